"""
Statistics engine for the bucket list tracker.

Pure functions over an activity snapshot: filtering, display ordering,
progress, per-category counts, the completion streak and the summary used
by the stats view. None of them keep state, so they can be called as often
as a view re-renders.

Functions:
    filter_activities: Subsequence matching a FilterMode
    sort_for_display: Most recently created first
    progress: Completed/total counts and percentage
    by_category: Per-category total and completed counts
    completion_streak: Longest run of consecutive completion days
    summarize: All aggregate statistics in one ActivityStats
    memories: Completed activities with a photo
"""

from datetime import date, tzinfo
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

from ..models.activity import Activity, ActivityCategory
from ..models.stats import ActivityStats, CategoryCount, Progress


class FilterMode(str, Enum):
    """Which activities a list view shows."""

    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"


def filter_activities(
    collection: Iterable[Activity], mode: Union[FilterMode, str] = FilterMode.ALL
) -> List[Activity]:
    """
    Return the activities matching ``mode``, in collection order.

    Raises:
        ValueError: If mode is not one of all, completed or pending
    """
    mode = FilterMode(mode)
    if mode is FilterMode.COMPLETED:
        return [a for a in collection if a.completed]
    if mode is FilterMode.PENDING:
        return [a for a in collection if not a.completed]
    return list(collection)


def sort_for_display(collection: Iterable[Activity]) -> List[Activity]:
    """Most recently created first; ties keep their collection order."""
    # sorted() is stable with reverse=True as well
    return sorted(collection, key=lambda a: a.created_at, reverse=True)


def progress(collection: Iterable[Activity]) -> Progress:
    activities = list(collection)
    total = len(activities)
    completed = sum(1 for a in activities if a.completed)
    percentage = (completed / total) * 100 if total else 0.0
    return Progress(completed_count=completed, total_count=total, percentage=percentage)


def by_category(collection: Iterable[Activity]) -> Dict[ActivityCategory, CategoryCount]:
    """
    Count activities per category.

    Categories without activities are absent from the result, so the totals
    always add up to the collection size.
    """
    counts: Dict[ActivityCategory, CategoryCount] = {}
    for activity in collection:
        entry = counts.setdefault(activity.category, CategoryCount())
        entry.total += 1
        if activity.completed:
            entry.completed += 1
    return counts


def completion_dates(collection: Iterable[Activity], tz: Optional[tzinfo] = None) -> List[date]:
    """Distinct calendar dates in ``tz`` (default local) with a completion, ascending."""
    return sorted(
        {
            a.completed_at.astimezone(tz).date()
            for a in collection
            if a.completed and a.completed_at is not None
        }
    )


def completion_streak(collection: Iterable[Activity], tz: Optional[tzinfo] = None) -> int:
    """
    Longest run of consecutive calendar days with at least one completion.

    The day of a completion is the date of ``completed_at`` converted to
    ``tz``, the local timezone when not given, so records stored in UTC
    count on the user's own day. Several completions on one day count
    once; a gap of more than one day starts a new run.

    Returns:
        Length of the longest run, 0 when nothing has been completed
    """
    longest = 0
    current = 0
    previous = None
    for day in completion_dates(collection, tz):
        if previous is not None and (day - previous).days == 1:
            current += 1
        else:
            current = 1
        longest = max(longest, current)
        previous = day
    return longest


def summarize(collection: Iterable[Activity], tz: Optional[tzinfo] = None) -> ActivityStats:
    """Compute every aggregate statistic shown on the stats view."""
    activities = list(collection)
    total = len(activities)
    completed = sum(1 for a in activities if a.completed)

    return ActivityStats(
        total=total,
        completed=completed,
        pending=total - completed,
        with_photos=sum(1 for a in activities if a.has_photo),
        with_locations=sum(1 for a in activities if a.has_location),
        completion_rate=completed / total if total else 0.0,
        streak=completion_streak(activities, tz),
        by_category=by_category(activities),
    )


def memories(collection: Iterable[Activity]) -> List[Activity]:
    """Completed activities that carry a photo, in collection order."""
    return [a for a in collection if a.completed and a.has_photo]
