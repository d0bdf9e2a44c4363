"""
Derived statistics models.

These models are produced by the statistics engine from an activity
snapshot. They are never persisted.
"""

from typing import Dict

from pydantic import BaseModel, Field

from .activity import ActivityCategory


class Progress(BaseModel):
    """Completed vs. total count for a progress bar."""

    completed_count: int = 0
    total_count: int = 0
    percentage: float = Field(default=0.0, ge=0, le=100)


class CategoryCount(BaseModel):
    total: int = 0
    completed: int = 0


class ActivityStats(BaseModel):
    """
    Aggregate statistics over an activity collection.

    Attributes:
        total: Number of activities
        completed: Number of completed activities
        pending: Number of activities still to do
        with_photos: Activities carrying a photo reference
        with_locations: Activities carrying coordinates
        completion_rate: completed / total as a 0..1 ratio (0 when empty)
        streak: Longest run of consecutive completion days
        by_category: Per-category counts, empty categories omitted
    """

    total: int = 0
    completed: int = 0
    pending: int = 0
    with_photos: int = 0
    with_locations: int = 0
    completion_rate: float = 0.0
    streak: int = 0
    by_category: Dict[ActivityCategory, CategoryCount] = Field(default_factory=dict)


class AchievementStatus(BaseModel):
    """Evaluation result of one achievement rule."""

    code: str
    title: str
    description: str
    icon: str = ""
    achieved: bool = False
    progress: float = Field(default=0.0, ge=0, le=1)
