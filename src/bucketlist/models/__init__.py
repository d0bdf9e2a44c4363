"""
Data models for the bucket list tracker.

This module contains Pydantic models for validation and serialization of
activities, settings and the derived statistics.

Classes:
    Activity: A single bucket list item
    ActivityCategory: Enum of activity categories
    ActivityUpdate: Typed partial update of an activity
    Location: Latitude/longitude pair
    Settings: User preference flags
    SettingsUpdate: Typed partial update of the settings
    Progress, CategoryCount, ActivityStats, AchievementStatus: Derived stats
"""

from .activity import Activity, ActivityCategory, ActivityUpdate, Location
from .settings import Settings, SettingsUpdate
from .stats import AchievementStatus, ActivityStats, CategoryCount, Progress

__all__ = [
    "Activity",
    "ActivityCategory",
    "ActivityUpdate",
    "Location",
    "Settings",
    "SettingsUpdate",
    "Progress",
    "CategoryCount",
    "ActivityStats",
    "AchievementStatus",
]
