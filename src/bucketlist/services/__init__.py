"""
Service layer for the bucket list tracker.

This module contains the stores, the statistics engine and the storage
adapters used throughout the application.

Classes:
    ActivityStore: Activity collection with write-through persistence
    SettingsStore: Settings record with write-through persistence
    StorageAdapter: Protocol of the durable key-value capability
    InMemoryStorage: Dictionary-backed storage adapter
    DynamoDBStorage: DynamoDB-backed storage adapter
    AchievementRegistry, AchievementRule: Data-driven achievements
"""

from .achievements import AchievementRegistry, AchievementRule, achievements
from .activity_store import ActivityStore, poll_snapshots
from .dynamodb_service import DynamoDBStorage
from .settings_store import SettingsStore
from .statistics import (
    FilterMode,
    by_category,
    completion_streak,
    filter_activities,
    memories,
    progress,
    sort_for_display,
    summarize,
)
from .storage import InMemoryStorage, StorageAdapter

__all__ = [
    "ActivityStore",
    "SettingsStore",
    "StorageAdapter",
    "InMemoryStorage",
    "DynamoDBStorage",
    "AchievementRegistry",
    "AchievementRule",
    "FilterMode",
    "achievements",
    "by_category",
    "completion_streak",
    "filter_activities",
    "memories",
    "poll_snapshots",
    "progress",
    "sort_for_display",
    "summarize",
]
