"""
Bucket list tracker: activity store, statistics engine and settings store.

This package keeps a persisted collection of bucket list activities,
derives progress, category, streak and achievement statistics from it, and
stores the user's settings. Storage is a pluggable async key-value adapter
(in-memory or DynamoDB).

Modules:
    app: Application container wiring storage and stores
    lambdas: AWS Lambda handler exposing the stores over HTTP
    services: Stores, statistics engine and storage adapters
    models: Data models and validation using Pydantic
    utils: Utility functions and helpers

Version: 0.1.0
"""

__version__ = "0.1.0"

from .app import BucketListApp, create_app
from .models import Activity, ActivityCategory, Location, Settings
from .services import ActivityStore, InMemoryStorage, SettingsStore

__all__ = [
    "Activity",
    "ActivityCategory",
    "Location",
    "Settings",
    "ActivityStore",
    "SettingsStore",
    "InMemoryStorage",
    "BucketListApp",
    "create_app",
]
