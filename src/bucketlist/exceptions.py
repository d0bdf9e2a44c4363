"""
Exception hierarchy for the bucket list tracker.

Validation and not-found errors are raised to the caller. Persistence and
decode errors are reported through the store's error channel instead of
being raised from mutations.
"""

from typing import Any, Optional


class BucketListError(Exception):
    """Base class for all bucket list errors."""


class ActivityStoreError(BucketListError):
    """Raised when the activity store cannot complete an operation."""


class ActivityValidationError(BucketListError):
    """Raised when input to a store operation is invalid (e.g. blank text)."""


class ActivityNotFoundError(BucketListError):
    """Raised when no activity matches the requested id."""

    def __init__(self, activity_id: Any):
        self.activity_id = activity_id
        super().__init__(f"Activity {activity_id!r} not found")


class PersistenceError(BucketListError):
    """Raised by storage adapters when a read, write or remove fails."""

    def __init__(
        self, message: str, key: Optional[str] = None, operation: Optional[str] = None
    ):
        self.key = key
        self.operation = operation
        super().__init__(message)


class DecodeError(PersistenceError):
    """Stored payload is not a well-formed record."""


class SettingsValidationError(BucketListError):
    """Raised when a settings update names an unknown flag or a non-boolean value."""
