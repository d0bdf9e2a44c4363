"""
Activity data model for the bucket list tracker.

This module defines the Activity record stored by the activity store, the
category enum, the location value object and the typed partial update used
to edit an existing record. Records serialize to the camelCase JSON layout
of the persisted ``activities`` key.

Classes:
    ActivityCategory: Enum of the supported activity categories
    Location: Latitude/longitude pair attached by a location provider
    Activity: Frozen Pydantic model for one bucket list item
    ActivityUpdate: Partial update accepted by ActivityStore.update_fields
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ActivityCategory(str, Enum):
    """
    Enumeration of supported activity categories.

    Unknown category values are coerced to ``OTHER`` when an activity is
    created or decoded, so stored data never fails on a category name.
    """

    ADVENTURE = "adventure"
    BEACH = "beach"
    FOOD = "food"
    TRAVEL = "travel"
    FUN = "fun"
    OTHER = "other"

    @classmethod
    def coerce(cls, value: Any) -> "ActivityCategory":
        """Return the matching category, or OTHER if the value is not recognized."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.OTHER


class Location(BaseModel):
    """Geographic coordinates stored verbatim from the location provider."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in degrees")


def _require_text(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Activity text must not be empty")
    return value.strip()


class Activity(BaseModel):
    """
    Pydantic model representing one bucket list activity.

    Instances are frozen: the store replaces records with updated copies
    instead of mutating them, which keeps every snapshot immutable.

    Attributes:
        id: Unique identifier (int for records created by the mobile app,
            ``act_...`` strings for records created here)
        text: What the user wants to do
        category: ActivityCategory of the item
        completed: Whether the item has been done
        created_at: When the item was added (never changes)
        completed_at: When the item was completed, None while pending
        photo: Opaque photo reference set by an image picker
        notes: Free-form notes
        location: Optional coordinates set by a location provider

    Example:
        >>> activity = Activity(
        ...     id="act_1f2e3d4c5b6a",
        ...     text="Watch the sunrise at the beach",
        ...     category="beach",
        ...     created_at=datetime(2025, 6, 1, 6, 0, tzinfo=timezone.utc),
        ... )
        >>> activity.model_dump(mode="json", by_alias=True)["createdAt"]
        '2025-06-01T06:00:00Z'
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Union[int, str] = Field(..., description="Unique activity identifier")
    text: str = Field(..., min_length=1, description="Activity description")
    category: ActivityCategory = Field(
        default=ActivityCategory.OTHER, description="Activity category"
    )
    completed: bool = Field(default=False, description="Completion flag")
    created_at: datetime = Field(..., alias="createdAt", description="Creation time")
    completed_at: Optional[datetime] = Field(
        default=None, alias="completedAt", description="Completion time"
    )
    photo: Optional[str] = Field(default=None, description="Photo reference")
    notes: str = Field(default="", description="User notes")
    location: Optional[Location] = Field(default=None, description="Coordinates")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _require_text(v)

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, v: Any) -> ActivityCategory:
        return ActivityCategory.coerce(v)

    @field_validator("notes", mode="before")
    @classmethod
    def default_notes(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("created_at", "completed_at")
    @classmethod
    def make_aware(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Naive timestamps are taken as local time."""
        if v is not None and v.tzinfo is None:
            return v.astimezone()
        return v

    @model_validator(mode="after")
    def sync_completion_time(self) -> "Activity":
        """
        Keep completed_at present exactly when completed is set.

        A pending record drops a stale completion time. A completed record
        without one is taken as completed when it was created.
        """
        if not self.completed and self.completed_at is not None:
            object.__setattr__(self, "completed_at", None)
        elif self.completed and self.completed_at is None:
            object.__setattr__(self, "completed_at", self.created_at)
        return self

    @property
    def has_photo(self) -> bool:
        return bool(self.photo)

    @property
    def has_location(self) -> bool:
        return self.location is not None

    def to_storage_item(self) -> dict:
        """Convert the activity to its persisted JSON-compatible form."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_storage_item(cls, item: dict) -> "Activity":
        """Create an Activity from its persisted JSON-compatible form."""
        return cls.model_validate(item)


class ActivityUpdate(BaseModel):
    """
    Typed partial update for an existing activity.

    Only fields that were explicitly provided are applied, so passing
    ``photo=None`` removes the photo while omitting ``photo`` leaves it
    untouched. Unknown keys are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    text: Optional[str] = None
    photo: Optional[str] = None
    notes: Optional[str] = None
    location: Optional[Location] = None

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("Activity text must not be empty")
        return _require_text(v)

    @field_validator("notes")
    @classmethod
    def normalize_notes(cls, v: Optional[str]) -> str:
        return v or ""

    def changes(self) -> dict:
        """Return only the explicitly provided fields."""
        return self.model_dump(exclude_unset=True)
