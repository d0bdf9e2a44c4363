"""
Settings data model for the bucket list tracker.

Settings are a flat record of independent boolean flags persisted under
their own storage key.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class Settings(BaseModel):
    """User preferences; every flag defaults to off."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    notifications: StrictBool = Field(default=False, description="Push notifications")
    daily_reminder: StrictBool = Field(
        default=False, alias="dailyReminder", description="Daily reminder"
    )
    dark_mode: StrictBool = Field(default=False, alias="darkMode", description="Dark theme")

    def to_storage_item(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class SettingsUpdate(BaseModel):
    """Partial settings change; unknown flags are rejected."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    notifications: Optional[StrictBool] = None
    daily_reminder: Optional[StrictBool] = Field(default=None, alias="dailyReminder")
    dark_mode: Optional[StrictBool] = Field(default=None, alias="darkMode")

    def changes(self) -> dict:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}
