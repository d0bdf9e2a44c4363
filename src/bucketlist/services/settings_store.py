"""
Settings store for the bucket list tracker.

Holds the user's preference flags with the same write-through discipline
as the activity store, under its own ``settings`` storage key.

Classes:
    SettingsStore: In-memory settings record with write-through persistence
"""

import json
import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from ..config import SETTINGS_KEY
from ..exceptions import DecodeError, PersistenceError, SettingsValidationError
from ..models.settings import Settings, SettingsUpdate
from .storage import StorageAdapter
from .write_through import ErrorHandler, WriteThroughStore

logger = logging.getLogger(__name__)


class SettingsStore(WriteThroughStore[Settings]):
    """
    Single source of truth for the settings record.

    Example:
        >>> settings = SettingsStore(InMemoryStorage())
        >>> await settings.load()
        Settings(notifications=False, daily_reminder=False, dark_mode=False)
        >>> (await settings.update(dark_mode=True)).dark_mode
        True
    """

    def __init__(
        self,
        storage: StorageAdapter,
        key: str = SETTINGS_KEY,
        on_persistence_error: Optional[ErrorHandler] = None,
    ):
        super().__init__(storage, key, on_persistence_error)
        self._settings = Settings()

    def snapshot(self) -> Settings:
        return self._settings

    async def load(self) -> Settings:
        """
        Load the persisted settings.

        Missing or malformed settings fall back to the defaults; a read
        failure, or an update made while the read is in flight, keeps the
        current in-memory settings.
        """
        version = self._version
        try:
            raw = await self._read()
        except PersistenceError as e:
            self._report(e)
            return self._settings

        if self._version != version:
            return self._settings

        if raw is None:
            self._settings = Settings()
        else:
            try:
                self._settings = Settings.model_validate_json(raw)
            except ValidationError as e:
                self._report(
                    DecodeError(
                        f"Stored settings are malformed: {e.error_count()} error(s)",
                        key=self.key,
                        operation="get",
                    )
                )
                self._settings = Settings()

        self._notify()
        return self._settings

    async def update(
        self,
        changes: Optional[Union[SettingsUpdate, Mapping[str, Any]]] = None,
        **fields: Any,
    ) -> Settings:
        """
        Merge the given flags into the settings and persist them.

        Raises:
            SettingsValidationError: If a flag is unknown or not a boolean
        """
        if isinstance(changes, SettingsUpdate):
            values = changes.changes()
        else:
            values = dict(changes or {})
        values.update(fields)

        try:
            update = SettingsUpdate.model_validate(values)
        except ValidationError as e:
            raise SettingsValidationError(f"Invalid settings: {e.error_count()} error(s)") from e

        new_values = update.changes()
        if not new_values:
            return self._settings

        self._settings = self._settings.model_copy(update=new_values)
        self._commit(json.dumps(self._settings.to_storage_item()))
        logger.info("Updated settings: %s", ", ".join(sorted(new_values)))
        return self._settings

    async def clear(self) -> None:
        """Reset to defaults and delete the persisted key."""
        self._settings = Settings()
        self._commit(None)
        logger.info("Cleared settings")
