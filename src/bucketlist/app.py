"""
Application container for the bucket list tracker.

Builds the storage adapter and both stores once at start-up. Callers pass
the resulting BucketListApp explicitly; there is no module-level singleton.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Union

from .config import ACTIVITIES_KEY, SETTINGS_KEY, STORAGE_TABLE
from .services.activity_store import ActivityStore
from .services.dynamodb_service import DynamoDBStorage
from .services.settings_store import SettingsStore
from .services.storage import InMemoryStorage, StorageAdapter
from .services.write_through import ErrorHandler

logger = logging.getLogger(__name__)


@dataclass
class BucketListApp:
    storage: StorageAdapter
    activities: ActivityStore
    settings: SettingsStore
    started_at: datetime = field(default_factory=datetime.now)

    async def load(self) -> None:
        """Load both stores from storage."""
        await asyncio.gather(self.activities.load(), self.settings.load())

    async def flush(self) -> None:
        """Wait for all pending writes of both stores."""
        await asyncio.gather(self.activities.flush(), self.settings.flush())

    async def clear_all_data(self) -> None:
        """
        Delete all activities and reset the settings.

        Each key is removed independently; a failure on one does not
        affect the other.
        """
        await self.activities.clear_all()
        await self.settings.clear()
        logger.info("All data cleared")


def default_storage() -> StorageAdapter:
    """DynamoDB when BUCKETLIST_TABLE is set, otherwise in-memory storage."""
    if STORAGE_TABLE:
        return DynamoDBStorage(STORAGE_TABLE)
    logger.warning("BUCKETLIST_TABLE not set, using in-memory storage")
    return InMemoryStorage()


def create_app(
    storage: Optional[StorageAdapter] = None,
    id_factory: Optional[Callable[[], Union[int, str]]] = None,
    clock: Optional[Callable[[], datetime]] = None,
    on_persistence_error: Optional[ErrorHandler] = None,
) -> BucketListApp:
    storage = storage if storage is not None else default_storage()
    return BucketListApp(
        storage=storage,
        activities=ActivityStore(
            storage,
            key=ACTIVITIES_KEY,
            id_factory=id_factory,
            clock=clock,
            on_persistence_error=on_persistence_error,
        ),
        settings=SettingsStore(
            storage, key=SETTINGS_KEY, on_persistence_error=on_persistence_error
        ),
    )
