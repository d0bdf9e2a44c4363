"""
Write-through persistence shared by the activity and settings stores.

Each store keeps its state in memory and mirrors it to one storage key.
Mutations return as soon as the in-memory state is updated; the durable
write runs as a background task. Writes of one store are applied in the
order they were scheduled, and failures are reported instead of raised.

Classes:
    WriteThroughStore: Base class owning the write queue, error reporting
        and snapshot subscribers of a single storage key
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Optional, Set, TypeVar

from ..exceptions import PersistenceError
from .storage import StorageAdapter

logger = logging.getLogger(__name__)

SnapshotT = TypeVar("SnapshotT")

ErrorHandler = Callable[[PersistenceError], None]
Listener = Callable[[SnapshotT], None]


class WriteThroughStore(ABC, Generic[SnapshotT]):
    """
    Base class for stores mirrored to a single storage key.

    Subclasses call ``_commit(payload)`` after replacing their in-memory
    state; ``payload`` is the serialized snapshot to write, or None to
    remove the key.

    Attributes:
        key: Storage key owned by this store
        last_persistence_error: Most recent reported failure, if any
    """

    def __init__(
        self,
        storage: StorageAdapter,
        key: str,
        on_persistence_error: Optional[ErrorHandler] = None,
    ):
        self._storage = storage
        self.key = key
        self._on_persistence_error = on_persistence_error
        self._write_lock = asyncio.Lock()
        self._pending: Set[asyncio.Task] = set()
        self._listeners: List[Listener] = []
        self.last_persistence_error: Optional[PersistenceError] = None
        self._version = 0

    @abstractmethod
    def snapshot(self) -> SnapshotT:
        """Return the current in-memory state."""

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new snapshot after every change.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def flush(self) -> None:
        """Wait until every write scheduled so far has completed or failed."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _commit(self, payload: Optional[str]) -> asyncio.Task:
        self._version += 1
        task = asyncio.get_running_loop().create_task(self._write(payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        self._notify()
        return task

    async def _write(self, payload: Optional[str]) -> None:
        operation = "remove" if payload is None else "set"
        async with self._write_lock:
            try:
                if payload is None:
                    await self._storage.remove_item(self.key)
                else:
                    await self._storage.set_item(self.key, payload)
            except PersistenceError as e:
                self._report(e)
            except Exception as e:
                self._report(
                    PersistenceError(
                        f"Unexpected error during {operation} of {self.key!r}: {e}",
                        key=self.key,
                        operation=operation,
                    )
                )
            else:
                logger.debug("Persisted %s of %r", operation, self.key)

    async def _read(self) -> Optional[str]:
        """Read the raw payload, waiting for this store's own writes first."""
        await self.flush()
        try:
            return await self._storage.get_item(self.key)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(
                f"Unexpected error during get of {self.key!r}: {e}",
                key=self.key,
                operation="get",
            ) from e

    def _report(self, error: PersistenceError) -> None:
        self.last_persistence_error = error
        logger.error("Storage error for %r: %s", self.key, error)
        if self._on_persistence_error is not None:
            try:
                self._on_persistence_error(error)
            except Exception:
                logger.exception("Persistence error handler failed for %r", self.key)

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener failed for %r", self.key)
