"""
Key-value storage adapters for the bucket list tracker.

The stores only need an async get/set/remove capability addressed by string
keys, holding JSON strings. Any object implementing ``StorageAdapter`` can
be injected; ``InMemoryStorage`` is used for local runs and tests and
``DynamoDBStorage`` (see dynamodb_service) in Lambda.

Classes:
    StorageAdapter: Protocol describing the durable key-value capability
    InMemoryStorage: Dictionary-backed adapter
"""

import asyncio
import logging
from typing import Dict, Optional, Protocol, runtime_checkable

from ..exceptions import PersistenceError

logger = logging.getLogger(__name__)


@runtime_checkable
class StorageAdapter(Protocol):
    async def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""

    async def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    async def remove_item(self, key: str) -> None:
        """Delete key. Removing an absent key is not an error."""


class InMemoryStorage:
    """
    Dictionary-backed storage adapter.

    Values live only as long as the process. Failures can be injected per
    operation through ``fail_on`` to exercise the stores' error handling.

    Attributes:
        data: Stored values by key
        fail_on: Operation names ("get", "set", "remove") that raise
            PersistenceError
        delay: Seconds each operation waits before completing

    Example:
        >>> storage = InMemoryStorage()
        >>> await storage.set_item("settings", '{"darkMode": true}')
        >>> await storage.get_item("settings")
        '{"darkMode": true}'
    """

    def __init__(self, data: Optional[Dict[str, str]] = None, delay: float = 0.0):
        self.data: Dict[str, str] = dict(data or {})
        self.fail_on: set = set()
        self.delay = delay
        self.operations: list = []

    async def _operation(self, operation: str, key: str) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.operations.append((operation, key))
        if operation in self.fail_on:
            raise PersistenceError(
                f"Simulated {operation} failure for {key!r}", key=key, operation=operation
            )

    async def get_item(self, key: str) -> Optional[str]:
        await self._operation("get", key)
        return self.data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        await self._operation("set", key)
        self.data[key] = value

    async def remove_item(self, key: str) -> None:
        await self._operation("remove", key)
        self.data.pop(key, None)

    def health_check(self) -> Dict[str, object]:
        return {"status": "healthy", "backend": "memory", "keys": sorted(self.data)}
