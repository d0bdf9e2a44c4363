"""
Activity store for the bucket list tracker.

The activity store is the single source of truth for the activity
collection. Every screen or API handler reads snapshots from it and sends
mutations through it; each mutation is mirrored to the ``activities``
storage key.

Classes:
    ActivityStore: In-memory activity collection with write-through persistence

Functions:
    poll_snapshots: Re-load a store periodically and yield its snapshots
"""

import asyncio
import json
import logging
import uuid
from datetime import datetime
from typing import (
    Any,
    AsyncIterator,
    Callable,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from pydantic import TypeAdapter, ValidationError

from ..config import ACTIVITIES_KEY, MAX_ID_ATTEMPTS, POLL_INTERVAL_SECONDS
from ..exceptions import (
    ActivityNotFoundError,
    ActivityStoreError,
    ActivityValidationError,
    DecodeError,
    PersistenceError,
)
from ..models.activity import Activity, ActivityCategory, ActivityUpdate, Location
from .storage import StorageAdapter
from .write_through import ErrorHandler, WriteThroughStore

logger = logging.getLogger(__name__)

ActivityId = Union[int, str]
Snapshot = Tuple[Activity, ...]

_collection_adapter = TypeAdapter(Tuple[Activity, ...])


def generate_activity_id() -> str:
    """Generate an id of the form ``act_<12 hex chars>``."""
    return f"act_{uuid.uuid4().hex[:12]}"


def local_now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()


class ActivityStore(WriteThroughStore[Snapshot]):
    """
    Single source of truth for the activity collection.

    Mutations are applied to the in-memory collection immediately and in
    call order, then written through to storage in the background. A read
    right after a mutation always sees the mutation, even while the write
    is still in flight. Storage failures are logged and reported through
    ``on_persistence_error``; they never roll back the in-memory change.

    Separate store instances over the same storage only converge on their
    next ``load()``.

    Attributes:
        key: Storage key of the collection (default ``activities``)
        last_persistence_error: Most recent storage or decode failure

    Example:
        >>> store = ActivityStore(InMemoryStorage())
        >>> await store.load()
        ()
        >>> activity = await store.add("Surf lesson", category="beach")
        >>> await store.toggle_completion(activity.id)
        >>> store.snapshot()[0].completed
        True
    """

    def __init__(
        self,
        storage: StorageAdapter,
        key: str = ACTIVITIES_KEY,
        id_factory: Optional[Callable[[], ActivityId]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        on_persistence_error: Optional[ErrorHandler] = None,
    ):
        """
        Initialize the activity store.

        Args:
            storage: Durable key-value storage adapter
            key: Storage key holding the JSON array of activities
            id_factory: Optional id generator, defaults to generate_activity_id
            clock: Optional current-time source, defaults to local_now
            on_persistence_error: Optional callback receiving storage failures
        """
        super().__init__(storage, key, on_persistence_error)
        self._id_factory = id_factory or generate_activity_id
        self._clock = clock or local_now
        self._activities: Snapshot = ()

    def snapshot(self) -> Snapshot:
        """Return the current collection as an immutable tuple."""
        return self._activities

    def __len__(self) -> int:
        return len(self._activities)

    async def load(self) -> Snapshot:
        """
        Load the persisted collection into memory.

        An absent key yields an empty collection. A read failure keeps the
        current in-memory collection; a malformed payload falls back to an
        empty collection. Both are reported, never raised.

        A mutation made while the read is in flight is newer than the
        payload; the payload is then discarded and the in-memory collection
        kept.

        Returns:
            The loaded snapshot
        """
        version = self._version
        try:
            raw = await self._read()
        except PersistenceError as e:
            self._report(e)
            return self._activities

        if self._version != version:
            logger.debug("Store %r changed during load, keeping in-memory state", self.key)
            return self._activities

        if raw is None:
            self._activities = ()
        else:
            try:
                self._activities = self._decode(raw)
            except DecodeError as e:
                self._report(e)
                self._activities = ()

        logger.debug("Loaded %d activities from %r", len(self._activities), self.key)
        self._notify()
        return self._activities

    async def add(
        self,
        text: str,
        category: Union[ActivityCategory, str] = ActivityCategory.OTHER,
        location: Optional[Union[Location, Mapping[str, float]]] = None,
    ) -> Activity:
        """
        Create a new pending activity and append it to the collection.

        Args:
            text: What the user wants to do; must not be blank
            category: Category name, unknown names become ``other``
            location: Optional coordinates captured when adding

        Returns:
            The created activity

        Raises:
            ActivityValidationError: If text is blank or location is invalid
        """
        if not isinstance(text, str) or not text.strip():
            raise ActivityValidationError("Activity text must not be empty")

        try:
            activity = Activity(
                id=self._new_id(),
                text=text,
                category=category,
                completed=False,
                created_at=self._clock(),
                location=location,
            )
        except ValidationError as e:
            raise ActivityValidationError(_describe(e)) from e

        self._activities = self._activities + (activity,)
        self._persist()
        logger.info("Added activity %s (%s)", activity.id, activity.category.value)
        return activity

    async def toggle_completion(self, activity_id: ActivityId) -> Activity:
        """
        Flip the completion flag of an activity.

        Completing stamps ``completed_at`` with the current time; reopening
        clears it.

        Raises:
            ActivityNotFoundError: If no activity has this id
        """
        index = self._index_of(activity_id)
        current = self._activities[index]
        if current.completed:
            changes = {"completed": False, "completed_at": None}
        else:
            changes = {"completed": True, "completed_at": self._clock()}

        updated = Activity.model_validate({**current.model_dump(), **changes})
        self._replace(index, updated)
        logger.info(
            "Activity %s marked %s",
            updated.id,
            "completed" if updated.completed else "pending",
        )
        return updated

    async def update_fields(
        self,
        activity_id: ActivityId,
        changes: Optional[Union[ActivityUpdate, Mapping[str, Any]]] = None,
        **fields: Any,
    ) -> Activity:
        """
        Merge a partial update (text, photo, notes, location) into an activity.

        Args:
            activity_id: Id of the activity to update
            changes: ActivityUpdate or mapping of fields to change
            **fields: Fields to change, merged over ``changes``

        Returns:
            The updated activity

        Raises:
            ActivityValidationError: If a key is unknown or a value is invalid
            ActivityNotFoundError: If no activity has this id
        """
        update = self._coerce_update(changes, fields)
        index = self._index_of(activity_id)
        current = self._activities[index]

        values = update.changes()
        if not values:
            return current

        try:
            updated = Activity.model_validate({**current.model_dump(), **values})
        except ValidationError as e:
            raise ActivityValidationError(_describe(e)) from e

        self._replace(index, updated)
        logger.info("Updated activity %s fields: %s", updated.id, ", ".join(sorted(values)))
        return updated

    async def remove(self, activity_id: ActivityId) -> Activity:
        """
        Delete an activity.

        Returns:
            The removed activity

        Raises:
            ActivityNotFoundError: If no activity has this id
        """
        index = self._index_of(activity_id)
        removed = self._activities[index]
        self._activities = self._activities[:index] + self._activities[index + 1 :]
        self._persist()
        logger.info("Removed activity %s", removed.id)
        return removed

    async def clear_all(self) -> None:
        """Empty the collection and delete the persisted key."""
        self._activities = ()
        self._commit(None)
        logger.info("Cleared all activities")

    def get(self, activity_id: ActivityId) -> Activity:
        """
        Look up a single activity.

        Raises:
            ActivityNotFoundError: If no activity has this id
        """
        return self._activities[self._index_of(activity_id)]

    def export_json(self, indent: Optional[int] = 2) -> str:
        """Serialize the current collection as a JSON array for export."""
        return json.dumps(
            [activity.to_storage_item() for activity in self._activities], indent=indent
        )

    def _persist(self) -> None:
        self._commit(self.export_json(indent=None))

    def _replace(self, index: int, activity: Activity) -> None:
        activities = list(self._activities)
        activities[index] = activity
        self._activities = tuple(activities)
        self._persist()

    def _index_of(self, activity_id: ActivityId) -> int:
        for index, activity in enumerate(self._activities):
            if _same_id(activity.id, activity_id):
                return index
        raise ActivityNotFoundError(activity_id)

    def _new_id(self) -> ActivityId:
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = self._id_factory()
            if not any(_same_id(a.id, candidate) for a in self._activities):
                return candidate
            logger.warning("Generated activity id %r already exists, retrying", candidate)
        raise ActivityStoreError(
            f"Could not generate a unique activity id after {MAX_ID_ATTEMPTS} attempts"
        )

    def _decode(self, raw: str) -> Snapshot:
        try:
            activities = _collection_adapter.validate_json(raw)
        except ValidationError as e:
            raise DecodeError(
                f"Stored activities are malformed: {_describe(e)}",
                key=self.key,
                operation="get",
            ) from e

        seen = set()
        for activity in activities:
            marker = str(activity.id)
            if marker in seen:
                raise DecodeError(
                    f"Stored activities contain duplicate id {activity.id!r}",
                    key=self.key,
                    operation="get",
                )
            seen.add(marker)
        return activities

    @staticmethod
    def _coerce_update(
        changes: Optional[Union[ActivityUpdate, Mapping[str, Any]]],
        fields: Mapping[str, Any],
    ) -> ActivityUpdate:
        if isinstance(changes, ActivityUpdate) and not fields:
            return changes
        if isinstance(changes, ActivityUpdate):
            values = changes.changes()
        else:
            values = dict(changes or {})
        values.update(fields)
        try:
            return ActivityUpdate.model_validate(values)
        except ValidationError as e:
            raise ActivityValidationError(_describe(e)) from e


def _same_id(left: ActivityId, right: ActivityId) -> bool:
    # Ids from URLs arrive as strings
    return left == right or str(left) == str(right)


def _describe(error: ValidationError) -> str:
    messages = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ())) or "value"
        messages.append(f"{location}: {detail.get('msg')}")
    return "; ".join(messages)


async def poll_snapshots(
    store: ActivityStore, interval: float = POLL_INTERVAL_SECONDS
) -> AsyncIterator[Snapshot]:
    """
    Re-load ``store`` every ``interval`` seconds and yield each snapshot.

    Observers holding their own store instance use this to pick up changes
    made elsewhere; staleness is bounded by the interval.
    """
    while True:
        yield await store.load()
        await asyncio.sleep(interval)
