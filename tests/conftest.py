"""
Pytest configuration and shared fixtures for bucket list tests.

This module sets up mocked AWS credentials and DynamoDB tables, in-memory
storage, deterministic clocks and id generators, and factories for test
activities.

Fixtures:
    anyio_backend: Runs async tests on asyncio
    mock_dynamodb_table: Mocked DynamoDB table for the storage adapter
    storage: Fresh in-memory storage adapter
    clock: Controllable clock returning tz-aware datetimes
    activity_store: ActivityStore over the in-memory storage
    settings_store: SettingsStore over the in-memory storage
    make_activity: Factory building Activity records directly
"""

import itertools
import os
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import boto3
import pytest
from moto import mock_aws

from bucketlist.app import create_app
from bucketlist.models.activity import Activity, ActivityCategory
from bucketlist.services.activity_store import ActivityStore
from bucketlist.services.settings_store import SettingsStore
from bucketlist.services.storage import InMemoryStorage

TEST_TABLE_NAME = "test-bucketlist-storage"
START_TIME = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock returning a fixed time until advanced."""

    def __init__(self, start: datetime = START_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def anyio_backend():
    """Run anyio tests on asyncio only."""
    return "asyncio"


@pytest.fixture(scope="session")
def aws_credentials():
    """
    Fixture to set up AWS credentials for testing.

    These are fake credentials picked up by moto.
    """
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def mock_dynamodb_table(aws_credentials):
    """
    Fixture that creates a mocked DynamoDB key-value table.

    Returns:
        boto3.resource.Table: Mocked DynamoDB table resource
    """
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        table = dynamodb.create_table(
            TableName=TEST_TABLE_NAME,
            KeySchema=[{"AttributeName": "key", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "key", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )

        table.wait_until_exists()
        yield table


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Sequential ids: act_0001, act_0002, ..."""
    counter = itertools.count(1)
    return lambda: f"act_{next(counter):04d}"


@pytest.fixture
def persistence_errors() -> List[Exception]:
    """Collects errors passed to the stores' error handler."""
    return []


@pytest.fixture
def activity_store(storage, clock, id_factory, persistence_errors) -> ActivityStore:
    return ActivityStore(
        storage,
        id_factory=id_factory,
        clock=clock,
        on_persistence_error=persistence_errors.append,
    )


@pytest.fixture
def settings_store(storage, persistence_errors) -> SettingsStore:
    return SettingsStore(storage, on_persistence_error=persistence_errors.append)


@pytest.fixture
def app_factory(storage, clock, id_factory):
    """Build a new BucketListApp over the shared in-memory storage."""
    return lambda: create_app(storage=storage, id_factory=id_factory, clock=clock)


@pytest.fixture
def make_activity() -> Callable[..., Activity]:
    """
    Factory for Activity records with sensible defaults.

    ``completed_on`` accepts a date string (``"2025-06-02"``) and marks the
    activity completed at noon UTC on that day.
    """
    counter = itertools.count(1)

    def factory(
        completed_on: Optional[str] = None,
        category: ActivityCategory = ActivityCategory.OTHER,
        created_at: Optional[datetime] = None,
        **overrides,
    ) -> Activity:
        number = next(counter)
        values = {
            "id": number,
            "text": f"Test activity {number}",
            "category": category,
            "created_at": created_at or START_TIME + timedelta(minutes=number),
        }
        if completed_on is not None:
            day = datetime.fromisoformat(completed_on).replace(
                hour=12, tzinfo=timezone.utc
            )
            values.update(completed=True, completed_at=day)
        values.update(overrides)
        return Activity(**values)

    return factory


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "aws: mark test as requiring mocked AWS services")
