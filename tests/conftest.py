"""Shared fixtures: a manual clock, in-memory storage and a wired service."""

from datetime import datetime, timedelta, timezone

import pytest

from slacker.audit import ActivityLogger
from slacker.config import Settings
from slacker.orchestrator import create_app_components
from slacker.services.clock import ManualClock
from slacker.services.storage import InMemoryKeyValueStore, KeyValueHistoryPersistence


TAIPEI = timezone(timedelta(hours=8))

# Wednesday morning, local time
START = datetime(2024, 1, 3, 9, 0, 0, tzinfo=TAIPEI)


@pytest.fixture
def start():
    return START


@pytest.fixture
def clock(start):
    return ManualClock(start)


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def persistence(store):
    return KeyValueHistoryPersistence(store)


@pytest.fixture
def activity_logger():
    return ActivityLogger()


@pytest.fixture
def service(clock, store):
    return create_app_components(settings=Settings(), clock=clock, store=store)
