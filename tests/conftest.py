"""Shared fixtures: an isolated data file and services wired to it."""

from datetime import datetime, timedelta

import pytest

from crime_tracker.config import Settings
from crime_tracker.core.auth import AuthService
from crime_tracker.core.models import Database, Session
from crime_tracker.core.records import RecordService
from crime_tracker.core.storage import DatabaseStore


class FakeClock:
    """Returns the same timestamp until advanced."""

    def __init__(self, start=datetime(2025, 3, 1, 9, 30)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "crimedb.json"


@pytest.fixture
def settings(data_file):
    return Settings(data_file=data_file, log_level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(data_file, clock):
    return DatabaseStore(data_file, clock=clock)


@pytest.fixture
def database():
    return Database()


@pytest.fixture
def auth(database, store):
    return AuthService(database, store)


@pytest.fixture
def records(database, store, clock):
    return RecordService(database, store, clock=clock)


@pytest.fixture
def session():
    return Session()
