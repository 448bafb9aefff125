"""Shared fixtures: fresh store, service and HTTP client per test."""

from __future__ import annotations

import os

# Settings are read when events_api.main is imported.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from events_api.config import Settings
from events_api.main import create_app
from events_api.repos.memory import EventRepository
from events_api.services.events import EventService


def at(day: int, hour: int, minute: int = 0, month: int = 4) -> datetime:
    return datetime(2024, month, day, hour, minute, tzinfo=timezone.utc)


def event_document(start: datetime, end: datetime, name: str = "Standup", all_day: bool = False) -> dict:
    return {"name": name, "allDay": all_day, "start": start, "end": end}


@pytest.fixture()
def repo():
    store = EventRepository(name="test-events")
    yield store
    if not store.closed:
        store.close()


@pytest.fixture()
def service(repo):
    return EventService(repo)


@pytest.fixture()
def client():
    app = create_app(Settings(ENVIRONMENT="test", LOG_LEVEL="WARNING"))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def app_repo(client) -> EventRepository:
    return client.app.state.event_repo
