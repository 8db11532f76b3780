# This project was developed with assistance from AI tools.
"""Shared fixtures: pinned clock, in-memory registries and a wired coordinator.

The real app from ``lending.main`` is a module singleton; the ``client``
fixture overrides the coordinator dependency and clears the override after
each test. The lifespan is not entered, so no ticker runs during tests.
"""

import pytest
from factories import NOW, RecordingNotifier
from fastapi.testclient import TestClient

from lending.core.clock import FixedClock
from lending.main import app as real_app
from lending.schemas.reminder import ReminderSettings
from lending.services.lifecycle import LifecycleCoordinator, get_lifecycle_service
from lending.services.store import build_memory_stores


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def stores():
    return build_memory_stores()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def reminder_settings():
    return ReminderSettings()


@pytest.fixture
def coordinator(stores, notifier, clock, reminder_settings):
    return LifecycleCoordinator(
        stores,
        notifier,
        clock,
        reminder_settings=reminder_settings,
        payment_link_base="https://pay.example.com",
    )


@pytest.fixture
def app():
    """Return the real FastAPI app with all routers mounted."""
    yield real_app
    real_app.dependency_overrides.clear()


@pytest.fixture
def client(app, coordinator):
    app.dependency_overrides[get_lifecycle_service] = lambda: coordinator
    return TestClient(app)
