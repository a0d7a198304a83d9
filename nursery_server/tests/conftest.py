"""
Test configuration
Fixtures for an in-memory database, a fixed clock and an API client.
"""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from nursery_server.app import create_app
from nursery_server.core.database import DatabaseManager
from nursery_server.core.security import ADMIN, SUPER_ADMIN, create_access_token
from nursery_server.engine.store import PeriodStore
from nursery_server.models.settings import DEFAULT_TIMING_CONFIG
from nursery_server.models.schedule import ScheduleSlotIn
from nursery_server.services.settings_service import SettingsService

# A Sunday, first day of the operating week
TODAY = date(2024, 3, 10)


def days(n: int) -> date:
    """TODAY shifted by n days"""
    return TODAY + timedelta(days=n)


def slot(day="MONDAY", start="08:45", end="09:15", activity="Painting", **extra) -> ScheduleSlotIn:
    return ScheduleSlotIn(day_of_week=day, start_time=start, end_time=end, activity=activity, **extra)


@pytest.fixture
def test_db():
    """In-memory database"""
    db = DatabaseManager(":memory:")
    db.init_database()
    yield db
    db.close()


@pytest.fixture
def clock():
    return lambda: TODAY


@pytest.fixture
def timing_config(test_db):
    """Default facility configuration: 4 slots of 30 minutes from 08:00"""
    return SettingsService(test_db).replace_config(DEFAULT_TIMING_CONFIG)


@pytest.fixture
def classroom(test_db):
    test_db.execute(
        "INSERT INTO classrooms (id, name, category, capacity) VALUES (5, 'Papillons', 'PETIT', 12)"
    )
    return {"id": 5, "name": "Papillons", "category": "PETIT", "capacity": 12}


@pytest.fixture
def other_classroom(test_db):
    test_db.execute(
        "INSERT INTO classrooms (id, name, category, capacity) VALUES (6, 'Lucioles', 'GRAND', 15)"
    )
    return {"id": 6, "name": "Lucioles", "category": "GRAND", "capacity": 15}


@pytest.fixture
def make_period(test_db):
    """Insert a period directly, bypassing the creation rules"""

    def factory(scope, scope_key, start, end=None, active=False, name="period"):
        return PeriodStore(test_db, scope).create(scope_key, name, start, end, active)

    return factory


@pytest.fixture
def app_instance(test_db, clock):
    return create_app(db=test_db, clock=clock)


@pytest.fixture
def client(app_instance):
    return TestClient(app_instance)


@pytest.fixture
def admin_headers():
    """Super admin bearer header"""
    return {"Authorization": f"Bearer {create_access_token(1, SUPER_ADMIN)}"}


@pytest.fixture
def staff_headers():
    """Admin (non super admin) bearer header"""
    return {"Authorization": f"Bearer {create_access_token(2, ADMIN)}"}
