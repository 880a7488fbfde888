"""Pytest configuration and shared fixtures."""
import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("REPOSITORY_BACKEND", "memory")

from datetime import date
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from lending.domain.borrowing import Borrowing
from lending.domain.equipment import Equipment
from lending.domain.identifiers import BorrowingId, EmployeeId, EquipmentId, EquipmentName
from lending.domain.period import Period
from lending.infrastructure.memory import InMemoryEquipmentRepository
from lending.services.equipment import EquipmentAppService

TODAY = date(2025, 10, 20)


def make_period(start: date, end: date) -> Period:
    """Build a period regardless of where it lies relative to TODAY."""
    return Period.create(start, end, today=start).unwrap()


def make_borrowing(borrowing_id: str, start: date, end: date, employee_id: str = "emp-001") -> Borrowing:
    return Borrowing.create(
        id=BorrowingId.parse(borrowing_id).unwrap(),
        employee_id=EmployeeId.parse(employee_id).unwrap(),
        equipment_id=EquipmentId.parse("eq-001").unwrap(),
        period=make_period(start, end),
    )


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def projector():
    """Freshly registered equipment with no borrowings."""
    return Equipment.create(
        EquipmentId.parse("eq-001").unwrap(),
        EquipmentName.parse("Projector").unwrap(),
    )


@pytest.fixture
def repository():
    return InMemoryEquipmentRepository()


@pytest.fixture
def service(repository):
    """Application service with the clock pinned to TODAY."""
    return EquipmentAppService(repository, clock=lambda: TODAY)


@pytest.fixture
def test_client(repository):
    """FastAPI test client backed by an isolated in-memory repository."""
    from main import app
    from lending.api.dependencies import get_repository, get_today

    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_today] = lambda: TODAY
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def mock_redis():
    """Mock Redis client backed by a plain dict."""
    store = {}
    client = Mock()

    def _incr(key):
        store[key] = int(store.get(key, 0)) + 1
        return store[key]

    client.get.side_effect = lambda key: store.get(key)
    client.set.side_effect = lambda key, value: store.__setitem__(key, value) or True
    client.incr.side_effect = _incr
    client.ping.return_value = True
    client.store = store
    return client
