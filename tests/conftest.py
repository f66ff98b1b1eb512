"""
Pytest configuration and fixtures.
"""
from decimal import Decimal

import fakeredis
import pytest
from rest_framework.test import APIClient

from analytics.sink import AnalyticsSink
from api.models import CustomUser
from events.bus import EventBus
from orders.models import Order
from promo_codes.models import PromoCode


class RecordingSink(AnalyticsSink):
    """Keeps inserted rows in memory; can be told to fail."""

    def __init__(self):
        self.rows = []
        self.error = None
        self.query_results = []
        self.queries = []

    def insert(self, table, row):
        if self.error is not None:
            raise self.error
        self.rows.append((table, row))

    def query(self, sql, parameters=None):
        self.queries.append((sql, parameters))
        return self.query_results.pop(0) if self.query_results else []


class RecordingBus(EventBus):
    def __init__(self):
        self.events = []
        self.error = None

    def publish(self, event):
        if self.error is not None:
            raise self.error
        self.events.append(event)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def bus():
    return RecordingBus()


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def clock():
    """Controllable time source in seconds."""

    class Clock:
        now = 1_700_000_000.0

        def __call__(self):
            return self.now

        def advance(self, seconds):
            self.now += seconds

    return Clock()


@pytest.fixture
def user(db):
    return CustomUser.objects.create_user(email="jane@example.com", password="password123", name="Jane")


@pytest.fixture
def other_user(db):
    return CustomUser.objects.create_user(email="john@example.com", password="password123", name="John")


@pytest.fixture
def admin_user(db):
    return CustomUser.objects.create_superuser(email="admin@example.com", password="password123", name="Admin")


@pytest.fixture
def promo_code(db):
    return PromoCode.objects.create(
        code="SUMMER2024",
        discount_percent=20,
        total_limit=100,
        per_user_limit=1,
    )


@pytest.fixture
def order(user):
    return Order.objects.create(user=user, amount=Decimal("100.00"))


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def patched_bus(mocker, bus):
    """Route every view-level publish to the recording bus."""
    mocker.patch("orders.views.get_event_bus", return_value=bus)
    mocker.patch("promo_codes.views.get_event_bus", return_value=bus)
    return bus
