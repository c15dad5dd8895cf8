"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from ticketing.domain import AuthContext, Role, TicketType
from ticketing.services import TicketingServices, build_services, get_services
from ticketing.stores.memory_store import InMemoryTicketingStore


@pytest.fixture
def services() -> TicketingServices:
    return build_services(InMemoryTicketingStore())


@pytest.fixture
def customer() -> AuthContext:
    return AuthContext(user_id="customer-1", role=Role.CUSTOMER)


@pytest.fixture
def organizer() -> AuthContext:
    return AuthContext(user_id="organizer-1", role=Role.ORGANIZER)


@pytest.fixture
def event(services: TicketingServices, organizer: AuthContext):
    return services.catalog.create_event(
        organizer_id=organizer.user_id,
        name="Summer Jazz Night",
        location="Riverside Hall",
        starts_at=datetime(2026, 7, 1, 19, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def make_ticket_type(services: TicketingServices, event):
    def _make(quantity: int = 100, sold: int = 0, price: str = "50.00", name: str = "General Admission") -> TicketType:
        return services.catalog.add_ticket_type(event.id, name, Decimal(price), quantity, sold=sold)

    return _make


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def fresh_api_services():
    get_services.cache_clear()
    yield
    get_services.cache_clear()
