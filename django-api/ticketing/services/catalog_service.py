"""Catalog service - events and the ticket types they own.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal

import structlog
from django.utils import timezone

from ticketing.domain import (
    Capacity,
    Event,
    EventId,
    EventStatus,
    Money,
    TicketCategory,
    TicketType,
    TicketTypeId,
)
from ticketing.domain.errors import EventNotFoundError
from ticketing.services.parsing import parse_id
from ticketing.stores.interfaces import TicketingStore

logger = structlog.get_logger(__name__)


class CatalogService:
    """Service for event catalog operations."""

    def __init__(self, store: TicketingStore, clock: Callable[[], datetime] = timezone.now) -> None:
        self._store = store
        self._clock = clock

    def create_event(
        self,
        organizer_id: str,
        name: str,
        location: str,
        starts_at: datetime,
        status: EventStatus = EventStatus.ACTIVE,
        featured: bool = False,
    ) -> Event:
        event = Event(
            id=EventId.generate(),
            organizer_id=organizer_id,
            name=name,
            location=location,
            starts_at=starts_at,
            status=status,
            created_at=self._clock(),
            featured=featured,
        )
        self._store.add_event(event)
        logger.info("event_created", event_id=str(event.id), organizer_id=organizer_id)
        return event

    def add_ticket_type(
        self,
        event_id: EventId,
        name: str,
        price: Decimal,
        quantity: int,
        category: TicketCategory = TicketCategory.REGULAR,
        sold: int = 0,
    ) -> TicketType:
        """Attach a new ticket type to an event.

        ``sold`` seeds the counter for imported inventory; afterwards it only
        moves through the inventory ledger.

        Raises:
            EventNotFoundError: If the event does not exist.
            ValueError: If price or quantity is negative or sold exceeds quantity.
        """
        if self._store.get_event(event_id) is None:
            raise EventNotFoundError(str(event_id))
        ticket_type = TicketType(
            id=TicketTypeId.generate(),
            event_id=event_id,
            name=name,
            price=Money(price),
            quantity=Capacity(quantity),
            sold=sold,
            category=category,
            created_at=self._clock(),
        )
        self._store.add_ticket_type(ticket_type)
        logger.info("ticket_type_added", event_id=str(event_id), ticket_type_id=str(ticket_type.id), quantity=quantity)
        return ticket_type

    def list_events(self) -> list[Event]:
        """Return all events."""
        return self._store.list_events()

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self._store.get_event(parse_id(EventId, event_id, "event"))
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def get_ticket_types(self, event_id: str) -> list[TicketType]:
        """Return the ticket types of an event.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self.get_event(event_id)
        return self._store.list_ticket_types(event.id)
