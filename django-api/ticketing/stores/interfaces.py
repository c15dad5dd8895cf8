"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Records are immutable;
``update_*`` methods implement optimistic versioning: the record passed in must
carry the version currently stored, and the stored copy comes back with the
version incremented.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from ticketing.domain import (
    ActivityEntry,
    Event,
    EventId,
    Order,
    OrderId,
    QRCode,
    RefundId,
    RefundRequest,
    Ticket,
    TicketId,
    TicketType,
    TicketTypeId,
)


class StaleRecordError(Exception):
    """Raised when an update is based on an outdated version of a record."""

    def __init__(self, record_id: object, expected: int, actual: int) -> None:
        super().__init__(f"Record {record_id} is at version {actual}, update was based on {expected}")
        self.record_id = record_id
        self.expected = expected
        self.actual = actual


class TicketingStore(ABC):
    """Interface for ticketing persistence operations."""

    # Events

    @abstractmethod
    def add_event(self, event: Event) -> Event:
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by created_at descending."""
        ...

    # Ticket types

    @abstractmethod
    def add_ticket_type(self, ticket_type: TicketType) -> TicketType:
        ...

    @abstractmethod
    def get_ticket_type(self, ticket_type_id: TicketTypeId) -> TicketType | None:
        ...

    @abstractmethod
    def update_ticket_type(self, ticket_type: TicketType) -> TicketType:
        ...

    @abstractmethod
    def list_ticket_types(self, event_id: EventId) -> list[TicketType]:
        """Return the ticket types of an event in creation order."""
        ...

    # Tickets

    @abstractmethod
    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        ...

    @abstractmethod
    def get_ticket_by_qr_code(self, qr_code: QRCode) -> Ticket | None:
        """Return the ticket holding exactly this code, or None."""
        ...

    @abstractmethod
    def qr_code_exists(self, qr_code: QRCode) -> bool:
        ...

    @abstractmethod
    def update_ticket(self, ticket: Ticket) -> Ticket:
        ...

    @abstractmethod
    def list_tickets(
        self,
        event_id: EventId | None = None,
        order_ids: Iterable[OrderId] | None = None,
    ) -> list[Ticket]:
        """Return tickets in issue order, optionally filtered."""
        ...

    # Orders

    @abstractmethod
    def save_order(self, order: Order, tickets: Sequence[Ticket]) -> Order:
        """Insert an order together with its tickets.

        Raises:
            DuplicateQRCodeError: If any QR code is already stored or repeated
                within ``tickets``. Nothing is inserted in that case.
        """
        ...

    @abstractmethod
    def get_order(self, order_id: OrderId) -> Order | None:
        ...

    @abstractmethod
    def update_order(self, order: Order) -> Order:
        ...

    @abstractmethod
    def list_orders(
        self,
        customer_id: str | None = None,
        event_id: EventId | None = None,
    ) -> list[Order]:
        """Return orders in creation order, optionally filtered."""
        ...

    # Refunds

    @abstractmethod
    def add_refund(self, refund: RefundRequest) -> RefundRequest:
        ...

    @abstractmethod
    def get_refund(self, refund_id: RefundId) -> RefundRequest | None:
        ...

    @abstractmethod
    def update_refund(self, refund: RefundRequest) -> RefundRequest:
        ...

    @abstractmethod
    def list_refunds(self, order_ids: Iterable[OrderId] | None = None) -> list[RefundRequest]:
        """Return refund requests in request order, optionally filtered."""
        ...

    # Activity

    @abstractmethod
    def append_activity(self, entry: ActivityEntry) -> ActivityEntry:
        ...

    @abstractmethod
    def list_activity(self) -> list[ActivityEntry]:
        """Return activity entries in insertion order."""
        ...
