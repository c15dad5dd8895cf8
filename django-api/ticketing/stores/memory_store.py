"""In-memory implementation of the TicketingStore.

Records live in dicts keyed by id. Every read and write takes the arena lock,
so a reader always gets a whole record and never one that is half built.
"""

import threading
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import TypeVar

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
from ticketing.domain.errors import DuplicateQRCodeError
from ticketing.stores.interfaces import StaleRecordError, TicketingStore

R = TypeVar("R", TicketType, Ticket, Order, RefundRequest)


class InMemoryTicketingStore(TicketingStore):
    """Process-local arena of records."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._events: dict[EventId, Event] = {}
        self._ticket_types: dict[TicketTypeId, TicketType] = {}
        self._tickets: dict[TicketId, Ticket] = {}
        self._tickets_by_qr: dict[QRCode, TicketId] = {}
        self._orders: dict[OrderId, Order] = {}
        self._refunds: dict[RefundId, RefundRequest] = {}
        self._activity: list[ActivityEntry] = []

    def _replace_versioned(self, table: dict, record: R) -> R:
        current = table.get(record.id)
        if current is None:
            raise KeyError(record.id)
        if current.version != record.version:
            raise StaleRecordError(record.id, expected=record.version, actual=current.version)
        stored = replace(record, version=record.version + 1)
        table[record.id] = stored
        return stored

    # Events

    def add_event(self, event: Event) -> Event:
        with self._lock:
            self._events[event.id] = event
        return event

    def get_event(self, event_id: EventId) -> Event | None:
        with self._lock:
            return self._events.get(event_id)

    def list_events(self) -> list[Event]:
        with self._lock:
            events = list(self._events.values())
        return sorted(events, key=lambda e: e.created_at, reverse=True)

    # Ticket types

    def add_ticket_type(self, ticket_type: TicketType) -> TicketType:
        with self._lock:
            self._ticket_types[ticket_type.id] = ticket_type
        return ticket_type

    def get_ticket_type(self, ticket_type_id: TicketTypeId) -> TicketType | None:
        with self._lock:
            return self._ticket_types.get(ticket_type_id)

    def update_ticket_type(self, ticket_type: TicketType) -> TicketType:
        with self._lock:
            return self._replace_versioned(self._ticket_types, ticket_type)

    def list_ticket_types(self, event_id: EventId) -> list[TicketType]:
        with self._lock:
            return [t for t in self._ticket_types.values() if t.event_id == event_id]

    # Tickets

    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        with self._lock:
            return self._tickets.get(ticket_id)

    def get_ticket_by_qr_code(self, qr_code: QRCode) -> Ticket | None:
        with self._lock:
            ticket_id = self._tickets_by_qr.get(qr_code)
            return self._tickets.get(ticket_id) if ticket_id is not None else None

    def qr_code_exists(self, qr_code: QRCode) -> bool:
        with self._lock:
            return qr_code in self._tickets_by_qr

    def update_ticket(self, ticket: Ticket) -> Ticket:
        with self._lock:
            current = self._tickets.get(ticket.id)
            if current is not None and current.qr_code != ticket.qr_code:
                raise ValueError("QR code of an issued ticket cannot change")
            return self._replace_versioned(self._tickets, ticket)

    def list_tickets(
        self,
        event_id: EventId | None = None,
        order_ids: Iterable[OrderId] | None = None,
    ) -> list[Ticket]:
        wanted = set(order_ids) if order_ids is not None else None
        with self._lock:
            tickets = list(self._tickets.values())
        if event_id is not None:
            tickets = [t for t in tickets if t.event_id == event_id]
        if wanted is not None:
            tickets = [t for t in tickets if t.order_id in wanted]
        return tickets

    # Orders

    def save_order(self, order: Order, tickets: Sequence[Ticket]) -> Order:
        with self._lock:
            seen: set[QRCode] = set()
            for ticket in tickets:
                if ticket.qr_code in seen or ticket.qr_code in self._tickets_by_qr:
                    raise DuplicateQRCodeError(str(ticket.qr_code))
                seen.add(ticket.qr_code)
            for ticket in tickets:
                self._tickets[ticket.id] = ticket
                self._tickets_by_qr[ticket.qr_code] = ticket.id
            self._orders[order.id] = order
        return order

    def get_order(self, order_id: OrderId) -> Order | None:
        with self._lock:
            return self._orders.get(order_id)

    def update_order(self, order: Order) -> Order:
        with self._lock:
            return self._replace_versioned(self._orders, order)

    def list_orders(
        self,
        customer_id: str | None = None,
        event_id: EventId | None = None,
    ) -> list[Order]:
        with self._lock:
            orders = list(self._orders.values())
        if customer_id is not None:
            orders = [o for o in orders if o.customer_id == customer_id]
        if event_id is not None:
            orders = [o for o in orders if o.event_id == event_id]
        return orders

    # Refunds

    def add_refund(self, refund: RefundRequest) -> RefundRequest:
        with self._lock:
            self._refunds[refund.id] = refund
        return refund

    def get_refund(self, refund_id: RefundId) -> RefundRequest | None:
        with self._lock:
            return self._refunds.get(refund_id)

    def update_refund(self, refund: RefundRequest) -> RefundRequest:
        with self._lock:
            return self._replace_versioned(self._refunds, refund)

    def list_refunds(self, order_ids: Iterable[OrderId] | None = None) -> list[RefundRequest]:
        wanted = set(order_ids) if order_ids is not None else None
        with self._lock:
            refunds = list(self._refunds.values())
        if wanted is not None:
            refunds = [r for r in refunds if r.order_id in wanted]
        return refunds

    # Activity

    def append_activity(self, entry: ActivityEntry) -> ActivityEntry:
        with self._lock:
            self._activity.append(entry)
        return entry

    def list_activity(self) -> list[ActivityEntry]:
        with self._lock:
            return list(self._activity)
