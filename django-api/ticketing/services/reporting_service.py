"""Read-only projections consumed by dashboards and the attendee export.

Nothing here changes state.
"""

from ticketing.domain import (
    AttendeeRecord,
    CheckInStats,
    Event,
    EventId,
    Order,
    OrderId,
    QRCode,
    RefundRequest,
    Ticket,
    TicketStatus,
)
from ticketing.domain.errors import EventNotFoundError, OrderNotFoundError, TicketNotFoundError
from ticketing.services.parsing import parse_id
from ticketing.stores.interfaces import TicketingStore


class ReportingService:
    """Service for dashboard reads."""

    def __init__(self, store: TicketingStore) -> None:
        self._store = store

    def get_all_orders(self) -> list[Order]:
        return self._store.list_orders()

    def get_order(self, order_id: str) -> Order:
        """Return an order by ID.

        Raises:
            InvalidIdError: If the order_id is not a valid UUID.
            OrderNotFoundError: If the order does not exist.
        """
        order = self._store.get_order(parse_id(OrderId, order_id, "order"))
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def get_orders_by_customer_id(self, customer_id: str) -> list[Order]:
        return self._store.list_orders(customer_id=customer_id)

    def get_tickets_by_event_id(self, event_id: str) -> list[Ticket]:
        event = self._event(event_id)
        return self._store.list_tickets(event_id=event.id)

    def get_tickets_by_order_id(self, order_id: str) -> list[Ticket]:
        order = self.get_order(order_id)
        tickets = {t.id: t for t in self._store.list_tickets(order_ids=[order.id])}
        return [tickets[ticket_id] for ticket_id in order.ticket_ids if ticket_id in tickets]

    def get_tickets_by_customer_id(self, customer_id: str) -> list[Ticket]:
        order_ids = [o.id for o in self._store.list_orders(customer_id=customer_id)]
        if not order_ids:
            return []
        return self._store.list_tickets(order_ids=order_ids)

    def get_ticket_by_qr_code(self, qr_code: str) -> Ticket:
        ticket = self._store.get_ticket_by_qr_code(QRCode(qr_code)) if qr_code else None
        if ticket is None:
            raise TicketNotFoundError(qr_code)
        return ticket

    def get_all_refunds(self) -> list[RefundRequest]:
        return self._store.list_refunds()

    def get_refunds_by_order_id(self, order_id: str) -> list[RefundRequest]:
        order = self.get_order(order_id)
        return self._store.list_refunds(order_ids=[order.id])

    def get_refunds_by_event_id(self, event_id: str) -> list[RefundRequest]:
        """Refunds of every order holding a ticket for the event."""
        event = self._event(event_id)
        order_ids = {t.order_id for t in self._store.list_tickets(event_id=event.id)}
        if not order_ids:
            return []
        return self._store.list_refunds(order_ids=order_ids)

    def get_check_in_stats(self, event_id: str) -> CheckInStats:
        """Check-in progress for an event. Refunded tickets do not count."""
        tickets = [t for t in self.get_tickets_by_event_id(event_id) if t.status is not TicketStatus.REFUNDED]
        total = len(tickets)
        checked_in = sum(1 for t in tickets if t.checked_in)
        percentage = round(checked_in / total * 100) if total else 0
        return CheckInStats(total=total, checked_in=checked_in, remaining=total - checked_in, percentage=percentage)

    def get_attendee_records(self, event_id: str) -> list[AttendeeRecord]:
        """Records behind the attendee export, one per ticket that still admits."""
        event = self._event(event_id)
        orders = {o.id: o for o in self._store.list_orders(event_id=event.id)}
        ticket_types = {t.id: t for t in self._store.list_ticket_types(event.id)}
        records = []
        for ticket in self._store.list_tickets(event_id=event.id):
            if ticket.status is TicketStatus.REFUNDED:
                continue
            order = orders.get(ticket.order_id) or self._store.get_order(ticket.order_id)
            ticket_type = ticket_types.get(ticket.ticket_type_id)
            if order is None or ticket_type is None:
                continue
            records.append(AttendeeRecord(ticket=ticket, order=order, ticket_type=ticket_type))
        return records

    def _event(self, event_id: str) -> Event:
        event = self._store.get_event(parse_id(EventId, event_id, "event"))
        if event is None:
            raise EventNotFoundError(event_id)
        return event
