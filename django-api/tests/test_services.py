"""Unit tests for CatalogService and ReportingService.

These test error handling and domain error mapping.
Run with: pytest tests/test_services.py -v
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ticketing.domain import EventId, OrderId, TicketStatus
from ticketing.domain.errors import EventNotFoundError, InvalidIdError, OrderNotFoundError, TicketNotFoundError
from ticketing.services.catalog_service import CatalogService
from ticketing.stores.memory_store import InMemoryTicketingStore
from tests.helpers import cart_line


class TestCatalogService:
    """Tests for CatalogService."""

    def test_get_event_invalid_id_raises_error(self, services):
        with pytest.raises(InvalidIdError):
            services.catalog.get_event("not-a-uuid")

    def test_get_event_not_found_raises_error(self, services):
        with pytest.raises(EventNotFoundError):
            services.catalog.get_event(str(EventId.generate()))

    def test_list_events_newest_first(self, organizer):
        created = iter([datetime(2026, 1, 1, tzinfo=timezone.utc), datetime(2026, 1, 2, tzinfo=timezone.utc)])
        catalog = CatalogService(InMemoryTicketingStore(), clock=lambda: next(created))
        starts_at = datetime(2026, 6, 1, tzinfo=timezone.utc)
        older = catalog.create_event(organizer.user_id, "Older", "Hall A", starts_at)
        newer = catalog.create_event(organizer.user_id, "Newer", "Hall B", starts_at)

        assert [e.id for e in catalog.list_events()] == [newer.id, older.id]

    def test_add_ticket_type_to_unknown_event(self, services):
        with pytest.raises(EventNotFoundError):
            services.catalog.add_ticket_type(EventId.generate(), "VIP", Decimal("10"), 5)

    def test_add_ticket_type_rejects_negative_price(self, services, event):
        with pytest.raises(ValueError):
            services.catalog.add_ticket_type(event.id, "VIP", Decimal("-1"), 5)

    def test_get_ticket_types_for_event(self, services, event, make_ticket_type):
        vip = make_ticket_type(name="VIP")

        assert services.catalog.get_ticket_types(str(event.id)) == [vip]

    def test_featured_is_separate_from_status(self, services, organizer):
        event = services.catalog.create_event(
            organizer.user_id, "Gala", "Opera", datetime(2026, 9, 1, tzinfo=timezone.utc), featured=True
        )
        assert event.featured is True
        assert event.status.value == "active"


class TestReportingService:
    """Tests for ReportingService."""

    def test_orders_by_customer(self, services, customer, organizer, make_ticket_type):
        ticket_type = make_ticket_type()
        mine = services.orders.create_order(customer, [cart_line(ticket_type, 1)])
        services.orders.create_order(organizer, [cart_line(ticket_type, 1)])

        assert services.reporting.get_orders_by_customer_id(customer.user_id) == [mine]
        assert len(services.reporting.get_all_orders()) == 2

    def test_get_order_not_found(self, services):
        with pytest.raises(OrderNotFoundError):
            services.reporting.get_order(str(OrderId.generate()))

    def test_tickets_by_event_and_order(self, services, customer, event, make_ticket_type):
        ticket_type = make_ticket_type()
        order = services.orders.create_order(customer, [cart_line(ticket_type, 3)])

        by_event = services.reporting.get_tickets_by_event_id(str(event.id))
        by_order = services.reporting.get_tickets_by_order_id(str(order.id))

        assert [t.id for t in by_order] == list(order.ticket_ids)
        assert {t.id for t in by_event} == set(order.ticket_ids)

    def test_tickets_by_customer(self, services, customer, organizer, make_ticket_type):
        ticket_type = make_ticket_type()
        services.orders.create_order(customer, [cart_line(ticket_type, 2)])
        services.orders.create_order(organizer, [cart_line(ticket_type, 1)])

        assert len(services.reporting.get_tickets_by_customer_id(customer.user_id)) == 2
        assert services.reporting.get_tickets_by_customer_id("nobody") == []

    def test_ticket_by_qr_code(self, services, customer, make_ticket_type):
        ticket_type = make_ticket_type()
        order = services.orders.create_order(customer, [cart_line(ticket_type, 1)])
        ticket = services.store.get_ticket(order.ticket_ids[0])

        assert services.reporting.get_ticket_by_qr_code(ticket.qr_code.value) == ticket
        with pytest.raises(TicketNotFoundError):
            services.reporting.get_ticket_by_qr_code("QR-unknown")

    def test_refunds_by_event_and_order(self, services, customer, event, make_ticket_type):
        ticket_type = make_ticket_type()
        order = services.orders.create_order(customer, [cart_line(ticket_type, 1)])
        refund = services.refunds.request_refund(order.id, customer, "")

        assert services.reporting.get_refunds_by_event_id(str(event.id)) == [refund]
        assert services.reporting.get_refunds_by_order_id(str(order.id)) == [refund]
        assert services.reporting.get_all_refunds() == [refund]

    def test_refunds_follow_tickets_across_events(self, services, customer, organizer, make_ticket_type):
        first_event_type = make_ticket_type()
        other_event = services.catalog.create_event(
            organizer.user_id, "Late Show", "Basement", datetime(2026, 7, 2, 22, 0, tzinfo=timezone.utc)
        )
        other_event_type = services.catalog.add_ticket_type(other_event.id, "Standing", Decimal("15.00"), 30)
        order = services.orders.create_order(customer, [cart_line(first_event_type, 1), cart_line(other_event_type, 1)])
        refund = services.refunds.request_refund(order.id, customer, "")

        assert len(services.reporting.get_tickets_by_event_id(str(other_event.id))) == 1
        assert services.reporting.get_refunds_by_event_id(str(other_event.id)) == [refund]
        assert services.reporting.get_refunds_by_event_id(str(first_event_type.event_id)) == [refund]

    def test_refunds_by_event_without_orders(self, services, event):
        assert services.reporting.get_refunds_by_event_id(str(event.id)) == []

    def test_check_in_stats(self, services, customer, organizer, event, make_ticket_type):
        ticket_type = make_ticket_type()
        order = services.orders.create_order(customer, [cart_line(ticket_type, 3)])
        ticket = services.store.get_ticket(order.ticket_ids[0])
        services.check_ins.check_in(ticket.qr_code.value, organizer)

        stats = services.reporting.get_check_in_stats(str(event.id))

        assert (stats.total, stats.checked_in, stats.remaining, stats.percentage) == (3, 1, 2, 33)

    def test_check_in_stats_for_empty_event(self, services, event):
        stats = services.reporting.get_check_in_stats(str(event.id))
        assert stats.percentage == 0

    def test_attendee_records_skip_refunded_tickets(self, services, customer, organizer, event, make_ticket_type):
        ticket_type = make_ticket_type(name="Balcony")
        kept = services.orders.create_order(customer, [cart_line(ticket_type, 2)])
        refunded = services.orders.create_order(customer, [cart_line(ticket_type, 1)])
        refund = services.refunds.request_refund(refunded.id, customer, "")
        services.refunds.approve(refund.id, organizer)

        records = services.reporting.get_attendee_records(str(event.id))

        assert [r.ticket.id for r in records] == list(kept.ticket_ids)
        assert all(r.ticket_type.name == "Balcony" for r in records)
        assert all(r.order.id == kept.id for r in records)
        assert all(r.ticket.status is TicketStatus.VALID for r in records)

    def test_reads_do_not_change_state(self, services, customer, event, make_ticket_type):
        ticket_type = make_ticket_type()
        services.orders.create_order(customer, [cart_line(ticket_type, 2)])
        before = (services.store.list_tickets(), services.store.list_orders(), services.store.list_activity())

        services.reporting.get_tickets_by_event_id(str(event.id))
        services.reporting.get_check_in_stats(str(event.id))
        services.reporting.get_attendee_records(str(event.id))

        assert (services.store.list_tickets(), services.store.list_orders(), services.store.list_activity()) == before
