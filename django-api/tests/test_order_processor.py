"""Unit tests for OrderProcessor.

Run with: pytest tests/test_order_processor.py -v
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from decimal import Decimal
from itertools import repeat

import pytest

from ticketing.domain import (
    ActivityType,
    CartLine,
    EventId,
    Money,
    OrderStatus,
    PaymentMethod,
    QRCode,
    TicketStatus,
    TicketTypeId,
)
from ticketing.domain.errors import (
    DuplicateQRCodeError,
    EmptyCartError,
    InsufficientInventoryError,
    InvalidCartLineError,
    InvalidQuantityError,
    OutOfStockError,
    TicketIssuanceFailedError,
    TicketTypeNotFoundError,
)
from ticketing.services import build_services
from ticketing.services.order_processor import OrderProcessor
from ticketing.stores.memory_store import InMemoryTicketingStore
from tests.helpers import cart_line, sold


def processor_with_codes(services, codes, max_attempts: int = 5) -> OrderProcessor:
    codes = iter(codes)
    return OrderProcessor(
        services.store,
        services.ledger,
        services.activity,
        qr_generator=lambda: QRCode(next(codes)),
        qr_max_attempts=max_attempts,
    )


class RacyStore(InMemoryTicketingStore):
    """Reports a stored code as free, as if another order took it just after the check."""

    def __init__(self, lies: int) -> None:
        super().__init__()
        self._lies = lies

    def qr_code_exists(self, qr_code: QRCode) -> bool:
        exists = super().qr_code_exists(qr_code)
        if exists and self._lies > 0:
            self._lies -= 1
            return False
        return exists


def racy_services(organizer, lies: int):
    services = build_services(RacyStore(lies))
    event = services.catalog.create_event(
        organizer.user_id, "Racy Night", "Club", datetime(2026, 7, 1, 19, 0, tzinfo=timezone.utc)
    )
    ticket_type = services.catalog.add_ticket_type(event.id, "General", Decimal("10.00"), 10)
    return services, ticket_type


class TestCreateOrder:
    def test_creates_completed_order_with_one_ticket_per_unit(self, services, customer, make_ticket_type):
        vip = make_ticket_type(quantity=10, price="120.00", name="VIP")
        regular = make_ticket_type(quantity=100, price="40.00", name="Regular")

        order = services.orders.create_order(
            customer,
            [cart_line(vip, 2), cart_line(regular, 3)],
            PaymentMethod.PAYPAL,
        )

        assert order.status is OrderStatus.COMPLETED
        assert order.customer_id == customer.user_id
        assert order.payment_method is PaymentMethod.PAYPAL
        assert order.total_amount == Money(Decimal("360.00"))
        assert len(order.ticket_ids) == 5
        assert sold(services, vip) == 2
        assert sold(services, regular) == 3

    def test_tickets_keep_purchase_order(self, services, customer, make_ticket_type):
        vip = make_ticket_type(name="VIP")
        regular = make_ticket_type(name="Regular")

        order = services.orders.create_order(customer, [cart_line(vip, 1), cart_line(regular, 2)])

        tickets = [services.store.get_ticket(ticket_id) for ticket_id in order.ticket_ids]
        assert [t.ticket_type_id for t in tickets] == [vip.id, regular.id, regular.id]
        assert all(t.status is TicketStatus.VALID and not t.checked_in for t in tickets)
        assert all(t.order_id == order.id for t in tickets)

    def test_qr_codes_are_pairwise_distinct(self, services, customer, make_ticket_type):
        ticket_type = make_ticket_type(quantity=500)

        for _ in range(5):
            services.orders.create_order(customer, [cart_line(ticket_type, 20)])

        codes = [t.qr_code for t in services.store.list_tickets()]
        assert len(codes) == 100
        assert len(set(codes)) == 100

    def test_order_creation_is_logged(self, services, customer, make_ticket_type):
        ticket_type = make_ticket_type()

        services.orders.create_order(customer, [cart_line(ticket_type, 2)])

        entries = services.activity.entries()
        assert [e.type for e in entries] == [ActivityType.ORDER_CREATION]
        assert entries[0].actor == customer.user_id


class TestCartValidation:
    def test_empty_cart(self, services, customer):
        with pytest.raises(EmptyCartError):
            services.orders.create_order(customer, [])

    def test_zero_quantity_line(self, services, customer, make_ticket_type):
        ticket_type = make_ticket_type()
        with pytest.raises(InvalidQuantityError):
            services.orders.create_order(customer, [cart_line(ticket_type, 1), cart_line(ticket_type, 0)])
        assert sold(services, ticket_type) == 0

    def test_unknown_ticket_type(self, services, customer, event):
        line = CartLine(TicketTypeId.generate(), event.id, 1, Money(Decimal("10")))
        with pytest.raises(TicketTypeNotFoundError):
            services.orders.create_order(customer, [line])

    def test_ticket_type_of_another_event(self, services, customer, make_ticket_type):
        ticket_type = make_ticket_type()
        line = CartLine(ticket_type.id, EventId.generate(), 1, ticket_type.price)
        with pytest.raises(InvalidCartLineError):
            services.orders.create_order(customer, [line])
        assert sold(services, ticket_type) == 0


class TestRollback:
    def test_out_of_stock_line_rolls_back_earlier_lines(self, services, customer, make_ticket_type):
        """[typeB qty=1 (10 left), typeA qty=5 (3 left)] leaves both untouched."""
        type_a = make_ticket_type(quantity=10, sold=7, name="A")
        type_b = make_ticket_type(quantity=10, sold=0, name="B")

        with pytest.raises(OutOfStockError) as exc_info:
            services.orders.create_order(customer, [cart_line(type_b, 1), cart_line(type_a, 5)])

        assert isinstance(exc_info.value.__cause__, InsufficientInventoryError)
        assert exc_info.value.available == 3
        assert sold(services, type_a) == 7
        assert sold(services, type_b) == 0
        assert services.store.list_orders() == []
        assert services.store.list_tickets() == []
        assert services.activity.entries() == []

    def test_first_line_out_of_stock(self, services, customer, make_ticket_type):
        """[typeA qty=5 (3 left), typeB qty=1] fails and typeB is never touched."""
        type_a = make_ticket_type(quantity=10, sold=7, name="A")
        type_b = make_ticket_type(quantity=10, sold=0, name="B")

        with pytest.raises(OutOfStockError):
            services.orders.create_order(customer, [cart_line(type_a, 5), cart_line(type_b, 1)])

        assert sold(services, type_a) == 7
        assert sold(services, type_b) == 0


class TestQRCodeIssuance:
    def test_collision_with_existing_ticket_is_regenerated(self, services, customer, make_ticket_type):
        ticket_type = make_ticket_type()
        processor = processor_with_codes(services, ["QR-A", "QR-A", "QR-B"])

        first = processor.create_order(customer, [cart_line(ticket_type, 1)])
        second = processor.create_order(customer, [cart_line(ticket_type, 1)])

        first_ticket = services.store.get_ticket(first.ticket_ids[0])
        second_ticket = services.store.get_ticket(second.ticket_ids[0])
        assert first_ticket.qr_code == QRCode("QR-A")
        assert second_ticket.qr_code == QRCode("QR-B")

    def test_collision_within_one_order_is_regenerated(self, services, customer, make_ticket_type):
        ticket_type = make_ticket_type()
        processor = processor_with_codes(services, ["QR-A", "QR-A", "QR-C"])

        order = processor.create_order(customer, [cart_line(ticket_type, 2)])

        codes = [services.store.get_ticket(t).qr_code.value for t in order.ticket_ids]
        assert codes == ["QR-A", "QR-C"]

    def test_exhausted_retries_fail_and_release_inventory(self, services, customer, make_ticket_type):
        ticket_type = make_ticket_type(quantity=10)
        processor = processor_with_codes(services, repeat("QR-X"), max_attempts=3)
        processor.create_order(customer, [cart_line(ticket_type, 1)])

        with pytest.raises(TicketIssuanceFailedError):
            processor.create_order(customer, [cart_line(ticket_type, 2)])

        assert sold(services, ticket_type) == 1
        assert len(services.store.list_orders()) == 1

    def test_store_rejects_duplicate_codes(self, services, customer, make_ticket_type):
        """Uniqueness is enforced on insert, not only by the generator."""
        ticket_type = make_ticket_type()
        order = services.orders.create_order(customer, [cart_line(ticket_type, 1)])
        ticket = services.store.get_ticket(order.ticket_ids[0])

        with pytest.raises(DuplicateQRCodeError):
            services.store.save_order(order, [ticket])

    def test_code_taken_between_check_and_insert_is_reissued(self, customer, organizer):
        services, ticket_type = racy_services(organizer, lies=1)
        processor = processor_with_codes(services, ["QR-A", "QR-A", "QR-B"])
        processor.create_order(customer, [cart_line(ticket_type, 1)])

        second = processor.create_order(customer, [cart_line(ticket_type, 1)])

        assert services.store.get_ticket(second.ticket_ids[0]).qr_code == QRCode("QR-B")
        assert sold(services, ticket_type) == 2

    def test_repeated_insert_collisions_fail_and_release_inventory(self, customer, organizer):
        services, ticket_type = racy_services(organizer, lies=100)
        processor = processor_with_codes(services, repeat("QR-X"), max_attempts=3)
        processor.create_order(customer, [cart_line(ticket_type, 1)])

        with pytest.raises(TicketIssuanceFailedError):
            processor.create_order(customer, [cart_line(ticket_type, 1)])

        assert sold(services, ticket_type) == 1
        assert len(services.store.list_orders()) == 1


class TestContention:
    def test_two_concurrent_orders_for_last_seats(self, services, customer, make_ticket_type):
        """quantity=10, sold=8, two orders of 2: one wins, sold ends at 10."""
        ticket_type = make_ticket_type(quantity=10, sold=8)
        barrier = threading.Barrier(2)

        def place():
            barrier.wait()
            try:
                return services.orders.create_order(customer, [cart_line(ticket_type, 2)])
            except OutOfStockError as exc:
                return exc

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(lambda _: place(), range(2)))

        failures = [r for r in results if isinstance(r, OutOfStockError)]
        assert len(failures) == 1
        assert isinstance(failures[0].__cause__, InsufficientInventoryError)
        assert sold(services, ticket_type) == 10
        assert len(services.store.list_tickets()) == 2

    def test_many_concurrent_multi_line_orders(self, services, customer, make_ticket_type):
        """Mixed carts racing against each other never oversell either type."""
        type_a = make_ticket_type(quantity=15, name="A")
        type_b = make_ticket_type(quantity=15, name="B")
        barrier = threading.Barrier(20)

        def place(i: int):
            barrier.wait()
            cart = [cart_line(type_a, 1), cart_line(type_b, 1)] if i % 2 else [cart_line(type_b, 1), cart_line(type_a, 1)]
            try:
                services.orders.create_order(customer, cart)
            except OutOfStockError:
                return False
            return True

        with ThreadPoolExecutor(max_workers=20) as pool:
            results = list(pool.map(place, range(20)))

        a_sold, b_sold = sold(services, type_a), sold(services, type_b)
        assert a_sold <= 15 and b_sold <= 15
        assert a_sold == b_sold == results.count(True)
        assert len(services.store.list_tickets()) == 2 * results.count(True)
