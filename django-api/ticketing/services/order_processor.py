"""Order processor - turns a cart into an order and its tickets.

Orders touching several ticket types are handled as a saga: lines are reserved
one by one in submitted order and, if any line cannot be satisfied, every
reservation made so far is restocked before the error reaches the caller.
"""

from collections.abc import Callable, Sequence
from datetime import datetime

import structlog
from django.utils import timezone

from ticketing.domain import (
    ActivityType,
    AuthContext,
    CartLine,
    Money,
    Order,
    OrderId,
    OrderLine,
    OrderStatus,
    PaymentMethod,
    QRCode,
    Ticket,
    TicketId,
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
from ticketing.services.activity_log import ActivityLog
from ticketing.services.inventory_ledger import InventoryLedger
from ticketing.services.qr_codes import QRCodeGenerator, generate_qr_code
from ticketing.stores.interfaces import TicketingStore

logger = structlog.get_logger(__name__)


class OrderProcessor:
    """Service for converting carts into completed orders."""

    def __init__(
        self,
        store: TicketingStore,
        ledger: InventoryLedger,
        activity_log: ActivityLog,
        qr_generator: QRCodeGenerator = generate_qr_code,
        clock: Callable[[], datetime] = timezone.now,
        qr_max_attempts: int = 5,
    ) -> None:
        self._store = store
        self._ledger = ledger
        self._activity_log = activity_log
        self._qr_generator = qr_generator
        self._clock = clock
        self._qr_max_attempts = qr_max_attempts

    def create_order(
        self,
        actor: AuthContext,
        cart: Sequence[CartLine],
        payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD,
    ) -> Order:
        """Reserve inventory for every cart line and issue one ticket per unit.

        Payment is assumed to succeed; the order is created completed.

        Raises:
            EmptyCartError: If the cart has no lines.
            InvalidQuantityError: If a line has a quantity below one.
            TicketTypeNotFoundError: If a line names an unknown ticket type.
            InvalidCartLineError: If a ticket type does not belong to the line's event.
            OutOfStockError: If any line cannot be reserved. No inventory is
                held afterwards.
            TicketIssuanceFailedError: If unique QR codes could not be issued.
                No inventory is held afterwards.
        """
        self._validate(cart)
        reserved = self._reserve_all(cart)
        try:
            order = self._issue(actor, cart, payment_method)
        except Exception:
            self._compensate(reserved)
            raise

        self._activity_log.record(
            ActivityType.ORDER_CREATION,
            f"Order placed for {len(order.ticket_ids)} ticket(s)",
            actor.user_id,
        )
        logger.info(
            "order_created",
            order_id=str(order.id),
            customer_id=order.customer_id,
            tickets=len(order.ticket_ids),
            total_amount=str(order.total_amount),
        )
        return order

    def _validate(self, cart: Sequence[CartLine]) -> None:
        if not cart:
            raise EmptyCartError()
        for line in cart:
            if line.quantity <= 0:
                raise InvalidQuantityError(line.quantity)
            ticket_type = self._store.get_ticket_type(line.ticket_type_id)
            if ticket_type is None:
                raise TicketTypeNotFoundError(str(line.ticket_type_id))
            if ticket_type.event_id != line.event_id:
                raise InvalidCartLineError(str(line.ticket_type_id), str(line.event_id))

    def _reserve_all(self, cart: Sequence[CartLine]) -> list[CartLine]:
        reserved: list[CartLine] = []
        for line in cart:
            try:
                self._ledger.reserve(line.ticket_type_id, line.quantity)
            except InsufficientInventoryError as exc:
                self._compensate(reserved)
                logger.info(
                    "order_rejected_out_of_stock",
                    ticket_type_id=exc.ticket_type_id,
                    requested=exc.requested,
                    available=exc.available,
                    rolled_back_lines=len(reserved),
                )
                raise OutOfStockError(exc.ticket_type_id, exc.requested, exc.available) from exc
            except Exception:
                self._compensate(reserved)
                raise
            reserved.append(line)
        return reserved

    def _compensate(self, reserved: Sequence[CartLine]) -> None:
        for line in reversed(reserved):
            self._ledger.restock(line.ticket_type_id, line.quantity)

    def _issue(self, actor: AuthContext, cart: Sequence[CartLine], payment_method: PaymentMethod) -> Order:
        order_id = OrderId.generate()
        now = self._clock()
        total = Money.zero()
        for line in cart:
            total = total + line.subtotal
        lines = tuple(OrderLine(line.ticket_type_id, line.quantity, line.unit_price) for line in cart)

        for attempt in range(1, self._qr_max_attempts + 1):
            tickets = self._build_tickets(order_id, cart)
            order = Order(
                id=order_id,
                customer_id=actor.user_id,
                event_id=cart[0].event_id,
                ticket_ids=tuple(t.id for t in tickets),
                lines=lines,
                total_amount=total,
                status=OrderStatus.COMPLETED,
                payment_method=payment_method,
                created_at=now,
                updated_at=now,
            )
            try:
                return self._store.save_order(order, tickets)
            except DuplicateQRCodeError as exc:
                # Another order took the code between our check and the insert.
                logger.warning("qr_code_collision_on_save", order_id=str(order_id), attempt=attempt, qr_code=exc.qr_code)

        raise TicketIssuanceFailedError(self._qr_max_attempts)

    def _build_tickets(self, order_id: OrderId, cart: Sequence[CartLine]) -> list[Ticket]:
        tickets: list[Ticket] = []
        taken: set[QRCode] = set()
        for line in cart:
            for _ in range(line.quantity):
                qr_code = self._unique_qr_code(taken)
                taken.add(qr_code)
                tickets.append(
                    Ticket(
                        id=TicketId.generate(),
                        order_id=order_id,
                        ticket_type_id=line.ticket_type_id,
                        event_id=line.event_id,
                        qr_code=qr_code,
                    )
                )
        return tickets

    def _unique_qr_code(self, taken: set[QRCode]) -> QRCode:
        for attempt in range(1, self._qr_max_attempts + 1):
            qr_code = self._qr_generator()
            if qr_code not in taken and not self._store.qr_code_exists(qr_code):
                return qr_code
            logger.warning("qr_code_collision", attempt=attempt)
        raise TicketIssuanceFailedError(self._qr_max_attempts)
