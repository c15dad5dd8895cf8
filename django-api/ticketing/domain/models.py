"""Domain models representing persisted state.

These are immutable domain objects. A change is expressed by building a new
record (the transition methods below) and handing it to the store, which
bumps ``version``. Status transitions are only reachable through these methods.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import assert_never

from ticketing.domain.errors import (
    AlreadyCheckedInError,
    InvalidRefundTransitionError,
    NotCheckedInError,
    RefundNotAllowedError,
    TicketRefundedError,
)
from ticketing.domain.value_objects import (
    ActivityId,
    Capacity,
    EventId,
    Money,
    OrderId,
    QRCode,
    RefundId,
    TicketId,
    TicketTypeId,
)


class EventStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    CANCELLED = "cancelled"


class TicketCategory(Enum):
    VIP = "vip"
    REGULAR = "regular"
    EARLY_BIRD = "early-bird"


class TicketStatus(Enum):
    VALID = "valid"
    USED = "used"
    REFUNDED = "refunded"


class OrderStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"


class RefundStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class ActivityType(Enum):
    ORDER_CREATION = "order_creation"
    CHECKIN = "checkin"
    REFUND = "refund"


class Role(Enum):
    ADMIN = "admin"
    ORGANIZER = "organizer"
    CUSTOMER = "customer"


@dataclass(frozen=True)
class AuthContext:
    """The acting user, supplied by the caller and never modified."""

    user_id: str
    role: Role


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    organizer_id: str
    name: str
    location: str
    starts_at: datetime
    status: EventStatus
    created_at: datetime
    featured: bool = False


@dataclass(frozen=True)
class TicketType:
    """Domain representation of a TicketType.

    ``sold`` only changes through the inventory ledger.
    """

    id: TicketTypeId
    event_id: EventId
    name: str
    price: Money
    quantity: Capacity
    sold: int
    category: TicketCategory
    created_at: datetime
    version: int = 0

    def __post_init__(self) -> None:
        if self.sold < 0:
            raise ValueError("Sold count cannot be negative")
        if self.sold > self.quantity.value:
            raise ValueError("Sold count cannot exceed quantity")

    @property
    def available(self) -> int:
        return self.quantity.value - self.sold


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a single admission."""

    id: TicketId
    order_id: OrderId
    ticket_type_id: TicketTypeId
    event_id: EventId
    qr_code: QRCode
    checked_in: bool = False
    checked_in_at: datetime | None = None
    status: TicketStatus = TicketStatus.VALID
    version: int = 0

    def check_in(self, at: datetime) -> "Ticket":
        if self.status is TicketStatus.VALID:
            return replace(self, checked_in=True, checked_in_at=at, status=TicketStatus.USED)
        if self.status is TicketStatus.USED:
            raise AlreadyCheckedInError(str(self.id))
        if self.status is TicketStatus.REFUNDED:
            raise TicketRefundedError(str(self.id))
        assert_never(self.status)

    def undo_check_in(self) -> "Ticket":
        if self.status is TicketStatus.USED:
            return replace(self, checked_in=False, checked_in_at=None, status=TicketStatus.VALID)
        if self.status is TicketStatus.VALID:
            raise NotCheckedInError(str(self.id))
        if self.status is TicketStatus.REFUNDED:
            raise TicketRefundedError(str(self.id))
        assert_never(self.status)

    def refund(self) -> "Ticket":
        if self.status is TicketStatus.VALID or self.status is TicketStatus.USED:
            return replace(self, status=TicketStatus.REFUNDED)
        if self.status is TicketStatus.REFUNDED:
            raise TicketRefundedError(str(self.id))
        assert_never(self.status)


@dataclass(frozen=True)
class CartLine:
    """One line of a shopping cart as handed over by the cart collaborator."""

    ticket_type_id: TicketTypeId
    event_id: EventId
    quantity: int
    unit_price: Money

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class OrderLine:
    """Purchased quantity of one ticket type within an order."""

    ticket_type_id: TicketTypeId
    quantity: int
    unit_price: Money


@dataclass(frozen=True)
class Order:
    """Domain representation of an Order.

    ``ticket_ids`` keeps purchase order.
    """

    id: OrderId
    customer_id: str
    event_id: EventId
    ticket_ids: tuple[TicketId, ...]
    lines: tuple[OrderLine, ...]
    total_amount: Money
    status: OrderStatus
    payment_method: PaymentMethod
    created_at: datetime
    updated_at: datetime
    version: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.status in (OrderStatus.REFUNDED, OrderStatus.CANCELLED)

    def ensure_refundable(self) -> None:
        if self.status is OrderStatus.COMPLETED:
            return
        if self.status in (OrderStatus.PENDING, OrderStatus.REFUNDED, OrderStatus.CANCELLED):
            raise RefundNotAllowedError(str(self.id), self.status.value)
        assert_never(self.status)

    def refund(self, at: datetime) -> "Order":
        self.ensure_refundable()
        return replace(self, status=OrderStatus.REFUNDED, updated_at=at)


@dataclass(frozen=True)
class RefundRequest:
    """A customer's request to reverse a completed order."""

    id: RefundId
    order_id: OrderId
    customer_id: str
    amount: Money
    reason: str
    status: RefundStatus
    requested_at: datetime
    processed_at: datetime | None = None
    processed_by: str | None = None
    version: int = 0

    @property
    def is_active(self) -> bool:
        return self.status is not RefundStatus.REJECTED

    def approve(self, at: datetime, by: str) -> "RefundRequest":
        self._ensure_pending("approved")
        return replace(self, status=RefundStatus.APPROVED, processed_at=at, processed_by=by)

    def reject(self, at: datetime, by: str) -> "RefundRequest":
        self._ensure_pending("rejected")
        return replace(self, status=RefundStatus.REJECTED, processed_at=at, processed_by=by)

    def _ensure_pending(self, target: str) -> None:
        if self.status is RefundStatus.PENDING:
            return
        if self.status in (RefundStatus.APPROVED, RefundStatus.REJECTED, RefundStatus.COMPLETED):
            raise InvalidRefundTransitionError(str(self.id), self.status.value, target)
        assert_never(self.status)


@dataclass(frozen=True)
class ActivityEntry:
    """Immutable record of something that happened in the core."""

    id: ActivityId
    type: ActivityType
    description: str
    timestamp: datetime
    actor: str


@dataclass(frozen=True)
class CheckInResult:
    """The redeemed ticket together with its event, for display at the door."""

    ticket: Ticket
    event: Event


@dataclass(frozen=True)
class CheckInStats:
    total: int
    checked_in: int
    remaining: int
    percentage: int


@dataclass(frozen=True)
class AttendeeRecord:
    """Records behind one attendee export row."""

    ticket: Ticket
    order: Order
    ticket_type: TicketType
