"""Domain error codes for the ticketing module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    INVALID_RESTOCK = "INVALID_RESTOCK"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    EMPTY_CART = "EMPTY_CART"
    INVALID_CART_LINE = "INVALID_CART_LINE"
    DUPLICATE_QR_CODE = "DUPLICATE_QR_CODE"
    TICKET_ISSUANCE_FAILED = "TICKET_ISSUANCE_FAILED"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    TICKET_TYPE_NOT_FOUND = "TICKET_TYPE_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    REFUND_NOT_FOUND = "REFUND_NOT_FOUND"
    ALREADY_CHECKED_IN = "ALREADY_CHECKED_IN"
    NOT_CHECKED_IN = "NOT_CHECKED_IN"
    TICKET_REFUNDED = "TICKET_REFUNDED"
    INVALID_REFUND_TRANSITION = "INVALID_REFUND_TRANSITION"
    REFUND_NOT_ALLOWED = "REFUND_NOT_ALLOWED"
    REFUND_ALREADY_REQUESTED = "REFUND_ALREADY_REQUESTED"
    INVALID_ID = "INVALID_ID"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InsufficientInventoryError(DomainError):
    """Raised when a reservation asks for more than the remaining capacity."""

    def __init__(self, ticket_type_id: str, requested: int, available: int) -> None:
        if available <= 0:
            message = "This ticket type is sold out"
        else:
            message = f"Only {available} ticket(s) remaining"
        super().__init__(code=ErrorCode.INSUFFICIENT_INVENTORY, message=message)
        self.ticket_type_id = ticket_type_id
        self.requested = requested
        self.available = available


class OutOfStockError(DomainError):
    """Raised for a whole cart after its reservations were rolled back."""

    def __init__(self, ticket_type_id: str, requested: int, available: int) -> None:
        super().__init__(
            code=ErrorCode.OUT_OF_STOCK,
            message=f"Not enough tickets left: requested {requested}, only {available} remaining",
        )
        self.ticket_type_id = ticket_type_id
        self.requested = requested
        self.available = available


class InvalidRestockError(DomainError):
    """Raised when a restock would drive the sold counter below zero."""

    def __init__(self, ticket_type_id: str, requested: int, sold: int) -> None:
        super().__init__(
            code=ErrorCode.INVALID_RESTOCK,
            message=f"Cannot restock {requested} ticket(s), only {sold} sold",
        )
        self.ticket_type_id = ticket_type_id
        self.requested = requested
        self.sold = sold


class InvalidQuantityError(DomainError):
    """Raised when a quantity is zero or negative."""

    def __init__(self, quantity: int) -> None:
        super().__init__(
            code=ErrorCode.INVALID_QUANTITY,
            message="Quantity must be greater than zero",
        )
        self.quantity = quantity


class EmptyCartError(DomainError):
    """Raised when an order is placed with no cart lines."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EMPTY_CART,
            message="Your cart is empty",
        )


class InvalidCartLineError(DomainError):
    """Raised when a cart line names a ticket type of another event."""

    def __init__(self, ticket_type_id: str, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CART_LINE,
            message="Ticket type does not belong to the selected event",
        )
        self.ticket_type_id = ticket_type_id
        self.event_id = event_id


class DuplicateQRCodeError(DomainError):
    """Raised when a QR code is already held by another ticket."""

    def __init__(self, qr_code: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_QR_CODE,
            message="QR code already issued",
        )
        self.qr_code = qr_code


class TicketIssuanceFailedError(DomainError):
    """Raised when unique QR codes could not be issued within the retry budget."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            code=ErrorCode.TICKET_ISSUANCE_FAILED,
            message="Tickets could not be issued, please try again",
        )
        self.attempts = attempts


class TicketNotFoundError(DomainError):
    """Raised when a ticket is not found by id or QR code."""

    def __init__(self, reference: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_NOT_FOUND,
            message="Invalid QR code. Ticket not found",
        )
        self.reference = reference


class TicketTypeNotFoundError(DomainError):
    """Raised when a ticket type is not found."""

    def __init__(self, ticket_type_id: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_TYPE_NOT_FOUND,
            message="Ticket type not found",
        )
        self.ticket_type_id = ticket_type_id


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class OrderNotFoundError(DomainError):
    """Raised when an order is not found."""

    def __init__(self, order_id: str) -> None:
        super().__init__(
            code=ErrorCode.ORDER_NOT_FOUND,
            message="Order not found",
        )
        self.order_id = order_id


class RefundNotFoundError(DomainError):
    """Raised when a refund request is not found."""

    def __init__(self, refund_id: str) -> None:
        super().__init__(
            code=ErrorCode.REFUND_NOT_FOUND,
            message="Refund request not found",
        )
        self.refund_id = refund_id


class AlreadyCheckedInError(DomainError):
    """Raised when a ticket that was already redeemed is scanned again."""

    def __init__(self, ticket_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_CHECKED_IN,
            message="This ticket has already been checked in",
        )
        self.ticket_id = ticket_id


class NotCheckedInError(DomainError):
    """Raised when undoing a check-in on a ticket that was never redeemed."""

    def __init__(self, ticket_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_CHECKED_IN,
            message="This ticket has not been checked in",
        )
        self.ticket_id = ticket_id


class TicketRefundedError(DomainError):
    """Raised when a refunded ticket is scanned or modified."""

    def __init__(self, ticket_id: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_REFUNDED,
            message="This ticket has been refunded",
        )
        self.ticket_id = ticket_id


class InvalidRefundTransitionError(DomainError):
    """Raised when a refund request is no longer pending."""

    def __init__(self, refund_id: str, current: str, target: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_REFUND_TRANSITION,
            message=f"Refund request is already {current} and cannot be {target}",
        )
        self.refund_id = refund_id
        self.current = current
        self.target = target


class RefundNotAllowedError(DomainError):
    """Raised when a refund is requested for an order that is not completed."""

    def __init__(self, order_id: str, status: str) -> None:
        super().__init__(
            code=ErrorCode.REFUND_NOT_ALLOWED,
            message=f"Only completed orders can be refunded, this order is {status}",
        )
        self.order_id = order_id
        self.status = status


class RefundAlreadyRequestedError(DomainError):
    """Raised when an order already has an active refund request."""

    def __init__(self, order_id: str, refund_id: str) -> None:
        super().__init__(
            code=ErrorCode.REFUND_ALREADY_REQUESTED,
            message="A refund has already been requested for this order",
        )
        self.order_id = order_id
        self.refund_id = refund_id


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} ID format",
        )
        self.kind = kind
