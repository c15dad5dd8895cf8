from ticketing.domain.models import (
    ActivityEntry,
    ActivityType,
    AttendeeRecord,
    AuthContext,
    CartLine,
    CheckInResult,
    CheckInStats,
    Event,
    EventStatus,
    Order,
    OrderLine,
    OrderStatus,
    PaymentMethod,
    RefundRequest,
    RefundStatus,
    Role,
    Ticket,
    TicketCategory,
    TicketStatus,
    TicketType,
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

__all__ = [
    "ActivityEntry",
    "ActivityType",
    "AttendeeRecord",
    "AuthContext",
    "CartLine",
    "CheckInResult",
    "CheckInStats",
    "Event",
    "EventStatus",
    "Order",
    "OrderLine",
    "OrderStatus",
    "PaymentMethod",
    "RefundRequest",
    "RefundStatus",
    "Role",
    "Ticket",
    "TicketCategory",
    "TicketStatus",
    "TicketType",
    "ActivityId",
    "EventId",
    "OrderId",
    "RefundId",
    "TicketId",
    "TicketTypeId",
    "Money",
    "Capacity",
    "QRCode",
]
