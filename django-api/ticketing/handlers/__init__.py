from ticketing.handlers.views import (
    ActivityListView,
    CheckInView,
    EventAttendeeListView,
    EventCheckInStatsView,
    EventDetailView,
    EventListView,
    EventRefundListView,
    EventTicketListView,
    EventTicketTypeListView,
    OrderDetailView,
    OrderListView,
    OrderRefundView,
    OrderTicketListView,
    RefundApproveView,
    RefundListView,
    RefundRejectView,
    TicketCheckInView,
)

__all__ = [
    "ActivityListView",
    "CheckInView",
    "EventAttendeeListView",
    "EventCheckInStatsView",
    "EventDetailView",
    "EventListView",
    "EventRefundListView",
    "EventTicketListView",
    "EventTicketTypeListView",
    "OrderDetailView",
    "OrderListView",
    "OrderRefundView",
    "OrderTicketListView",
    "RefundApproveView",
    "RefundListView",
    "RefundRejectView",
    "TicketCheckInView",
]
