from django.urls import path

from ticketing.handlers import (
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

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/ticket-types",
        EventTicketTypeListView.as_view(),
        name="event-ticket-type-list",
    ),
    path("events/<str:event_id>/tickets", EventTicketListView.as_view(), name="event-ticket-list"),
    path("events/<str:event_id>/refunds", EventRefundListView.as_view(), name="event-refund-list"),
    path(
        "events/<str:event_id>/check-in-stats",
        EventCheckInStatsView.as_view(),
        name="event-check-in-stats",
    ),
    path("events/<str:event_id>/attendees", EventAttendeeListView.as_view(), name="event-attendee-list"),
    path("orders", OrderListView.as_view(), name="order-list"),
    path("orders/<str:order_id>", OrderDetailView.as_view(), name="order-detail"),
    path("orders/<str:order_id>/tickets", OrderTicketListView.as_view(), name="order-ticket-list"),
    path("orders/<str:order_id>/refunds", OrderRefundView.as_view(), name="order-refunds"),
    path("refunds", RefundListView.as_view(), name="refund-list"),
    path("refunds/<str:refund_id>/approve", RefundApproveView.as_view(), name="refund-approve"),
    path("refunds/<str:refund_id>/reject", RefundRejectView.as_view(), name="refund-reject"),
    path("check-ins", CheckInView.as_view(), name="check-in"),
    path("tickets/<str:ticket_id>/check-in", TicketCheckInView.as_view(), name="ticket-check-in"),
    path("activity", ActivityListView.as_view(), name="activity-list"),
]
