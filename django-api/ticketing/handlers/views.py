"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import structlog
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ticketing.domain import (
    AuthContext,
    CartLine,
    EventId,
    Money,
    OrderId,
    PaymentMethod,
    RefundId,
    Role,
    TicketId,
    TicketTypeId,
)
from ticketing.domain.errors import DomainError, ErrorCode
from ticketing.handlers import serializers
from ticketing.services import get_services
from ticketing.services.parsing import parse_id

logger = structlog.get_logger(__name__)

STATUS_BY_ERROR_CODE = {
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_QUANTITY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EMPTY_CART: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CART_LINE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TICKET_TYPE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TICKET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REFUND_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INSUFFICIENT_INVENTORY: status.HTTP_409_CONFLICT,
    ErrorCode.OUT_OF_STOCK: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_RESTOCK: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_CHECKED_IN: status.HTTP_409_CONFLICT,
    ErrorCode.NOT_CHECKED_IN: status.HTTP_409_CONFLICT,
    ErrorCode.TICKET_REFUNDED: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_REFUND_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.REFUND_NOT_ALLOWED: status.HTTP_409_CONFLICT,
    ErrorCode.REFUND_ALREADY_REQUESTED: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_QR_CODE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.TICKET_ISSUANCE_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def auth_context(request: Request) -> AuthContext:
    """Read the acting user passed along by the authentication layer."""
    role = request.headers.get("X-User-Role", Role.CUSTOMER.value)
    try:
        parsed_role = Role(role)
    except ValueError:
        parsed_role = Role.CUSTOMER
    return AuthContext(user_id=request.headers.get("X-User-Id", "guest"), role=parsed_role)


class TicketingAPIView(APIView):
    """Base view translating domain errors into ``{"code", "message"}`` responses."""

    def handle_exception(self, exc: Exception) -> Response:
        if isinstance(exc, DomainError):
            logger.info("request_failed", code=exc.code.value, path=self.request.path)
            return Response(
                {"code": exc.code.value, "message": exc.message},
                status=STATUS_BY_ERROR_CODE[exc.code],
            )
        return super().handle_exception(exc)


class EventListView(TicketingAPIView):
    """Handler for GET /api/events"""

    def get(self, request: Request) -> Response:
        events = get_services().catalog.list_events()
        return Response(serializers.EventSerializer(events, many=True).data)


class EventDetailView(TicketingAPIView):
    """Handler for GET /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        event = get_services().catalog.get_event(event_id)
        return Response(serializers.EventSerializer(event).data)


class EventTicketTypeListView(TicketingAPIView):
    """Handler for GET /api/events/{event_id}/ticket-types"""

    def get(self, request: Request, event_id: str) -> Response:
        ticket_types = get_services().catalog.get_ticket_types(event_id)
        return Response(serializers.TicketTypeSerializer(ticket_types, many=True).data)


class EventTicketListView(TicketingAPIView):
    """Handler for GET /api/events/{event_id}/tickets"""

    def get(self, request: Request, event_id: str) -> Response:
        tickets = get_services().reporting.get_tickets_by_event_id(event_id)
        return Response(serializers.TicketSerializer(tickets, many=True).data)


class EventRefundListView(TicketingAPIView):
    """Handler for GET /api/events/{event_id}/refunds"""

    def get(self, request: Request, event_id: str) -> Response:
        refunds = get_services().reporting.get_refunds_by_event_id(event_id)
        return Response(serializers.RefundRequestSerializer(refunds, many=True).data)


class EventCheckInStatsView(TicketingAPIView):
    """Handler for GET /api/events/{event_id}/check-in-stats"""

    def get(self, request: Request, event_id: str) -> Response:
        stats = get_services().reporting.get_check_in_stats(event_id)
        return Response(serializers.CheckInStatsSerializer(stats).data)


class EventAttendeeListView(TicketingAPIView):
    """Handler for GET /api/events/{event_id}/attendees"""

    def get(self, request: Request, event_id: str) -> Response:
        records = get_services().reporting.get_attendee_records(event_id)
        return Response(serializers.AttendeeRecordSerializer(records, many=True).data)


class OrderListView(TicketingAPIView):
    """Handler for GET and POST /api/orders"""

    def get(self, request: Request) -> Response:
        reporting = get_services().reporting
        customer_id = request.query_params.get("customer_id")
        if customer_id:
            orders = reporting.get_orders_by_customer_id(customer_id)
        else:
            orders = reporting.get_all_orders()
        return Response(serializers.OrderSerializer(orders, many=True).data)

    def post(self, request: Request) -> Response:
        payload = serializers.CreateOrderInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        cart = [
            CartLine(
                ticket_type_id=TicketTypeId(item["ticket_type_id"]),
                event_id=EventId(item["event_id"]),
                quantity=item["quantity"],
                unit_price=Money(item["unit_price"]),
            )
            for item in payload.validated_data["items"]
        ]
        order = get_services().orders.create_order(
            auth_context(request),
            cart,
            PaymentMethod(payload.validated_data["payment_method"]),
        )
        return Response(serializers.OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderDetailView(TicketingAPIView):
    """Handler for GET /api/orders/{order_id}"""

    def get(self, request: Request, order_id: str) -> Response:
        order = get_services().reporting.get_order(order_id)
        return Response(serializers.OrderSerializer(order).data)


class OrderTicketListView(TicketingAPIView):
    """Handler for GET /api/orders/{order_id}/tickets"""

    def get(self, request: Request, order_id: str) -> Response:
        tickets = get_services().reporting.get_tickets_by_order_id(order_id)
        return Response(serializers.TicketSerializer(tickets, many=True).data)


class OrderRefundView(TicketingAPIView):
    """Handler for GET and POST /api/orders/{order_id}/refunds"""

    def get(self, request: Request, order_id: str) -> Response:
        refunds = get_services().reporting.get_refunds_by_order_id(order_id)
        return Response(serializers.RefundRequestSerializer(refunds, many=True).data)

    def post(self, request: Request, order_id: str) -> Response:
        payload = serializers.RefundInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        refund = get_services().refunds.request_refund(
            parse_id(OrderId, order_id, "order"),
            auth_context(request),
            payload.validated_data["reason"],
        )
        return Response(serializers.RefundRequestSerializer(refund).data, status=status.HTTP_201_CREATED)


class RefundListView(TicketingAPIView):
    """Handler for GET /api/refunds"""

    def get(self, request: Request) -> Response:
        refunds = get_services().reporting.get_all_refunds()
        return Response(serializers.RefundRequestSerializer(refunds, many=True).data)


class RefundApproveView(TicketingAPIView):
    """Handler for POST /api/refunds/{refund_id}/approve"""

    def post(self, request: Request, refund_id: str) -> Response:
        refund = get_services().refunds.approve(parse_id(RefundId, refund_id, "refund"), auth_context(request))
        return Response(serializers.RefundRequestSerializer(refund).data)


class RefundRejectView(TicketingAPIView):
    """Handler for POST /api/refunds/{refund_id}/reject"""

    def post(self, request: Request, refund_id: str) -> Response:
        refund = get_services().refunds.reject(parse_id(RefundId, refund_id, "refund"), auth_context(request))
        return Response(serializers.RefundRequestSerializer(refund).data)


class CheckInView(TicketingAPIView):
    """Handler for POST /api/check-ins"""

    def post(self, request: Request) -> Response:
        payload = serializers.CheckInInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        result = get_services().check_ins.check_in(payload.validated_data["qr_code"], auth_context(request))
        return Response(serializers.CheckInResultSerializer(result).data)


class TicketCheckInView(TicketingAPIView):
    """Handler for DELETE /api/tickets/{ticket_id}/check-in"""

    def delete(self, request: Request, ticket_id: str) -> Response:
        ticket = get_services().check_ins.undo_check_in(
            parse_id(TicketId, ticket_id, "ticket"),
            auth_context(request),
        )
        return Response(serializers.TicketSerializer(ticket).data)


class ActivityListView(TicketingAPIView):
    """Handler for GET /api/activity"""

    def get(self, request: Request) -> Response:
        limit = request.query_params.get("limit")
        try:
            parsed_limit = int(limit) if limit is not None else None
        except ValueError:
            return Response(
                {"code": ErrorCode.INVALID_QUANTITY.value, "message": "limit must be an integer"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        entries = get_services().activity.recent(parsed_limit)
        return Response(serializers.ActivityEntrySerializer(entries, many=True).data)
