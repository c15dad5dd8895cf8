"""Serializers for transforming domain models to API responses and parsing input."""

from rest_framework import serializers

from ticketing.domain import PaymentMethod


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    organizer_id = serializers.CharField()
    name = serializers.CharField()
    location = serializers.CharField()
    starts_at = serializers.DateTimeField()
    status = serializers.CharField(source="status.value")
    featured = serializers.BooleanField()


class TicketTypeSerializer(serializers.Serializer):
    """Serializer for TicketType domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    name = serializers.CharField()
    price = serializers.DecimalField(source="price.amount", max_digits=10, decimal_places=2)
    quantity = serializers.IntegerField(source="quantity.value")
    sold = serializers.IntegerField()
    available = serializers.IntegerField()
    category = serializers.CharField(source="category.value")


class TicketSerializer(serializers.Serializer):
    """Serializer for Ticket domain model."""

    id = serializers.UUIDField(source="id.value")
    order_id = serializers.UUIDField(source="order_id.value")
    ticket_type_id = serializers.UUIDField(source="ticket_type_id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    qr_code = serializers.CharField(source="qr_code.value")
    checked_in = serializers.BooleanField()
    checked_in_at = serializers.DateTimeField(allow_null=True)
    status = serializers.CharField(source="status.value")


class OrderLineSerializer(serializers.Serializer):
    ticket_type_id = serializers.UUIDField(source="ticket_type_id.value")
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(source="unit_price.amount", max_digits=10, decimal_places=2)


class OrderSerializer(serializers.Serializer):
    """Serializer for Order domain model."""

    id = serializers.UUIDField(source="id.value")
    customer_id = serializers.CharField()
    event_id = serializers.UUIDField(source="event_id.value")
    tickets = serializers.SerializerMethodField()
    lines = OrderLineSerializer(many=True)
    total_amount = serializers.DecimalField(source="total_amount.amount", max_digits=12, decimal_places=2)
    status = serializers.CharField(source="status.value")
    payment_method = serializers.CharField(source="payment_method.value")
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()

    def get_tickets(self, order) -> list[str]:
        return [str(ticket_id) for ticket_id in order.ticket_ids]


class RefundRequestSerializer(serializers.Serializer):
    """Serializer for RefundRequest domain model."""

    id = serializers.UUIDField(source="id.value")
    order_id = serializers.UUIDField(source="order_id.value")
    customer_id = serializers.CharField()
    amount = serializers.DecimalField(source="amount.amount", max_digits=12, decimal_places=2)
    reason = serializers.CharField()
    status = serializers.CharField(source="status.value")
    requested_at = serializers.DateTimeField()
    processed_at = serializers.DateTimeField(allow_null=True)
    processed_by = serializers.CharField(allow_null=True)


class ActivityEntrySerializer(serializers.Serializer):
    id = serializers.UUIDField(source="id.value")
    type = serializers.CharField(source="type.value")
    description = serializers.CharField()
    timestamp = serializers.DateTimeField()
    actor = serializers.CharField()


class CheckInResultSerializer(serializers.Serializer):
    ticket = TicketSerializer()
    event = EventSerializer()


class CheckInStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    checked_in = serializers.IntegerField()
    remaining = serializers.IntegerField()
    percentage = serializers.IntegerField()


class AttendeeRecordSerializer(serializers.Serializer):
    """Fields the attendee export needs from the core."""

    customer_id = serializers.CharField(source="order.customer_id")
    ticket_type_name = serializers.CharField(source="ticket_type.name")
    purchased_at = serializers.DateTimeField(source="order.created_at")
    qr_code = serializers.CharField(source="ticket.qr_code.value")


# Input


class CartLineInputSerializer(serializers.Serializer):
    ticket_type_id = serializers.UUIDField()
    event_id = serializers.UUIDField()
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)


class CreateOrderInputSerializer(serializers.Serializer):
    items = CartLineInputSerializer(many=True, allow_empty=True)
    payment_method = serializers.ChoiceField(
        choices=[m.value for m in PaymentMethod],
        default=PaymentMethod.CREDIT_CARD.value,
    )


class CheckInInputSerializer(serializers.Serializer):
    qr_code = serializers.CharField()


class RefundInputSerializer(serializers.Serializer):
    reason = serializers.CharField(allow_blank=True, default="")
