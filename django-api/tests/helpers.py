from ticketing.domain import CartLine, Money, TicketType


def cart_line(ticket_type: TicketType, quantity: int) -> CartLine:
    return CartLine(
        ticket_type_id=ticket_type.id,
        event_id=ticket_type.event_id,
        quantity=quantity,
        unit_price=Money(ticket_type.price.amount),
    )


def sold(services, ticket_type: TicketType) -> int:
    return services.store.get_ticket_type(ticket_type.id).sold
