"""Inventory ledger: the only writer of TicketType.sold."""

from dataclasses import replace

import structlog

from ticketing.domain import TicketType, TicketTypeId
from ticketing.domain.errors import (
    InsufficientInventoryError,
    InvalidQuantityError,
    InvalidRestockError,
    TicketTypeNotFoundError,
)
from ticketing.services.locks import KeyedLocks
from ticketing.stores.interfaces import TicketingStore

logger = structlog.get_logger(__name__)


class InventoryLedger:
    """Per-ticket-type capacity counters with atomic reserve and restock.

    Each mutation holds the ticket type's lock for the whole
    read-check-write, so two reservations can never both see the same stale
    availability.
    """

    def __init__(self, store: TicketingStore, locks: KeyedLocks | None = None) -> None:
        self._store = store
        self._locks = locks or KeyedLocks()

    def reserve(self, ticket_type_id: TicketTypeId, quantity: int) -> TicketType:
        """Move ``quantity`` units from available to sold.

        Raises:
            InvalidQuantityError: If quantity is not positive.
            TicketTypeNotFoundError: If the ticket type does not exist.
            InsufficientInventoryError: If fewer than ``quantity`` units remain.
        """
        if quantity <= 0:
            raise InvalidQuantityError(quantity)
        with self._locks.hold(ticket_type_id):
            ticket_type = self._get(ticket_type_id)
            if quantity > ticket_type.available:
                logger.info(
                    "inventory_reservation_rejected",
                    ticket_type_id=str(ticket_type_id),
                    requested=quantity,
                    available=ticket_type.available,
                )
                raise InsufficientInventoryError(str(ticket_type_id), quantity, ticket_type.available)
            updated = self._store.update_ticket_type(replace(ticket_type, sold=ticket_type.sold + quantity))
        logger.debug("inventory_reserved", ticket_type_id=str(ticket_type_id), quantity=quantity, sold=updated.sold)
        return updated

    def restock(self, ticket_type_id: TicketTypeId, quantity: int) -> TicketType:
        """Return ``quantity`` sold units to the available pool.

        Raises:
            InvalidQuantityError: If quantity is not positive.
            TicketTypeNotFoundError: If the ticket type does not exist.
            InvalidRestockError: If fewer than ``quantity`` units are sold.
        """
        if quantity <= 0:
            raise InvalidQuantityError(quantity)
        with self._locks.hold(ticket_type_id):
            ticket_type = self._get(ticket_type_id)
            if ticket_type.sold - quantity < 0:
                raise InvalidRestockError(str(ticket_type_id), quantity, ticket_type.sold)
            updated = self._store.update_ticket_type(replace(ticket_type, sold=ticket_type.sold - quantity))
        logger.debug("inventory_restocked", ticket_type_id=str(ticket_type_id), quantity=quantity, sold=updated.sold)
        return updated

    def availability(self, ticket_type_id: TicketTypeId) -> int:
        return self._get(ticket_type_id).available

    def _get(self, ticket_type_id: TicketTypeId) -> TicketType:
        ticket_type = self._store.get_ticket_type(ticket_type_id)
        if ticket_type is None:
            raise TicketTypeNotFoundError(str(ticket_type_id))
        return ticket_type
