"""Check-in service - redeems tickets at the door."""

from collections.abc import Callable
from datetime import datetime

import structlog
from django.utils import timezone

from ticketing.domain import ActivityType, AuthContext, CheckInResult, QRCode, Ticket, TicketId
from ticketing.domain.errors import DomainError, EventNotFoundError, TicketNotFoundError
from ticketing.services.activity_log import ActivityLog
from ticketing.services.locks import KeyedLocks
from ticketing.stores.interfaces import TicketingStore

logger = structlog.get_logger(__name__)


class CheckInService:
    """Idempotent check-in and its organizer-side undo.

    Both operations hold the ticket's lock while reading and writing it, so a
    ticket scanned at two doors at once is admitted only once.
    """

    def __init__(
        self,
        store: TicketingStore,
        activity_log: ActivityLog,
        locks: KeyedLocks | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._activity_log = activity_log
        self._locks = locks or KeyedLocks()
        self._clock = clock

    def check_in(self, code: str, actor: AuthContext) -> CheckInResult:
        """Redeem the ticket holding ``code``.

        Raises:
            TicketNotFoundError: If no ticket holds this code.
            AlreadyCheckedInError: If the ticket was already redeemed. Nothing changes.
            TicketRefundedError: If the ticket was refunded.
        """
        found = self._store.get_ticket_by_qr_code(QRCode(code)) if code else None
        if found is None:
            logger.info("check_in_rejected", reason="ticket_not_found")
            raise TicketNotFoundError(code)

        with self._locks.hold(found.id):
            ticket = self._current(found.id)
            try:
                checked_in = ticket.check_in(self._clock())
            except DomainError as exc:
                logger.info("check_in_rejected", ticket_id=str(ticket.id), reason=exc.code.value)
                raise
            event = self._store.get_event(ticket.event_id)
            if event is None:
                raise EventNotFoundError(str(ticket.event_id))
            ticket = self._store.update_ticket(checked_in)

        self._activity_log.record(ActivityType.CHECKIN, f"Ticket checked in for {event.name}", actor.user_id)
        logger.info("ticket_checked_in", ticket_id=str(ticket.id), event_id=str(event.id))
        return CheckInResult(ticket=ticket, event=event)

    def undo_check_in(self, ticket_id: TicketId, actor: AuthContext) -> Ticket:
        """Revert a mis-scan. The seat stays sold.

        Raises:
            TicketNotFoundError: If the ticket does not exist.
            NotCheckedInError: If the ticket was not checked in.
            TicketRefundedError: If the ticket was refunded.
        """
        with self._locks.hold(ticket_id):
            ticket = self._current(ticket_id)
            ticket = self._store.update_ticket(ticket.undo_check_in())

        self._activity_log.record(ActivityType.CHECKIN, "Check-in undone", actor.user_id)
        logger.info("ticket_check_in_undone", ticket_id=str(ticket_id))
        return ticket

    def _current(self, ticket_id: TicketId) -> Ticket:
        ticket = self._store.get_ticket(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(str(ticket_id))
        return ticket
