"""Refund workflow - requests, approvals and rejections.

A request starts pending and is processed exactly once: approved or
rejected. Approval reverses the order's effect on inventory.
"""

from collections.abc import Callable
from datetime import datetime

import structlog
from django.utils import timezone

from ticketing.domain import (
    ActivityType,
    AuthContext,
    OrderId,
    RefundId,
    RefundRequest,
    RefundStatus,
    Ticket,
    TicketId,
)
from ticketing.domain.errors import (
    OrderNotFoundError,
    RefundAlreadyRequestedError,
    RefundNotFoundError,
    TicketNotFoundError,
)
from ticketing.services.activity_log import ActivityLog
from ticketing.services.inventory_ledger import InventoryLedger
from ticketing.services.locks import KeyedLocks
from ticketing.stores.interfaces import TicketingStore

logger = structlog.get_logger(__name__)


class RefundWorkflow:
    """State machine over refund requests."""

    def __init__(
        self,
        store: TicketingStore,
        ledger: InventoryLedger,
        activity_log: ActivityLog,
        locks: KeyedLocks | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._ledger = ledger
        self._activity_log = activity_log
        self._locks = locks or KeyedLocks()
        self._clock = clock

    def request_refund(self, order_id: OrderId, actor: AuthContext, reason: str) -> RefundRequest:
        """Open a pending refund request for the full order amount.

        Raises:
            OrderNotFoundError: If the order does not exist.
            RefundNotAllowedError: If the order is not completed.
            RefundAlreadyRequestedError: If the order has a pending or approved request.
        """
        with self._locks.hold(order_id):
            order = self._store.get_order(order_id)
            if order is None:
                raise OrderNotFoundError(str(order_id))
            order.ensure_refundable()
            for existing in self._store.list_refunds(order_ids=[order_id]):
                if existing.is_active:
                    raise RefundAlreadyRequestedError(str(order_id), str(existing.id))

            refund = self._store.add_refund(
                RefundRequest(
                    id=RefundId.generate(),
                    order_id=order.id,
                    customer_id=order.customer_id,
                    amount=order.total_amount,
                    reason=reason,
                    status=RefundStatus.PENDING,
                    requested_at=self._clock(),
                )
            )

        self._activity_log.record(ActivityType.REFUND, f"Refund of {refund.amount} requested", actor.user_id)
        logger.info("refund_requested", refund_id=str(refund.id), order_id=str(order_id), amount=str(refund.amount))
        return refund

    def approve(self, refund_id: RefundId, actor: AuthContext) -> RefundRequest:
        """Approve a pending request: refund every ticket and restock its seat.

        Raises:
            RefundNotFoundError: If the request does not exist.
            InvalidRefundTransitionError: If the request is not pending.
            OrderNotFoundError: If the refunded order has disappeared.
            RefundNotAllowedError: If the order is no longer completed.
        """
        with self._locks.hold(refund_id):
            refund = self._get_refund(refund_id)
            now = self._clock()
            approved = refund.approve(now, actor.user_id)

            with self._locks.hold(refund.order_id):
                order = self._store.get_order(refund.order_id)
                if order is None:
                    raise OrderNotFoundError(str(refund.order_id))
                refunded_order = order.refund(now)

                with self._locks.hold_all(order.ticket_ids):
                    tickets = [self._get_ticket(ticket_id) for ticket_id in order.ticket_ids]
                    refunded_tickets = [ticket.refund() for ticket in tickets]
                    for ticket in refunded_tickets:
                        self._store.update_ticket(ticket)
                    self._store.update_order(refunded_order)
                    # Seats go back only once the order is recorded as refunded.
                    self._restock(tickets)
            refund = self._store.update_refund(approved)

        self._activity_log.record(ActivityType.REFUND, f"Refund of {refund.amount} approved", actor.user_id)
        logger.info(
            "refund_approved",
            refund_id=str(refund_id),
            order_id=str(refund.order_id),
            tickets_restocked=len(tickets),
        )
        return refund

    def reject(self, refund_id: RefundId, actor: AuthContext) -> RefundRequest:
        """Reject a pending request. Inventory and the order are untouched.

        Raises:
            RefundNotFoundError: If the request does not exist.
            InvalidRefundTransitionError: If the request is not pending.
        """
        with self._locks.hold(refund_id):
            refund = self._get_refund(refund_id)
            refund = self._store.update_refund(refund.reject(self._clock(), actor.user_id))

        self._activity_log.record(ActivityType.REFUND, f"Refund of {refund.amount} rejected", actor.user_id)
        logger.info("refund_rejected", refund_id=str(refund_id), order_id=str(refund.order_id))
        return refund

    def _restock(self, tickets: list[Ticket]) -> None:
        restocked: list[Ticket] = []
        try:
            for ticket in tickets:
                self._ledger.restock(ticket.ticket_type_id, 1)
                restocked.append(ticket)
        except Exception:
            for ticket in reversed(restocked):
                self._ledger.reserve(ticket.ticket_type_id, 1)
            raise

    def _get_refund(self, refund_id: RefundId) -> RefundRequest:
        refund = self._store.get_refund(refund_id)
        if refund is None:
            raise RefundNotFoundError(str(refund_id))
        return refund

    def _get_ticket(self, ticket_id: TicketId) -> Ticket:
        ticket = self._store.get_ticket(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(str(ticket_id))
        return ticket
