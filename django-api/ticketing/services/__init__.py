"""Service wiring.

All services share one store and one set of per-key locks, so the ticket
locks taken by check-in and by refund approval are the same locks.
"""

from dataclasses import dataclass
from functools import lru_cache

from django.conf import settings

from ticketing.services.activity_log import ActivityLog
from ticketing.services.catalog_service import CatalogService
from ticketing.services.checkin_service import CheckInService
from ticketing.services.inventory_ledger import InventoryLedger
from ticketing.services.locks import KeyedLocks
from ticketing.services.order_processor import OrderProcessor
from ticketing.services.refund_workflow import RefundWorkflow
from ticketing.services.reporting_service import ReportingService
from ticketing.stores.interfaces import TicketingStore
from ticketing.stores.memory_store import InMemoryTicketingStore


@dataclass(frozen=True)
class TicketingServices:
    store: TicketingStore
    catalog: CatalogService
    ledger: InventoryLedger
    orders: OrderProcessor
    check_ins: CheckInService
    refunds: RefundWorkflow
    activity: ActivityLog
    reporting: ReportingService


def build_services(store: TicketingStore | None = None) -> TicketingServices:
    store = store or InMemoryTicketingStore()
    locks = KeyedLocks()
    activity = ActivityLog(store, default_limit=settings.TICKETING_RECENT_ACTIVITY_LIMIT)
    ledger = InventoryLedger(store, locks)
    return TicketingServices(
        store=store,
        catalog=CatalogService(store),
        ledger=ledger,
        orders=OrderProcessor(
            store,
            ledger,
            activity,
            qr_max_attempts=settings.TICKETING_QR_MAX_ATTEMPTS,
        ),
        check_ins=CheckInService(store, activity, locks),
        refunds=RefundWorkflow(store, ledger, activity, locks),
        activity=activity,
        reporting=ReportingService(store),
    )


@lru_cache(maxsize=1)
def get_services() -> TicketingServices:
    """Process-wide services used by the HTTP handlers."""
    return build_services()
