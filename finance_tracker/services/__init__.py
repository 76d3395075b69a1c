"""Business logic services."""

from finance_tracker.services.ledger_store import LedgerStore, BalanceSummary
from finance_tracker.services.ledger_service import LedgerService
from finance_tracker.services.locks import OwnerLocks
from finance_tracker.services.results import LedgerResult, LedgerStatus
from finance_tracker.services.user_store import UserStore
from finance_tracker.services.user_service import UserService

__all__ = [
    "LedgerStore",
    "BalanceSummary",
    "LedgerService",
    "OwnerLocks",
    "LedgerResult",
    "LedgerStatus",
    "UserStore",
    "UserService",
]
