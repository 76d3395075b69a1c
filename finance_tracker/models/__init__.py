"""
Database models package.

All models must be imported here so that Database.create_all()
can discover them through Base.metadata.
"""

from finance_tracker.models.base import Base, Database
from finance_tracker.models.enums import EntryKind
from finance_tracker.models.ledger_entry import LedgerEntry
from finance_tracker.models.user import User

__all__ = [
    "Base",
    "Database",
    "EntryKind",
    "LedgerEntry",
    "User",
]
