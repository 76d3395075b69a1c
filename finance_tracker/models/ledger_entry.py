"""
Ledger entry model.

Each entry is one income or expense record owned by a single
user. Unlike a bank ledger these entries are mutable: kind,
amount and description can change, owner and creation time
cannot.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, DateTime, Numeric, Integer, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from finance_tracker.models.base import Base, utcnow
from finance_tracker.models.enums import EntryKind

# Bounds on the trimmed description
DESCRIPTION_MIN_LENGTH = 3
DESCRIPTION_MAX_LENGTH = 255

# Numeric(12, 2): ten integer digits and two decimals
AMOUNT_MAX_DIGITS = 12
AMOUNT_DECIMAL_PLACES = 2


class LedgerEntry(Base):
    """
    A single income or expense record.

    The balance invariant (income - expense never negative) is
    enforced by the LedgerService, not by the model. The model
    is just the data structure.
    """

    __tablename__ = "ledger_entries"
    # AUTOINCREMENT keeps SQLite from handing out the id of a
    # deleted row again.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    kind: Mapped[EntryKind] = mapped_column(
        SAEnum(EntryKind, name="entry_kind_enum", create_constraint=True),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(AMOUNT_MAX_DIGITS, AMOUNT_DECIMAL_PLACES), nullable=False
    )
    description: Mapped[str] = mapped_column(
        String(255), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry {self.id} {self.kind.value} "
            f"{self.amount} owner={self.owner_id}>"
        )
