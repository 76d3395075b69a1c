"""
Result values returned by the LedgerService.

Business outcomes (not found, insufficient balance, invalid
data) are returned, not raised, so every caller has to look at
the status before using the value.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from finance_tracker.models.ledger_entry import LedgerEntry


class LedgerStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID_DATA = "invalid_data"
    INSUFFICIENT_BALANCE = "insufficient_balance"


@dataclass(frozen=True)
class InsufficientBalance:
    """Why a solvency check failed, in cents."""
    attempted_amount: Decimal
    current_balance: Decimal
    shortfall: Decimal

    @property
    def message(self) -> str:
        return (
            f"Insufficient balance for an expense of {self.attempted_amount:.2f}. "
            f"Available balance: {self.current_balance:.2f}. "
            f"Missing: {self.shortfall:.2f}"
        )


@dataclass(frozen=True)
class EntryMutation:
    """An entry after create/update, with the owner's new balance."""
    entry: LedgerEntry
    current_balance: Decimal


@dataclass(frozen=True)
class DeletedEntry:
    deleted_entry: LedgerEntry
    current_balance: Decimal


@dataclass(frozen=True)
class LedgerSummary:
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    entry_count: int


@dataclass(frozen=True)
class EntryListing:
    entries: list[LedgerEntry]
    summary: LedgerSummary


@dataclass(frozen=True)
class AccountSummary:
    balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    entry_count: int
    recent_entries: list[LedgerEntry]


@dataclass(frozen=True)
class LedgerResult:
    """
    Outcome of a LedgerService operation.

    Exactly one of these holds:
    - status OK: `value` carries the payload
    - status NOT_FOUND / INVALID_DATA: `message` (and `errors`)
    - status INSUFFICIENT_BALANCE: `insufficient` carries the amounts
    """

    status: LedgerStatus
    value: Any = None
    message: str | None = None
    errors: tuple[str, ...] = field(default_factory=tuple)
    insufficient: InsufficientBalance | None = None

    @classmethod
    def success(cls, value: Any) -> "LedgerResult":
        return cls(status=LedgerStatus.OK, value=value)

    @classmethod
    def not_found(cls, entry_id: int) -> "LedgerResult":
        return cls(
            status=LedgerStatus.NOT_FOUND,
            message=f"Entry {entry_id} not found",
        )

    @classmethod
    def invalid_data(cls, message: str, errors=()) -> "LedgerResult":
        return cls(
            status=LedgerStatus.INVALID_DATA,
            message=message,
            errors=tuple(errors),
        )

    @classmethod
    def insufficient_balance(
        cls, attempted_amount: Decimal, current_balance: Decimal
    ) -> "LedgerResult":
        detail = InsufficientBalance(
            attempted_amount=attempted_amount,
            current_balance=current_balance,
            shortfall=attempted_amount - current_balance,
        )
        return cls(
            status=LedgerStatus.INSUFFICIENT_BALANCE,
            message=detail.message,
            insufficient=detail,
        )

    @property
    def is_success(self) -> bool:
        return self.status == LedgerStatus.OK
