"""
Ledger store: the authoritative collection of entries.

The store knows nothing about solvency. It assigns ids and
timestamps, enforces the structural invariants of an entry
(kind, amount, description) and aggregates balances. Every
lookup and mutation is scoped by (entry id, owner id).
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Callable

from sqlalchemy import select, func

from finance_tracker.exceptions import EntryNotFound, InvalidEntryData
from finance_tracker.models.base import Database, utcnow
from finance_tracker.models.enums import EntryKind
from finance_tracker.models.ledger_entry import (
    LedgerEntry,
    AMOUNT_DECIMAL_PLACES,
    AMOUNT_MAX_DIGITS,
    DESCRIPTION_MIN_LENGTH,
    DESCRIPTION_MAX_LENGTH,
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
# Largest amount the amount column holds: 9999999999.99
AMOUNT_MAX = (
    Decimal(10) ** (AMOUNT_MAX_DIGITS - AMOUNT_DECIMAL_PLACES) - CENTS
)
UPDATABLE_FIELDS = {"kind", "amount", "description"}


def to_cents(value: Decimal) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class BalanceSummary:
    """Income and expense totals for one owner, in cents."""
    income: Decimal
    expense: Decimal
    balance: Decimal


def _coerce_kind(kind, errors: list[str]):
    try:
        return EntryKind(kind)
    except ValueError:
        errors.append('kind must be "entrada" or "saida"')
        return None


def _coerce_amount(amount, errors: list[str]):
    if amount is None or isinstance(amount, bool):
        errors.append("amount must be a positive number")
        return None
    try:
        value = Decimal(str(amount))
        if not value.is_finite():
            errors.append("amount must be a positive number")
            return None
        if value > AMOUNT_MAX:
            errors.append(f"amount must be at most {AMOUNT_MAX}")
            return None
        value = to_cents(value)
    except (InvalidOperation, ValueError):
        errors.append("amount must be a positive number")
        return None
    if value <= 0:
        errors.append("amount must be greater than zero")
        return None
    return value


def _coerce_description(description, errors: list[str]):
    if not isinstance(description, str):
        errors.append("description is required")
        return None
    description = description.strip()
    if len(description) < DESCRIPTION_MIN_LENGTH:
        errors.append(
            f"description must have at least {DESCRIPTION_MIN_LENGTH} characters"
        )
        return None
    if len(description) > DESCRIPTION_MAX_LENGTH:
        errors.append(
            f"description must have at most {DESCRIPTION_MAX_LENGTH} characters"
        )
        return None
    return description


def validate_entry_fields(kind, amount, description) -> tuple[EntryKind, Decimal, str]:
    """
    Check and normalise the structural fields of an entry.

    Returns (kind, amount in cents, trimmed description).
    Raises InvalidEntryData listing every violation found.
    """
    errors: list[str] = []
    kind = _coerce_kind(kind, errors)
    amount = _coerce_amount(amount, errors)
    description = _coerce_description(description, errors)
    if errors:
        raise InvalidEntryData(errors)
    return kind, amount, description


class LedgerStore:
    """
    In-memory ledger backed by the Database passed in.

    The clock is injectable so tests can control creation
    timestamps (and therefore "most recent" ordering).
    """

    def __init__(
        self,
        database: Database,
        clock: Callable[[], datetime] | None = None,
    ):
        self.database = database
        self._clock = clock or utcnow

    def create(
        self, owner_id: int, kind, amount, description
    ) -> LedgerEntry:
        """
        Validate and append a new entry.

        Raises InvalidEntryData if any structural invariant fails.
        """
        kind, amount, description = validate_entry_fields(
            kind, amount, description
        )
        with self.database.session_scope() as session:
            entry = LedgerEntry(
                owner_id=owner_id,
                kind=kind,
                amount=amount,
                description=description,
                created_at=self._clock(),
            )
            session.add(entry)
            session.flush()

        logger.debug("Stored entry %s for owner %s", entry.id, owner_id)
        return entry

    def find_all_by_owner(self, owner_id: int) -> list[LedgerEntry]:
        """Return all entries for an owner, in insertion order."""
        with self.database.session_scope() as session:
            entries = session.execute(
                select(LedgerEntry)
                .where(LedgerEntry.owner_id == owner_id)
                .order_by(LedgerEntry.id)
            ).scalars().all()
            return list(entries)

    def find_by_id_and_owner(
        self, entry_id: int, owner_id: int
    ) -> LedgerEntry | None:
        """Return the entry, or None if it does not exist or is not owned."""
        with self.database.session_scope() as session:
            return self._get(session, entry_id, owner_id)

    def find_recent_by_owner(
        self, owner_id: int, limit: int
    ) -> list[LedgerEntry]:
        """Return up to `limit` entries, newest first."""
        with self.database.session_scope() as session:
            entries = session.execute(
                select(LedgerEntry)
                .where(LedgerEntry.owner_id == owner_id)
                .order_by(LedgerEntry.created_at.desc(), LedgerEntry.id.desc())
                .limit(limit)
            ).scalars().all()
            return list(entries)

    def count_by_owner(self, owner_id: int) -> int:
        with self.database.session_scope() as session:
            return session.execute(
                select(func.count(LedgerEntry.id))
                .where(LedgerEntry.owner_id == owner_id)
            ).scalar_one()

    def update(self, entry_id: int, owner_id: int, changes: dict) -> LedgerEntry:
        """
        Merge `changes` over an existing entry.

        Only kind, amount and description may change. The merged
        entry is validated as a whole; if validation fails nothing
        is written.
        """
        with self.database.session_scope() as session:
            entry = self._get(session, entry_id, owner_id)
            if entry is None:
                raise EntryNotFound(entry_id, owner_id)

            unknown = set(changes) - UPDATABLE_FIELDS
            if unknown:
                raise InvalidEntryData([
                    f"field '{name}' cannot be updated"
                    for name in sorted(unknown)
                ])

            kind, amount, description = validate_entry_fields(
                changes.get("kind", entry.kind),
                changes.get("amount", entry.amount),
                changes.get("description", entry.description),
            )
            entry.kind = kind
            entry.amount = amount
            entry.description = description
            session.flush()

        logger.debug("Updated entry %s for owner %s", entry_id, owner_id)
        return entry

    def delete(self, entry_id: int, owner_id: int) -> LedgerEntry:
        """Remove an entry and return it."""
        with self.database.session_scope() as session:
            entry = self._get(session, entry_id, owner_id)
            if entry is None:
                raise EntryNotFound(entry_id, owner_id)
            session.delete(entry)
            session.flush()

        logger.debug("Deleted entry %s for owner %s", entry_id, owner_id)
        return entry

    def balance(
        self, owner_id: int, exclude_entry_id: int | None = None
    ) -> BalanceSummary:
        """
        Sum income and expense for an owner.

        Balance is never stored. It is always derived from the
        entries. With exclude_entry_id, that entry is left out
        of both sums (the hypothetical balance used when
        re-checking an update).
        """
        with self.database.session_scope() as session:
            totals = {}
            for kind in EntryKind:
                query = select(
                    func.coalesce(func.sum(LedgerEntry.amount), 0)
                ).where(
                    LedgerEntry.owner_id == owner_id,
                    LedgerEntry.kind == kind,
                )
                if exclude_entry_id is not None:
                    query = query.where(LedgerEntry.id != exclude_entry_id)
                totals[kind] = to_cents(session.execute(query).scalar())

        income = totals[EntryKind.INCOME]
        expense = totals[EntryKind.EXPENSE]
        return BalanceSummary(
            income=income,
            expense=expense,
            balance=to_cents(income - expense),
        )

    def has_sufficient_balance(self, owner_id: int, amount) -> bool:
        return self.balance(owner_id).balance >= Decimal(str(amount))

    @staticmethod
    def _get(session, entry_id: int, owner_id: int) -> LedgerEntry | None:
        return session.execute(
            select(LedgerEntry).where(
                LedgerEntry.id == entry_id,
                LedgerEntry.owner_id == owner_id,
            )
        ).scalar_one_or_none()
