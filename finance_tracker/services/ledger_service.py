"""
Ledger service: the business rules on top of the LedgerStore.

This service enforces the one rule that matters:
an owner's balance (income - expense) must never go negative
because of a create or an update. The check runs before the
write, inside the owner's lock, so two concurrent expenses
cannot both pass against the same balance.

Deletes are not checked: removing an income entry can leave
the balance negative.

All operations return a LedgerResult. The store is the single
source of truth: the service never keeps entries between calls.
"""

import logging

from finance_tracker.exceptions import (
    EntryNotFound,
    InvalidEntryData,
    LedgerOperationError,
)
from finance_tracker.models.enums import EntryKind
from finance_tracker.schemas.ledger import EntryCreate, EntryUpdate
from finance_tracker.services.ledger_store import (
    LedgerStore,
    UPDATABLE_FIELDS,
    validate_entry_fields,
)
from finance_tracker.services.locks import OwnerLocks
from finance_tracker.services.results import (
    AccountSummary,
    DeletedEntry,
    EntryListing,
    EntryMutation,
    LedgerResult,
    LedgerSummary,
)

logger = logging.getLogger(__name__)

RECENT_ENTRIES_LIMIT = 5


class LedgerService:
    """
    All entry operations pass through this service.

    The store and the lock registry are passed in, so one
    service instance is shared by every request of the app.
    """

    def __init__(self, store: LedgerStore, owner_locks: OwnerLocks | None = None):
        self.store = store
        self.owner_locks = owner_locks or OwnerLocks()

    def create_entry(
        self, request: EntryCreate | dict, owner_id: int
    ) -> LedgerResult:
        """
        Create an entry for an owner.

        An expense is only accepted if the current balance
        covers it.
        """
        if isinstance(request, EntryCreate):
            fields = request.model_dump()
        else:
            fields = dict(request)

        try:
            with self.owner_locks.hold(owner_id):
                unknown = set(fields) - UPDATABLE_FIELDS
                if unknown:
                    raise InvalidEntryData([
                        f"field '{name}' cannot be set"
                        for name in sorted(unknown)
                    ])
                kind, amount, description = validate_entry_fields(
                    fields.get("kind"),
                    fields.get("amount"),
                    fields.get("description"),
                )

                if kind == EntryKind.EXPENSE:
                    current = self.store.balance(owner_id).balance
                    if current < amount:
                        logger.warning(
                            "Rejected expense of %s for owner %s: balance is %s",
                            amount, owner_id, current,
                        )
                        return LedgerResult.insufficient_balance(amount, current)

                entry = self.store.create(owner_id, kind, amount, description)
                current_balance = self.store.balance(owner_id).balance
        except InvalidEntryData as e:
            return LedgerResult.invalid_data(
                f"Failed to create entry: {e}", e.errors
            )
        except Exception as e:
            raise LedgerOperationError(
                "create", f"Failed to create entry: {e}"
            ) from e

        logger.info(
            "Created %s entry %s of %s for owner %s (balance %s)",
            entry.kind.value, entry.id, entry.amount, owner_id, current_balance,
        )
        return LedgerResult.success(EntryMutation(entry, current_balance))

    def list_entries(self, owner_id: int) -> LedgerResult:
        """All of an owner's entries plus their totals."""
        try:
            entries = self.store.find_all_by_owner(owner_id)
            totals = self.store.balance(owner_id)
        except Exception as e:
            raise LedgerOperationError(
                "list", f"Failed to list entries: {e}"
            ) from e

        summary = LedgerSummary(
            total_income=totals.income,
            total_expense=totals.expense,
            balance=totals.balance,
            entry_count=len(entries),
        )
        return LedgerResult.success(EntryListing(entries, summary))

    def get_entry(self, entry_id: int, owner_id: int) -> LedgerResult:
        try:
            entry = self.store.find_by_id_and_owner(entry_id, owner_id)
        except Exception as e:
            raise LedgerOperationError(
                "get", f"Failed to fetch entry: {e}"
            ) from e

        if entry is None:
            return LedgerResult.not_found(entry_id)
        return LedgerResult.success(entry)

    def update_entry(
        self, entry_id: int, request: EntryUpdate | dict, owner_id: int
    ) -> LedgerResult:
        """
        Apply a partial update to an entry.

        The solvency check runs again when the update turns the
        entry into an expense, or changes the amount of an entry
        that already is one. It is done against the balance of
        the owner's *other* entries: this entry's old
        contribution, whatever its kind, is left out.
        """
        if isinstance(request, EntryUpdate):
            changes = request.changes()
        else:
            changes = dict(request)

        try:
            with self.owner_locks.hold(owner_id):
                existing = self.store.find_by_id_and_owner(entry_id, owner_id)
                if existing is None:
                    return LedgerResult.not_found(entry_id)

                kind, amount, description = validate_entry_fields(
                    changes.get("kind", existing.kind),
                    changes.get("amount", existing.amount),
                    changes.get("description", existing.description),
                )

                becomes_expense = (
                    "kind" in changes and kind == EntryKind.EXPENSE
                )
                expense_amount_changes = (
                    existing.kind == EntryKind.EXPENSE and "amount" in changes
                )
                if becomes_expense or expense_amount_changes:
                    available = self.store.balance(
                        owner_id, exclude_entry_id=entry_id
                    ).balance
                    if available < amount:
                        logger.warning(
                            "Rejected update of entry %s to %s for owner %s: "
                            "balance without it is %s",
                            entry_id, amount, owner_id, available,
                        )
                        return LedgerResult.insufficient_balance(amount, available)

                entry = self.store.update(entry_id, owner_id, changes)
                current_balance = self.store.balance(owner_id).balance
        except EntryNotFound:
            return LedgerResult.not_found(entry_id)
        except InvalidEntryData as e:
            return LedgerResult.invalid_data(
                f"Failed to update entry: {e}", e.errors
            )
        except Exception as e:
            raise LedgerOperationError(
                "update", f"Failed to update entry: {e}"
            ) from e

        logger.info(
            "Updated entry %s for owner %s (balance %s)",
            entry_id, owner_id, current_balance,
        )
        return LedgerResult.success(EntryMutation(entry, current_balance))

    def delete_entry(self, entry_id: int, owner_id: int) -> LedgerResult:
        """Remove an entry. No solvency check."""
        try:
            with self.owner_locks.hold(owner_id):
                if self.store.find_by_id_and_owner(entry_id, owner_id) is None:
                    return LedgerResult.not_found(entry_id)

                deleted = self.store.delete(entry_id, owner_id)
                current_balance = self.store.balance(owner_id).balance
        except EntryNotFound:
            return LedgerResult.not_found(entry_id)
        except Exception as e:
            raise LedgerOperationError(
                "delete", f"Failed to delete entry: {e}"
            ) from e

        if current_balance < 0:
            logger.warning(
                "Deleting entry %s left owner %s with a negative balance of %s",
                entry_id, owner_id, current_balance,
            )
        logger.info(
            "Deleted entry %s for owner %s (balance %s)",
            entry_id, owner_id, current_balance,
        )
        return LedgerResult.success(DeletedEntry(deleted, current_balance))

    def summary(self, owner_id: int) -> LedgerResult:
        """Totals plus the most recent entries, newest first."""
        try:
            totals = self.store.balance(owner_id)
            entry_count = self.store.count_by_owner(owner_id)
            recent = self.store.find_recent_by_owner(
                owner_id, RECENT_ENTRIES_LIMIT
            )
        except Exception as e:
            raise LedgerOperationError(
                "summary", f"Failed to build summary: {e}"
            ) from e

        return LedgerResult.success(AccountSummary(
            balance=totals.balance,
            total_income=totals.income,
            total_expense=totals.expense,
            entry_count=entry_count,
            recent_entries=recent,
        ))
