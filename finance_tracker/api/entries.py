"""
Ledger entry API endpoints.

The API layer is thin: it authenticates the caller, validates
the body, and delegates all business logic to the
LedgerService. The service answers with a LedgerResult; the
only job left here is turning its status into an HTTP status.
"""

from fastapi import APIRouter, Depends, HTTPException, Path

from finance_tracker.api.dependencies import get_current_user, get_ledger_service
from finance_tracker.models.user import User
from finance_tracker.schemas.ledger import (
    EntryCreate,
    EntryUpdate,
    EntryResponse,
    EntryEnvelope,
    EntryMutationResponse,
    EntryDeletedResponse,
    EntryListResponse,
    LedgerSummaryResponse,
    AccountSummaryResponse,
    InsufficientBalanceDetail,
)
from finance_tracker.services.ledger_service import LedgerService
from finance_tracker.services.results import LedgerResult, LedgerStatus

router = APIRouter(prefix="/api/entries", tags=["Entries"])


def _raise_for_failure(result: LedgerResult, entry_id: int | None = None) -> None:
    """Map a failed LedgerResult onto an HTTPException."""
    if result.status == LedgerStatus.NOT_FOUND:
        raise HTTPException(
            status_code=404,
            detail=(
                f"Entry {entry_id} was not found or does not belong "
                f"to this user"
            ),
        )
    if result.status == LedgerStatus.INSUFFICIENT_BALANCE:
        info = result.insufficient
        raise HTTPException(
            status_code=400,
            detail=InsufficientBalanceDetail(
                message=info.message,
                attempted_amount=f"{info.attempted_amount:.2f}",
                current_balance=f"{info.current_balance:.2f}",
                shortfall=f"{info.shortfall:.2f}",
            ).model_dump(),
        )
    if result.status == LedgerStatus.INVALID_DATA:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "INVALID_DATA",
                "message": result.message,
                "errors": list(result.errors),
            },
        )


@router.post("", response_model=EntryMutationResponse, status_code=201)
def create_entry(
    request: EntryCreate,
    user: User = Depends(get_current_user),
    service: LedgerService = Depends(get_ledger_service),
):
    """
    Create an income or expense entry.

    Expenses are rejected if the current balance does not
    cover them.
    """
    result = service.create_entry(request, user.id)
    _raise_for_failure(result)

    mutation = result.value
    return EntryMutationResponse(
        entry=EntryResponse.model_validate(mutation.entry),
        current_balance=float(mutation.current_balance),
    )


@router.get("", response_model=EntryListResponse)
def list_entries(
    user: User = Depends(get_current_user),
    service: LedgerService = Depends(get_ledger_service),
):
    """All of the caller's entries, oldest first, with totals."""
    result = service.list_entries(user.id)
    _raise_for_failure(result)

    listing = result.value
    return EntryListResponse(
        entries=[EntryResponse.model_validate(e) for e in listing.entries],
        summary=LedgerSummaryResponse(
            total_income=float(listing.summary.total_income),
            total_expense=float(listing.summary.total_expense),
            balance=float(listing.summary.balance),
            entry_count=listing.summary.entry_count,
        ),
    )


@router.get("/summary", response_model=AccountSummaryResponse)
def get_summary(
    user: User = Depends(get_current_user),
    service: LedgerService = Depends(get_ledger_service),
):
    """Balance, totals and the five most recent entries."""
    result = service.summary(user.id)
    _raise_for_failure(result)

    summary = result.value
    return AccountSummaryResponse(
        balance=float(summary.balance),
        total_income=float(summary.total_income),
        total_expense=float(summary.total_expense),
        entry_count=summary.entry_count,
        recent_entries=[
            EntryResponse.model_validate(e) for e in summary.recent_entries
        ],
    )


@router.get("/{entry_id}", response_model=EntryEnvelope)
def get_entry(
    entry_id: int = Path(gt=0),
    user: User = Depends(get_current_user),
    service: LedgerService = Depends(get_ledger_service),
):
    result = service.get_entry(entry_id, user.id)
    _raise_for_failure(result, entry_id)
    return EntryEnvelope(entry=EntryResponse.model_validate(result.value))


@router.put("/{entry_id}", response_model=EntryMutationResponse)
def update_entry(
    request: EntryUpdate,
    entry_id: int = Path(gt=0),
    user: User = Depends(get_current_user),
    service: LedgerService = Depends(get_ledger_service),
):
    """
    Update kind, amount and/or description of an entry.

    Turning an entry into an expense, or changing an expense's
    amount, re-runs the balance check.
    """
    result = service.update_entry(entry_id, request, user.id)
    _raise_for_failure(result, entry_id)

    mutation = result.value
    return EntryMutationResponse(
        entry=EntryResponse.model_validate(mutation.entry),
        current_balance=float(mutation.current_balance),
    )


@router.delete("/{entry_id}", response_model=EntryDeletedResponse)
def delete_entry(
    entry_id: int = Path(gt=0),
    user: User = Depends(get_current_user),
    service: LedgerService = Depends(get_ledger_service),
):
    result = service.delete_entry(entry_id, user.id)
    _raise_for_failure(result, entry_id)

    deleted = result.value
    return EntryDeletedResponse(
        deleted_entry=EntryResponse.model_validate(deleted.deleted_entry),
        current_balance=float(deleted.current_balance),
    )
