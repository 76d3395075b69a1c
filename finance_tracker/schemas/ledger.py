"""
Pydantic schemas for ledger entry operations.

These define the API contract: what data comes in, what data
goes out. They are separate from the database models because
the API shape and the storage shape are often different.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, field_validator, model_validator

from finance_tracker.models.enums import EntryKind
from finance_tracker.models.ledger_entry import (
    AMOUNT_DECIMAL_PLACES,
    AMOUNT_MAX_DIGITS,
    DESCRIPTION_MIN_LENGTH,
    DESCRIPTION_MAX_LENGTH,
)


def _normalize_kind(v):
    # Clients send "Entrada", " saida " and so on
    if isinstance(v, str):
        return v.strip().lower()
    return v


def _clean_description(v: str) -> str:
    v = v.strip()
    if len(v) < DESCRIPTION_MIN_LENGTH:
        raise ValueError(
            f"description must have at least {DESCRIPTION_MIN_LENGTH} characters"
        )
    if len(v) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(
            f"description must have at most {DESCRIPTION_MAX_LENGTH} characters"
        )
    return v


# --- Request Schemas ---

class EntryCreate(BaseModel):
    """A new income or expense entry."""
    kind: EntryKind
    amount: Decimal = Field(
        gt=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES
    )
    description: str

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v):
        return _normalize_kind(v)

    @field_validator("description")
    @classmethod
    def description_must_fit(cls, v: str) -> str:
        return _clean_description(v)


class EntryUpdate(BaseModel):
    """
    Partial update of an entry.

    Only the fields the client actually sent are applied;
    at least one must be present.
    """
    kind: EntryKind | None = None
    amount: Annotated[Decimal, Field(
        gt=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES
    )] | None = None
    description: str | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v):
        return _normalize_kind(v)

    @field_validator("description")
    @classmethod
    def description_must_fit(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _clean_description(v)

    @model_validator(mode="after")
    def at_least_one_field(self) -> "EntryUpdate":
        if not self.changes():
            raise ValueError(
                "at least one of kind, amount or description must be provided"
            )
        return self

    def changes(self) -> dict:
        """The fields to merge over the stored entry."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


# --- Response Schemas ---

class EntryResponse(BaseModel):
    """Single entry in API responses."""
    id: int
    kind: EntryKind
    amount: float
    description: str
    owner_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class EntryEnvelope(BaseModel):
    entry: EntryResponse


class EntryMutationResponse(BaseModel):
    """Response after creating or updating an entry."""
    entry: EntryResponse
    current_balance: float


class EntryDeletedResponse(BaseModel):
    deleted_entry: EntryResponse
    current_balance: float


class LedgerSummaryResponse(BaseModel):
    total_income: float
    total_expense: float
    balance: float
    entry_count: int


class EntryListResponse(BaseModel):
    entries: list[EntryResponse]
    summary: LedgerSummaryResponse


class AccountSummaryResponse(BaseModel):
    """Balance overview with the most recent entries, newest first."""
    balance: float
    total_income: float
    total_expense: float
    entry_count: int
    recent_entries: list[EntryResponse]


class InsufficientBalanceDetail(BaseModel):
    code: str = "INSUFFICIENT_BALANCE"
    message: str
    attempted_amount: str
    current_balance: str
    shortfall: str
