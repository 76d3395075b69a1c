"""
Shared enumerations for database models.

The values are the wire names clients send ("entrada" for
money coming in, "saida" for money going out).
"""

import enum


class EntryKind(str, enum.Enum):
    """Direction of a ledger entry."""
    INCOME = "entrada"
    EXPENSE = "saida"
