"""
Typed exceptions for the finance tracker.

Every exception carries a machine-readable ``code`` and the
structured data a caller needs, so handlers catch by type and
never parse messages.

    FinanceTrackerError
    |
    +-- InvalidEntryData        (also ValueError)
    +-- EntryNotFound           (also LookupError)
    +-- LedgerOperationError
    |
    +-- UserError
        +-- InvalidUserData     (also ValueError)
        +-- UserAlreadyExists
        +-- InvalidCredentials
        +-- InvalidToken
"""


class FinanceTrackerError(Exception):
    """Base class for all domain errors."""

    code: str = "FINANCE_TRACKER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# --- Ledger ---

class InvalidEntryData(FinanceTrackerError, ValueError):
    """An entry violates its structural invariants."""

    code = "INVALID_DATA"

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(f"Invalid data: {', '.join(self.errors)}")


class EntryNotFound(FinanceTrackerError, LookupError):
    """No entry matches (id, owner)."""

    code = "ENTRY_NOT_FOUND"

    def __init__(self, entry_id: int, owner_id: int):
        self.entry_id = entry_id
        self.owner_id = owner_id
        super().__init__(f"Entry {entry_id} not found")


class LedgerOperationError(FinanceTrackerError):
    """An unexpected failure inside a ledger operation."""

    code = "LEDGER_OPERATION_FAILED"

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(message)


# --- Users ---

class UserError(FinanceTrackerError):
    code = "USER_ERROR"


class InvalidUserData(UserError, ValueError):
    code = "INVALID_USER_DATA"


class UserAlreadyExists(UserError):
    code = "USER_ALREADY_EXISTS"

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User '{username}' already exists")


class InvalidCredentials(UserError):
    code = "INVALID_CREDENTIALS"


class InvalidToken(UserError):
    code = "INVALID_TOKEN"
