"""Personal Finance Tracker: income/expense ledger with an overdraft-safe balance."""

__version__ = "0.1.0"
