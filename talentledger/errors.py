"""
Exception types raised by ledger operations.

Malformed data inside records never raises; these cover rejected user
actions (validation) and record-store failures.
"""

from typing import Any, Dict, List, Optional


class LedgerError(Exception):
    """Base class for all ledger failures."""
    pass


class ValidationError(LedgerError):
    """Raised when an action is rejected before any write happens."""

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors))


class PersistenceError(LedgerError):
    """Raised when the record store rejects a read or write."""
    pass


class RecordNotFoundError(PersistenceError):
    """Raised when a record id does not exist in its table."""

    def __init__(self, table: str, record_id: str):
        self.table = table
        self.record_id = record_id
        super().__init__(f"{table} record not found: {record_id}")


class PartialWriteError(PersistenceError):
    """
    Raised when an hour-log entry write succeeded but the follow-up
    candidate counter write failed.

    The caller can retry just the candidate update using `pending_update`.
    """

    def __init__(
        self,
        message: str,
        entry_id: Optional[str],
        candidate_id: str,
        pending_update: Dict[str, Any],
    ):
        self.entry_id = entry_id
        self.candidate_id = candidate_id
        self.pending_update = pending_update
        super().__init__(message)
