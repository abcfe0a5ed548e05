"""Exception types raised by the ledger services and the record store."""

from typing import Any, Dict, Optional


class LedgerError(Exception):
    """Base class for ledger errors."""


class ValidationError(LedgerError):
    """Raised before any write when input breaks a uniqueness or amount rule."""


class RecordStoreError(LedgerError):
    """
    Raised when the record store rejects or cannot serve a request.

    Carries the document path and operation so callers can report the
    failure without parsing the message.
    """

    def __init__(self, path: str, operation: str, request_data: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        self.path = path
        self.operation = operation
        self.request_data = request_data
        self.cause = cause
        message = f"Record store {operation} failed for '{path}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
