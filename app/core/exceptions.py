"""Error taxonomy for the loan ledger engine."""


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Malformed or out-of-range input. Raised before any write."""

    status_code = 400


class NotFoundError(LedgerError):
    """A referenced entity does not exist."""

    status_code = 404


class ConflictError(LedgerError):
    """Business-rule violation against current persisted state."""

    status_code = 409


class StorageError(LedgerError):
    """Transaction or connection failure. The unit of work was rolled back."""

    status_code = 500
