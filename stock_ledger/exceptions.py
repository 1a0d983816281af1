class LedgerError(Exception):
    """Base error for the ledger core. ``status`` mirrors the HTTP status a boundary should use."""

    code = "LEDGER_ERROR"
    status = 400

    def __init__(self, message: str, code: str | None = None, status: int | None = None):
        super().__init__(message)
        if code:
            self.code = code
        if status:
            self.status = status
        self.message = message


class NotFoundError(LedgerError):
    code = "NOT_FOUND"
    status = 404

    def __init__(self, resource: str, field: str | None = None, value=None):
        if field is None:
            message = resource
        else:
            message = f"{resource} not found with {field}: {value}"
        super().__init__(message)


class ConflictError(LedgerError):
    code = "CONFLICT"
    status = 409


class InsufficientStockError(ConflictError):
    code = "INSUFFICIENT_STOCK"


class IdentifierExhaustedError(ConflictError):
    code = "IDENTIFIER_EXHAUSTED"


class ValidationFailedError(LedgerError):
    code = "VALIDATION_FAILED"
    status = 400


class InternalError(LedgerError):
    code = "INTERNAL"
    status = 500
