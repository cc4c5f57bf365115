from fastapi import HTTPException, status

from settleup.core.exceptions import (
    ConcurrencyConflict,
    LedgerError,
    NotFoundError,
    StateError,
    ValidationError,
)


def http_error(exc: LedgerError) -> HTTPException:
    """Translate a ledger error into the HTTP error returned to clients."""
    if isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ValidationError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, (StateError, ConcurrencyConflict)):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=str(exc))
