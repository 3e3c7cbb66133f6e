"""Interface layer errors and HTTP mapping of domain errors."""

import logfire
from fastapi import HTTPException, status

from tally.domain.error import (
    ConflictError,
    DomainError,
    NotFoundError,
    SinkError,
    StorageError,
    ValidationError,
)


# Most specific first: lookup walks this list in order
_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (SinkError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(error: DomainError) -> int:
    """HTTP status for a domain error (500 for anything unmapped)."""
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(error: DomainError) -> HTTPException:
    """Build the HTTPException a route raises for a domain error.

    Args:
        error: Error raised by a use case

    Returns:
        HTTPException carrying the mapped status and the error message
    """
    code = status_for(error)
    if code >= 500:
        logfire.error(
            "Request failed",
            error=str(error),
            error_type=type(error).__name__,
        )
    return HTTPException(status_code=code, detail=str(error))
