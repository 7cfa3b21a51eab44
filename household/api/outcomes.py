"""Translation of service outcomes into HTTP responses."""

from typing import TypeVar

from fastapi import HTTPException, status

from household.core.outcome import ErrorKind, Failure, Outcome

T = TypeVar("T")

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def unwrap_or_raise(outcome: Outcome[T]) -> T:
    """Return the success value or raise the matching HTTPException."""
    if isinstance(outcome, Failure):
        raise HTTPException(status_code=STATUS_BY_KIND[outcome.kind], detail=outcome.reason)
    return outcome.value
