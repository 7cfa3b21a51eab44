"""Tagged outcomes returned by the ledger services.

Service functions return either ``Ok(value)`` or ``Failure(kind, reason)``
so the caller has to look at the result before using it. Callers that want
exceptions can call ``Failure.raise_for_kind()``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, NoReturn, TypeAlias, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Kinds of business-rule failures."""

    VALIDATION = "validation"  # Caller-correctable rule violation
    NOT_FOUND = "not_found"  # Entity or derived result does not exist


class LedgerError(Exception):
    """Base class for ledger failures raised as exceptions."""

    kind: ErrorKind

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ValidationError(LedgerError):
    """A reading or price violates a business rule."""

    kind = ErrorKind.VALIDATION


class NotFound(LedgerError):
    """The requested entity or derived figure does not exist."""

    kind = ErrorKind.NOT_FOUND


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Failed outcome carrying the error kind and a human readable reason."""

    kind: ErrorKind
    reason: str

    def raise_for_kind(self) -> NoReturn:
        if self.kind == ErrorKind.NOT_FOUND:
            raise NotFound(self.reason)
        raise ValidationError(self.reason)

    def unwrap(self) -> NoReturn:
        self.raise_for_kind()


Outcome: TypeAlias = Union[Ok[T], Failure]


def validation_failure(reason: str) -> Failure:
    return Failure(ErrorKind.VALIDATION, reason)


def not_found(reason: str) -> Failure:
    return Failure(ErrorKind.NOT_FOUND, reason)
