"""
Domain failures - Tagged failure values returned by the workflows.

Workflows never raise for business rule violations. They return a Result
that either carries a value or a Failure tagged with a FailureKind, and the
HTTP boundary decides how each kind is rendered.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class FailureKind(Enum):
    """Every way a request can fail in the domain."""

    VALIDATION = "validation"
    DUPLICATE_FIELD = "duplicate_field"
    INVALID_TOKEN = "invalid_token"
    USER_NOT_FOUND = "user_not_found"
    AUTH_FAILED = "auth_failed"
    AUTH_INACTIVE = "auth_inactive"
    AUTH_FORBIDDEN = "auth_forbidden"
    ACTIVATION_EMAIL_FAILED = "activation_email_failed"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class Failure:
    """
    A failed outcome.

    Attributes:
        kind: What went wrong
        field: Offending field for DUPLICATE_FIELD
        value: Offending value for DUPLICATE_FIELD
        validation_errors: field -> message key, for VALIDATION
        message: Raw message for UNEXPECTED (None renders as "Unknown Error"),
            or a message key overriding the default one for VALIDATION
    """

    kind: FailureKind
    field: str | None = None
    value: str | None = None
    validation_errors: dict[str, str] | None = None
    message: str | None = None


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a workflow operation: a value or a Failure."""

    value: T | None = None
    failure: Failure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def success(value: T | None = None) -> Result[T]:
    return Result(value=value)


def fail(kind: FailureKind, **details: object) -> Result:
    return Result(failure=Failure(kind, **details))
