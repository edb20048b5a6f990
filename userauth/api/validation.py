"""
Validation error translation.

Turns pydantic error lists into a VALIDATION Failure holding exactly one
message key per offending field. The first error reported for a field
wins, and pydantic reports type and length errors before the custom
composition check.
"""

from collections.abc import Sequence
from typing import Any

from userauth.domain.failures import Failure, FailureKind

RULE_FIELDS = frozenset({"username", "email", "password"})

_CONSTRAINT_SUFFIXES = {
    "string_type": "type",
    "string_too_short": "size_min",
    "string_too_long": "size_max",
}


def message_key(field: str, error: dict[str, Any]) -> str:
    """Map one pydantic error on a field to a catalog message key."""
    kind = error["type"]

    if kind == "extra_forbidden":
        return "custom_field_not_allowed"
    if kind == "password_composition":
        return kind
    if field not in RULE_FIELDS:
        return "invalid_value"
    if kind == "missing":
        return f"{field}_required"
    # Empty strings fail min_length or email syntax; both read as "empty".
    if error.get("input") == "":
        return f"{field}_empty"
    if kind in _CONSTRAINT_SUFFIXES:
        return f"{field}_{_CONSTRAINT_SUFFIXES[kind]}"
    if field == "email":
        return "email_invalid"
    return "invalid_value"


def validation_failure(errors: Sequence[dict[str, Any]]) -> Failure:
    """
    Build a VALIDATION Failure from FastAPI's RequestValidationError.errors().

    Error locations look like ("body", "email") or ("path", "user_id").
    Errors without a field (malformed JSON, a missing or non-object body)
    only change the envelope message.
    """
    fields: dict[str, str] = {}
    message = None

    for error in errors:
        if error["type"] == "json_invalid":
            message = "invalid_json"
            continue

        loc = error.get("loc", ())
        if len(loc) < 2:
            continue

        field = str(loc[1])
        fields.setdefault(field, message_key(field, error))

    return Failure(FailureKind.VALIDATION, validation_errors=fields or None, message=message)
