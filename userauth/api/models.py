"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Request models forbid undeclared fields. Validation failures are rendered
by userauth.api.validation, not by FastAPI's default 422 handler.
"""

import re
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"\d")
_SYMBOL = re.compile(r"[^A-Za-z0-9]")


def check_password_composition(password: str) -> str:
    """Require at least one uppercase, lowercase, digit and symbol."""
    if not all(pattern.search(password) for pattern in (_UPPER, _LOWER, _DIGIT, _SYMBOL)):
        raise PydanticCustomError(
            "password_composition",
            "Password must contain at least 1 uppercase, 1 lowercase, 1 symbol, and 1 number",
        )
    return password


def check_email(value: str) -> str:
    """
    Validate email syntax but keep the address exactly as submitted.

    Display-name forms such as "Name <a@b.com>" are rejected.
    """
    _, address = validate_email(value)
    if address.lower() != value.lower():
        raise PydanticCustomError("value_error", "value is not a valid email address")
    return value


# Length constraints run before the composition check, so a short password
# is always reported as too short.
Username = Annotated[str, StringConstraints(min_length=3, max_length=30)]
Password = Annotated[
    str,
    StringConstraints(min_length=8, max_length=72),
    AfterValidator(check_password_composition),
]
LoginPassword = Annotated[str, StringConstraints(min_length=1)]
Email = Annotated[str, AfterValidator(check_email)]


class RequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ResponseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignUpRequest(RequestModel):
    """Request model for user signup."""

    username: Username
    email: Email
    password: Password


class LoginRequest(RequestModel):
    """Request model for credential login."""

    email: Email
    password: LoginPassword


class UserUpdateRequest(RequestModel):
    """Request model for updating the caller's own user record."""

    # Omitted fields stay None; an explicit null fails the string type check.
    username: Username = None
    email: Email = None


class UserResponse(ResponseModel):
    """Public view of a user. Never carries the password hash or tokens."""

    id: int
    username: str
    email: str


class SignUpResponse(ResponseModel):
    """Response model for successful signup."""

    sign_up_status: Literal["success"] = "success"
    message: str
    user: UserResponse


class AuthResponse(ResponseModel):
    """Response model for successful login."""

    id: int
    username: str
    token: str


class MessageResponse(ResponseModel):
    message: str


class UserPageResponse(ResponseModel):
    """One page of active users."""

    content: list[UserResponse]
    page: int
    size: int
    total_pages: int


class ErrorResponse(ResponseModel):
    """Standard error envelope."""

    path: str
    time_stamp: int
    message: str
    validation_errors: dict[str, str] | None = None
