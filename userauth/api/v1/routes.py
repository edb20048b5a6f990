"""
API v1 routes.

Defines the REST endpoints for user accounts and authentication.
Domain failures come back from the services as values and are rendered
through error_response(); nothing here raises for a business rule.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from userauth.api.dependencies import (
    Pagination,
    get_authentication_service,
    get_current_user_id,
    get_locale,
    get_localizer,
    get_pagination,
    get_registration_service,
    get_user_service,
)
from userauth.api.errors import error_response
from userauth.api.i18n import Localizer
from userauth.api.models import (
    AuthResponse,
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    SignUpRequest,
    SignUpResponse,
    UserPageResponse,
    UserResponse,
    UserUpdateRequest,
)
from userauth.domain.authentication import AuthenticationService
from userauth.domain.ports import User
from userauth.domain.registration import RegistrationService
from userauth.domain.users import UserService

router = APIRouter(tags=["v1"])


def _public(user: User) -> UserResponse:
    return UserResponse(id=user.id, username=user.username, email=user.email)


@router.post(
    "/users",
    response_model=SignUpResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error or duplicate username/email"},
        502: {"model": ErrorResponse, "description": "Activation email could not be sent"},
    },
    summary="Sign up a new user",
    description="Create an inactive account and email its activation token.",
)
async def sign_up(
    payload: SignUpRequest,
    request: Request,
    service: RegistrationService = Depends(get_registration_service),
    localizer: Localizer = Depends(get_localizer),
    locale: str = Depends(get_locale),
) -> SignUpResponse | JSONResponse:
    """
    Register a new user.

    - **username**: 3 to 30 characters, unique
    - **email**: Valid email address, unique
    - **password**: 8 to 72 characters with upper, lower, digit and symbol
    """
    result = service.register(payload.username, payload.email, payload.password)
    if not result.ok:
        return error_response(request, result.failure)

    return SignUpResponse(
        message=localizer.translate("user_created", locale),
        user=_public(result.value),
    )


@router.post(
    "/users/token/{token}",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid or consumed token"}},
    summary="Activate an account",
)
async def activate_account(
    token: str,
    request: Request,
    service: RegistrationService = Depends(get_registration_service),
    localizer: Localizer = Depends(get_localizer),
    locale: str = Depends(get_locale),
) -> MessageResponse | JSONResponse:
    result = service.activate(token)
    if not result.ok:
        return error_response(request, result.failure)

    return MessageResponse(message=localizer.translate("account_activated", locale))


@router.get(
    "/users",
    response_model=UserPageResponse,
    summary="List active users",
)
async def list_users(
    pagination: Pagination = Depends(get_pagination),
    service: UserService = Depends(get_user_service),
) -> UserPageResponse:
    page = service.list_users(pagination.page, pagination.size)
    return UserPageResponse(
        content=[_public(user) for user in page.content],
        page=page.page,
        size=page.size,
        total_pages=page.total_pages,
    )


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
    summary="Get a user by id",
)
async def get_user(
    user_id: int,
    request: Request,
    service: UserService = Depends(get_user_service),
) -> UserResponse | JSONResponse:
    result = service.get_user(user_id)
    if not result.ok:
        return error_response(request, result.failure)
    return _public(result.value)


@router.put(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error or duplicate username/email"},
        403: {"model": ErrorResponse, "description": "Not the owner of this user record"},
    },
    summary="Update own user",
)
async def update_user(
    user_id: int,
    payload: UserUpdateRequest,
    request: Request,
    actor_id: int | None = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
) -> UserResponse | JSONResponse:
    result = service.update_user(
        actor_id, user_id, username=payload.username, email=payload.email
    )
    if not result.ok:
        return error_response(request, result.failure)
    return _public(result.value)


@router.delete(
    "/users/{user_id}",
    response_model=MessageResponse,
    responses={403: {"model": ErrorResponse, "description": "Not the owner of this user record"}},
    summary="Delete own user",
)
async def delete_user(
    user_id: int,
    request: Request,
    actor_id: int | None = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
    localizer: Localizer = Depends(get_localizer),
    locale: str = Depends(get_locale),
) -> MessageResponse | JSONResponse:
    result = service.delete_user(actor_id, user_id)
    if not result.ok:
        return error_response(request, result.failure)
    return MessageResponse(message=localizer.translate("user_deleted", locale))


@router.post(
    "/auth",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        401: {"model": ErrorResponse, "description": "Incorrect credentials"},
        403: {"model": ErrorResponse, "description": "Account is inactive"},
    },
    summary="Log in",
    description="Exchange email and password for a session token.",
)
async def authenticate(
    payload: LoginRequest,
    request: Request,
    service: AuthenticationService = Depends(get_authentication_service),
) -> AuthResponse | JSONResponse:
    """
    Authenticate with credentials.

    Unknown email and wrong password produce the same 401 response.
    An inactive account produces 403.
    """
    result = service.authenticate(payload.email, payload.password)
    if not result.ok:
        return error_response(request, result.failure)

    session = result.value
    return AuthResponse(id=session.id, username=session.username, token=session.token)
