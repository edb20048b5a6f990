"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Tests replace the repository and email sender factories through
app.dependency_overrides.
"""

from dataclasses import dataclass
from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from userauth.adapters.repository.postgres import PostgresTokenRepository, PostgresUserRepository
from userauth.adapters.smtp import ConsoleEmailSender, SmtpEmailSender
from userauth.api.i18n import Localizer
from userauth.config.settings import Settings, get_settings
from userauth.domain.authentication import AuthenticationService
from userauth.domain.passwords import PasswordHasher
from userauth.domain.ports import EmailSender, TokenRepository, UserRepository
from userauth.domain.registration import RegistrationService
from userauth.domain.users import UserService


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_user_repository(request: Request) -> UserRepository:
    """Create user repository with connection pool from app state."""
    return PostgresUserRepository(get_pool(request))


def get_token_repository(request: Request) -> TokenRepository:
    """Create session token repository with connection pool from app state."""
    return PostgresTokenRepository(get_pool(request))


@lru_cache
def get_email_sender() -> EmailSender:
    """Get the configured activation email sender (singleton)."""
    settings = get_settings()
    if settings.email_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.mail_from,
            activation_url=settings.activation_url,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
        )
    return ConsoleEmailSender()


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Get bcrypt hasher configured with the settings' cost factor (singleton)."""
    return PasswordHasher(rounds=get_settings().bcrypt_cost)


@lru_cache
def get_localizer() -> Localizer:
    """Get localizer with all bundled message catalogs (singleton)."""
    return Localizer.from_package(get_settings().default_locale)


def get_locale(request: Request) -> str:
    """Locale negotiated from the Accept-Language header."""
    return get_localizer().negotiate(request.headers.get("accept-language"))


def get_registration_service(
    repository: UserRepository = Depends(get_user_repository),
    email_sender: EmailSender = Depends(get_email_sender),
    hasher: PasswordHasher = Depends(get_password_hasher),
    settings: Settings = Depends(get_settings),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository, email sender and hasher for the domain service.
    """
    return RegistrationService(
        repository=repository,
        email_sender=email_sender,
        hasher=hasher,
        token_bytes=settings.activation_token_bytes,
    )


def get_authentication_service(
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenRepository = Depends(get_token_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    settings: Settings = Depends(get_settings),
) -> AuthenticationService:
    return AuthenticationService(
        users=users,
        tokens=tokens,
        hasher=hasher,
        token_bytes=settings.session_token_bytes,
    )


def get_user_service(
    repository: UserRepository = Depends(get_user_repository),
) -> UserService:
    return UserService(repository=repository)


# Bearer token security scheme for OpenAPI documentation.
# auto_error is off: a missing token is "no actor", which the owner-only
# operations turn into 403.
http_bearer = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    service: AuthenticationService = Depends(get_authentication_service),
) -> int | None:
    """
    Resolve the session token in the Authorization header to a user id.

    Returns:
        The acting user's id, or None for a missing or unknown token
    """
    if credentials is None:
        return None
    return service.resolve_token(credentials.credentials)


# Keeps page * size well inside a PostgreSQL bigint OFFSET.
MAX_PAGE = 10_000_000


@dataclass(frozen=True)
class Pagination:
    page: int
    size: int


def get_pagination(
    page: str | None = None,
    size: str | None = None,
    settings: Settings = Depends(get_settings),
) -> Pagination:
    """
    Parse page/size query parameters leniently.

    Pages that are unparsable, negative or above MAX_PAGE become 0; sizes
    that are unparsable or outside 1..max_page_size become the default page
    size.
    """
    try:
        page_number = int(page) if page is not None else 0
    except ValueError:
        page_number = 0
    if not 0 <= page_number <= MAX_PAGE:
        page_number = 0

    try:
        page_size = int(size) if size is not None else settings.default_page_size
    except ValueError:
        page_size = settings.default_page_size
    if not 1 <= page_size <= settings.max_page_size:
        page_size = settings.default_page_size

    return Pagination(page=page_number, size=page_size)
