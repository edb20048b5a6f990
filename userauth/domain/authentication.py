"""
Authentication domain service - Credential login and session tokens.

Login attempt states:
    Received -> Validated -> Looked-up -> NotFound          -> AUTH_FAILED
                                        -> Inactive          -> AUTH_INACTIVE
                                        -> PasswordMismatch  -> AUTH_FAILED
                                        -> Success           -> token issued

NotFound and PasswordMismatch are indistinguishable to the caller, in both
the response and the bcrypt work performed. Inactive accounts are reported
separately on purpose.
"""

import logging
import secrets
from dataclasses import dataclass

from .failures import FailureKind, Result, fail, success
from .passwords import PasswordHasher
from .ports import Session, TokenRepository, UserRepository
from .registration import normalize_email

logger = logging.getLogger(__name__)


@dataclass
class AuthenticationService:
    """Domain service for login and bearer token resolution."""

    users: UserRepository
    tokens: TokenRepository
    hasher: PasswordHasher
    token_bytes: int = 32

    def authenticate(self, email: str, password: str) -> Result[Session]:
        """
        Verify credentials and issue a session token.

        Args:
            email: Validated email address (will be normalized)
            password: Plaintext password

        Returns:
            Result with the Session, or a Failure of kind AUTH_FAILED or
            AUTH_INACTIVE
        """
        user = self.users.find_by_email(normalize_email(email))

        if user is None:
            self.hasher.verify_dummy(password)
            return fail(FailureKind.AUTH_FAILED)

        if user.inactive:
            return fail(FailureKind.AUTH_INACTIVE)

        if not self.hasher.verify(password, user.password_hash):
            return fail(FailureKind.AUTH_FAILED)

        token = secrets.token_urlsafe(self.token_bytes)
        self.tokens.create_token(token, user.id)
        logger.info("Session issued for user %s", user.id)
        return success(Session(id=user.id, username=user.username, token=token))

    def resolve_token(self, token: str) -> int | None:
        """Return the id of the user owning a session token, if any."""
        return self.tokens.find_user_id(token)
