"""
Registration domain service - Signup and account activation.

Account Lifecycle (Forward-Only Transitions)
============================================

States:
- INACTIVE: Initial state after signup (activation token issued and emailed)
- ACTIVE: Terminal state after the activation token is consumed

Valid Transitions:
    INACTIVE -> ACTIVE  (activation token submitted)

Invalid Transitions (never allowed):
    ACTIVE -> INACTIVE  (an account cannot be deactivated)
    ACTIVE -> ACTIVE    (a consumed token no longer matches any user)

Uniqueness of username and email is checked here for a friendly error and
enforced again by the repository's UNIQUE constraints, which win any race.
"""

import logging
import secrets
from dataclasses import dataclass

from .failures import FailureKind, Result, fail, success
from .passwords import PasswordHasher
from .ports import EmailSender, User, UserRepository

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


@dataclass
class RegistrationService:
    """
    Domain service for user signup.

    Orchestrates the signup flow: duplicate detection, password hashing,
    token generation, persistence and activation email dispatch.
    """

    repository: UserRepository
    email_sender: EmailSender
    hasher: PasswordHasher
    token_bytes: int = 16

    def register(self, username: str, email: str, password: str) -> Result[User]:
        """
        Create a new inactive user and email its activation token.

        Args:
            username: Validated username
            email: Validated email address (will be normalized)
            password: Validated password (will be hashed)

        Returns:
            Result with the created user, or a Failure of kind
            DUPLICATE_FIELD or ACTIVATION_EMAIL_FAILED

        Raises:
            Whatever the email sender raises, after the new account is removed
        """
        normalized_email = normalize_email(email)

        duplicate = self._find_duplicate(username, email)
        if duplicate is not None:
            return duplicate

        password_hash = self.hasher.hash(password)
        token = self._generate_activation_token()

        user = self.repository.create(username, normalized_email, password_hash, token)
        if user is None:
            # Lost a race against a concurrent signup; the UNIQUE constraint fired.
            logger.info("Signup rejected by uniqueness constraint: %s", username)
            duplicate = self._find_duplicate(username, email)
            return duplicate or fail(FailureKind.DUPLICATE_FIELD, field="username", value=username)

        try:
            sent = self.email_sender.send_activation_token(user.email, token)
        except Exception:
            logger.warning("Activation email raised for user %s, removing account", user.id)
            self.repository.delete(user.id)
            raise

        if not sent:
            logger.warning("Activation email failed for user %s, removing account", user.id)
            self.repository.delete(user.id)
            return fail(FailureKind.ACTIVATION_EMAIL_FAILED)

        logger.info("User %s created (inactive)", user.id)
        return success(user)

    def activate(self, token: str) -> Result[None]:
        """
        Consume an activation token and flip its user to active.

        A token matches at most once: after activation it is cleared, so a
        second submission finds no user and fails with INVALID_TOKEN.
        """
        user = self.repository.find_by_activation_token(token)
        if user is None:
            return fail(FailureKind.INVALID_TOKEN)

        if not self.repository.activate(user.id):
            # Consumed concurrently between lookup and update
            return fail(FailureKind.INVALID_TOKEN)

        logger.info("User %s activated", user.id)
        return success()

    def _find_duplicate(self, username: str, email: str) -> Result[User] | None:
        """Report a taken field with the value as the client submitted it."""
        if self.repository.find_by_username(username) is not None:
            return fail(FailureKind.DUPLICATE_FIELD, field="username", value=username)
        if self.repository.find_by_email(normalize_email(email)) is not None:
            return fail(FailureKind.DUPLICATE_FIELD, field="email", value=email)
        return None

    def _generate_activation_token(self) -> str:
        """
        Generate a cryptographically secure activation token.

        Uniqueness across users is not checked; with 128 bits of
        randomness a collision is not a practical concern.
        """
        return secrets.token_hex(self.token_bytes)
