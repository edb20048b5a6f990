"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the entities and interfaces (ports) that the domain
requires from infrastructure. Adapters implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class User:
    """
    Persistent user record.

    Lifecycle (forward-only):
        inactive (activation_token set) -> active (activation_token cleared)

    The pairing of inactive with a non-null activation_token is enforced
    by a CHECK constraint in the users table.
    """

    id: int
    username: str
    email: str
    password_hash: str
    inactive: bool
    activation_token: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Session:
    """Issued on successful login."""

    id: int
    username: str
    token: str


@dataclass(frozen=True)
class UserPage:
    """One page of active users."""

    content: list[User]
    page: int
    size: int
    total_pages: int


class UserRepository(Protocol):
    """Port interface for user persistence."""

    def find_by_id(self, user_id: int) -> User | None: ...

    def find_by_username(self, username: str) -> User | None: ...

    def find_by_email(self, email: str) -> User | None: ...

    def find_by_activation_token(self, token: str) -> User | None: ...

    def create(
        self, username: str, email: str, password_hash: str, activation_token: str
    ) -> User | None:
        """
        Insert a new inactive user.

        Returns:
            The created user, or None if username or email is already taken.
            The storage-level UNIQUE constraints decide, so a None here is
            authoritative even when an earlier existence check passed.
        """
        ...

    def activate(self, user_id: int) -> bool:
        """
        Flip a user to active and clear its activation token.

        Returns:
            True if the user was inactive and is now active, False otherwise
        """
        ...

    def update(
        self, user_id: int, username: str | None = None, email: str | None = None
    ) -> User | None:
        """
        Change username and/or email.

        Returns:
            The updated user, or None if a uniqueness constraint rejected it
        """
        ...

    def delete(self, user_id: int) -> bool:
        """Delete a user; its session tokens are removed by cascade."""
        ...

    def list_active_page(self, offset: int, limit: int) -> tuple[list[User], int]:
        """
        Return active users ordered by id, plus the total active count.
        """
        ...


class TokenRepository(Protocol):
    """Port interface for session token persistence."""

    def create_token(self, token: str, user_id: int) -> None: ...

    def find_user_id(self, token: str) -> int | None: ...


class EmailSender(Protocol):
    """Port interface for activation email delivery."""

    def send_activation_token(self, email: str, token: str) -> bool:
        """
        Send the activation token to an email address.

        Returns:
            True if the message was handed off, False if delivery failed
        """
        ...
