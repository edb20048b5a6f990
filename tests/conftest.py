"""
Shared test fixtures and configuration.

This module provides:
- In-memory implementations of the repository and email sender ports
- A low-cost bcrypt hasher
- An application wired to the in-memory ports via dependency_overrides
"""

from collections.abc import Generator
from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from userauth.api.dependencies import (
    get_email_sender,
    get_password_hasher,
    get_token_repository,
    get_user_repository,
)
from userauth.api.main import create_app
from userauth.domain.passwords import PasswordHasher
from userauth.domain.ports import User


class InMemoryTokenRepository:
    """TokenRepository port backed by a dict."""

    def __init__(self) -> None:
        self.tokens: dict[str, int] = {}

    def create_token(self, token: str, user_id: int) -> None:
        self.tokens[token] = user_id

    def find_user_id(self, token: str) -> int | None:
        return self.tokens.get(token)

    def delete_for_user(self, user_id: int) -> None:
        self.tokens = {t: uid for t, uid in self.tokens.items() if uid != user_id}


class InMemoryUserRepository:
    """
    UserRepository port backed by a dict.

    Mirrors the database: unique username/email, serial ids and
    cascading deletion of session tokens.
    """

    def __init__(self, tokens: InMemoryTokenRepository | None = None) -> None:
        self.users: dict[int, User] = {}
        self.tokens = tokens
        self._next_id = 1

    def _find(self, **criteria: object) -> User | None:
        for user in self.users.values():
            if all(getattr(user, key) == value for key, value in criteria.items()):
                return user
        return None

    def find_by_id(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def find_by_username(self, username: str) -> User | None:
        return self._find(username=username)

    def find_by_email(self, email: str) -> User | None:
        return self._find(email=email)

    def find_by_activation_token(self, token: str) -> User | None:
        return self._find(activation_token=token)

    def create(
        self, username: str, email: str, password_hash: str, activation_token: str
    ) -> User | None:
        if self.find_by_username(username) or self.find_by_email(email):
            return None
        now = datetime.now(timezone.utc)
        user = User(
            id=self._next_id,
            username=username,
            email=email,
            password_hash=password_hash,
            inactive=True,
            activation_token=activation_token,
            created_at=now,
            updated_at=now,
        )
        self.users[user.id] = user
        self._next_id += 1
        return user

    def activate(self, user_id: int) -> bool:
        user = self.users.get(user_id)
        if user is None or not user.inactive:
            return False
        self.users[user_id] = replace(user, inactive=False, activation_token=None)
        return True

    def update(
        self, user_id: int, username: str | None = None, email: str | None = None
    ) -> User | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        for other in self.users.values():
            if other.id != user_id and (other.username == username or other.email == email):
                return None
        updated = replace(
            user,
            username=username if username is not None else user.username,
            email=email if email is not None else user.email,
        )
        self.users[user_id] = updated
        return updated

    def delete(self, user_id: int) -> bool:
        if self.users.pop(user_id, None) is None:
            return False
        if self.tokens is not None:
            self.tokens.delete_for_user(user_id)
        return True

    def list_active_page(self, offset: int, limit: int) -> tuple[list[User], int]:
        active = [user for _, user in sorted(self.users.items()) if not user.inactive]
        return active[offset : offset + limit], len(active)


class RecordingEmailSender:
    """EmailSender port that records every activation message."""

    def __init__(self, succeed: bool = True) -> None:
        self.sent: list[tuple[str, str]] = []
        self.succeed = succeed
        self.error: Exception | None = None

    def send_activation_token(self, email: str, token: str) -> bool:
        if self.error is not None:
            raise self.error
        if not self.succeed:
            return False
        self.sent.append((email, token))
        return True


@pytest.fixture
def signup_payload() -> dict:
    """A signup body that passes every validation rule."""
    return {"username": "user1", "email": "user1@gmail.com", "password": "A4GuaN@SmZ"}


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    """bcrypt hasher at the minimum cost factor to keep tests fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_repository() -> InMemoryTokenRepository:
    return InMemoryTokenRepository()


@pytest.fixture
def user_repository(token_repository: InMemoryTokenRepository) -> InMemoryUserRepository:
    return InMemoryUserRepository(tokens=token_repository)


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def app(
    user_repository: InMemoryUserRepository,
    token_repository: InMemoryTokenRepository,
    email_sender: RecordingEmailSender,
    hasher: PasswordHasher,
) -> Generator[FastAPI, None, None]:
    """Application wired to in-memory ports (lifespan is not run)."""
    test_app = create_app()
    test_app.state.pool = MagicMock()
    test_app.dependency_overrides[get_user_repository] = lambda: user_repository
    test_app.dependency_overrides[get_token_repository] = lambda: token_repository
    test_app.dependency_overrides[get_email_sender] = lambda: email_sender
    test_app.dependency_overrides[get_password_hasher] = lambda: hasher
    yield test_app
    test_app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client that returns 500-class responses instead of re-raising."""
    return TestClient(app, raise_server_exceptions=False)
