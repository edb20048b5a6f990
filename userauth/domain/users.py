"""
User management domain service - Listing, lookup, update and delete.
"""

import logging
import math
from dataclasses import dataclass

from .failures import FailureKind, Result, fail, success
from .ports import User, UserPage, UserRepository
from .registration import normalize_email

logger = logging.getLogger(__name__)


@dataclass
class UserService:
    """
    Domain service for managing existing users.

    Update and delete are owner-only: the acting user (resolved from the
    session token, None when unauthenticated) must be the target user.
    """

    repository: UserRepository

    def list_users(self, page: int, size: int) -> UserPage:
        users, total = self.repository.list_active_page(offset=page * size, limit=size)
        return UserPage(
            content=users,
            page=page,
            size=size,
            total_pages=math.ceil(total / size),
        )

    def get_user(self, user_id: int) -> Result[User]:
        user = self.repository.find_by_id(user_id)
        if user is None or user.inactive:
            return fail(FailureKind.USER_NOT_FOUND)
        return success(user)

    def update_user(
        self,
        actor_id: int | None,
        user_id: int,
        username: str | None = None,
        email: str | None = None,
    ) -> Result[User]:
        """
        Change the username and/or email of the acting user.

        Returns:
            Result with the updated user, or a Failure of kind
            AUTH_FORBIDDEN, USER_NOT_FOUND or DUPLICATE_FIELD
        """
        if actor_id is None or actor_id != user_id:
            return fail(FailureKind.AUTH_FORBIDDEN)

        current = self.repository.find_by_id(user_id)
        if current is None:
            return fail(FailureKind.USER_NOT_FOUND)

        # Lookups and storage use the normalized email, failures echo the submitted one.
        normalized_email = normalize_email(email) if email is not None else None

        if username is not None and username != current.username:
            if self.repository.find_by_username(username) is not None:
                return fail(FailureKind.DUPLICATE_FIELD, field="username", value=username)
        if normalized_email is not None and normalized_email != current.email:
            if self.repository.find_by_email(normalized_email) is not None:
                return fail(FailureKind.DUPLICATE_FIELD, field="email", value=email)

        updated = self.repository.update(user_id, username=username, email=normalized_email)
        if updated is None:
            field, value = ("username", username) if username is not None else ("email", email)
            return fail(FailureKind.DUPLICATE_FIELD, field=field, value=value)

        logger.info("User %s updated", user_id)
        return success(updated)

    def delete_user(self, actor_id: int | None, user_id: int) -> Result[None]:
        if actor_id is None or actor_id != user_id:
            return fail(FailureKind.AUTH_FORBIDDEN)

        self.repository.delete(user_id)
        logger.info("User %s deleted", user_id)
        return success()
