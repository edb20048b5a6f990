"""
Domain layer - Pure business logic with zero framework imports.

This package contains the signup, activation, authentication and user
management workflows. It defines its own port interfaces for infrastructure
abstraction and reports failures as values rather than exceptions.
"""

from .authentication import AuthenticationService
from .failures import Failure, FailureKind, Result
from .passwords import PasswordHasher
from .ports import EmailSender, Session, TokenRepository, User, UserPage, UserRepository
from .registration import RegistrationService
from .users import UserService

__all__ = [
    "AuthenticationService",
    "EmailSender",
    "Failure",
    "FailureKind",
    "PasswordHasher",
    "RegistrationService",
    "Result",
    "Session",
    "TokenRepository",
    "User",
    "UserPage",
    "UserRepository",
    "UserService",
]
