"""
Credential hasher - bcrypt password hashing and verification.

bcrypt only considers the first 72 bytes of its input, and current bcrypt
releases reject longer inputs, so the encoded password is cut to 72 bytes
on both the hashing and the checking side.
"""

from dataclasses import dataclass, field

import bcrypt

_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode()[:_BCRYPT_MAX_BYTES]


@dataclass
class PasswordHasher:
    """
    One-way salted password hashing.

    Attributes:
        rounds: bcrypt cost factor (4 is the bcrypt minimum, use >= 10 outside tests)
    """

    rounds: int = 10
    _dummy_hash: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Compared against when the account does not exist so that a lookup
        # miss costs the same bcrypt work as a password mismatch.
        self._dummy_hash = self.hash("dummy_password_for_timing_safety")

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        return bcrypt.checkpw(_encode(password), password_hash.encode())

    def verify_dummy(self, password: str) -> bool:
        """Run a full bcrypt check that always fails."""
        self.verify(password, self._dummy_hash)
        return False
