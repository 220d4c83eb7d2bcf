"""
Password hashing and verification.

Uses bcrypt with a configurable work factor.  The salt is generated once
when the hasher is built and reused for every password hashed by this
process.
"""

from __future__ import annotations

from typing import Protocol

import bcrypt

from config.settings import config


class PasswordHasherProtocol(Protocol):
    """One-way hash + verify contract used by AuthCore."""

    def hash(self, password: str) -> str:
        """Hash plaintext password for storage."""

    def verify(self, password: str, password_hash: str) -> bool:
        """Check plaintext against a stored hash.  Never raises."""


class BcryptPasswordHasher:
    def __init__(self, rounds: int | None = None):
        self.rounds = rounds or config.bcrypt_rounds
        self._salt = bcrypt.gensalt(rounds=self.rounds)

    def hash(self, password: str) -> str:
        """Hash a password with bcrypt using the process-wide salt."""
        return bcrypt.hashpw(password.encode(), self._salt).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash."""
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except (ValueError, TypeError, AttributeError):
            return False
