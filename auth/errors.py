"""
Failure reasons and exceptions for the credential core.
"""

from __future__ import annotations

from enum import Enum


class FailureReason(str, Enum):
    MISSING_USERNAME = "missing_username"
    MISSING_PASSWORD = "missing_password"
    MISSING_SESSION = "missing_session"
    MISSING_PUBKEY = "missing_pubkey"
    MISSING_MESSAGE = "missing_message"
    MISSING_SIGNATURE = "missing_signature"
    DUPLICATE_USER = "duplicate_user"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_SESSION = "invalid_session"
    UNKNOWN_USER = "unknown_user"
    NO_PUBLIC_KEY = "no_public_key"


class AuthError(Exception):
    """Base class for errors raised by the credential core."""

    reason: FailureReason

    def __init__(self, reason: FailureReason, detail: str = ""):
        self.reason = reason
        super().__init__(detail or reason.value)


class DuplicateUserError(AuthError):
    def __init__(self, username: str):
        self.username = username
        super().__init__(
            FailureReason.DUPLICATE_USER,
            f"username {username!r} already registered",
        )
