"""Pydantic models shared by the credential store, session manager and AuthCore."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from auth.errors import FailureReason


class Identity(BaseModel):
    """A registered user.  ``public_key`` stays empty until StoreKey binds one."""

    username: str
    password_hash: str
    public_key: str = ""

    @property
    def has_public_key(self) -> bool:
        return bool(self.public_key)


class Session(BaseModel):
    token: str
    username: str
    issued_at: float
    expires_at: float

    def is_live(self, now: float) -> bool:
        return now < self.expires_at


class OperationResult(BaseModel):
    """
    Outcome of an AuthCore operation.

    ``ok=False`` carries a ``reason``; ``ok=True`` may still report
    ``verified=False`` for a signature that did not check out.
    """

    ok: bool
    reason: Optional[FailureReason] = None
    message: str = ""
    username: Optional[str] = None
    token: Optional[str] = None
    verified: Optional[bool] = None

    @classmethod
    def fail(cls, reason: FailureReason, message: str) -> "OperationResult":
        return cls(ok=False, reason=reason, message=message)
