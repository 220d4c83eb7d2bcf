"""
AuthCore — registration, login, key binding and signed-message checks.

Every operation takes the parsed request body as a loose mapping and returns
an ``OperationResult``.  Field checks run in a fixed order and the first
failure wins; nothing is mutated before all checks for that step pass.

Presence rules:
  • a field is missing when absent, ``null`` or not a string
  • an empty string counts as present and fails later on its own
  • username, password and sessID are trimmed; pubkey, message and signature
    are used exactly as sent (trimming would change the signed bytes)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

from auth.errors import DuplicateUserError, FailureReason
from auth.models import OperationResult
from auth.password import BcryptPasswordHasher, PasswordHasherProtocol
from auth.sessions import SessionManager
from auth.signature import SignatureVerifier, SignatureVerifierProtocol
from auth.store import CredentialStore

logger = logging.getLogger(__name__)


def _field(body: Mapping[str, Any], name: str, *, trim: bool = False) -> Optional[str]:
    value = body.get(name)
    if not isinstance(value, str):
        return None
    return value.strip() if trim else value


class AuthCore:
    def __init__(
        self,
        store: CredentialStore | None = None,
        sessions: SessionManager | None = None,
        hasher: PasswordHasherProtocol | None = None,
        verifier: SignatureVerifierProtocol | None = None,
    ):
        self.store = store or CredentialStore()
        self.sessions = sessions or SessionManager()
        self.hasher = hasher or BcryptPasswordHasher()
        self.verifier = verifier or SignatureVerifier()

    # ── Register ───────────────────────────────────────────────────────

    async def register(self, body: Mapping[str, Any]) -> OperationResult:
        username = _field(body, "username", trim=True)
        if username is None:
            return self._fail("register", FailureReason.MISSING_USERNAME, "no username specified")
        password = _field(body, "password", trim=True)
        if password is None:
            return self._fail("register", FailureReason.MISSING_PASSWORD, "no password specified")
        if username in self.store:
            return self._fail("register", FailureReason.DUPLICATE_USER, "username already registered")

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        try:
            self.store.register(username, password_hash)
        except DuplicateUserError:
            # lost a race with a concurrent registration of the same name
            return self._fail("register", FailureReason.DUPLICATE_USER, "username already registered")

        logger.info("Registered user %s", username)
        return OperationResult(ok=True, username=username, message="registered")

    # ── Login ──────────────────────────────────────────────────────────

    async def login(self, body: Mapping[str, Any]) -> OperationResult:
        username = _field(body, "username", trim=True)
        if username is None:
            return self._fail("login", FailureReason.MISSING_USERNAME, "missing first argument")
        password = _field(body, "password", trim=True)
        if password is None:
            return self._fail("login", FailureReason.MISSING_PASSWORD, "missing second argument")

        identity = self.store.find(username)
        if identity is None:
            logger.info("Login rejected: unknown user %s", username)
            return self._fail("login", FailureReason.INVALID_CREDENTIALS, "invalid credentials")
        matched = await asyncio.to_thread(self.hasher.verify, password, identity.password_hash)
        if not matched:
            logger.info("Login rejected: wrong password for %s", username)
            return self._fail("login", FailureReason.INVALID_CREDENTIALS, "invalid credentials")

        session = self.sessions.issue(identity.username)
        logger.info("Login: %s", identity.username)
        return OperationResult(
            ok=True,
            username=identity.username,
            token=session.token,
            message="login successful",
        )

    # ── StoreKey ───────────────────────────────────────────────────────

    async def store_key(self, body: Mapping[str, Any]) -> OperationResult:
        token = _field(body, "sessID", trim=True)
        if token is None:
            return self._fail("storekey", FailureReason.MISSING_SESSION, "no sessionID sent")
        session = self.sessions.validate(token)
        if session is None:
            return self._fail("storekey", FailureReason.INVALID_SESSION, "session ID not valid")
        pubkey = _field(body, "pubkey")
        if pubkey is None:
            return self._fail("storekey", FailureReason.MISSING_PUBKEY, "no publickey sent")

        if not self.store.set_public_key(session.username, pubkey):
            return self._fail("storekey", FailureReason.UNKNOWN_USER, "user not found")
        return OperationResult(ok=True, username=session.username, message="public key stored")

    # ── VerifyMessage ──────────────────────────────────────────────────

    async def verify_message(self, body: Mapping[str, Any]) -> OperationResult:
        username = _field(body, "username", trim=True)
        if username is None:
            return self._fail("signedmessage", FailureReason.MISSING_USERNAME, "missing username")
        message = _field(body, "message")
        if message is None:
            return self._fail("signedmessage", FailureReason.MISSING_MESSAGE, "missing message")
        signature = _field(body, "signature")
        if signature is None:
            return self._fail("signedmessage", FailureReason.MISSING_SIGNATURE, "missing signature")

        identity = self.store.find(username)
        if identity is None:
            logger.info("Signed message for unknown user %s", username)
            return self._fail("signedmessage", FailureReason.UNKNOWN_USER, "no public key found for this user")
        if not identity.has_public_key:
            return self._fail("signedmessage", FailureReason.NO_PUBLIC_KEY, "no public key found for this user")

        verified = self.verifier.verify(identity.public_key, message, signature)
        logger.info("Signature for %s %s", username, "verified" if verified else "failed verification")
        return OperationResult(
            ok=True,
            username=username,
            verified=verified,
            message="signature verified" if verified else "Signature failed verification",
        )

    # ── helpers ────────────────────────────────────────────────────────

    @staticmethod
    def _fail(operation: str, reason: FailureReason, message: str) -> OperationResult:
        logger.info("%s failed: %s", operation, reason.value)
        return OperationResult.fail(reason, message)
