"""
Session manager for the single live login session.

Only one session exists process-wide.  Issuing a new one replaces the old
token immediately and cancels its pending expiry.  Expiry is enforced twice:
a one-shot ``call_later`` timer clears the session when it fires, and
``validate`` also compares against ``expires_at`` so a late or missing timer
never extends a session.
"""

from __future__ import annotations

import asyncio
import hmac
import logging
import secrets
import threading
import time
from typing import Callable, Optional

from auth.models import Session
from config.settings import config

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(
        self,
        ttl_seconds: float | None = None,
        token_bytes: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else config.session_ttl_seconds
        self.token_bytes = token_bytes or config.session_token_bytes
        self._clock = clock
        self._session: Optional[Session] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[Session]:
        with self._lock:
            return self._session

    def issue(self, username: str) -> Session:
        """Create a fresh session for ``username``, replacing any existing one."""
        now = self._clock()
        session = Session(
            token=secrets.token_urlsafe(self.token_bytes),
            username=username,
            issued_at=now,
            expires_at=now + self.ttl_seconds,
        )
        with self._lock:
            if self._session is not None:
                logger.info(
                    "Session for %s superseded by new login", self._session.username
                )
            self._cancel_timer()
            self._session = session
            self._timer = self._schedule_expiry(session.token)
        logger.info("Issued session for %s (ttl=%ss)", username, self.ttl_seconds)
        return session

    def validate(self, token: str) -> Optional[Session]:
        """Return the live session if ``token`` matches it, else None."""
        with self._lock:
            session = self._session
        if session is None or not token:
            return None
        if not hmac.compare_digest(session.token.encode(), token.encode()):
            return None
        if not session.is_live(self._clock()):
            self._expire(session.token)
            return None
        return session

    def invalidate(self) -> None:
        """Drop the current session.  Safe to call when none exists."""
        with self._lock:
            self._cancel_timer()
            if self._session is not None:
                logger.info("Cleared session for %s", self._session.username)
            self._session = None

    # ── internals ──────────────────────────────────────────────────────

    def _expire(self, token: str) -> None:
        with self._lock:
            # a newer login may already own the slot
            if self._session is None or self._session.token != token:
                return
            logger.info("Session for %s expired", self._session.username)
            self._cancel_timer()
            self._session = None

    def _schedule_expiry(self, token: str) -> Optional[asyncio.TimerHandle]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no loop (sync caller); validate() still enforces expires_at
            return None
        return loop.call_later(self.ttl_seconds, self._expire, token)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
