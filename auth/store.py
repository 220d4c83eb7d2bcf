"""
In-memory credential store.

Keeps identities keyed by username.  Nothing is persisted: a restart
starts from an empty store.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from auth.errors import DuplicateUserError
from auth.models import Identity

logger = logging.getLogger(__name__)


class CredentialStore:
    def __init__(self):
        self._identities: Dict[str, Identity] = {}
        self._lock = threading.Lock()

    def register(self, username: str, password_hash: str) -> Identity:
        """
        Insert a new identity with no public key.

        Raises ``DuplicateUserError`` if the username is already taken.  The
        existence check and the insert happen under one lock.
        """
        with self._lock:
            if username in self._identities:
                raise DuplicateUserError(username)
            identity = Identity(username=username, password_hash=password_hash)
            self._identities[username] = identity
        logger.info("Stored identity for %s", username)
        return identity.model_copy()

    def find(self, username: str) -> Optional[Identity]:
        with self._lock:
            identity = self._identities.get(username)
            return identity.model_copy() if identity is not None else None

    def set_public_key(self, username: str, key: str) -> bool:
        """Overwrite the bound key.  Returns False for an unknown username."""
        with self._lock:
            identity = self._identities.get(username)
            if identity is None:
                return False
            identity.public_key = key
        logger.info("Public key bound for %s", username)
        return True

    def __contains__(self, username: object) -> bool:
        with self._lock:
            return username in self._identities

    def __len__(self) -> int:
        with self._lock:
            return len(self._identities)
