"""
Tests for the in-memory credential store.
"""

import pytest

from auth.errors import DuplicateUserError, FailureReason
from auth.store import CredentialStore


class TestCredentialStore:
    def setup_method(self):
        self.store = CredentialStore()

    def test_register_and_find(self):
        identity = self.store.register("alice", "hash-a")
        assert identity.username == "alice"
        assert identity.public_key == ""

        found = self.store.find("alice")
        assert found is not None
        assert found.password_hash == "hash-a"

    def test_find_unknown_returns_none(self):
        assert self.store.find("nobody") is None

    def test_duplicate_register_raises(self):
        self.store.register("alice", "hash-a")
        with pytest.raises(DuplicateUserError) as exc_info:
            self.store.register("alice", "hash-b")
        assert exc_info.value.reason is FailureReason.DUPLICATE_USER
        assert len(self.store) == 1
        assert self.store.find("alice").password_hash == "hash-a"

    def test_usernames_are_case_sensitive(self):
        self.store.register("alice", "h1")
        self.store.register("Alice", "h2")
        assert len(self.store) == 2

    def test_set_public_key_overwrites(self):
        self.store.register("alice", "h")
        assert self.store.set_public_key("alice", "key-1") is True
        assert self.store.set_public_key("alice", "key-2") is True
        assert self.store.find("alice").public_key == "key-2"

    def test_set_public_key_unknown_user(self):
        assert self.store.set_public_key("ghost", "key") is False
        assert "ghost" not in self.store

    def test_find_returns_a_copy(self):
        self.store.register("alice", "h")
        found = self.store.find("alice")
        found.public_key = "tampered"
        assert self.store.find("alice").public_key == ""
