"""
Shared fixtures: key pairs, signing helper and a fast AuthCore.
"""

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa

from auth.password import BcryptPasswordHasher
from auth.service import AuthCore
from auth.sessions import SessionManager


def _public_pem(private_key) -> str:
    return private_key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def rsa_public_pem(rsa_private_key) -> str:
    return _public_pem(rsa_private_key)


@pytest.fixture(scope="session")
def ec_private_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ec_public_pem(ec_private_key) -> str:
    return _public_pem(ec_private_key)


@pytest.fixture
def sign():
    """sign(private_key, message) -> lowercase hex SHA-256 signature."""

    def _sign(private_key, message: str) -> str:
        if isinstance(private_key, rsa.RSAPrivateKey):
            sig = private_key.sign(message.encode(), padding.PKCS1v15(), hashes.SHA256())
        else:
            sig = private_key.sign(message.encode(), ec.ECDSA(hashes.SHA256()))
        return sig.hex()

    return _sign


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="session")
def hasher() -> BcryptPasswordHasher:
    # minimum bcrypt cost keeps the suite fast
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def core(hasher, clock) -> AuthCore:
    return AuthCore(hasher=hasher, sessions=SessionManager(ttl_seconds=300, clock=clock))
