"""
Signature verification against a user's bound public key.

Signatures are SHA-256 over the raw message bytes, hex encoded on the wire.
RSA keys are checked with PKCS#1 v1.5 padding, EC keys with ECDSA.

Keys often arrive with their line breaks stripped (the client removes them
before posting), so ``repair_pem`` rebuilds the standard block before the
key is parsed.
"""

from __future__ import annotations

import logging
import textwrap
from typing import Protocol

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa

logger = logging.getLogger(__name__)

PEM_HEADER = "-----BEGIN PUBLIC KEY-----"
PEM_FOOTER = "-----END PUBLIC KEY-----"
PEM_LINE_LENGTH = 64


class SignatureVerifierProtocol(Protocol):
    def verify(self, public_key_pem: str, message: str, signature_hex: str) -> bool:
        """Return True only for a valid signature.  Never raises."""


def repair_pem(key: str) -> str:
    """
    Restore PEM line structure for a key that lost all of its newlines.

    Keys with at least one ``\\n`` are returned unchanged.
    """
    if "\n" in key:
        return key

    body = key.strip()
    if body.startswith(PEM_HEADER):
        body = body[len(PEM_HEADER):]
    if body.endswith(PEM_FOOTER):
        body = body[: -len(PEM_FOOTER)]
    body = "".join(body.split())

    lines = textwrap.wrap(body, PEM_LINE_LENGTH)
    return "\n".join([PEM_HEADER, *lines, PEM_FOOTER]) + "\n"


class SignatureVerifier:
    """SHA-256 signature check backed by ``cryptography``."""

    def verify(self, public_key_pem: str, message: str, signature_hex: str) -> bool:
        try:
            signature = bytes.fromhex(signature_hex)
        except (ValueError, TypeError):
            logger.debug("Signature is not valid hex")
            return False

        try:
            public_key = serialization.load_pem_public_key(
                repair_pem(public_key_pem).encode()
            )
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            logger.debug("Could not load public key: %s", exc)
            return False

        data = message.encode()
        try:
            if isinstance(public_key, rsa.RSAPublicKey):
                public_key.verify(signature, data, padding.PKCS1v15(), hashes.SHA256())
            elif isinstance(public_key, ec.EllipticCurvePublicKey):
                public_key.verify(signature, data, ec.ECDSA(hashes.SHA256()))
            else:
                logger.debug("Unsupported key type %s", type(public_key).__name__)
                return False
        except InvalidSignature:
            return False
        except ValueError as exc:
            # e.g. signature of the wrong length for the key
            logger.debug("Signature rejected: %s", exc)
            return False
        return True
