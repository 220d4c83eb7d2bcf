"""
Command-line client for the signed-message service.

Usage:
    python -m client.cli register <username> <password>
    python -m client.cli login <username> <password>
    python -m client.cli storepubkey <sessionID> [--pubkey pem/pub.pem]
    python -m client.cli signandsend <username> [--privkey pem/priv.pem] [--message message.txt | --text "..."]
    python -m client.cli keygen [--out pem]

The public key is sent with its newlines stripped; the server rebuilds the
PEM block before verifying.  Only the signature leaves the machine, never
the private key.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:8000"


def strip_newlines(pem: str) -> str:
    return pem.replace("\r", "").replace("\n", "")


def sign_message(private_key_pem: str, message: str) -> str:
    """SHA-256 signature over ``message`` as lowercase hex."""
    key = serialization.load_pem_private_key(private_key_pem.encode(), password=None)
    data = message.encode()
    if isinstance(key, rsa.RSAPrivateKey):
        signature = key.sign(data, padding.PKCS1v15(), hashes.SHA256())
    elif isinstance(key, ec.EllipticCurvePrivateKey):
        signature = key.sign(data, ec.ECDSA(hashes.SHA256()))
    else:
        raise ValueError(f"unsupported private key type: {type(key).__name__}")
    return signature.hex()


def generate_keypair(out_dir: Path) -> tuple[Path, Path]:
    """Write a fresh RSA-2048 pair as ``priv.pem`` / ``pub.pem``."""
    out_dir.mkdir(parents=True, exist_ok=True)
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    priv_path = out_dir / "priv.pem"
    pub_path = out_dir / "pub.pem"
    priv_path.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    pub_path.write_bytes(
        key.public_key().public_bytes(
            serialization.Encoding.PEM,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )
    return priv_path, pub_path


class ServiceClient:
    """Thin httpx wrapper around the four API calls."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> str:
        response = httpx.post(
            f"{self.base_url}/api/{endpoint}",
            json=payload,
            headers={"Cache-Control": "no-cache"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.text

    def register(self, username: str, password: str) -> str:
        return self._post("register", {"username": username, "password": password})

    def login(self, username: str, password: str) -> str:
        return self._post("login", {"username": username, "password": password})

    def store_key(self, public_key_pem: str, session_id: str) -> str:
        return self._post(
            "storekey",
            {"pubkey": strip_newlines(public_key_pem), "sessID": session_id},
        )

    def send_signed(self, username: str, message: str, signature_hex: str) -> str:
        return self._post(
            "signedmessage",
            {"username": username, "message": message, "signature": signature_hex},
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sigauth",
        description="Client for the signed-message authentication service.",
    )
    parser.add_argument(
        "--base-url",
        default=os.environ.get("SIGAUTH_BASE_URL", DEFAULT_BASE_URL),
        help="service root (env: SIGAUTH_BASE_URL)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("register", help="register a username and password")
    p.add_argument("username")
    p.add_argument("password")

    p = sub.add_parser("login", help="log in and print the session ID")
    p.add_argument("username")
    p.add_argument("password")

    p = sub.add_parser("storepubkey", help="bind a public key using a session ID")
    p.add_argument("session_id")
    p.add_argument("--pubkey", type=Path, default=Path("pem/pub.pem"))

    p = sub.add_parser("signandsend", help="sign a message and ask the server to verify it")
    p.add_argument("username")
    p.add_argument("--privkey", type=Path, default=Path("pem/priv.pem"))
    group = p.add_mutually_exclusive_group()
    group.add_argument("--message", type=Path, default=Path("message.txt"))
    group.add_argument("--text")

    p = sub.add_parser("keygen", help="write a new RSA key pair")
    p.add_argument("--out", type=Path, default=Path("pem"))

    return parser


def run(args: argparse.Namespace, client: Optional[ServiceClient] = None) -> str:
    if args.command == "keygen":
        priv_path, pub_path = generate_keypair(args.out)
        return f"wrote {priv_path} and {pub_path}"

    client = client or ServiceClient(args.base_url)
    if args.command == "register":
        return client.register(args.username, args.password)
    if args.command == "login":
        return client.login(args.username, args.password)
    if args.command == "storepubkey":
        return client.store_key(args.pubkey.read_text(), args.session_id)
    if args.command == "signandsend":
        message = args.text if args.text is not None else args.message.read_text()
        signature = sign_message(args.privkey.read_text(), message)
        return client.send_signed(args.username, message, signature)
    raise ValueError(f"unknown command {args.command!r}")


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(message)s")
    args = build_parser().parse_args(argv)
    try:
        print(run(args))
    except httpx.HTTPError as exc:
        logger.error("Request failed: %s", exc)
        return 1
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
