"""
API routes — register, login, storekey, signedmessage.

Route prefix: /api

Every handled outcome is HTTP 200 with a plain-text body; clients read the
text to tell success from failure.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from api.dependencies import get_auth_core
from auth.service import AuthCore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"], default_response_class=PlainTextResponse)

LOGIN_FAILED = "login failed, try again"
STOREKEY_OK = "Public Key successfully stored"
STOREKEY_FAILED = (
    "Problem encountered while trying to store public key. "
    "Try logging in again and trying again."
)


async def _json_body(request: Request) -> Dict[str, Any]:
    """Parsed JSON object, or ``{}`` when the body is empty or not an object."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.debug("Unparseable body on %s", request.url.path)
        return {}
    return body if isinstance(body, dict) else {}


@router.post("/register")
async def register(
    request: Request,
    core: AuthCore = Depends(get_auth_core),
) -> str:
    """Register a username/password pair."""
    result = await core.register(await _json_body(request))
    return "registered" if result.ok else result.message


@router.post("/login")
async def login(
    request: Request,
    core: AuthCore = Depends(get_auth_core),
) -> str:
    """Check credentials and hand out the session ID."""
    result = await core.login(await _json_body(request))
    if not result.ok:
        return LOGIN_FAILED
    return f"login successful, use this sessionID for further API calls: {result.token}"


@router.post("/storekey")
async def storekey(
    request: Request,
    core: AuthCore = Depends(get_auth_core),
) -> str:
    """Bind a public key to the logged-in user."""
    result = await core.store_key(await _json_body(request))
    return STOREKEY_OK if result.ok else STOREKEY_FAILED


@router.post("/signedmessage")
async def signedmessage(
    request: Request,
    core: AuthCore = Depends(get_auth_core),
) -> str:
    """Verify a signed message against the user's stored public key."""
    body = await _json_body(request)
    result = await core.verify_message(body)
    if result.ok and result.verified:
        return (
            f"Message: \n {body['message']}\n\n"
            "has been verified using the user's publickey!"
        )
    return result.message
