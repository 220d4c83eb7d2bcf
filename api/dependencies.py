"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from fastapi import Request

from auth.service import AuthCore


def get_auth_core(request: Request) -> AuthCore:
    """The AuthCore built in ``create_app`` and kept on ``app.state``."""
    return request.app.state.auth_core
