"""
Signed-message authentication service — application entry point.
"""

from __future__ import annotations

import logging
import sys

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from api.middleware import register_middleware
from api.routes import router as api_router
from auth.service import AuthCore
from config.settings import config

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("httpcore", "httpx", "urllib3"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(auth_core: AuthCore | None = None) -> FastAPI:
    app = FastAPI(
        title="Signed Message Auth Service",
        version="1.0.0",
        description="Register, log in, bind a public key and verify signed messages.",
    )
    app.state.auth_core = auth_core or AuthCore()

    register_middleware(app)

    # Routes
    app.include_router(api_router, prefix="/api")

    @app.get("/health", response_class=PlainTextResponse)
    async def health() -> str:
        return "ok"

    @app.on_event("startup")
    async def on_startup():
        core = app.state.auth_core
        logger.info(
            "Session TTL %ss, bcrypt rounds %s",
            core.sessions.ttl_seconds,
            getattr(core.hasher, "rounds", "n/a"),
        )
        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        app.state.auth_core.sessions.invalidate()

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
