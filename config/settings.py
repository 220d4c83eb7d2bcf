"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Sessions ─────────────────────────────────────────────────────────
    session_ttl_seconds: float = 300.0   # one live session, 5 minutes
    session_token_bytes: int = 24        # entropy passed to secrets.token_urlsafe

    # ── Password hashing ─────────────────────────────────────────────────
    bcrypt_rounds: int = 10              # salt is generated once per process

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 8000
    host: str = "127.0.0.1"
    debug: bool = False

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


config = Settings()
