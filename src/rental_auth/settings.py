"""
rental_auth.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (signing secret, hook secret, SMTP password).
- Offer a cached settings instance for process entrypoints.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_JWT_SECRET = "dev-secret-change-me-0123456789abcdef"
DEV_HOOK_SECRET = "dev-hook-secret-change-me"


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `RENTAL_AUTH_`).

    Defaults are safe for local dev only; `prod` refuses the dev signing secret.
    """

    model_config = SettingsConfigDict(env_prefix="RENTAL_AUTH_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "rental-auth"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 3001

    # SPA origin allowed by CORS (credentials included).
    frontend_url: str = "http://localhost:5173"

    # Session credentials. The signing algorithm is fixed in code (HS256).
    jwt_secret: str = Field(default=DEV_JWT_SECRET, repr=False)
    jwt_issuer: str = "rental-auth"
    jwt_audience: str = "authenticated"
    credential_ttl_seconds: int = 3600

    # Shared secret the auth engine presents on hook calls (X-Hook-Secret).
    hook_secret: str = Field(default=DEV_HOOK_SECRET, repr=False)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./rental_auth.db"
    store_timeout_seconds: float = 2.0

    # Outbound email (verification/reset mails requested by the auth engine)
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = Field(default=None, repr=False)
    email_from: str = "no-reply@localhost"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each entrypoint.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Request handlers read the settings instance stored on `app.state` by the app
# factory (see `api.deps.settings_dep`), so tests can pass their own Settings.
