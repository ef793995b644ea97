"""
rental_auth.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer credential into a typed `Caller`.
- Enforce role checks via a reusable dependency factory.
- Authenticate hook calls from the auth engine (shared secret header).
"""

from __future__ import annotations

import hmac
from datetime import timedelta

import structlog
from fastapi import Depends, Header, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from rental_auth.api.deps import settings_dep
from rental_auth.auth.jwt import CredentialConfig, CredentialError, decode_and_validate
from rental_auth.auth.models import Caller
from rental_auth.db.models import Role
from rental_auth.settings import Settings

_bearer = HTTPBearer(auto_error=False)

MIN_HOOK_SECRET_BYTES = 16


class HookSecretConfigError(Exception):
    pass


def validate_hook_secret(secret: str) -> None:
    if len(secret.encode("utf-8")) < MIN_HOOK_SECRET_BYTES:
        raise HookSecretConfigError(f"hook secret must be at least {MIN_HOOK_SECRET_BYTES} bytes")


def credential_config(settings: Settings) -> CredentialConfig:
    return CredentialConfig(
        secret=settings.jwt_secret,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        ttl=timedelta(seconds=settings.credential_ttl_seconds),
    )


async def get_caller(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> Caller:
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    try:
        payload = decode_and_validate(cfg=credential_config(settings), token=creds.credentials)
    except CredentialError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}") from e

    caller = Caller(
        subject=str(payload["sub"]),
        email=str(payload["email"]),
        role=Role(payload["role"]),
    )
    structlog.contextvars.bind_contextvars(principal_id=caller.subject)
    return caller


def require_role(*allowed: Role):
    allowed_set = frozenset(allowed)

    def _dep(caller: Caller = Depends(get_caller)) -> Caller:
        if caller.is_admin:
            return caller
        if caller.role not in allowed_set:
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Insufficient role")
        return caller

    return _dep


def require_hook_secret(
    x_hook_secret: str | None = Header(default=None),
    settings: Settings = Depends(settings_dep),
) -> None:
    if not x_hook_secret or not hmac.compare_digest(
        x_hook_secret.encode("utf-8"), settings.hook_secret.encode("utf-8")
    ):
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid hook secret")


# --- Module Notes -----------------------------------------------------------
# Bearer credentials are the ones this service mints; admin passes every role check.
