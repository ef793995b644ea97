"""
rental_auth.auth.jwt

Session credential signing and verification.

Responsibilities:
- Sign `{sub, email, role, iat, exp, iss, aud}` claim sets with HS256.
- Decode and validate credentials with strict claim requirements.
- Reject unusable signing configuration at startup.

The algorithm is a module constant. It is never read from settings or from a
token header, so a caller cannot negotiate `none` or an asymmetric/symmetric swap.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from rental_auth.db.models import Role

ALGORITHM = "HS256"
MIN_SECRET_BYTES = 32

REQUIRED_CLAIMS = ["sub", "email", "role", "iat", "exp", "iss", "aud"]


@dataclass(frozen=True, slots=True)
class CredentialConfig:
    secret: str
    issuer: str
    audience: str
    ttl: timedelta = timedelta(hours=1)


@dataclass(frozen=True, slots=True)
class SignedCredential:
    token: str
    claims: dict[str, Any]

    @property
    def expires_in(self) -> int:
        return int(self.claims["exp"]) - int(self.claims["iat"])


class SigningConfigError(Exception):
    pass


class CredentialError(Exception):
    pass


def validate_signing_config(cfg: CredentialConfig) -> None:
    if len(cfg.secret.encode("utf-8")) < MIN_SECRET_BYTES:
        raise SigningConfigError(
            f"signing secret must be at least {MIN_SECRET_BYTES} bytes for {ALGORITHM}"
        )
    if cfg.ttl.total_seconds() <= 0:
        raise SigningConfigError("credential TTL must be positive")
    if not cfg.issuer or not cfg.audience:
        raise SigningConfigError("credential issuer and audience must be set")


def issue_credential(
    *,
    cfg: CredentialConfig,
    subject: str,
    email: str,
    role: Role,
    now: datetime | None = None,
) -> SignedCredential:
    issued_at = int((now or datetime.now(tz=UTC)).timestamp())
    claims: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "email": email,
        "role": role.value,
        "iat": issued_at,
        # Derived from the same reading so exp - iat is exactly the TTL.
        "exp": issued_at + int(cfg.ttl.total_seconds()),
    }
    token = jwt.encode(claims, cfg.secret, algorithm=ALGORITHM)
    return SignedCredential(token=token, claims=claims)


def decode_and_validate(*, cfg: CredentialConfig, token: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[ALGORITHM],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={"require": REQUIRED_CLAIMS},
        )
    except InvalidTokenError as e:
        raise CredentialError(str(e)) from e

    if payload["role"] not in {r.value for r in Role}:
        raise CredentialError(f"unknown role claim {payload['role']!r}")
    return payload


# --- Module Notes -----------------------------------------------------------
# Consumers (the data tier's RLS policies, this service's bearer routes) must check
# signature and exp before trusting `role`; `decode_and_validate` does both.
