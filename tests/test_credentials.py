"""
tests.test_credentials

Signing and verification of session credentials.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from rental_auth.auth.jwt import (
    ALGORITHM,
    CredentialConfig,
    CredentialError,
    SigningConfigError,
    decode_and_validate,
    issue_credential,
    validate_signing_config,
)
from rental_auth.db.models import Role


def test_issued_credential_carries_claims_and_exact_ttl(cred_cfg: CredentialConfig) -> None:
    now = datetime.now(tz=UTC).replace(microsecond=750_000)
    cred = issue_credential(cfg=cred_cfg, subject="u1", email="a@b.com", role=Role.tenant, now=now)

    assert jwt.get_unverified_header(cred.token)["alg"] == "HS256"
    payload = decode_and_validate(cfg=cred_cfg, token=cred.token)
    assert payload["sub"] == "u1"
    assert payload["email"] == "a@b.com"
    assert payload["role"] == "tenant"
    assert payload["exp"] - payload["iat"] == 3600
    assert cred.expires_in == 3600


def test_wrong_secret_is_rejected(cred_cfg: CredentialConfig) -> None:
    cred = issue_credential(cfg=cred_cfg, subject="u1", email="a@b.com", role=Role.admin)
    other = CredentialConfig(
        secret="another-signing-secret-0123456789abcdef",
        issuer=cred_cfg.issuer,
        audience=cred_cfg.audience,
    )
    with pytest.raises(CredentialError):
        decode_and_validate(cfg=other, token=cred.token)


def test_expired_credential_is_rejected(cred_cfg: CredentialConfig) -> None:
    issued = datetime.now(tz=UTC) - timedelta(hours=2)
    cred = issue_credential(
        cfg=cred_cfg, subject="u1", email="a@b.com", role=Role.landlord, now=issued
    )
    with pytest.raises(CredentialError):
        decode_and_validate(cfg=cred_cfg, token=cred.token)


def test_unsigned_token_is_rejected(cred_cfg: CredentialConfig) -> None:
    now = int(datetime.now(tz=UTC).timestamp())
    forged = jwt.encode(
        {
            "sub": "u1",
            "email": "a@b.com",
            "role": "admin",
            "iat": now,
            "exp": now + 60,
            "iss": cred_cfg.issuer,
            "aud": cred_cfg.audience,
        },
        key=None,
        algorithm="none",
    )
    with pytest.raises(CredentialError):
        decode_and_validate(cfg=cred_cfg, token=forged)


def test_token_signed_with_other_hmac_algorithm_is_rejected(cred_cfg: CredentialConfig) -> None:
    now = int(datetime.now(tz=UTC).timestamp())
    claims = {
        "sub": "u1",
        "email": "a@b.com",
        "role": "tenant",
        "iat": now,
        "exp": now + 60,
        "iss": cred_cfg.issuer,
        "aud": cred_cfg.audience,
    }
    token = jwt.encode(claims, cred_cfg.secret, algorithm="HS512")
    assert ALGORITHM != "HS512"
    with pytest.raises(CredentialError):
        decode_and_validate(cfg=cred_cfg, token=token)


def test_unknown_role_claim_is_rejected(cred_cfg: CredentialConfig) -> None:
    now = int(datetime.now(tz=UTC).timestamp())
    token = jwt.encode(
        {
            "sub": "u1",
            "email": "a@b.com",
            "role": "superuser",
            "iat": now,
            "exp": now + 60,
            "iss": cred_cfg.issuer,
            "aud": cred_cfg.audience,
        },
        cred_cfg.secret,
        algorithm=ALGORITHM,
    )
    with pytest.raises(CredentialError, match="unknown role"):
        decode_and_validate(cfg=cred_cfg, token=token)


@pytest.mark.parametrize(
    "cfg",
    [
        CredentialConfig(secret="short", issuer="i", audience="a"),
        CredentialConfig(secret="x" * 32, issuer="i", audience="a", ttl=timedelta(0)),
        CredentialConfig(secret="x" * 32, issuer="", audience="a"),
    ],
)
def test_unusable_signing_config_fails_validation(cfg: CredentialConfig) -> None:
    with pytest.raises(SigningConfigError):
        validate_signing_config(cfg)
