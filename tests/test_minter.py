"""
tests.test_minter

Credential minting end to end over the identity pipeline.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from rental_auth.auth.jwt import decode_and_validate
from rental_auth.db.models import Role
from rental_auth.identity.errors import StoreUnavailableError
from rental_auth.identity.minter import CredentialMinter
from rental_auth.identity.models import Principal
from rental_auth.identity.provisioner import ProfileProvisioner
from rental_auth.identity.resolver import IdentityResolver

U1 = Principal(id="u1", email="a@b.com")


class SteppingClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now


def _minter(store, cfg, clock=None) -> CredentialMinter:
    kwargs = {"clock": clock} if clock is not None else {}
    return CredentialMinter(resolver=IdentityResolver(store), cfg=cfg, **kwargs)


@pytest.mark.asyncio
async def test_new_principal_gets_tenant_credential(memory_store, cred_cfg) -> None:
    profile = await ProfileProvisioner(memory_store).ensure_profile(U1)
    assert (profile.role, profile.is_landlord, profile.is_verified) == (Role.tenant, False, False)

    cred = await _minter(memory_store, cred_cfg).mint(U1)

    claims = decode_and_validate(cfg=cred_cfg, token=cred.token)
    assert {k: claims[k] for k in ("sub", "email", "role")} == {
        "sub": "u1",
        "email": "a@b.com",
        "role": "tenant",
    }
    assert claims["exp"] - claims["iat"] == 3600


@pytest.mark.asyncio
async def test_role_change_applies_to_next_credential_only(memory_store, cred_cfg) -> None:
    clock = SteppingClock(datetime.now(tz=UTC) - timedelta(minutes=10))
    minter = _minter(memory_store, cred_cfg, clock)
    await ProfileProvisioner(memory_store).ensure_profile(U1)

    before = await minter.mint(U1)
    await memory_store.set_role("u1", Role.landlord)
    clock.now += timedelta(minutes=5)
    after = await minter.mint(U1)

    assert decode_and_validate(cfg=cred_cfg, token=after.token)["role"] == "landlord"
    # The earlier credential is still valid and still says tenant until it expires.
    assert decode_and_validate(cfg=cred_cfg, token=before.token)["role"] == "tenant"


@pytest.mark.asyncio
async def test_missing_profile_mints_default_role(memory_store, cred_cfg) -> None:
    cred = await _minter(memory_store, cred_cfg).mint(U1)
    assert cred.claims["role"] == "tenant"


@pytest.mark.asyncio
async def test_store_outage_produces_no_credential(unavailable_store, cred_cfg) -> None:
    minter = _minter(unavailable_store, cred_cfg)
    cred = None
    with pytest.raises(StoreUnavailableError):
        cred = await minter.mint(U1)
    assert cred is None


@pytest.mark.asyncio
async def test_uses_injected_clock(memory_store, cred_cfg) -> None:
    fixed = datetime.now(tz=UTC).replace(microsecond=0)
    cred = await _minter(memory_store, cred_cfg, SteppingClock(fixed)).mint(U1)
    assert cred.claims["iat"] == int(fixed.timestamp())
    assert cred.claims["exp"] == int(fixed.timestamp()) + 3600
