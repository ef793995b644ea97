"""
tests.conftest

Shared fixtures: settings, credential config, in-memory and failing profile stores,
a SQLite-backed store, and an HTTP client bound to the app.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import replace
from datetime import datetime, timedelta
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from rental_auth.api.app import create_app
from rental_auth.auth.jwt import CredentialConfig
from rental_auth.db.init_db import init_db
from rental_auth.db.models import DEFAULT_ROLE, Role
from rental_auth.db.session import create_engine, create_sessionmaker
from rental_auth.identity.errors import ProfileNotFoundError, StoreUnavailableError
from rental_auth.identity.models import Principal, ProfileRecord
from rental_auth.identity.store import (
    ProfileMissing,
    RoleFound,
    RoleLookup,
    SqlProfileStore,
    StoreFailure,
)
from rental_auth.settings import Settings

HOOK_SECRET = "test-hook-secret"
JWT_SECRET = "test-signing-secret-0123456789abcdef"


class InMemoryProfileStore:
    """Dict-backed store with the same insert-or-noop semantics as the SQL store."""

    def __init__(self) -> None:
        self.rows: dict[str, ProfileRecord] = {}
        self.insert_calls = 0

    async def lookup_role(self, principal_id: str) -> RoleLookup:
        row = self.rows.get(principal_id)
        return RoleFound(role=row.role) if row is not None else ProfileMissing()

    async def get(self, principal_id: str) -> ProfileRecord | None:
        return self.rows.get(principal_id)

    async def insert_if_absent(self, principal: Principal) -> tuple[ProfileRecord, bool]:
        self.insert_calls += 1
        # Yield so concurrent callers interleave the way they would on a real store.
        await asyncio.sleep(0)
        if principal.id in self.rows:
            return self.rows[principal.id], False
        now = datetime.utcnow()
        record = ProfileRecord(
            id=principal.id,
            full_name=principal.name,
            email=principal.email,
            role=DEFAULT_ROLE,
            is_landlord=False,
            is_verified=False,
            created_at=now,
            updated_at=now,
        )
        self.rows[principal.id] = record
        return record, True

    async def set_role(self, principal_id: str, role: Role) -> ProfileRecord:
        row = self.rows.get(principal_id)
        if row is None:
            raise ProfileNotFoundError(principal_id)
        updated = replace(row, role=role, is_landlord=role is Role.landlord)
        self.rows[principal_id] = updated
        return updated

    async def set_verified(self, principal_id: str, verified: bool) -> ProfileRecord:
        row = self.rows.get(principal_id)
        if row is None:
            raise ProfileNotFoundError(principal_id)
        updated = replace(row, is_verified=verified)
        self.rows[principal_id] = updated
        return updated


class UnavailableProfileStore:
    """Every operation fails the way a dropped connection does."""

    reason = "connection refused"

    async def lookup_role(self, principal_id: str) -> RoleLookup:
        return StoreFailure(reason=self.reason)

    async def get(self, principal_id: str) -> ProfileRecord | None:
        raise StoreUnavailableError(self.reason)

    async def insert_if_absent(self, principal: Principal) -> tuple[ProfileRecord, bool]:
        raise StoreUnavailableError(self.reason)

    async def set_role(self, principal_id: str, role: Role) -> ProfileRecord:
        raise StoreUnavailableError(self.reason)

    async def set_verified(self, principal_id: str, verified: bool) -> ProfileRecord:
        raise StoreUnavailableError(self.reason)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}",
        jwt_secret=JWT_SECRET,
        hook_secret=HOOK_SECRET,
        log_level="WARNING",
    )


@pytest.fixture
def cred_cfg() -> CredentialConfig:
    return CredentialConfig(
        secret=JWT_SECRET,
        issuer="rental-auth",
        audience="authenticated",
        ttl=timedelta(seconds=3600),
    )


@pytest.fixture
def memory_store() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture
def unavailable_store() -> UnavailableProfileStore:
    return UnavailableProfileStore()


@pytest_asyncio.fixture
async def sql_store(settings: Settings) -> AsyncIterator[SqlProfileStore]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield SqlProfileStore(create_sessionmaker(engine), timeout=settings.store_timeout_seconds)
    finally:
        await engine.dispose()


@pytest.fixture
def hook_headers() -> dict[str, str]:
    return {"X-Hook-Secret": HOOK_SECRET}


async def _client_for(app) -> AsyncIterator[httpx.AsyncClient]:
    # httpx ASGITransport does not run lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    async for c in _client_for(create_app(settings=settings)):
        yield c


@pytest_asyncio.fixture
async def unavailable_client(
    settings: Settings, unavailable_store: UnavailableProfileStore
) -> AsyncIterator[httpx.AsyncClient]:
    async for c in _client_for(create_app(settings=settings, store=unavailable_store)):
        yield c
