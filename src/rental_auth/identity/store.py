"""
rental_auth.identity.store

Profile store capability injected into the resolver and provisioner.

Responsibilities:
- Define the tagged result of a role lookup (found / missing / store failure).
- Define the `ProfileStore` protocol.
- Implement it over SQLAlchemy async sessions with a per-operation timeout,
  classifying driver and timeout failures as `StoreUnavailableError`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rental_auth.db.models import Role
from rental_auth.db.repositories.profiles import ProfileRepo
from rental_auth.identity.errors import ProfileNotFoundError, StoreUnavailableError
from rental_auth.identity.models import Principal, ProfileRecord
from rental_auth.observability.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RoleFound:
    role: Role


@dataclass(frozen=True, slots=True)
class ProfileMissing:
    pass


@dataclass(frozen=True, slots=True)
class StoreFailure:
    reason: str


RoleLookup = RoleFound | ProfileMissing | StoreFailure


class ProfileStore(Protocol):
    async def lookup_role(self, principal_id: str) -> RoleLookup: ...

    async def get(self, principal_id: str) -> ProfileRecord | None: ...

    async def insert_if_absent(self, principal: Principal) -> tuple[ProfileRecord, bool]: ...

    async def set_role(self, principal_id: str, role: Role) -> ProfileRecord: ...

    async def set_verified(self, principal_id: str, verified: bool) -> ProfileRecord: ...


class SqlProfileStore:
    """
    `ProfileStore` backed by the `profiles` table.

    Each operation runs in its own session and transaction, bounded by `timeout`.
    Methods other than `lookup_role` raise `StoreUnavailableError` on failure.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        timeout: float,
    ) -> None:
        self._session_factory = session_factory
        self._timeout = timeout

    async def _run(self, op: str, fn: Callable[[ProfileRepo], Awaitable[T]]) -> T:
        try:
            async with asyncio.timeout(self._timeout):
                async with self._session_factory() as session:
                    result = await fn(ProfileRepo(session))
                    await session.commit()
                    return result
        except TimeoutError as e:
            raise StoreUnavailableError(f"profile store timed out during {op}") from e
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailableError(f"profile store failed during {op}: {e}") from e
        except LookupError as e:
            # A stored role outside `Role` (enum decode); fail closed, never read as missing.
            raise StoreUnavailableError(f"unreadable profile row during {op}: {e}") from e

    async def lookup_role(self, principal_id: str) -> RoleLookup:
        try:
            role = await self._run("lookup_role", lambda repo: repo.get_role(principal_id))
        except StoreUnavailableError as e:
            return StoreFailure(reason=str(e))
        if role is None:
            return ProfileMissing()
        return RoleFound(role=Role(role))

    async def get(self, principal_id: str) -> ProfileRecord | None:
        async def op(repo: ProfileRepo) -> ProfileRecord | None:
            row = await repo.get(principal_id)
            return ProfileRecord.from_row(row) if row is not None else None

        return await self._run("get", op)

    async def insert_if_absent(self, principal: Principal) -> tuple[ProfileRecord, bool]:
        async def op(repo: ProfileRepo) -> tuple[ProfileRecord, bool]:
            created = await repo.insert_if_absent(
                profile_id=principal.id, full_name=principal.name, email=principal.email
            )
            row = await repo.get(principal.id)
            if row is None:
                # Only reachable if the row was deleted between insert and read.
                raise ProfileNotFoundError(principal.id)
            return ProfileRecord.from_row(row), created

        return await self._run("insert_if_absent", op)

    async def set_role(self, principal_id: str, role: Role) -> ProfileRecord:
        async def op(repo: ProfileRepo) -> ProfileRecord:
            row = await repo.set_role(principal_id, role)
            if row is None:
                raise ProfileNotFoundError(principal_id)
            return ProfileRecord.from_row(row)

        record = await self._run("set_role", op)
        log.info("profile_role_changed", principal_id=principal_id, role=role.value)
        return record

    async def set_verified(self, principal_id: str, verified: bool) -> ProfileRecord:
        async def op(repo: ProfileRepo) -> ProfileRecord:
            row = await repo.set_verified(principal_id, verified)
            if row is None:
                raise ProfileNotFoundError(principal_id)
            return ProfileRecord.from_row(row)

        return await self._run("set_verified", op)


# --- Module Notes -----------------------------------------------------------
# `lookup_role` returns a tag instead of raising because the resolver must treat
# "no row" and "no answer" differently; every other caller just wants an exception.
