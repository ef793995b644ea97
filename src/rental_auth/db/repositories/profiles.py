"""
rental_auth.db.repositories.profiles

Repository for `Profile` entities.

Responsibilities:
- Primary-key reads (full row and role only).
- Insert-or-noop-on-conflict provisioning.
- Role and verification updates that keep the landlord flag consistent.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from rental_auth.db.models import DEFAULT_ROLE, Profile, Role, apply_role, utcnow

_ON_CONFLICT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class UnsupportedDialectError(RuntimeError):
    pass


class ProfileRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, profile_id: str) -> Profile | None:
        return await self._session.get(Profile, profile_id)

    async def get_role(self, profile_id: str) -> Role | None:
        stmt = select(Profile.role).where(Profile.id == profile_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def insert_if_absent(self, *, profile_id: str, full_name: str, email: str) -> bool:
        """
        Insert a default profile unless one already exists for `profile_id`.

        Returns True when this call created the row. Concurrent inserts for the same
        id are settled by the primary key: one writer creates, the rest no-op.
        """

        now = utcnow()
        values: dict[str, Any] = {
            "id": profile_id,
            "full_name": full_name,
            "email": email,
            "role": DEFAULT_ROLE,
            "is_landlord": DEFAULT_ROLE is Role.landlord,
            "is_verified": False,
            "created_at": now,
            "updated_at": now,
        }

        dialect = self._session.get_bind().dialect.name
        insert = _ON_CONFLICT_INSERTS.get(dialect)
        if insert is None:
            raise UnsupportedDialectError(f"no ON CONFLICT insert for dialect {dialect!r}")

        stmt = insert(Profile).values(**values).on_conflict_do_nothing(index_elements=["id"])
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def set_role(self, profile_id: str, role: Role) -> Profile | None:
        profile = await self._session.get(Profile, profile_id, with_for_update=True)
        if profile is None:
            return None
        apply_role(profile, role)
        profile.updated_at = utcnow()
        await self._session.flush()
        return profile

    async def set_verified(self, profile_id: str, verified: bool) -> Profile | None:
        profile = await self._session.get(Profile, profile_id, with_for_update=True)
        if profile is None:
            return None
        profile.is_verified = verified
        profile.updated_at = utcnow()
        await self._session.flush()
        return profile
