"""
rental_auth.identity.models

Value types passed between the auth engine hooks and the identity pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rental_auth.db.models import Profile, Role


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Identity created and owned by the external auth engine.
    """

    id: str
    email: str
    name: str = ""


@dataclass(frozen=True, slots=True)
class ProfileRecord:
    """
    Detached snapshot of a `profiles` row.
    """

    id: str
    full_name: str
    email: str
    role: Role
    is_landlord: bool
    is_verified: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: Profile) -> ProfileRecord:
        return cls(
            id=row.id,
            full_name=row.full_name,
            email=row.email,
            role=Role(row.role),
            is_landlord=row.is_landlord,
            is_verified=row.is_verified,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
