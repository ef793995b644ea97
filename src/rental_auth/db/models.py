"""
rental_auth.db.models

Persistence schema owned by this service.

Responsibilities:
- Define the `Profile` row (one per auth-engine principal, keyed by its id).
- Define the `Role` enumeration shared by the store, the minter and the API.
- Keep the redundant landlord flag tied to the role on every write path.
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import CheckConstraint, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from rental_auth.db.base import Base


def utcnow() -> datetime:
    # Naive UTC timestamps, matching the `timestamp without time zone` columns.
    return datetime.utcnow()


class Role(enum.StrEnum):
    # Values are embedded in credentials and read by RLS policies; treat as stable.
    tenant = "tenant"
    landlord = "landlord"
    admin = "admin"


DEFAULT_ROLE = Role.tenant


class Profile(Base):
    __tablename__ = "profiles"

    # Same opaque identifier the auth engine assigns to the principal.
    id: Mapped[str] = mapped_column(String(128), primary_key=True)

    full_name: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(320), nullable=False)

    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, length=16), nullable=False, default=DEFAULT_ROLE
    )
    is_landlord: Mapped[bool] = mapped_column(nullable=False, default=False)
    is_verified: Mapped[bool] = mapped_column(nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "role IN ('tenant', 'landlord', 'admin')", name="ck_profiles_role_known"
        ),
        CheckConstraint(
            "is_landlord = (role = 'landlord')", name="ck_profiles_landlord_matches_role"
        ),
    )


def apply_role(profile: Profile, role: Role) -> None:
    """Set `role` and the derived landlord flag together."""
    profile.role = role
    profile.is_landlord = role is Role.landlord


# --- Module Notes -----------------------------------------------------------
# The check constraint backs `apply_role` at the database level, so a write that
# bypasses this module (e.g. an admin SQL console) cannot split role and flag.
