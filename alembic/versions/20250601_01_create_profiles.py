"""create profiles table

Revision ID: 20250601_01
Revises:
Create Date: 2025-06-01
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "20250601_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=128), primary_key=True),
        sa.Column("full_name", sa.String(length=256), nullable=False, server_default=""),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False, server_default="tenant"),
        sa.Column("is_landlord", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "role IN ('tenant', 'landlord', 'admin')", name="ck_profiles_role_known"
        ),
        sa.CheckConstraint(
            "is_landlord = (role = 'landlord')", name="ck_profiles_landlord_matches_role"
        ),
    )


def downgrade() -> None:
    op.drop_table("profiles")
