"""
rental_auth.auth.models

Auth domain models.

Responsibilities:
- Define the verified caller type (`Caller`) injected into bearer-protected endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass

from rental_auth.db.models import Role


@dataclass(frozen=True, slots=True)
class Caller:
    """
    Identity asserted by a verified session credential.
    """

    subject: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin
