"""
rental_auth.identity.resolver

Identity Resolver: principal id -> current role.

Responsibilities:
- One primary-key lookup against the profile store.
- Fall back to the default role only when the profile is missing.
- Surface store failures as `StoreUnavailableError`.
"""

from __future__ import annotations

from rental_auth.db.models import DEFAULT_ROLE, Role
from rental_auth.identity.errors import StoreUnavailableError
from rental_auth.identity.store import ProfileMissing, ProfileStore, RoleFound, StoreFailure
from rental_auth.observability.logging import get_logger
from rental_auth.observability.metrics import role_resolutions_total

log = get_logger(__name__)


class IdentityResolver:
    def __init__(self, store: ProfileStore, *, default_role: Role = DEFAULT_ROLE) -> None:
        self._store = store
        self._default_role = default_role

    async def resolve_role(self, principal_id: str) -> Role:
        if not principal_id:
            raise ValueError("principal_id must be non-empty")

        lookup = await self._store.lookup_role(principal_id)

        if isinstance(lookup, RoleFound):
            role_resolutions_total.labels(outcome="found").inc()
            return lookup.role

        if isinstance(lookup, ProfileMissing):
            # Provisioning lag or a lost creation event; the hook redelivery should fix it.
            role_resolutions_total.labels(outcome="profile_missing").inc()
            log.warning(
                "role_default_applied",
                principal_id=principal_id,
                role=self._default_role.value,
            )
            return self._default_role

        if isinstance(lookup, StoreFailure):
            role_resolutions_total.labels(outcome="store_unavailable").inc()
            log.error("role_lookup_failed", principal_id=principal_id, reason=lookup.reason)
            raise StoreUnavailableError(lookup.reason)

        raise TypeError(f"unexpected role lookup result: {lookup!r}")
