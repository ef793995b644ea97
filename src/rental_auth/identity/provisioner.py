"""
rental_auth.identity.provisioner

Profile Provisioner: handler for the auth engine's "principal created" event.

Responsibilities:
- Ensure exactly one profile exists per principal id.
- Treat redelivery (profile already present) as success.
- Log and count failures, then re-raise so the caller can retry delivery.
"""

from __future__ import annotations

from rental_auth.identity.errors import ProfileNotFoundError, StoreUnavailableError
from rental_auth.identity.models import Principal, ProfileRecord
from rental_auth.identity.store import ProfileStore
from rental_auth.observability.logging import get_logger
from rental_auth.observability.metrics import profile_provisioning_total

log = get_logger(__name__)


class ProfileProvisioner:
    def __init__(self, store: ProfileStore) -> None:
        self._store = store

    async def ensure_profile(self, principal: Principal) -> ProfileRecord:
        if not principal.id:
            raise ValueError("principal id must be non-empty")

        try:
            record, created = await self._store.insert_if_absent(principal)
        except (StoreUnavailableError, ProfileNotFoundError) as e:
            profile_provisioning_total.labels(outcome="failed").inc()
            log.error("profile_provision_failed", principal_id=principal.id, error=str(e))
            raise

        outcome = "created" if created else "existing"
        profile_provisioning_total.labels(outcome=outcome).inc()
        log.info("profile_provisioned", principal_id=principal.id, outcome=outcome)
        return record


# --- Module Notes -----------------------------------------------------------
# New profiles always start as tenant/unverified. Existing rows are returned as-is,
# so a redelivered event never resets a role an admin has since changed.
