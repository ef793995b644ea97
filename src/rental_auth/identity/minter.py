"""
rental_auth.identity.minter

Credential Minter: called on every session issuance (login, refresh).

Responsibilities:
- Resolve the principal's current role.
- Sign a time-boxed credential embedding it.
- Abort (raise) when the role cannot be resolved authoritatively.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from rental_auth.auth.jwt import CredentialConfig, SignedCredential, issue_credential
from rental_auth.identity.models import Principal
from rental_auth.identity.resolver import IdentityResolver
from rental_auth.observability.logging import get_logger
from rental_auth.observability.metrics import credentials_minted_total

log = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class CredentialMinter:
    def __init__(
        self,
        *,
        resolver: IdentityResolver,
        cfg: CredentialConfig,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._resolver = resolver
        self._cfg = cfg
        self._clock = clock

    async def mint(self, principal: Principal) -> SignedCredential:
        # StoreUnavailableError propagates: no credential rather than a guessed role.
        role = await self._resolver.resolve_role(principal.id)
        credential = issue_credential(
            cfg=self._cfg,
            subject=principal.id,
            email=principal.email,
            role=role,
            now=self._clock(),
        )
        credentials_minted_total.labels(role=role.value).inc()
        log.info("credential_minted", principal_id=principal.id, role=role.value)
        return credential


# --- Module Notes -----------------------------------------------------------
# Credentials are not revoked on role change; an outstanding token keeps its old
# role until `exp`. The TTL is the bound on that staleness.
