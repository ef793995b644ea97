"""
rental_auth.observability.metrics

Prometheus counters for the identity pipeline.

Responsibilities:
- Count role resolution outcomes so a missing profile is distinguishable
  from a store outage.
- Count provisioning outcomes (created / already existed / failed).
- Count minted credentials by role.
"""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

role_resolutions_total = Counter(
    "role_resolutions_total",
    "Role lookups by outcome (found, profile_missing, store_unavailable).",
    labelnames=("outcome",),
)

profile_provisioning_total = Counter(
    "profile_provisioning_total",
    "Profile provisioning attempts by outcome (created, existing, failed).",
    labelnames=("outcome",),
)

credentials_minted_total = Counter(
    "credentials_minted_total",
    "Session credentials minted, by embedded role.",
    labelnames=("role",),
)


def render_latest() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST


# --- Module Notes -----------------------------------------------------------
# Counters are process-local and registered on the default registry at import.
