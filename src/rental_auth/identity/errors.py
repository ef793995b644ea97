"""
rental_auth.identity.errors

Error taxonomy for the identity pipeline.
"""

from __future__ import annotations


class IdentityError(Exception):
    pass


class StoreUnavailableError(IdentityError):
    """
    The profile store could not answer (connectivity, timeout, driver failure).

    Retryable. Never to be read as "profile missing".
    """


class ProfileNotFoundError(IdentityError):
    def __init__(self, principal_id: str) -> None:
        super().__init__(f"no profile for principal {principal_id!r}")
        self.principal_id = principal_id
