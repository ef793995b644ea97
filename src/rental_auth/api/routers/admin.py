"""
rental_auth.api.routers.admin

Admin endpoints for profile role and verification changes.

Responsibilities:
- Change a profile's role (landlord flag follows).
- Set a profile's verified flag.

A role change applies to credentials minted afterwards; outstanding credentials
keep their role until they expire.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from starlette.status import HTTP_404_NOT_FOUND

from rental_auth.api.deps import profile_store
from rental_auth.api.routers.profiles import ProfileResponse, store_unavailable
from rental_auth.auth.deps import require_role
from rental_auth.auth.models import Caller
from rental_auth.db.models import Role
from rental_auth.identity.errors import ProfileNotFoundError, StoreUnavailableError
from rental_auth.identity.store import ProfileStore
from rental_auth.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/v1/admin/profiles", tags=["admin"])


class RoleUpdateRequest(BaseModel):
    role: Role


class VerifiedUpdateRequest(BaseModel):
    is_verified: bool


@router.put("/{profile_id}/role", response_model=ProfileResponse)
async def set_profile_role(
    profile_id: str,
    body: RoleUpdateRequest,
    caller: Caller = Depends(require_role(Role.admin)),
    store: ProfileStore = Depends(profile_store),
) -> ProfileResponse:
    try:
        record = await store.set_role(profile_id, body.role)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Profile not found") from e
    except StoreUnavailableError as e:
        raise store_unavailable(e) from e
    log.info(
        "admin_role_update", actor=caller.subject, principal_id=profile_id, role=body.role.value
    )
    return ProfileResponse.from_record(record)


@router.put("/{profile_id}/verified", response_model=ProfileResponse)
async def set_profile_verified(
    profile_id: str,
    body: VerifiedUpdateRequest,
    caller: Caller = Depends(require_role(Role.admin)),
    store: ProfileStore = Depends(profile_store),
) -> ProfileResponse:
    try:
        record = await store.set_verified(profile_id, body.is_verified)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Profile not found") from e
    except StoreUnavailableError as e:
        raise store_unavailable(e) from e
    log.info(
        "admin_verified_update",
        actor=caller.subject,
        principal_id=profile_id,
        is_verified=body.is_verified,
    )
    return ProfileResponse.from_record(record)
