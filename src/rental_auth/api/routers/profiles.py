"""
rental_auth.api.routers.profiles

Profile read endpoints for the SPA.

Responsibilities:
- Return the caller's own profile, authenticated by a session credential.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from starlette.status import HTTP_404_NOT_FOUND, HTTP_503_SERVICE_UNAVAILABLE

from rental_auth.api.deps import profile_store
from rental_auth.auth.deps import get_caller
from rental_auth.auth.models import Caller
from rental_auth.identity.errors import StoreUnavailableError
from rental_auth.identity.models import ProfileRecord
from rental_auth.identity.store import ProfileStore

router = APIRouter(prefix="/v1/profiles", tags=["profiles"])

RETRY_AFTER_SECONDS = "5"


class ProfileResponse(BaseModel):
    id: str
    full_name: str
    email: str
    role: str
    is_landlord: bool
    is_verified: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: ProfileRecord) -> ProfileResponse:
        return cls(
            id=record.id,
            full_name=record.full_name,
            email=record.email,
            role=record.role.value,
            is_landlord=record.is_landlord,
            is_verified=record.is_verified,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


def store_unavailable(e: StoreUnavailableError) -> HTTPException:
    return HTTPException(
        status_code=HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Profile store unavailable: {e}",
        headers={"Retry-After": RETRY_AFTER_SECONDS},
    )


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    caller: Caller = Depends(get_caller),
    store: ProfileStore = Depends(profile_store),
) -> ProfileResponse:
    try:
        record = await store.get(caller.subject)
    except StoreUnavailableError as e:
        raise store_unavailable(e) from e
    if record is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Profile not found")
    return ProfileResponse.from_record(record)
