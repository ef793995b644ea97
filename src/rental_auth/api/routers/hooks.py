"""
rental_auth.api.routers.hooks

Endpoints called by the external auth engine.

Responsibilities:
- "principal created": provision the profile (at-least-once delivery; idempotent).
- "session credential": mint the role-bearing credential for a session being issued.
- "send email": deliver verification/reset mails on the engine's behalf.

Every route requires the shared `X-Hook-Secret` header. Store failures answer 503
with `Retry-After` so the engine retries delivery or fails the session issuance;
they never degrade into a default-role credential.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_202_ACCEPTED, HTTP_503_SERVICE_UNAVAILABLE

from rental_auth.api.deps import email_sender, minter, provisioner
from rental_auth.api.routers.profiles import ProfileResponse, store_unavailable
from rental_auth.auth.deps import require_hook_secret
from rental_auth.identity.errors import ProfileNotFoundError, StoreUnavailableError
from rental_auth.identity.minter import CredentialMinter
from rental_auth.identity.models import Principal
from rental_auth.identity.provisioner import ProfileProvisioner
from rental_auth.notifications.email import (
    EmailDeliveryError,
    EmailNotConfiguredError,
    SmtpEmailSender,
)

router = APIRouter(
    prefix="/v1/hooks",
    tags=["hooks"],
    dependencies=[Depends(require_hook_secret)],
)


class PrincipalPayload(BaseModel):
    id: str = Field(min_length=1, max_length=128)
    email: str = Field(min_length=3, max_length=320)
    name: str = Field(default="", max_length=256)

    def to_principal(self) -> Principal:
        return Principal(id=self.id, email=self.email, name=self.name)


class SessionCredentialRequest(BaseModel):
    user: PrincipalPayload


class SessionCredentialResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class SendEmailRequest(BaseModel):
    to: str = Field(min_length=3, max_length=320)
    subject: str = Field(min_length=1, max_length=998)
    body: str
    html: str | None = None


@router.post("/principal-created", response_model=ProfileResponse)
async def principal_created(
    body: PrincipalPayload,
    svc: ProfileProvisioner = Depends(provisioner),
) -> ProfileResponse:
    structlog.contextvars.bind_contextvars(principal_id=body.id)
    try:
        record = await svc.ensure_profile(body.to_principal())
    except StoreUnavailableError as e:
        raise store_unavailable(e) from e
    except ProfileNotFoundError as e:
        # Row vanished between insert and read; redelivery recreates it.
        raise store_unavailable(StoreUnavailableError(str(e))) from e
    return ProfileResponse.from_record(record)


@router.post("/session-credential", response_model=SessionCredentialResponse)
async def session_credential(
    body: SessionCredentialRequest,
    svc: CredentialMinter = Depends(minter),
) -> SessionCredentialResponse:
    structlog.contextvars.bind_contextvars(principal_id=body.user.id)
    try:
        credential = await svc.mint(body.user.to_principal())
    except StoreUnavailableError as e:
        raise store_unavailable(e) from e
    return SessionCredentialResponse(
        access_token=credential.token,
        expires_in=credential.expires_in,
    )


@router.post("/send-email", status_code=HTTP_202_ACCEPTED)
async def send_email(
    body: SendEmailRequest,
    sender: SmtpEmailSender = Depends(email_sender),
) -> dict[str, str]:
    try:
        await sender.send(body.to, body.subject, body.body, html=body.html)
    except (EmailNotConfiguredError, EmailDeliveryError) as e:
        raise HTTPException(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
    return {"status": "sent"}
