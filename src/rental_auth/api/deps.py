"""
rental_auth.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the settings, store and pipeline components built by the app factory.
- Provide request-scoped DB sessions for the readiness probe.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rental_auth.identity.minter import CredentialMinter
from rental_auth.identity.provisioner import ProfileProvisioner
from rental_auth.identity.store import ProfileStore
from rental_auth.notifications.email import SmtpEmailSender
from rental_auth.settings import Settings


def settings_dep(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created at startup in `rental_auth.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


def profile_store(request: Request) -> ProfileStore:
    return request.app.state.profile_store  # type: ignore[attr-defined]


def provisioner(request: Request) -> ProfileProvisioner:
    return request.app.state.provisioner  # type: ignore[attr-defined]


def minter(request: Request) -> CredentialMinter:
    return request.app.state.minter  # type: ignore[attr-defined]


def email_sender(request: Request) -> SmtpEmailSender:
    return request.app.state.email_sender  # type: ignore[attr-defined]
