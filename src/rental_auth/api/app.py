"""
rental_auth.api.app

FastAPI app factory for the auth backend.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Validate signing configuration before serving anything.
- Compose the identity pipeline: one profile store injected into the resolver,
  provisioner and minter.
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rental_auth import __version__
from rental_auth.api.routers.admin import router as admin_router
from rental_auth.api.routers.health import router as health_router
from rental_auth.api.routers.hooks import router as hooks_router
from rental_auth.api.routers.profiles import router as profiles_router
from rental_auth.auth.deps import HookSecretConfigError, credential_config, validate_hook_secret
from rental_auth.auth.jwt import SigningConfigError, validate_signing_config
from rental_auth.db.init_db import init_db
from rental_auth.db.session import create_engine, create_sessionmaker
from rental_auth.identity.minter import CredentialMinter
from rental_auth.identity.provisioner import ProfileProvisioner
from rental_auth.identity.resolver import IdentityResolver
from rental_auth.identity.store import ProfileStore, SqlProfileStore
from rental_auth.notifications.email import SmtpEmailSender
from rental_auth.observability.logging import configure_logging, get_logger
from rental_auth.observability.middleware import RequestContextMiddleware
from rental_auth.settings import DEV_HOOK_SECRET, DEV_JWT_SECRET, Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    store: ProfileStore | None = None,
    email_sender: SmtpEmailSender | None = None,
) -> FastAPI:
    """
    `store` and `email_sender` replace the SQL store / SMTP sender when given.
    """

    configure_logging(service_name=settings.service_name, level=settings.log_level)

    cred_cfg = credential_config(settings)
    validate_signing_config(cred_cfg)
    if settings.env == "prod" and settings.jwt_secret == DEV_JWT_SECRET:
        raise SigningConfigError("the dev signing secret cannot be used in prod")
    validate_hook_secret(settings.hook_secret)
    if settings.env == "prod" and settings.hook_secret == DEV_HOOK_SECRET:
        raise HookSecretConfigError("the dev hook secret cannot be used in prod")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Prod runs Alembic migrations instead.
            await init_db(engine)

        profile_store = store or SqlProfileStore(
            app.state.sessionmaker, timeout=settings.store_timeout_seconds
        )
        app.state.profile_store = profile_store
        app.state.provisioner = ProfileProvisioner(profile_store)
        app.state.minter = CredentialMinter(
            resolver=IdentityResolver(profile_store),
            cfg=cred_cfg,
        )
        app.state.email_sender = email_sender or SmtpEmailSender(settings)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Rental Auth Backend",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(health_router, tags=["health"])
    app.include_router(hooks_router)
    app.include_router(profiles_router)
    app.include_router(admin_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is the composition root; business logic stays in `identity`.
