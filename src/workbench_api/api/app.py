"""
workbench_api.api.app

FastAPI app factory for the Workbench REST API.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Build the auth components (challenge cache/service, bearer verifier) once.
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from workbench_api.api.routers.authn import router as authn_router
from workbench_api.api.routers.dev_auth import router as dev_auth_router
from workbench_api.api.routers.health import router as health_router
from workbench_api.api.routers.session import router as session_router
from workbench_api.api.routers.user_accounts import router as user_accounts_router
from workbench_api.auth.bearer import BearerTokenVerifier, build_bearer_verifier
from workbench_api.auth.cache import ChallengeCache
from workbench_api.auth.errors import EntropySourceUnavailable
from workbench_api.auth.nonce import generate_nonce
from workbench_api.auth.service import ChallengeService, PendingChallenge
from workbench_api.db.init_db import init_db
from workbench_api.db.session import create_engine, create_sessionmaker
from workbench_api.observability.logging import configure_logging, get_logger
from workbench_api.observability.middleware import RequestContextMiddleware
from workbench_api.settings import Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    challenge_cache: ChallengeCache[PendingChallenge] | None = None,
    bearer_verifier: BearerTokenVerifier | None = None,
    nonce_factory: Callable[[], str] = generate_nonce,
) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info(
            "startup",
            env=settings.env,
            apikey_authn=settings.service_authn_apikey.enable,
            oidc_authn=settings.service_authn_oidc.enable,
        )
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Workbench REST API",
        version="0.1.0",
        docs_url="/docs" if settings.env != "prod" else None,
        openapi_url="/openapi.json" if settings.env != "prod" else None,
        lifespan=lifespan,
    )

    # One instance each for the app's lifetime; injected into routes via `api.deps`.
    app.state.settings = settings
    app.state.challenge_service = ChallengeService(
        cfg=settings.service_authn_apikey,
        cache=challenge_cache if challenge_cache is not None else ChallengeCache(),
        nonce_factory=nonce_factory,
    )
    app.state.bearer_verifier = bearer_verifier or build_bearer_verifier(settings)

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        https_only=settings.env == "prod",
    )
    app.add_middleware(RequestContextMiddleware)

    @app.exception_handler(EntropySourceUnavailable)
    async def _entropy_unavailable(_: Request, exc: EntropySourceUnavailable) -> JSONResponse:
        log.error("entropy_source_unavailable", error=str(exc))
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    app.include_router(health_router, tags=["health"])
    app.include_router(authn_router)
    app.include_router(session_router)
    app.include_router(user_accounts_router)
    app.include_router(dev_auth_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; auth logic
# stays in `workbench_api.auth`.
