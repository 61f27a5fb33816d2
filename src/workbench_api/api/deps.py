"""
workbench_api.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and the auth
  components built once at startup.
- Encapsulate app.state access patterns.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from workbench_api.auth.bearer import BearerTokenVerifier
from workbench_api.auth.service import ChallengeService
from workbench_api.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The settings object the app was built with (see `api.app.create_app`).
    return request.app.state.settings  # type: ignore[attr-defined]


def challenge_service_dep(request: Request) -> ChallengeService:
    return request.app.state.challenge_service  # type: ignore[attr-defined]


def bearer_verifier_dep(request: Request) -> BearerTokenVerifier:
    return request.app.state.bearer_verifier  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created on app startup in `workbench_api.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the caller.
    async with session_factory() as session:
        yield session


# --- Module Notes -----------------------------------------------------------
# Everything reachable from here is built exactly once per app, so tests can
# substitute any piece by passing it to `create_app`.
