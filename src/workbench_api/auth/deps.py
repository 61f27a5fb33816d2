"""
workbench_api.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Decide, once per request, which authentication strategy applies.
- Convert a bearer token or an established session into a typed `Principal`.
- Enforce role membership via a reusable dependency factory.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

import structlog
from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.concurrency import run_in_threadpool
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from workbench_api.api.deps import bearer_verifier_dep, sessionmaker_from_app, settings_dep
from workbench_api.auth.bearer import BearerTokenVerifier
from workbench_api.auth.errors import AuthnError
from workbench_api.auth.models import Principal, Role
from workbench_api.db.models import UserAccountStatus
from workbench_api.db.repositories.user_accounts import UserAccountRepo
from workbench_api.observability.logging import get_logger
from workbench_api.settings import Settings

log = get_logger(__name__)

# Written by the interactive login strategies; read here.
SESSION_USER_KEY = "user_account_id"


@dataclass(frozen=True, slots=True)
class BearerCandidate:
    token: str


@dataclass(frozen=True, slots=True)
class SessionCandidate:
    user_account_id: str


@dataclass(frozen=True, slots=True)
class Unauthenticated:
    pass


AuthnCandidate = BearerCandidate | SessionCandidate | Unauthenticated


def classify_request(request: Request, settings: Settings) -> AuthnCandidate:
    header = request.headers.get("authorization")
    if settings.bearer_enabled and header is not None:
        # A credential header always takes the bearer path, even if malformed.
        scheme, _, token = header.partition(" ")
        return BearerCandidate(token=token.strip() if scheme.lower() == "bearer" else "")

    session = request.session if "session" in request.scope else {}
    user_account_id = session.get(SESSION_USER_KEY)
    if user_account_id:
        return SessionCandidate(user_account_id=str(user_account_id))

    return Unauthenticated()


def _unauthorized(settings: Settings) -> HTTPException:
    # Deliberately vague: callers never learn which check failed.
    headers = {"WWW-Authenticate": "Bearer"} if settings.bearer_enabled else None
    return HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Not authorized", headers=headers)


async def _session_principal(
    session_factory: async_sessionmaker[AsyncSession], user_account_id: str
) -> Principal | None:
    try:
        account_id = uuid.UUID(user_account_id)
    except ValueError:
        return None
    async with session_factory() as session:
        account = await UserAccountRepo(session).get(account_id)
    if account is None or account.status != UserAccountStatus.active:
        return None
    return Principal(subject=account.username, kind="user", roles=frozenset({account.role}))


async def authenticate(
    request: Request,
    settings: Settings = Depends(settings_dep),
    verifier: BearerTokenVerifier = Depends(bearer_verifier_dep),
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> Principal:
    candidate = classify_request(request, settings)

    if isinstance(candidate, BearerCandidate):
        try:
            # The IdP key lookup may fetch JWKS synchronously; keep it off the event loop.
            principal = await run_in_threadpool(verifier.verify, candidate.token)
        except AuthnError as e:
            log.info("authentication_failed", strategy="bearer", reason=type(e).__name__)
            raise _unauthorized(settings) from e
    elif isinstance(candidate, SessionCandidate):
        principal = await _session_principal(session_factory, candidate.user_account_id)
        if principal is None:
            log.info("authentication_failed", strategy="session", reason="unknown_or_inactive")
            raise _unauthorized(settings)
    else:
        log.info("authentication_failed", strategy="none", reason="no_credentials")
        raise _unauthorized(settings)

    request.state.principal = principal
    structlog.contextvars.bind_contextvars(principal=principal.subject, principal_kind=principal.kind)
    return principal


def require_role(role: Role, *more: Role):
    """Dependency factory: the caller must hold `role` or one of `more`."""

    allowed_set = frozenset((role, *more))

    def _dep(principal: Principal = Depends(authenticate)) -> Principal:
        if not principal.has_any_role(allowed_set):
            log.info(
                "authorization_denied",
                principal=principal.subject,
                required=sorted(allowed_set),
            )
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Forbidden")
        return principal

    return _dep


# --- Module Notes -----------------------------------------------------------
# Route usage:
#   router = APIRouter(dependencies=[Depends(require_role(Role.admin))])
# `authenticate` is resolved once per request even when several dependencies need it.
