from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_404_NOT_FOUND

from workbench_api.api.deps import db_session, settings_dep
from workbench_api.auth.deps import SESSION_USER_KEY
from workbench_api.auth.models import Role
from workbench_api.db.repositories.user_accounts import UserAccountRepo
from workbench_api.observability.logging import get_logger
from workbench_api.settings import Settings

router = APIRouter(prefix="/v1/dev", tags=["dev"])

log = get_logger(__name__)


class DevSessionRequest(BaseModel):
    username: str = Field(min_length=1, max_length=256)
    role: Role = Role.visitor


class DevSessionResponse(BaseModel):
    user_account_id: str
    username: str
    role: Role


def _dev_only(settings: Settings = Depends(settings_dep)) -> None:
    # Stand-in for the interactive login strategies; never exposed in prod.
    if settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")


@router.post("/session", response_model=DevSessionResponse, dependencies=[Depends(_dev_only)])
async def dev_login(
    request: Request,
    body: DevSessionRequest,
    session: AsyncSession = Depends(db_session),
) -> DevSessionResponse:
    repo = UserAccountRepo(session)
    account = await repo.get_by_username(body.username)
    if account is None:
        account = await repo.create(username=body.username, role=body.role)
        await session.commit()

    request.session[SESSION_USER_KEY] = str(account.id)
    log.info("dev_session_login", username=account.username)
    return DevSessionResponse(
        user_account_id=str(account.id),
        username=account.username,
        role=account.role,
    )


@router.delete("/session", status_code=204, dependencies=[Depends(_dev_only)])
async def dev_logout(request: Request) -> None:
    request.session.clear()
