"""
workbench_api.api.routers.user_accounts

Read access to user accounts, restricted to administrators.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_404_NOT_FOUND

from workbench_api.api.deps import db_session
from workbench_api.auth.deps import require_role
from workbench_api.auth.models import Role
from workbench_api.db.models import UserAccountStatus
from workbench_api.db.repositories.user_accounts import UserAccountRepo

router = APIRouter(
    prefix="/api/user-accounts",
    tags=["user-accounts"],
    dependencies=[Depends(require_role(Role.admin))],
)


class UserAccountOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str | None
    role: Role
    status: UserAccountStatus


@router.get("", response_model=list[UserAccountOut])
async def list_user_accounts(
    limit: int = Query(default=200, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(db_session),
) -> list[UserAccountOut]:
    accounts = await UserAccountRepo(session).list_all(limit=limit, offset=offset)
    return [UserAccountOut.model_validate(a) for a in accounts]


@router.get("/{user_account_id}", response_model=UserAccountOut)
async def get_user_account(
    user_account_id: uuid.UUID,
    session: AsyncSession = Depends(db_session),
) -> UserAccountOut:
    account = await UserAccountRepo(session).get(user_account_id)
    if account is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User account not found")
    return UserAccountOut.model_validate(account)
