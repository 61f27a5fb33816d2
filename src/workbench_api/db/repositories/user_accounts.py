from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workbench_api.auth.models import Role
from workbench_api.db.models import UserAccount, UserAccountStatus


class UserAccountRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        username: str,
        role: Role,
        email: str | None = None,
        status: UserAccountStatus = UserAccountStatus.active,
    ) -> UserAccount:
        account = UserAccount(username=username, email=email, role=role, status=status)
        self._session.add(account)
        await self._session.flush()
        return account

    async def get(self, user_account_id: uuid.UUID) -> UserAccount | None:
        return await self._session.get(UserAccount, user_account_id)

    async def get_by_username(self, username: str) -> UserAccount | None:
        stmt = select(UserAccount).where(UserAccount.username == username)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_all(self, *, limit: int = 200, offset: int = 0) -> list[UserAccount]:
        stmt = select(UserAccount).order_by(UserAccount.username).limit(limit).offset(offset)
        return list((await self._session.execute(stmt)).scalars().all())
