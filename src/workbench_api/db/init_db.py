"""
workbench_api.db.init_db

Table bootstrap for dev/test environments.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from workbench_api.db import models  # noqa: F401  # registers tables on Base.metadata
from workbench_api.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Create missing tables. Production databases are provisioned by the
    login subsystem that owns user accounts.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
