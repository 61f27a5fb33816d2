"""
workbench_api.db.models

Persistence schema for session-authenticated users.

Responsibilities:
- Define `UserAccount`, the record a session cookie points at. Its role feeds
  the `Principal` built for session requests.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import Enum, String, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from workbench_api.auth.models import Role
from workbench_api.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps for simplicity; production systems may use tz-aware types.
    return datetime.utcnow()


class UserAccountStatus(enum.StrEnum):
    # Only active accounts may authenticate.
    pending = "pending"
    active = "active"
    inactive = "inactive"


class UserAccount(Base):
    __tablename__ = "user_accounts"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    username: Mapped[str] = mapped_column(String(256), nullable=False, unique=True, index=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)

    role: Mapped[Role] = mapped_column(Enum(Role), nullable=False, default=Role.visitor)
    status: Mapped[UserAccountStatus] = mapped_column(
        Enum(UserAccountStatus), nullable=False, default=UserAccountStatus.pending
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


# --- Module Notes -----------------------------------------------------------
# Registration and profile management live with the interactive login
# subsystem; this service only reads accounts (and creates them in dev).
