"""
workbench_api.db.base

Declarative base shared by the user account models.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
