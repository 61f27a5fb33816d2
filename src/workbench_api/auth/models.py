"""
workbench_api.auth.models

Auth domain models.

Responsibilities:
- Define the closed set of roles checked by the authorization gate.
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Literal


class Role(enum.StrEnum):
    # User roles (session-derived principals).
    admin = "admin"
    editor = "editor"
    visitor = "visitor"
    # Service roles (bearer-token principals).
    read_only = "read-only"
    collection_manager = "collection-manager"


PrincipalKind = Literal["service", "user"]


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity.
    """

    subject: str
    kind: PrincipalKind
    roles: frozenset[Role]

    def has_any_role(self, roles: frozenset[Role]) -> bool:
        return not self.roles.isdisjoint(roles)


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; it is used across API, services, and client boundaries.
