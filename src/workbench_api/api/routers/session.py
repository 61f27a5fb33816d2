from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from workbench_api.auth.deps import authenticate
from workbench_api.auth.models import Principal, PrincipalKind, Role

router = APIRouter(prefix="/api", tags=["session"])


class SessionResponse(BaseModel):
    subject: str
    kind: PrincipalKind
    roles: list[Role]


@router.get("/session", response_model=SessionResponse)
async def current_session(principal: Principal = Depends(authenticate)) -> SessionResponse:
    return SessionResponse(
        subject=principal.subject,
        kind=principal.kind,
        roles=sorted(principal.roles),
    )
