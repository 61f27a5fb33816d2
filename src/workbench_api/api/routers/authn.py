"""
workbench_api.api.routers.authn

Service authentication endpoints (apikey challenge/response).

Responsibilities:
- Issue challenges to configured service accounts.
- Exchange a challenge proof for a bearer token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from workbench_api.api.deps import challenge_service_dep, settings_dep
from workbench_api.auth.errors import ChallengeNotFound, InvalidChallengeHash, ServiceNotFound
from workbench_api.auth.service import ChallengeService
from workbench_api.settings import Settings

router = APIRouter(prefix="/api/authn/service", tags=["authn"])


class ChallengeRequest(BaseModel):
    service_name: str = Field(min_length=1, max_length=256)


class ChallengeResponse(BaseModel):
    challenge: str


class TokenRequest(BaseModel):
    service_name: str = Field(min_length=1, max_length=256)
    challenge_hash: str = Field(min_length=1, max_length=256)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


def _require_apikey_enabled(settings: Settings = Depends(settings_dep)) -> None:
    if not settings.service_authn_apikey.enable:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")


@router.post(
    "/apikey-challenge",
    response_model=ChallengeResponse,
    dependencies=[Depends(_require_apikey_enabled)],
)
async def create_challenge(
    body: ChallengeRequest,
    service: ChallengeService = Depends(challenge_service_dep),
) -> ChallengeResponse:
    try:
        challenge = service.create_challenge(body.service_name)
    except ServiceNotFound as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=str(e)) from e
    return ChallengeResponse(challenge=challenge)


@router.post(
    "/apikey-token",
    response_model=TokenResponse,
    dependencies=[Depends(_require_apikey_enabled)],
)
async def create_token(
    body: TokenRequest,
    service: ChallengeService = Depends(challenge_service_dep),
) -> TokenResponse:
    try:
        issued = service.redeem_challenge(body.service_name, body.challenge_hash)
    except (ChallengeNotFound, InvalidChallengeHash) as e:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return TokenResponse(access_token=issued.token, expires_in=issued.expires_in)


# --- Module Notes -----------------------------------------------------------
# EntropySourceUnavailable is left to the app-level handler (500).
