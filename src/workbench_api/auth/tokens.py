"""
workbench_api.auth.tokens

Bearer token issuing and validation for apikey-authenticated services.

Responsibilities:
- Issue short-lived HS256 JWTs after a challenge has been redeemed.
- Validate presented tokens (signature + expiry) and map them to a `Principal`.

Note:
- Tokens are self-contained and not stored anywhere; they cannot be revoked
  before `exp`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import ExpiredSignatureError, InvalidTokenError

from workbench_api.auth.errors import InvalidSignature, ServiceNotFound, TokenExpired
from workbench_api.auth.models import Principal
from workbench_api.settings import ApikeyAuthnSettings

ALGORITHM = "HS256"
SERVICE_NAME_CLAIM = "serviceName"


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    expires_in: int


def issue_service_token(
    *,
    secret: str,
    service_name: str,
    timeout: int,
    now: datetime | None = None,
) -> IssuedToken:
    now = now or datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        SERVICE_NAME_CLAIM: service_name,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=timeout)).timestamp()),
    }
    return IssuedToken(token=jwt.encode(payload, secret, algorithm=ALGORITHM), expires_in=timeout)


def decode_service_token(*, secret: str, token: str) -> dict[str, Any]:
    try:
        # Only HS256 is accepted; `alg: none` and key-confusion tokens fail here.
        return jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"require": ["exp", SERVICE_NAME_CLAIM]},
        )
    except ExpiredSignatureError as e:
        raise TokenExpired(str(e)) from e
    except InvalidTokenError as e:
        raise InvalidSignature(str(e)) from e


class ApikeyTokenVerifier:
    """Stateless check of tokens minted by `ChallengeService`."""

    def __init__(self, cfg: ApikeyAuthnSettings) -> None:
        self._cfg = cfg

    def verify(self, token: str) -> Principal:
        claims = decode_service_token(secret=self._cfg.secret, token=token)
        service_name = str(claims[SERVICE_NAME_CLAIM])
        account = self._cfg.find_service(service_name)
        if account is None:
            # Signed by us, but the account has since been removed from config.
            raise ServiceNotFound(service_name)
        return Principal(subject=account.name, kind="service", roles=frozenset(account.roles))


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `auth.service.ChallengeService`; verification by
# `auth.deps.authenticate` on every bearer request.
