"""
workbench_api.auth.service

Apikey challenge/response handshake for service accounts.

Responsibilities:
- Issue a one-time challenge (nonce) to a configured service.
- Redeem the challenge: check the caller's HMAC proof and mint a bearer token.

Handshake (client side):
1. POST the service name, receive a challenge string.
2. Compute hex(HMAC-SHA256(key=service secret, msg=challenge)).
3. POST the digest, receive `{access_token, expires_in}`.
"""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from workbench_api.auth.cache import ChallengeCache
from workbench_api.auth.errors import ChallengeNotFound, InvalidChallengeHash, ServiceNotFound
from workbench_api.auth.nonce import generate_nonce
from workbench_api.auth.tokens import IssuedToken, issue_service_token
from workbench_api.observability.logging import get_logger
from workbench_api.settings import ApikeyAuthnSettings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PendingChallenge:
    nonce: str
    secret: str


def compute_challenge_hash(*, secret: str, challenge: str) -> str:
    return hmac.new(secret.encode("utf-8"), challenge.encode("utf-8"), hashlib.sha256).hexdigest()


class ChallengeService:
    """
    Sole owner of the challenge cache entries.

    A new challenge for a service replaces any unredeemed one. A redemption
    attempt consumes the challenge before the proof is checked, so each
    challenge allows exactly one guess.
    """

    def __init__(
        self,
        *,
        cfg: ApikeyAuthnSettings,
        cache: ChallengeCache[PendingChallenge],
        nonce_factory: Callable[[], str] = generate_nonce,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._cfg = cfg
        self._cache = cache
        self._nonce_factory = nonce_factory
        self._clock = clock

    def create_challenge(self, service_name: str) -> str:
        account = self._cfg.find_service(service_name)
        if account is None:
            log.info("apikey_challenge_rejected", service=service_name, reason="service_not_found")
            raise ServiceNotFound(service_name)

        nonce = self._nonce_factory()
        self._cache.put(
            service_name,
            PendingChallenge(nonce=nonce, secret=account.secret),
            self._cfg.challenge_ttl,
        )
        log.info("apikey_challenge_issued", service=service_name, ttl=self._cfg.challenge_ttl)
        return nonce

    def redeem_challenge(self, service_name: str, challenge_hash: str) -> IssuedToken:
        # Consume first: a failed attempt below leaves nothing to retry against.
        pending = self._cache.take(service_name)
        if pending is None:
            log.info("apikey_token_rejected", service=service_name, reason="challenge_not_found")
            raise ChallengeNotFound(service_name)

        expected = compute_challenge_hash(secret=pending.secret, challenge=pending.nonce)
        if not hmac.compare_digest(expected.encode("utf-8"), challenge_hash.encode("utf-8")):
            log.info("apikey_token_rejected", service=service_name, reason="invalid_challenge_hash")
            raise InvalidChallengeHash(service_name)

        issued = issue_service_token(
            secret=self._cfg.secret,
            service_name=service_name,
            timeout=self._cfg.token_timeout,
            now=self._clock() if self._clock else None,
        )
        log.info("apikey_token_issued", service=service_name, expires_in=issued.expires_in)
        return issued


# --- Module Notes -----------------------------------------------------------
# No retries happen here. A caller that fails step 3 (including on a transient
# network error) must start over with a new challenge.
