from __future__ import annotations

import hashlib
import hmac

import pytest

from conftest import SIGNING_SECRET, FakeClock, make_apikey_settings
from workbench_api.auth.cache import ChallengeCache
from workbench_api.auth.errors import (
    ChallengeNotFound,
    EntropySourceUnavailable,
    InvalidChallengeHash,
    InvalidSignature,
    ServiceNotFound,
)
from workbench_api.auth.service import ChallengeService, PendingChallenge, compute_challenge_hash
from workbench_api.auth.tokens import ApikeyTokenVerifier


@pytest.fixture
def cache() -> ChallengeCache[PendingChallenge]:
    return ChallengeCache()


@pytest.fixture
def service(cache: ChallengeCache[PendingChallenge]) -> ChallengeService:
    return ChallengeService(cfg=make_apikey_settings(), cache=cache)


def test_compute_challenge_hash_is_hex_hmac_sha256() -> None:
    expected = hmac.new(b"k1", b"some-nonce", hashlib.sha256).hexdigest()
    assert compute_challenge_hash(secret="k1", challenge="some-nonce") == expected


def test_handshake_issues_verifiable_token(service: ChallengeService) -> None:
    nonce = service.create_challenge("svc-A")
    digest = hmac.new(b"k1", nonce.encode(), hashlib.sha256).hexdigest()

    issued = service.redeem_challenge("svc-A", digest)

    assert issued.expires_in == 300
    principal = ApikeyTokenVerifier(make_apikey_settings()).verify(issued.token)
    assert principal.subject == "svc-A"
    assert principal.kind == "service"


def test_challenges_are_distinct(service: ChallengeService) -> None:
    assert service.create_challenge("svc-A") != service.create_challenge("svc-A")


def test_replayed_proof_fails_with_challenge_not_found(service: ChallengeService) -> None:
    nonce = service.create_challenge("svc-A")
    digest = compute_challenge_hash(secret="k1", challenge=nonce)
    service.redeem_challenge("svc-A", digest)

    with pytest.raises(ChallengeNotFound):
        service.redeem_challenge("svc-A", digest)


def test_wrong_proof_consumes_the_challenge(service: ChallengeService) -> None:
    nonce = service.create_challenge("svc-A")

    with pytest.raises(InvalidChallengeHash):
        service.redeem_challenge("svc-A", "wrong-digest")

    # The correct proof is useless now; a new challenge is required.
    with pytest.raises(ChallengeNotFound):
        service.redeem_challenge("svc-A", compute_challenge_hash(secret="k1", challenge=nonce))


def test_proof_under_another_services_secret_is_rejected(service: ChallengeService) -> None:
    nonce = service.create_challenge("svc-A")
    with pytest.raises(InvalidChallengeHash):
        service.redeem_challenge("svc-A", compute_challenge_hash(secret="k2", challenge=nonce))


def test_redeem_without_challenge(service: ChallengeService) -> None:
    with pytest.raises(ChallengeNotFound):
        service.redeem_challenge("svc-A", "wrong-digest")


def test_unknown_service_creates_no_cache_entry(
    service: ChallengeService, cache: ChallengeCache[PendingChallenge]
) -> None:
    with pytest.raises(ServiceNotFound):
        service.create_challenge("svc-unknown")
    assert len(cache) == 0


def test_service_names_are_case_sensitive(service: ChallengeService) -> None:
    with pytest.raises(ServiceNotFound):
        service.create_challenge("SVC-A")


def test_new_challenge_replaces_unredeemed_one(service: ChallengeService) -> None:
    first = service.create_challenge("svc-A")
    service.create_challenge("svc-A")

    with pytest.raises(InvalidChallengeHash):
        service.redeem_challenge("svc-A", compute_challenge_hash(secret="k1", challenge=first))


def test_expired_challenge_cannot_be_redeemed() -> None:
    clock = FakeClock()
    service = ChallengeService(cfg=make_apikey_settings(), cache=ChallengeCache(clock=clock))
    nonce = service.create_challenge("svc-A")

    clock.now += 61
    with pytest.raises(ChallengeNotFound):
        service.redeem_challenge("svc-A", compute_challenge_hash(secret="k1", challenge=nonce))


def test_entropy_failure_leaves_no_challenge(cache: ChallengeCache[PendingChallenge]) -> None:
    def no_entropy() -> str:
        raise EntropySourceUnavailable("no entropy")

    service = ChallengeService(cfg=make_apikey_settings(), cache=cache, nonce_factory=no_entropy)
    with pytest.raises(EntropySourceUnavailable):
        service.create_challenge("svc-A")
    assert len(cache) == 0


def test_token_is_signed_with_service_wide_secret(service: ChallengeService) -> None:
    nonce = service.create_challenge("svc-A")
    issued = service.redeem_challenge("svc-A", compute_challenge_hash(secret="k1", challenge=nonce))

    other = make_apikey_settings(secret=SIGNING_SECRET + "-rotated")
    with pytest.raises(InvalidSignature):
        ApikeyTokenVerifier(other).verify(issued.token)
