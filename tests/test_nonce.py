from __future__ import annotations

import base64

import pytest

from workbench_api.auth.errors import EntropySourceUnavailable
from workbench_api.auth.nonce import NONCE_BYTES, generate_nonce


def test_nonce_is_48_random_bytes_base64_encoded() -> None:
    nonce = generate_nonce()
    assert len(base64.b64decode(nonce)) == NONCE_BYTES == 48


def test_consecutive_nonces_differ() -> None:
    nonces = {generate_nonce() for _ in range(100)}
    assert len(nonces) == 100


def test_unavailable_random_source_is_fatal() -> None:
    def broken(_: int) -> bytes:
        raise OSError("no entropy")

    with pytest.raises(EntropySourceUnavailable):
        generate_nonce(broken)


def test_short_read_is_rejected() -> None:
    with pytest.raises(EntropySourceUnavailable):
        generate_nonce(lambda n: b"\x00" * (n - 1))
