"""
workbench_api.auth.nonce

Challenge nonce generation.
"""

from __future__ import annotations

import base64
import secrets
from collections.abc import Callable

from workbench_api.auth.errors import EntropySourceUnavailable

NONCE_BYTES = 48


def generate_nonce(randbytes: Callable[[int], bytes] = secrets.token_bytes) -> str:
    """
    Return 48 bytes from the OS CSPRNG, base64 encoded for transport.

    `randbytes` is replaceable for tests only; there is no fallback source.
    """

    try:
        raw = randbytes(NONCE_BYTES)
    except OSError as e:
        raise EntropySourceUnavailable("Secure random source unavailable") from e
    if len(raw) != NONCE_BYTES:
        raise EntropySourceUnavailable("Secure random source returned a short read")
    return base64.b64encode(raw).decode("ascii")
