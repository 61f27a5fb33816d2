"""
workbench_api.clients.service_auth

HTTP client side of the apikey challenge/response handshake.

Responsibilities:
- Request a challenge, prove possession of the shared secret, obtain a token.
- Attach the bearer token to outgoing requests, re-authenticating after expiry.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from workbench_api.auth.service import compute_challenge_hash

CHALLENGE_PATH = "/api/authn/service/apikey-challenge"
TOKEN_PATH = "/api/authn/service/apikey-token"


@dataclass(frozen=True, slots=True)
class ServiceCredentials:
    service_name: str
    secret: str = field(repr=False)


class ServiceAuthClient:
    """
    Thin wrapper around an `httpx.AsyncClient` for calling the API as a service.

    A failed handshake is not retried here; `httpx.HTTPStatusError` reaches
    the caller, who decides whether to start over.
    """

    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        credentials: ServiceCredentials,
        clock: Callable[[], float] = time.monotonic,
        refresh_margin: float = 5.0,
    ) -> None:
        self._http = http
        self._credentials = credentials
        self._clock = clock
        self._refresh_margin = refresh_margin
        self._token: str | None = None
        self._token_deadline = 0.0

    async def login(self) -> str:
        name = self._credentials.service_name
        r = await self._http.post(CHALLENGE_PATH, json={"service_name": name})
        r.raise_for_status()
        challenge = r.json()["challenge"]

        digest = compute_challenge_hash(secret=self._credentials.secret, challenge=challenge)
        r = await self._http.post(TOKEN_PATH, json={"service_name": name, "challenge_hash": digest})
        r.raise_for_status()
        body = r.json()

        self._token = body["access_token"]
        self._token_deadline = self._clock() + float(body["expires_in"])
        return self._token

    async def _authz(self) -> dict[str, str]:
        if self._token is None or self._clock() >= self._token_deadline - self._refresh_margin:
            await self.login()
        return {"Authorization": f"Bearer {self._token}"}

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = {**kwargs.pop("headers", {}), **(await self._authz())}
        return await self._http.request(method, url, headers=headers, **kwargs)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)
