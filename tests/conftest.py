"""
tests.conftest

Shared fixtures: test settings, an app with its lifespan running, and an
httpx client bound to it through ASGITransport.
"""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx
import pytest_asyncio
from fastapi import FastAPI

from workbench_api.api.app import create_app
from workbench_api.auth.models import Role
from workbench_api.settings import ApikeyAuthnSettings, ServiceAccount, Settings

SIGNING_SECRET = "test-token-signing-secret-0123456789abcdef"


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_apikey_settings(**overrides: Any) -> ApikeyAuthnSettings:
    values: dict[str, Any] = {
        "enable": True,
        "secret": SIGNING_SECRET,
        "token_timeout": 300,
        "challenge_ttl": 60,
        "service_accounts": (
            ServiceAccount(name="svc-A", secret="k1", roles=(Role.read_only,)),
            ServiceAccount(name="svc-admin", secret="k2", roles=(Role.admin,)),
        ),
    }
    values.update(overrides)
    return ApikeyAuthnSettings(**values)


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "env": "test",
        "database_url": "sqlite+aiosqlite:///:memory:",
        "service_authn_apikey": make_apikey_settings(),
    }
    values.update(overrides)
    return Settings(**values)


async def handshake(client: httpx.AsyncClient, service_name: str, secret: str) -> dict[str, Any]:
    r = await client.post(
        "/api/authn/service/apikey-challenge", json={"service_name": service_name}
    )
    assert r.status_code == 200
    nonce = r.json()["challenge"]
    digest = hmac.new(secret.encode(), nonce.encode(), hashlib.sha256).hexdigest()
    r = await client.post(
        "/api/authn/service/apikey-token",
        json={"service_name": service_name, "challenge_hash": digest},
    )
    assert r.status_code == 200
    return r.json()


@asynccontextmanager
async def running(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    # httpx ASGITransport does not manage lifespan; run it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest_asyncio.fixture
async def app() -> FastAPI:
    return create_app(settings=make_settings())


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    async with running(app) as c:
        yield c
