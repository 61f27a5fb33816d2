"""
workbench_api.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Describe the configured service accounts and authentication strategies.
- Hide secrets from repr/logging (token signing secret, service secrets).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from workbench_api.auth.models import Role


class ServiceAccount(BaseModel):
    """A named service allowed to authenticate with the apikey challenge."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    secret: str = Field(min_length=1, repr=False)
    roles: tuple[Role, ...] = ()


class ApikeyAuthnSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    enable: bool = False
    # Signs the bearer tokens minted after a redeemed challenge.
    secret: str = Field(default="dev-token-secret-change-me", repr=False)
    token_timeout: int = Field(default=300, ge=1)
    challenge_ttl: int = Field(default=60, ge=1)
    service_accounts: tuple[ServiceAccount, ...] = ()

    def find_service(self, name: str) -> ServiceAccount | None:
        # Exact, case-sensitive match.
        for account in self.service_accounts:
            if account.name == name:
                return account
        return None


class OidcClient(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_id: str = Field(min_length=1)
    roles: tuple[Role, ...] = ()


class OidcClientCredentialsSettings(BaseModel):
    """Bearer tokens issued by an external identity provider (client credentials grant)."""

    model_config = ConfigDict(frozen=True)

    enable: bool = False
    issuer: str = ""
    audience: str = ""
    jwks_uri: str = ""
    algorithms: tuple[str, ...] = ("RS256",)
    client_id_claim: str = "client_id"
    clients: tuple[OidcClient, ...] = ()

    def find_client(self, client_id: str) -> OidcClient | None:
        for client in self.clients:
            if client.client_id == client_id:
                return client
        return None


class Settings(BaseSettings):
    """
    - Strict env-driven configuration
    - Defaults safe for local dev (no service accounts, bearer strategies off)
    - Built once at process start and passed by reference; never mutated
    """

    model_config = SettingsConfigDict(
        env_prefix="WB_",
        env_nested_delimiter="__",
        case_sensitive=False,
        frozen=True,
    )

    # Environment controls toggle behavior like auto-init DB tables and dev login.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "workbench-rest-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Session cookie set by the (external) interactive login strategies.
    session_secret: str = Field(default="dev-session-secret-change-me", repr=False)
    session_cookie: str = "workbench.sid"

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./workbench.db"

    # Service authentication strategies
    service_authn_apikey: ApikeyAuthnSettings = Field(default_factory=ApikeyAuthnSettings)
    service_authn_oidc: OidcClientCredentialsSettings = Field(
        default_factory=OidcClientCredentialsSettings
    )

    @property
    def bearer_enabled(self) -> bool:
        return self.service_authn_apikey.enable or self.service_authn_oidc.enable


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Service accounts are supplied as JSON, e.g.
# WB_SERVICE_AUTHN_APIKEY__SERVICE_ACCOUNTS='[{"name": "svc-A", "secret": "k1"}]'
