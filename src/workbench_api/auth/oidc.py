"""
workbench_api.auth.oidc

Validation of bearer tokens issued by an external OIDC identity provider
(client credentials grant).

Responsibilities:
- Resolve the signing key from the provider's JWKS endpoint.
- Enforce issuer/audience/expiry and map the client id onto configured roles.
"""

from __future__ import annotations

from typing import Any, Protocol

import jwt
from jwt import ExpiredSignatureError, PyJWKClient, PyJWTError

from workbench_api.auth.errors import InvalidSignature, ServiceNotFound, TokenExpired
from workbench_api.auth.models import Principal
from workbench_api.settings import OidcClientCredentialsSettings


class SigningKeySource(Protocol):
    def get_signing_key_from_jwt(self, token: str) -> Any: ...


class OidcTokenVerifier:
    def __init__(
        self,
        cfg: OidcClientCredentialsSettings,
        *,
        keys: SigningKeySource | None = None,
    ) -> None:
        self._cfg = cfg
        # PyJWKClient caches the key set; it only fetches on an unknown `kid`.
        self._keys = keys or PyJWKClient(cfg.jwks_uri, cache_keys=True)

    def verify(self, token: str) -> Principal:
        try:
            signing_key = self._keys.get_signing_key_from_jwt(token)
            claims: dict[str, Any] = jwt.decode(
                token,
                signing_key.key,
                algorithms=list(self._cfg.algorithms),
                issuer=self._cfg.issuer,
                audience=self._cfg.audience,
                options={"require": ["exp", "iss", "aud"]},
            )
        except ExpiredSignatureError as e:
            raise TokenExpired(str(e)) from e
        except PyJWTError as e:
            # Includes JWKS failures (empty key set, fetch errors, unknown kid).
            raise InvalidSignature(str(e)) from e

        client_id = str(claims.get(self._cfg.client_id_claim, ""))
        client = self._cfg.find_client(client_id)
        if client is None:
            raise ServiceNotFound(client_id)
        return Principal(subject=client.client_id, kind="service", roles=frozenset(client.roles))
