"""
workbench_api.auth.bearer

Bearer token verification across the enabled bearer strategies.
"""

from __future__ import annotations

from workbench_api.auth.errors import InvalidSignature
from workbench_api.auth.models import Principal
from workbench_api.auth.oidc import OidcTokenVerifier
from workbench_api.auth.tokens import ApikeyTokenVerifier
from workbench_api.settings import Settings


class BearerTokenVerifier:
    """
    Apikey tokens are tried first; a token that is not one of ours (wrong
    signature or algorithm) falls through to the external IdP when enabled.
    An expired apikey token is rejected outright.
    """

    def __init__(
        self,
        *,
        apikey: ApikeyTokenVerifier | None = None,
        oidc: OidcTokenVerifier | None = None,
    ) -> None:
        self._apikey = apikey
        self._oidc = oidc

    def verify(self, token: str) -> Principal:
        if not token:
            raise InvalidSignature("Empty bearer token")
        if self._apikey is not None:
            try:
                return self._apikey.verify(token)
            except InvalidSignature:
                if self._oidc is None:
                    raise
        if self._oidc is not None:
            return self._oidc.verify(token)
        raise InvalidSignature("No bearer strategy enabled")


def build_bearer_verifier(settings: Settings) -> BearerTokenVerifier:
    apikey_cfg = settings.service_authn_apikey
    oidc_cfg = settings.service_authn_oidc
    return BearerTokenVerifier(
        apikey=ApikeyTokenVerifier(apikey_cfg) if apikey_cfg.enable else None,
        oidc=OidcTokenVerifier(oidc_cfg) if oidc_cfg.enable else None,
    )
