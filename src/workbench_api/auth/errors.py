"""
workbench_api.auth.errors

Exception taxonomy for service authentication.

The API layer converts these into HTTP responses; nothing in the auth
package retries on any of them.
"""

from __future__ import annotations


class AuthnError(Exception):
    pass


class ServiceNotFound(AuthnError):
    def __init__(self, service_name: str) -> None:
        super().__init__("Service not found")
        self.service_name = service_name


class ChallengeNotFound(AuthnError):
    def __init__(self, service_name: str) -> None:
        super().__init__("Challenge not found")
        self.service_name = service_name


class InvalidChallengeHash(AuthnError):
    def __init__(self, service_name: str) -> None:
        super().__init__("Invalid challenge hash")
        self.service_name = service_name


class EntropySourceUnavailable(AuthnError):
    pass


class TokenVerificationError(AuthnError):
    pass


class InvalidSignature(TokenVerificationError):
    pass


class TokenExpired(TokenVerificationError):
    pass
