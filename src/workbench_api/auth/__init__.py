"""
workbench_api.auth

Authentication/authorization package.

Responsibilities:
- Apikey challenge/response handshake and bearer token issuing.
- Bearer token validation (apikey tokens and external IdP tokens).
- FastAPI auth dependencies (Principal + role gate).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only `auth.deps` depends on FastAPI; the rest is plain Python and can be
# exercised without an application.
