"""
opencafe.auth.deps

FastAPI dependency functions for admin authentication.

Responsibilities:
- Extract the opaque admin token from an `Authorization: Bearer` header.
"""

from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from opencafe.errors import Unauthorized

_bearer = HTTPBearer(auto_error=False)


def bearer_token(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    # Tokens are opaque; resolution and permission checks happen in AuthCore.
    if creds is None or not creds.credentials:
        raise Unauthorized("Missing bearer token")
    return creds.credentials

