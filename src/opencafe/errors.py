"""
opencafe.errors

Domain error taxonomy shared by services and the API layer.

Responsibilities:
- Give every failure mode a type that maps onto one HTTP status.
- Keep HTTP concerns out of services (mapping lives in `api.app`).
"""

from __future__ import annotations


class OpenCafeError(Exception):
    status_code: int = 500

    def __init__(self, detail: str = "", *, payload: dict | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.payload = payload


class InvalidArgument(OpenCafeError):
    # Missing/empty required field or a malformed value.
    status_code = 400


class Unauthorized(OpenCafeError):
    # Token resolves to no admin, or the admin lacks the capability.
    status_code = 401


class NotFound(OpenCafeError):
    status_code = 404


class Conflict(OpenCafeError):
    status_code = 409


class StoreTimeout(OpenCafeError):
    # Fatal: the store round-trip exceeded `store_timeout_seconds`.
    status_code = 503


class EncryptionKeyMissing(OpenCafeError):
    # Fatal: no key configured for a collection.
    status_code = 500


# --- Module Notes -----------------------------------------------------------
# None of these are retried automatically; fatal ones propagate to the caller.
