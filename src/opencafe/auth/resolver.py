"""
opencafe.auth.resolver

Plaintext bearer token -> admin identity.

Responsibilities:
- Define the `TokenResolver` contract so an indexed lookup can replace the scan.
- Implement the scan: load every admin, decrypt each stored token, first match wins.
"""

from __future__ import annotations

import asyncio
import hmac
from collections.abc import Sequence
from typing import Protocol

from opencafe.auth.crypto import CollectionCipher, DecryptionError
from opencafe.auth.models import AdminIdentity
from opencafe.errors import InvalidArgument, StoreTimeout
from opencafe.observability.logging import get_logger

log = get_logger(__name__)


class AdminSource(Protocol):
    async def list_identities(self) -> Sequence[AdminIdentity]:
        """All admins in store iteration (insertion) order."""
        ...


class TokenResolver(Protocol):
    async def resolve(self, plaintext: str) -> AdminIdentity | None: ...


def ensure_token(plaintext: str | None) -> str:
    if plaintext is None or not plaintext.strip():
        raise InvalidArgument("Token cannot be empty.")
    return plaintext


class ScanTokenResolver:
    """
    O(n) decryptions per lookup, n = admin count. Fine for a café roster.
    A record whose ciphertext cannot be decrypted is a non-match, never an error.
    """

    def __init__(
        self,
        *,
        source: AdminSource,
        cipher: CollectionCipher,
        timeout_seconds: float,
    ) -> None:
        self._source = source
        self._cipher = cipher
        self._timeout = timeout_seconds

    async def resolve(self, plaintext: str) -> AdminIdentity | None:
        wanted = ensure_token(plaintext).encode()
        try:
            admins = await asyncio.wait_for(self._source.list_identities(), self._timeout)
        except TimeoutError as e:
            log.error("auth.resolve_timeout", timeout_seconds=self._timeout)
            raise StoreTimeout("Admin lookup timed out") from e

        for admin in admins:
            try:
                candidate = self._cipher.decrypt(admin.token_ciphertext)
            except DecryptionError:
                log.warning("auth.token_undecryptable", admin_id=str(admin.id))
                continue
            if hmac.compare_digest(candidate.encode(), wanted):
                return admin
        return None


# --- Module Notes -----------------------------------------------------------
# Token uniqueness is assumed, not enforced. If two records decrypt to the same
# plaintext, the first in iteration order is returned.
