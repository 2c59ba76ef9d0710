"""
opencafe.auth.core

AuthCore facade used by every handler.

Responsibilities:
- Resolve plaintext tokens into admins (via a pluggable `TokenResolver`).
- Gate operations on capabilities.
- Issue new tokens and revoke existing ones.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Protocol

from opencafe.auth.crypto import CollectionCipher
from opencafe.auth.models import AdminIdentity
from opencafe.auth.policy import Capability, authorize, is_head
from opencafe.auth.resolver import ScanTokenResolver, TokenResolver
from opencafe.auth.tokens import IssuedToken, issue_token
from opencafe.errors import Unauthorized
from opencafe.observability.logging import get_logger

log = get_logger(__name__)


class AdminStore(Protocol):
    async def list_identities(self) -> Sequence[AdminIdentity]: ...

    async def set_token(self, admin_id: uuid.UUID, ciphertext: str) -> bool: ...


class AuthCore:
    """
    Stateless between calls: no cache, no locks. Tokens never expire; they
    stop resolving only when the record is deleted or `revoke` rotates them.
    """

    def __init__(
        self,
        *,
        store: AdminStore,
        cipher: CollectionCipher,
        timeout_seconds: float,
        resolver: TokenResolver | None = None,
    ) -> None:
        self._store = store
        self._cipher = cipher
        self._resolver = resolver or ScanTokenResolver(
            source=store, cipher=cipher, timeout_seconds=timeout_seconds
        )

    async def resolve_token(self, plaintext: str) -> AdminIdentity | None:
        return await self._resolver.resolve(plaintext)

    async def require_admin(self, plaintext: str) -> AdminIdentity:
        admin = await self.resolve_token(plaintext)
        if admin is None:
            raise Unauthorized("Token does not belong to any admin.")
        return admin

    async def require(self, plaintext: str, capability: Capability) -> AdminIdentity:
        admin = await self.require_admin(plaintext)
        if not authorize(admin, capability):
            log.info("auth.denied", admin_id=str(admin.id), capability=type(capability).__name__)
            raise Unauthorized("Insufficient permissions.")
        return admin

    is_head = staticmethod(is_head)
    authorize = staticmethod(authorize)

    def issue_token(self) -> IssuedToken:
        return issue_token(self._cipher)

    async def revoke(self, admin: AdminIdentity) -> IssuedToken:
        # Rotation: the old plaintext stops resolving; the caller hands out the new one.
        issued = self.issue_token()
        await self._store.set_token(admin.id, issued.ciphertext)
        log.info("auth.token_revoked", admin_id=str(admin.id))
        return issued


# --- Module Notes -----------------------------------------------------------
# `revoke` is the only invalidation path; there is no expiry or revocation list.
