"""
opencafe.services.admins

Admin account lifecycle.

Responsibilities:
- Login, registration by a head, renaming, deletion and listing.
- Token rotation through `AuthCore.revoke`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.auth.core import AuthCore
from opencafe.auth.models import AdminIdentity, Role
from opencafe.auth.policy import IsHead, SelfOrHead
from opencafe.auth.resolver import ensure_token
from opencafe.db.repositories.admins import AdminRepo
from opencafe.db.repositories.points import PointRepo
from opencafe.errors import NotFound, Unauthorized
from opencafe.observability.logging import get_logger
from opencafe.services.common import require_fields

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class NewAdmin:
    admin: AdminIdentity
    # Shown to the registering head exactly once.
    token: str


class AdminService:
    def __init__(self, *, session: AsyncSession, auth: AuthCore) -> None:
        self._session = session
        self._auth = auth
        self._admins = AdminRepo(session)
        self._points = PointRepo(session)

    async def _resolve_pair(
        self, token: str, target_token: str
    ) -> tuple[AdminIdentity, AdminIdentity]:
        caller = await self._auth.resolve_token(token)
        target = await self._auth.resolve_token(target_token)
        if caller is None or target is None:
            raise NotFound("Token or target token holder was not found.")
        return caller, target

    async def login(self, *, token: str) -> AdminIdentity:
        ensure_token(token)
        admin = await self._auth.resolve_token(token)
        if admin is None:
            raise Unauthorized("Token does not belong to any admin.")
        return admin

    async def register(self, *, token: str, name: str) -> NewAdmin:
        require_fields(token, name)
        await self._auth.require(token, IsHead())

        issued = self._auth.issue_token()
        record = await self._admins.create(
            name=name.strip(), roles=[Role.general.value], bound_to=None, token=issued.ciphertext
        )
        await self._session.commit()
        log.info("admin.registered", admin_id=str(record.id))
        return NewAdmin(admin=AdminIdentity.from_record(record), token=issued.plaintext)

    async def change_name(self, *, token: str, target_token: str, name: str) -> AdminIdentity:
        require_fields(token, target_token, name)
        caller, target = await self._resolve_pair(token, target_token)
        if not self._auth.authorize(caller, SelfOrHead(target.id)):
            raise Unauthorized("Only the admin themself or a head can rename an admin.")

        await self._admins.set_name(target.id, name.strip())
        await self._session.commit()
        log.info("admin.renamed", admin_id=str(target.id), by=str(caller.id))
        record = await self._admins.get(target.id)
        return AdminIdentity.from_record(record) if record is not None else target

    async def delete(self, *, token: str, target_token: str) -> AdminIdentity:
        require_fields(token, target_token)
        caller, target = await self._resolve_pair(token, target_token)
        if not self._auth.is_head(caller):
            raise Unauthorized("Only a head admin can delete admins.")

        await self._admins.delete(target.id)
        if target.bound_to is not None:
            point = await self._points.get(target.bound_to)
            if point is not None:
                staff = [s for s in point.supervisors if s != str(target.id)]
                await self._points.patch(point, supervisors=staff)
        await self._session.commit()
        log.info("admin.deleted", admin_id=str(target.id), by=str(caller.id))
        return target

    async def get_all(self, *, token: str) -> list[dict[str, Any]]:
        require_fields(token)
        caller = await self._auth.resolve_token(token)
        if caller is None:
            raise NotFound("Token does not belong to any admin.")
        if not self._auth.is_head(caller):
            raise Unauthorized("Only a head admin can list admins.")
        return [a.public() for a in await self._admins.list_identities()]

    async def revoke(self, *, token: str, target_token: str) -> NewAdmin:
        require_fields(token, target_token)
        caller, target = await self._resolve_pair(token, target_token)
        if not self._auth.authorize(caller, SelfOrHead(target.id)):
            raise Unauthorized("Only the admin themself or a head can revoke a token.")

        issued = await self._auth.revoke(target)
        await self._session.commit()
        return NewAdmin(admin=target, token=issued.plaintext)


# --- Module Notes -----------------------------------------------------------
# Concurrent register/rename/delete calls are not serialized; last write wins.
