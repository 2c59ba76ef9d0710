"""
opencafe.db.repositories.admins

Repository for `Admin` records.

Responsibilities:
- Provide the admin list in insertion order (token scans depend on it).
- Apply the few mutations admins undergo: rename, rebind, token rotation, delete.
"""

from __future__ import annotations

import uuid

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.auth.models import AdminIdentity
from opencafe.db.models import Admin


class AdminRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        name: str,
        roles: list[str],
        bound_to: int | None,
        token: str,
    ) -> Admin:
        admin = Admin(name=name, roles=roles, bound_to=bound_to, token=token)
        self._session.add(admin)
        await self._session.flush()
        return admin

    async def get(self, admin_id: uuid.UUID) -> Admin | None:
        return await self._session.get(Admin, admin_id)

    async def list_all(self) -> list[Admin]:
        stmt = select(Admin).order_by(Admin.created_at)
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_identities(self) -> list[AdminIdentity]:
        return [AdminIdentity.from_record(a) for a in await self.list_all()]

    async def count(self) -> int:
        return int((await self._session.execute(select(func.count(Admin.id)))).scalar_one())

    async def set_name(self, admin_id: uuid.UUID, name: str) -> bool:
        admin = await self._session.get(Admin, admin_id)
        if admin is None:
            return False
        admin.name = name
        await self._session.flush()
        return True

    async def set_bound_to(self, admin_id: uuid.UUID, point_id: int | None) -> bool:
        admin = await self._session.get(Admin, admin_id)
        if admin is None:
            return False
        admin.bound_to = point_id
        await self._session.flush()
        return True

    async def set_token(self, admin_id: uuid.UUID, ciphertext: str) -> bool:
        admin = await self._session.get(Admin, admin_id)
        if admin is None:
            return False
        admin.token = ciphertext
        await self._session.flush()
        return True

    async def unbind_point(self, point_id: int) -> int:
        stmt = update(Admin).where(Admin.bound_to == point_id).values(bound_to=None)
        res = await self._session.execute(stmt)
        return res.rowcount or 0

    async def delete(self, admin_id: uuid.UUID) -> bool:
        res = await self._session.execute(delete(Admin).where(Admin.id == admin_id))
        return bool(res.rowcount)


# --- Module Notes -----------------------------------------------------------
# There is no index on the token column: ciphertexts are randomized, so lookups
# go through `auth.resolver.ScanTokenResolver`.
