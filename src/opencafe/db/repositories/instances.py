from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.db.models import Instance


class InstanceRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def live(self) -> Instance | None:
        stmt = (
            select(Instance)
            .where(Instance.is_backup.is_(False))
            .order_by(desc(Instance.created_at))
            .limit(1)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get(self, instance_id: uuid.UUID) -> Instance | None:
        return await self._session.get(Instance, instance_id)

    async def list_backups(self) -> list[Instance]:
        stmt = (
            select(Instance)
            .where(Instance.is_backup.is_(True))
            .order_by(desc(Instance.created_at))
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def insert(self, *, is_backup: bool, content: dict[str, Any]) -> Instance:
        instance = Instance(
            is_backup=is_backup,
            cultures=list(content.get("cultures") or []),
            logo=content.get("logo"),
            name=dict(content.get("name") or {}),
            description=dict(content.get("description") or {}),
            pics=list(content.get("pics") or []),
        )
        self._session.add(instance)
        await self._session.flush()
        return instance

    async def delete_live(self) -> int:
        res = await self._session.execute(delete(Instance).where(Instance.is_backup.is_(False)))
        return res.rowcount or 0

    async def delete(self, instance_id: uuid.UUID) -> bool:
        res = await self._session.execute(delete(Instance).where(Instance.id == instance_id))
        return bool(res.rowcount)
