from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.db.models import LocalizedString


class StringRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(
        self, *, culture: str, content: str, si: str, outdated: bool = False
    ) -> LocalizedString:
        s = LocalizedString(culture=culture, content=content, si=si, outdated=outdated)
        self._session.add(s)
        await self._session.flush()
        return s

    async def get_by_si(self, si: str) -> list[LocalizedString]:
        stmt = select(LocalizedString).where(LocalizedString.si == si)
        return list((await self._session.execute(stmt)).scalars().all())

    async def get(self, si: str, culture: str) -> LocalizedString | None:
        stmt = select(LocalizedString).where(
            LocalizedString.si == si, LocalizedString.culture == culture
        )
        return (await self._session.execute(stmt)).scalars().first()

    async def mark_outdated_except(self, si: str, culture: str) -> int:
        stmt = (
            update(LocalizedString)
            .where(LocalizedString.si == si, LocalizedString.culture != culture)
            .values(outdated=True)
        )
        res = await self._session.execute(stmt)
        return res.rowcount or 0
