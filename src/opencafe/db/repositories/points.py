from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.db.models import Point


class PointRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, point_id: int, address: str) -> Point:
        point = Point(
            point_id=point_id,
            address=address,
            supervisors=[],
            pics=[],
            unavailable=[],
            reviews=[],
            active_issues=[],
        )
        self._session.add(point)
        await self._session.flush()
        return point

    async def get(self, point_id: int) -> Point | None:
        stmt = select(Point).where(Point.point_id == point_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_all(self) -> list[Point]:
        return list((await self._session.execute(select(Point))).scalars().all())

    async def patch(self, point: Point, **fields: Any) -> Point:
        for key, value in fields.items():
            setattr(point, key, value)
        await self._session.flush()
        return point

    async def delete(self, point_id: int) -> bool:
        res = await self._session.execute(delete(Point).where(Point.point_id == point_id))
        return bool(res.rowcount)
