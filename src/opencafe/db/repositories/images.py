from __future__ import annotations

import uuid

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.db.models import Image


class ImageRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, filename: str, author_id: uuid.UUID, alt: str) -> Image:
        image = Image(filename=filename, author_id=author_id, alt=alt)
        self._session.add(image)
        await self._session.flush()
        return image

    async def get(self, image_id: uuid.UUID) -> Image | None:
        return await self._session.get(Image, image_id)

    async def exists(self, image_id: str) -> bool:
        # Image references travel as strings; anything that isn't a UUID can't exist.
        try:
            parsed = uuid.UUID(str(image_id))
        except ValueError:
            return False
        return await self.get(parsed) is not None

    async def list_all(self) -> list[Image]:
        stmt = select(Image).order_by(desc(Image.uploaded_at))
        return list((await self._session.execute(stmt)).scalars().all())

    async def delete(self, image_id: uuid.UUID) -> bool:
        res = await self._session.execute(delete(Image).where(Image.id == image_id))
        return bool(res.rowcount)
