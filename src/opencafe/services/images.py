"""
opencafe.services.images

Image metadata records. The bytes live in an external file store; this service
only tracks what was uploaded, by whom, and under which stored filename.
"""

from __future__ import annotations

import os
import time
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.auth.core import AuthCore
from opencafe.auth.models import Role
from opencafe.auth.policy import AnyOf, HasRole, IsHead
from opencafe.db.models import Image
from opencafe.db.repositories.images import ImageRepo
from opencafe.errors import InvalidArgument, NotFound
from opencafe.services.common import require_fields

ALLOWED_EXTENSIONS = (".jpeg", ".jpg", ".png")
PUBLIC_PREFIX = "fs/img/"


def gen_filename(ext: str, alt: str, *, now: float | None = None) -> str:
    stamp = str(int(now if now is not None else time.time()))[-6:]
    stem = "".join(ch for ch in alt[:10] if ch.isalnum() or ch in "-_") or "img"
    return f"{stem}_{stamp}{ext}"


def public_image(image: Image) -> dict:
    return {
        "id": str(image.id),
        "path": PUBLIC_PREFIX + image.filename,
        "alt": image.alt,
        "author_id": str(image.author_id),
        "uploaded_at": image.uploaded_at.isoformat(),
    }


class ImageService:
    def __init__(self, *, session: AsyncSession, auth: AuthCore) -> None:
        self._session = session
        self._auth = auth
        self._images = ImageRepo(session)

    async def register(self, *, token: str, filename: str, alt: str) -> Image:
        require_fields(token, filename, alt)
        ext = os.path.splitext(filename)[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise InvalidArgument("Only .jpeg, .jpg and .png images are supported.")
        author = await self._auth.require(token, AnyOf(IsHead(), HasRole(Role.general)))

        image = await self._images.create(
            filename=gen_filename(ext, alt), author_id=author.id, alt=alt
        )
        await self._session.commit()
        return image

    async def get(self, image_id: uuid.UUID) -> Image:
        image = await self._images.get(image_id)
        if image is None:
            raise NotFound("An image with the specified ID was not found!")
        return image

    async def list_all(self) -> list[Image]:
        return await self._images.list_all()

    async def delete(self, *, token: str, image_id: uuid.UUID) -> None:
        require_fields(token)
        await self._auth.require_admin(token)
        image = await self.get(image_id)
        await self._images.delete(image.id)
        await self._session.commit()
