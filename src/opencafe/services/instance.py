"""
opencafe.services.instance

Deployment-wide configuration ("instance") with backups.

Responsibilities:
- Load the live instance.
- Flash a new live instance, copy it into backups, restore and delete backups.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.auth.core import AuthCore
from opencafe.auth.policy import IsHead
from opencafe.db.models import Instance
from opencafe.db.repositories.instances import InstanceRepo
from opencafe.errors import InvalidArgument, NotFound
from opencafe.observability.logging import get_logger
from opencafe.services.common import require_fields

log = get_logger(__name__)


def public_instance(instance: Instance) -> dict[str, Any]:
    return {"id": str(instance.id), "is_backup": instance.is_backup, **instance.content()}


class InstanceService:
    def __init__(self, *, session: AsyncSession, auth: AuthCore) -> None:
        self._session = session
        self._auth = auth
        self._instances = InstanceRepo(session)

    async def load(self) -> Instance:
        instance = await self._instances.live()
        if instance is None:
            raise NotFound("The instance has not been set up yet.")
        return instance

    async def flash(
        self, *, token: str, content: dict[str, Any], is_backup: bool = False
    ) -> Instance:
        require_fields(token, content)
        await self._auth.require(token, IsHead())
        if is_backup:
            raise InvalidArgument("Do not flash a backup as the live instance configuration!")
        if not content.get("cultures"):
            raise InvalidArgument("An instance needs at least one culture.")

        instance = await self._replace_live(content)
        await self._session.commit()
        return instance

    async def _replace_live(self, content: dict[str, Any]) -> Instance:
        await self._instances.delete_live()
        instance = await self._instances.insert(is_backup=False, content=content)
        log.info("instance.flashed", instance_id=str(instance.id))
        return instance

    async def _get(self, instance_id: uuid.UUID) -> Instance:
        instance = await self._instances.get(instance_id)
        if instance is None:
            raise NotFound("No instance configuration with this id.")
        return instance

    async def copy(self, *, token: str, instance_id: uuid.UUID) -> Instance:
        require_fields(token, instance_id)
        await self._auth.require(token, IsHead())
        source = await self._get(instance_id)

        backup = await self._instances.insert(is_backup=True, content=source.content())
        await self._session.commit()
        log.info("instance.backed_up", source_id=str(source.id), backup_id=str(backup.id))
        return backup

    async def restore(self, *, token: str, instance_id: uuid.UUID) -> Instance:
        require_fields(token, instance_id)
        await self._auth.require(token, IsHead())
        backup = await self._get(instance_id)
        if not backup.is_backup:
            raise InvalidArgument("Only backups can be restored.")

        # The backup itself is kept; its content becomes a new live instance.
        instance = await self._replace_live(backup.content())
        await self._session.commit()
        return instance

    async def delete(self, *, token: str, instance_id: uuid.UUID) -> None:
        require_fields(token, instance_id)
        await self._auth.require(token, IsHead())
        instance = await self._get(instance_id)
        if not instance.is_backup:
            raise InvalidArgument("Cannot delete the live configuration!")

        await self._instances.delete(instance.id)
        await self._session.commit()
        log.info("instance.backup_deleted", instance_id=str(instance.id))

    async def list_backups(self, *, token: str) -> list[Instance]:
        await self._auth.require(token, IsHead())
        return await self._instances.list_backups()
