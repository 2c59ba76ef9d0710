from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from opencafe.api.deps import instance_service
from opencafe.auth.deps import bearer_token
from opencafe.services.instance import InstanceService, public_instance

router = APIRouter(prefix="/v1/instance", tags=["instance"])


class InstanceContent(BaseModel):
    cultures: list[str] = Field(default_factory=list)
    logo: str | None = None
    name: dict[str, str] = Field(default_factory=dict)
    description: dict[str, str] = Field(default_factory=dict)
    pics: list[str] = Field(default_factory=list)
    is_backup: bool = False


@router.get("")
async def load(svc: InstanceService = Depends(instance_service)) -> dict[str, Any]:
    return public_instance(await svc.load())


@router.put("")
async def flash(
    body: InstanceContent,
    token: str = Depends(bearer_token),
    svc: InstanceService = Depends(instance_service),
) -> dict[str, Any]:
    content = body.model_dump(exclude={"is_backup"})
    instance = await svc.flash(token=token, content=content, is_backup=body.is_backup)
    return public_instance(instance)


@router.get("/backups")
async def list_backups(
    token: str = Depends(bearer_token), svc: InstanceService = Depends(instance_service)
) -> list[dict[str, Any]]:
    return [public_instance(i) for i in await svc.list_backups(token=token)]


@router.post("/{instance_id}/copy", status_code=201)
async def copy(
    instance_id: uuid.UUID,
    token: str = Depends(bearer_token),
    svc: InstanceService = Depends(instance_service),
) -> dict[str, Any]:
    return public_instance(await svc.copy(token=token, instance_id=instance_id))


@router.post("/backups/{instance_id}/restore")
async def restore(
    instance_id: uuid.UUID,
    token: str = Depends(bearer_token),
    svc: InstanceService = Depends(instance_service),
) -> dict[str, Any]:
    return public_instance(await svc.restore(token=token, instance_id=instance_id))


@router.delete("/backups/{instance_id}", status_code=204)
async def delete(
    instance_id: uuid.UUID,
    token: str = Depends(bearer_token),
    svc: InstanceService = Depends(instance_service),
) -> None:
    await svc.delete(token=token, instance_id=instance_id)
