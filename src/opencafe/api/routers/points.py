from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from opencafe.api.deps import point_service
from opencafe.auth.deps import bearer_token
from opencafe.services.points import PointService, public_point

router = APIRouter(prefix="/v1/points", tags=["points"])


class NewPointRequest(BaseModel):
    address: str


class PointUpdatesRequest(BaseModel):
    updates: dict[str, str]


class StaffRequest(BaseModel):
    target_token: str
    action: Literal["hire", "fire"]


@router.get("")
async def list_points(svc: PointService = Depends(point_service)) -> list[dict[str, Any]]:
    return [public_point(p) for p in await svc.list_all()]


@router.get("/{point_id}")
async def get_point(point_id: int, svc: PointService = Depends(point_service)) -> dict[str, Any]:
    return public_point(await svc.get(point_id))


@router.post("", status_code=201)
async def new_point(
    body: NewPointRequest,
    token: str = Depends(bearer_token),
    svc: PointService = Depends(point_service),
) -> dict[str, Any]:
    return public_point(await svc.new(token=token, address=body.address))


@router.patch("/{point_id}")
async def update_point(
    point_id: int,
    body: PointUpdatesRequest,
    token: str = Depends(bearer_token),
    svc: PointService = Depends(point_service),
) -> dict[str, Any]:
    return public_point(await svc.update(token=token, point_id=point_id, updates=body.updates))


@router.delete("/{point_id}")
async def delete_point(
    point_id: int,
    token: str = Depends(bearer_token),
    svc: PointService = Depends(point_service),
) -> dict[str, Any]:
    unbound = await svc.delete(token=token, point_id=point_id)
    return {"point_id": point_id, "unbound_admins": unbound}


@router.post("/{point_id}/staff")
async def staff_action(
    point_id: int,
    body: StaffRequest,
    token: str = Depends(bearer_token),
    svc: PointService = Depends(point_service),
) -> dict[str, Any]:
    point = await svc.staff_action(
        token=token, target_token=body.target_token, point_id=point_id, action=body.action
    )
    return public_point(point)
