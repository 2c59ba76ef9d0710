"""
opencafe.api.routers.admins

Admin account endpoints.

Responsibilities:
- Login with a bearer token, registration by a head, renaming, deletion, listing.
- Token revocation (rotation) for self or by a head.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from opencafe.api.deps import admin_service
from opencafe.auth.deps import bearer_token
from opencafe.services.admins import AdminService

router = APIRouter(prefix="/v1/admins", tags=["admins"])


class RegisterRequest(BaseModel):
    name: str


class TargetRequest(BaseModel):
    target_token: str


class ChangeNameRequest(TargetRequest):
    name: str


class IssuedAdminResponse(BaseModel):
    admin: dict[str, Any]
    # One-time plaintext; it cannot be retrieved again.
    token: str


@router.post("/login")
async def login(
    token: str = Depends(bearer_token), svc: AdminService = Depends(admin_service)
) -> dict[str, Any]:
    return (await svc.login(token=token)).public()


@router.post("", response_model=IssuedAdminResponse, status_code=201)
async def register(
    body: RegisterRequest,
    token: str = Depends(bearer_token),
    svc: AdminService = Depends(admin_service),
) -> IssuedAdminResponse:
    created = await svc.register(token=token, name=body.name)
    return IssuedAdminResponse(admin=created.admin.public(), token=created.token)


@router.get("")
async def get_all(
    token: str = Depends(bearer_token), svc: AdminService = Depends(admin_service)
) -> list[dict[str, Any]]:
    return await svc.get_all(token=token)


@router.post("/name")
async def change_name(
    body: ChangeNameRequest,
    token: str = Depends(bearer_token),
    svc: AdminService = Depends(admin_service),
) -> dict[str, Any]:
    admin = await svc.change_name(token=token, target_token=body.target_token, name=body.name)
    return admin.public()


@router.post("/delete")
async def delete(
    body: TargetRequest,
    token: str = Depends(bearer_token),
    svc: AdminService = Depends(admin_service),
) -> dict[str, Any]:
    removed = await svc.delete(token=token, target_token=body.target_token)
    return {"deleted": removed.public()}


@router.post("/revoke", response_model=IssuedAdminResponse)
async def revoke(
    body: TargetRequest,
    token: str = Depends(bearer_token),
    svc: AdminService = Depends(admin_service),
) -> IssuedAdminResponse:
    rotated = await svc.revoke(token=token, target_token=body.target_token)
    return IssuedAdminResponse(admin=rotated.admin.public(), token=rotated.token)
