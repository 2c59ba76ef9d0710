from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from opencafe.api.deps import image_service
from opencafe.auth.deps import bearer_token
from opencafe.services.images import ImageService, public_image

router = APIRouter(prefix="/v1/images", tags=["images"])


class RegisterImageRequest(BaseModel):
    # Original upload name; only its extension is kept.
    filename: str
    alt: str


@router.post("", status_code=201)
async def register(
    body: RegisterImageRequest,
    token: str = Depends(bearer_token),
    svc: ImageService = Depends(image_service),
) -> dict[str, Any]:
    return public_image(await svc.register(token=token, filename=body.filename, alt=body.alt))


@router.get("")
async def list_images(svc: ImageService = Depends(image_service)) -> list[dict[str, Any]]:
    return [public_image(i) for i in await svc.list_all()]


@router.get("/{image_id}")
async def get_image(
    image_id: uuid.UUID, svc: ImageService = Depends(image_service)
) -> dict[str, Any]:
    return public_image(await svc.get(image_id))


@router.delete("/{image_id}", status_code=204)
async def delete_image(
    image_id: uuid.UUID,
    token: str = Depends(bearer_token),
    svc: ImageService = Depends(image_service),
) -> None:
    await svc.delete(token=token, image_id=image_id)
