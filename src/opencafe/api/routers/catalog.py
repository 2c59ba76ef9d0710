"""
opencafe.api.routers.catalog

Dish and menu endpoints.

Responsibilities:
- Public reads of dishes and menus.
- Create/update/delete for catalog editors (heads and bound generals).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from opencafe.api.deps import dish_service, menu_service
from opencafe.auth.deps import bearer_token
from opencafe.services.catalog import DishService, MenuService, public_dish, public_menu

router = APIRouter(prefix="/v1", tags=["catalog"])


class NewDishRequest(BaseModel):
    name: str
    description: str
    price: int
    nutri_profile: dict[str, int] = Field(default_factory=dict)
    images: list[str] = Field(default_factory=list)


class NewMenuRequest(BaseModel):
    name: str
    description: str
    first_dish: int


class UpdatesRequest(BaseModel):
    # Applied in order, e.g. {"+image": "<id>", "price": "350"}.
    updates: dict[str, str]


@router.get("/dishes")
async def list_dishes(svc: DishService = Depends(dish_service)) -> list[dict[str, Any]]:
    return [public_dish(d) for d in await svc.list_all()]


@router.get("/dishes/{dish_id}")
async def get_dish(dish_id: int, svc: DishService = Depends(dish_service)) -> dict[str, Any]:
    return public_dish(await svc.get(dish_id))


@router.post("/dishes", status_code=201)
async def new_dish(
    body: NewDishRequest,
    token: str = Depends(bearer_token),
    svc: DishService = Depends(dish_service),
) -> dict[str, Any]:
    dish = await svc.new(
        token=token,
        name=body.name,
        description=body.description,
        price=body.price,
        nutri_profile=body.nutri_profile,
        images=body.images,
    )
    return public_dish(dish)


@router.patch("/dishes/{dish_id}")
async def update_dish(
    dish_id: int,
    body: UpdatesRequest,
    token: str = Depends(bearer_token),
    svc: DishService = Depends(dish_service),
) -> dict[str, Any]:
    return public_dish(await svc.update(token=token, dish_id=dish_id, updates=body.updates))


@router.delete("/dishes/{dish_id}", status_code=204)
async def delete_dish(
    dish_id: int,
    token: str = Depends(bearer_token),
    svc: DishService = Depends(dish_service),
) -> None:
    await svc.delete(token=token, dish_id=dish_id)


@router.get("/menus")
async def list_menus(svc: MenuService = Depends(menu_service)) -> list[dict[str, Any]]:
    return [public_menu(m) for m in await svc.list_all()]


@router.get("/menus/{menu_id}")
async def get_menu(menu_id: int, svc: MenuService = Depends(menu_service)) -> dict[str, Any]:
    return public_menu(await svc.get(menu_id))


@router.post("/menus", status_code=201)
async def create_menu(
    body: NewMenuRequest,
    token: str = Depends(bearer_token),
    svc: MenuService = Depends(menu_service),
) -> dict[str, Any]:
    menu = await svc.create(
        token=token, name=body.name, description=body.description, first_dish=body.first_dish
    )
    return public_menu(menu)


@router.patch("/menus/{menu_id}")
async def update_menu(
    menu_id: int,
    body: UpdatesRequest,
    token: str = Depends(bearer_token),
    svc: MenuService = Depends(menu_service),
) -> dict[str, Any]:
    return public_menu(await svc.update(token=token, menu_id=menu_id, updates=body.updates))


@router.delete("/menus/{menu_id}", status_code=204)
async def delete_menu(
    menu_id: int,
    token: str = Depends(bearer_token),
    svc: MenuService = Depends(menu_service),
) -> None:
    await svc.delete(token=token, menu_id=menu_id)
