"""
opencafe.db.repositories.catalog

Repositories for the catalog collections: dishes and menus.

Responsibilities:
- CRUD by public numeric id.
- Keep list-valued fields immutable-on-write (replace, never mutate in place).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.db.models import Dish, Menu


class DishRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        dish_id: int,
        price: int,
        name_si: str,
        description_si: str,
        nutri_profile: dict[str, int],
        images: list[str],
    ) -> Dish:
        dish = Dish(
            dish_id=dish_id,
            price=price,
            is_on_sale=False,
            old_price=price,
            name_si=name_si,
            description_si=description_si,
            nutri_profile=dict(nutri_profile),
            images=list(images),
        )
        self._session.add(dish)
        await self._session.flush()
        return dish

    async def get(self, dish_id: int) -> Dish | None:
        stmt = select(Dish).where(Dish.dish_id == dish_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_all(self) -> list[Dish]:
        return list((await self._session.execute(select(Dish))).scalars().all())

    async def patch(self, dish: Dish, **fields: Any) -> Dish:
        for key, value in fields.items():
            setattr(dish, key, value)
        await self._session.flush()
        return dish

    async def delete(self, dish_id: int) -> bool:
        res = await self._session.execute(delete(Dish).where(Dish.dish_id == dish_id))
        return bool(res.rowcount)


class MenuRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self, *, menu_id: int, name_si: str, description_si: str, dishes: list[int]
    ) -> Menu:
        menu = Menu(
            menu_id=menu_id, name_si=name_si, description_si=description_si, dishes=list(dishes)
        )
        self._session.add(menu)
        await self._session.flush()
        return menu

    async def get(self, menu_id: int) -> Menu | None:
        stmt = select(Menu).where(Menu.menu_id == menu_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_all(self) -> list[Menu]:
        return list((await self._session.execute(select(Menu))).scalars().all())

    async def set_dishes(self, menu: Menu, dishes: list[int]) -> Menu:
        menu.dishes = list(dishes)
        await self._session.flush()
        return menu

    async def delete(self, menu_id: int) -> bool:
        res = await self._session.execute(delete(Menu).where(Menu.menu_id == menu_id))
        return bool(res.rowcount)
