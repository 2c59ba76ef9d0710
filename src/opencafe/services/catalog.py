"""
opencafe.services.catalog

Dishes and menus.

Responsibilities:
- Create/update/delete dishes and menus on behalf of catalog editors.
- Keep display text in localized strings under the instance's default culture.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.auth.core import AuthCore
from opencafe.auth.policy import AnyOf, IsBoundGeneral, IsHead
from opencafe.db.models import Dish, Menu
from opencafe.db.repositories.catalog import DishRepo, MenuRepo
from opencafe.db.repositories.images import ImageRepo
from opencafe.db.repositories.instances import InstanceRepo
from opencafe.errors import Conflict, InvalidArgument, NotFound
from opencafe.observability.logging import get_logger
from opencafe.services.common import parse_int, require_fields, unused_public_id
from opencafe.services.strings import StringService, gen_si

log = get_logger(__name__)

NUTRITION_KEYS = ("weight", "calories", "proteins", "fats", "carbohydrates")

# Heads, or generals bound to a point, edit the shared catalog.
CATALOG_EDITOR = AnyOf(IsHead(), IsBoundGeneral())


def public_dish(dish: Dish) -> dict[str, Any]:
    return {
        "dish_id": dish.dish_id,
        "price": dish.price,
        "is_on_sale": dish.is_on_sale,
        "old_price": dish.old_price,
        "name_si": dish.name_si,
        "description_si": dish.description_si,
        "nutri_profile": dict(dish.nutri_profile or {}),
        "images": list(dish.images or []),
    }


def public_menu(menu: Menu) -> dict[str, Any]:
    return {
        "menu_id": menu.menu_id,
        "name_si": menu.name_si,
        "description_si": menu.description_si,
        "dishes": list(menu.dishes or []),
    }


class _CatalogBase:
    def __init__(self, *, session: AsyncSession, auth: AuthCore) -> None:
        self._session = session
        self._auth = auth
        self._dishes = DishRepo(session)
        self._strings = StringService(session=session)
        self._instances = InstanceRepo(session)

    async def _default_culture(self) -> str:
        instance = await self._instances.live()
        if instance is None or not instance.cultures:
            raise Conflict("Ask the head admin to set up the instance first.")
        return instance.cultures[0]

    async def _write_text(self, *, si: str, culture: str, content: str, fresh: bool) -> None:
        if fresh:
            await self._strings.insert_new(culture=culture, content=content, si=si)
        else:
            await self._strings.update(si=si, culture=culture, content=content)


class DishService(_CatalogBase):
    def __init__(self, *, session: AsyncSession, auth: AuthCore) -> None:
        super().__init__(session=session, auth=auth)
        self._images = ImageRepo(session)

    async def get(self, dish_id: int) -> Dish:
        dish = await self._dishes.get(dish_id)
        if dish is None:
            raise NotFound("Cannot find a dish with such an ID.")
        return dish

    async def list_all(self) -> list[Dish]:
        return await self._dishes.list_all()

    async def new(
        self,
        *,
        token: str,
        name: str,
        description: str,
        price: int,
        nutri_profile: dict[str, int] | None,
        images: list[str] | None = None,
    ) -> Dish:
        require_fields(token, name, description, price)
        if not nutri_profile or any(k not in nutri_profile for k in NUTRITION_KEYS):
            raise InvalidArgument(f"The nutritional profile must contain {NUTRITION_KEYS}.")
        if price < 0:
            raise InvalidArgument("A price cannot be negative.")
        await self._auth.require(token, CATALOG_EDITOR)

        culture = await self._default_culture()
        kept_images = [i for i in (images or []) if await self._images.exists(i)]

        dish_id = await unused_public_id(self._dishes.get)
        name_si = gen_si("dish", dish_id, "name")
        description_si = gen_si("dish", dish_id, "description")
        await self._write_text(si=name_si, culture=culture, content=name, fresh=True)
        await self._write_text(si=description_si, culture=culture, content=description, fresh=True)

        dish = await self._dishes.create(
            dish_id=dish_id,
            price=price,
            name_si=name_si,
            description_si=description_si,
            nutri_profile={k: int(nutri_profile[k]) for k in NUTRITION_KEYS},
            images=kept_images,
        )
        await self._session.commit()
        log.info("dish.created", dish_id=dish_id)
        return dish

    async def update(self, *, token: str, dish_id: int, updates: dict[str, str]) -> Dish:
        require_fields(token, dish_id, updates)
        await self._auth.require(token, CATALOG_EDITOR)
        dish = await self.get(dish_id)

        for key, value in updates.items():
            if key == "+image":
                if not await self._images.exists(value):
                    raise Conflict("Cannot attach a non-existent image!")
                if value not in dish.images:
                    await self._dishes.patch(dish, images=[*dish.images, value])
            elif key == "-image":
                if not dish.images:
                    raise Conflict("Cannot remove an image from a dish with no images!")
                await self._dishes.patch(dish, images=[i for i in dish.images if i != value])
            elif key in ("name", "description"):
                si = dish.name_si if key == "name" else dish.description_si
                culture = await self._default_culture()
                await self._write_text(si=si, culture=culture, content=value, fresh=False)
            elif key == "price":
                new_price = parse_int(value, what="price")
                if new_price < 0:
                    raise InvalidArgument("A price cannot be negative.")
                await self._dishes.patch(
                    dish,
                    old_price=dish.price,
                    price=new_price,
                    is_on_sale=new_price < dish.price,
                )
            elif key in NUTRITION_KEYS:
                profile = dict(dish.nutri_profile or {})
                profile[key] = parse_int(value, what="nutritional value")
                await self._dishes.patch(dish, nutri_profile=profile)
            else:
                raise InvalidArgument(f"Cannot perform the update {key!r}.")

        await self._session.commit()
        return dish

    async def delete(self, *, token: str, dish_id: int) -> None:
        require_fields(token, dish_id)
        await self._auth.require(token, CATALOG_EDITOR)
        await self.get(dish_id)

        await self._dishes.delete(dish_id)
        await self._session.commit()
        log.info("dish.deleted", dish_id=dish_id)


class MenuService(_CatalogBase):
    def __init__(self, *, session: AsyncSession, auth: AuthCore) -> None:
        super().__init__(session=session, auth=auth)
        self._menus = MenuRepo(session)

    async def get(self, menu_id: int) -> Menu:
        menu = await self._menus.get(menu_id)
        if menu is None:
            raise NotFound("Cannot find a menu with such an ID.")
        return menu

    async def list_all(self) -> list[Menu]:
        return await self._menus.list_all()

    async def create(
        self, *, token: str, name: str, description: str, first_dish: int
    ) -> Menu:
        require_fields(token, name, description, first_dish)
        await self._auth.require(token, CATALOG_EDITOR)
        if await self._dishes.get(first_dish) is None:
            raise InvalidArgument("The first dish of the menu doesn't exist!")

        culture = await self._default_culture()
        menu_id = await unused_public_id(self._menus.get)
        name_si = gen_si("menu", menu_id, "name")
        description_si = gen_si("menu", menu_id, "description")
        await self._write_text(si=name_si, culture=culture, content=name, fresh=True)
        await self._write_text(si=description_si, culture=culture, content=description, fresh=True)

        menu = await self._menus.create(
            menu_id=menu_id, name_si=name_si, description_si=description_si, dishes=[first_dish]
        )
        await self._session.commit()
        log.info("menu.created", menu_id=menu_id)
        return menu

    async def update(self, *, token: str, menu_id: int, updates: dict[str, str]) -> Menu:
        require_fields(token, menu_id, updates)
        await self._auth.require(token, CATALOG_EDITOR)
        menu = await self.get(menu_id)

        for key, value in updates.items():
            if key in ("+dish", "-dish"):
                dish_id = parse_int(value, what="dish ID")
                if await self._dishes.get(dish_id) is None:
                    raise NotFound(f"A dish with ID={dish_id} doesn't exist!")
                present = dish_id in menu.dishes
                if key == "+dish":
                    if present:
                        raise Conflict(f"The dish with ID={dish_id} is already in the menu!")
                    await self._menus.set_dishes(menu, [*menu.dishes, dish_id])
                else:
                    if not present:
                        raise Conflict(f"The dish with ID={dish_id} is not in the menu!")
                    await self._menus.set_dishes(menu, [d for d in menu.dishes if d != dish_id])
            elif key in ("name", "description"):
                si = menu.name_si if key == "name" else menu.description_si
                culture = await self._default_culture()
                await self._write_text(si=si, culture=culture, content=value, fresh=False)
            else:
                raise InvalidArgument(f"Cannot perform the update {key!r}.")

        await self._session.commit()
        return menu

    async def delete(self, *, token: str, menu_id: int) -> None:
        require_fields(token, menu_id)
        await self._auth.require(token, CATALOG_EDITOR)
        await self.get(menu_id)

        await self._menus.delete(menu_id)
        await self._session.commit()
        log.info("menu.deleted", menu_id=menu_id)
