"""
tests.test_catalog

Dishes, menus, images and the localized strings behind them.
"""

from __future__ import annotations

import httpx
import pytest

from conftest import bearer
from opencafe.auth.models import Role
from opencafe.errors import InvalidArgument
from opencafe.services.images import gen_filename
from opencafe.services.strings import gen_si, validate_si

NUTRITION = {"weight": 250, "calories": 420, "proteins": 12, "fats": 9, "carbohydrates": 60}
INSTANCE = {"cultures": ["en", "ru"], "name": {"en": "Cafe"}, "description": {"en": "Coffee"}}


async def _flash(client: httpx.AsyncClient, head_token: str) -> None:
    r = await client.put("/v1/instance", json=INSTANCE, headers=bearer(head_token))
    assert r.status_code == 200, r.text


async def _dish(client: httpx.AsyncClient, token: str, **overrides) -> httpx.Response:
    body = {
        "name": "Pancakes",
        "description": "With honey",
        "price": 300,
        "nutri_profile": NUTRITION,
    } | overrides
    return await client.post("/v1/dishes", json=body, headers=bearer(token))


def test_string_identifiers() -> None:
    assert gen_si("dish", 42, "name") == "DISH%42%NAME"
    assert validate_si("MENU%1%DESCRIPTION")
    assert not validate_si("MENU-1-DESCRIPTION")
    with pytest.raises(InvalidArgument):
        gen_si("drink", 1, "name")


def test_image_filenames() -> None:
    assert gen_filename(".png", "front door!", now=1700000123) == "frontdoor_000123.png"
    assert gen_filename(".jpg", "***", now=1700000123) == "img_000123.jpg"


@pytest.mark.asyncio
async def test_dish_needs_a_live_instance(client, head_token) -> None:
    r = await _dish(client, head_token)
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_create_dish_stores_default_culture_strings(client, head_token) -> None:
    await _flash(client, head_token)
    r = await _dish(client, head_token)
    assert r.status_code == 201, r.text
    dish = r.json()
    assert dish["name_si"] == f"DISH%{dish['dish_id']}%NAME"
    assert dish["old_price"] == 300 and dish["is_on_sale"] is False

    r = await client.get("/v1/strings", params={"si": dish["name_si"]})
    assert r.status_code == 200
    assert r.json() == [
        {"culture": "en", "content": "Pancakes", "si": dish["name_si"], "outdated": False}
    ]

    r = await client.get(f"/v1/dishes/{dish['dish_id']}")
    assert r.status_code == 200 and r.json()["nutri_profile"] == NUTRITION
    assert [d["dish_id"] for d in (await client.get("/v1/dishes")).json()] == [dish["dish_id"]]


@pytest.mark.asyncio
async def test_dish_validation(client, head_token) -> None:
    await _flash(client, head_token)
    partial = {k: v for k, v in NUTRITION.items() if k != "fats"}
    assert (await _dish(client, head_token, nutri_profile=partial)).status_code == 400
    assert (await _dish(client, head_token, name="")).status_code == 400
    assert (await _dish(client, head_token, price=-1)).status_code == 400


@pytest.mark.asyncio
async def test_catalog_editors(client, head_token, seed_admin) -> None:
    await _flash(client, head_token)
    unbound = await seed_admin(Role.general)
    bound = await seed_admin(Role.general, bound_to=3)
    supervisor = await seed_admin(Role.supervisor, bound_to=3)

    assert (await _dish(client, unbound)).status_code == 401
    assert (await _dish(client, supervisor)).status_code == 401
    assert (await _dish(client, bound)).status_code == 201


@pytest.mark.asyncio
async def test_dish_updates(client, head_token) -> None:
    await _flash(client, head_token)
    dish_id = (await _dish(client, head_token)).json()["dish_id"]

    async def patch(updates: dict[str, str]) -> httpx.Response:
        return await client.patch(
            f"/v1/dishes/{dish_id}", json={"updates": updates}, headers=bearer(head_token)
        )

    r = await patch({"price": "250", "calories": "400"})
    assert r.status_code == 200
    body = r.json()
    assert (body["price"], body["old_price"], body["is_on_sale"]) == (250, 300, True)
    assert body["nutri_profile"]["calories"] == 400

    assert (await patch({"colour": "red"})).status_code == 400
    assert (await patch({"price": "cheap"})).status_code == 400
    assert (await patch({"+image": "not-an-image"})).status_code == 409
    assert (await patch({"-image": "whatever"})).status_code == 409

    r = await client.post(
        "/v1/images", json={"filename": "p.png", "alt": "pancakes"}, headers=bearer(head_token)
    )
    assert r.status_code == 201
    image_id = r.json()["id"]
    assert r.json()["path"].startswith("fs/img/pancakes_")

    r = await patch({"+image": image_id})
    assert r.json()["images"] == [image_id]
    r = await patch({"-image": image_id})
    assert r.json()["images"] == []

    r = await patch({"name": "Crepes"})
    assert r.status_code == 200
    strings = (await client.get("/v1/strings", params={"si": gen_si("dish", dish_id, "name")})).json()
    assert strings[0]["content"] == "Crepes"


@pytest.mark.asyncio
async def test_dish_delete(client, head_token) -> None:
    await _flash(client, head_token)
    dish_id = (await _dish(client, head_token)).json()["dish_id"]

    r = await client.delete(f"/v1/dishes/{dish_id}", headers=bearer(head_token))
    assert r.status_code == 204
    assert (await client.get(f"/v1/dishes/{dish_id}")).status_code == 404
    r = await client.delete(f"/v1/dishes/{dish_id}", headers=bearer(head_token))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_menu_lifecycle(client, head_token) -> None:
    await _flash(client, head_token)
    first = (await _dish(client, head_token)).json()["dish_id"]
    second = (await _dish(client, head_token, name="Soup")).json()["dish_id"]

    # Public ids start at 1, so 0 never names a dish.
    menu_body = {"name": "Breakfast", "description": "Until noon", "first_dish": 0}
    r = await client.post("/v1/menus", json=menu_body, headers=bearer(head_token))
    assert r.status_code == 400

    menu_body["first_dish"] = first
    r = await client.post("/v1/menus", json=menu_body, headers=bearer(head_token))
    assert r.status_code == 201
    menu_id = r.json()["menu_id"]
    assert r.json()["dishes"] == [first]

    async def patch(updates: dict[str, str]) -> httpx.Response:
        return await client.patch(
            f"/v1/menus/{menu_id}", json={"updates": updates}, headers=bearer(head_token)
        )

    assert (await patch({"+dish": str(first)})).status_code == 409
    assert (await patch({"-dish": str(second)})).status_code == 409
    r = await patch({"+dish": str(second)})
    assert r.status_code == 200 and r.json()["dishes"] == [first, second]
    r = await patch({"-dish": str(first)})
    assert r.json()["dishes"] == [second]

    r = await client.delete(f"/v1/menus/{menu_id}", headers=bearer(head_token))
    assert r.status_code == 204
    assert (await client.get("/v1/menus")).json() == []


@pytest.mark.asyncio
async def test_string_update_outdates_other_cultures(client, head_token) -> None:
    await _flash(client, head_token)
    si = (await _dish(client, head_token)).json()["name_si"]

    r = await client.put(
        "/v1/strings",
        json={"si": si, "culture": "ru", "content": "Blini"},
        headers=bearer(head_token),
    )
    assert r.status_code == 200
    by_culture = {s["culture"]: s for s in r.json()}
    assert by_culture["ru"]["outdated"] is False
    assert by_culture["en"]["outdated"] is True

    r = await client.put(
        "/v1/strings",
        json={"si": si, "culture": "en", "content": "Pancakes!"},
        headers=bearer(head_token),
    )
    by_culture = {s["culture"]: s for s in r.json()}
    assert by_culture["en"] == {"culture": "en", "content": "Pancakes!", "si": si, "outdated": False}
    assert by_culture["ru"]["outdated"] is True

    r = await client.put(
        "/v1/strings",
        json={"si": "DISH%1%NAME", "culture": "en", "content": "x"},
        headers=bearer(head_token),
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_images_are_registered_by_heads_and_generals(client, head_token, seed_admin) -> None:
    supervisor = await seed_admin(Role.supervisor)
    general = await seed_admin(Role.general)
    body = {"filename": "door.jpg", "alt": "door"}

    assert (await client.post("/v1/images", json=body, headers=bearer(supervisor))).status_code == 401
    assert (
        await client.post("/v1/images", json={**body, "filename": "door.gif"}, headers=bearer(general))
    ).status_code == 400

    r = await client.post("/v1/images", json=body, headers=bearer(general))
    assert r.status_code == 201
    image_id = r.json()["id"]
    assert (await client.get(f"/v1/images/{image_id}")).json()["alt"] == "door"

    r = await client.delete(f"/v1/images/{image_id}", headers=bearer(supervisor))
    assert r.status_code == 204
    assert (await client.get("/v1/images")).json() == []
