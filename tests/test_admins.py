"""
tests.test_admins

Admin lifecycle through the HTTP API.
"""

from __future__ import annotations

import httpx
import pytest

from conftest import bearer
from opencafe.auth.tokens import TOKEN_ALPHABET


async def _register(client: httpx.AsyncClient, head_token: str, name: str = "Alice") -> dict:
    r = await client.post("/v1/admins", json={"name": name}, headers=bearer(head_token))
    assert r.status_code == 201, r.text
    return r.json()


@pytest.mark.asyncio
async def test_head_login(client, head_token) -> None:
    r = await client.post("/v1/admins/login", headers=bearer(head_token))
    assert r.status_code == 200
    assert r.json()["roles"] == ["head"]
    assert "token" not in r.json()


@pytest.mark.asyncio
async def test_login_requires_a_known_token(client, head_token) -> None:
    r = await client.post("/v1/admins/login")
    assert r.status_code == 401

    r = await client.post("/v1/admins/login", headers=bearer("x" * 48))
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_head_registers_a_general(client, head_token) -> None:
    created = await _register(client, head_token)

    token = created["token"]
    assert len(token) == 48 and set(token) <= set(TOKEN_ALPHABET)
    assert created["admin"]["roles"] == ["general"]
    assert created["admin"]["bound_to"] is None

    r = await client.post("/v1/admins/login", headers=bearer(token))
    assert r.status_code == 200
    assert r.json()["name"] == "Alice"


@pytest.mark.asyncio
async def test_non_head_cannot_register(client, head_token) -> None:
    general = (await _register(client, head_token))["token"]
    r = await client.post("/v1/admins", json={"name": "Bob"}, headers=bearer(general))
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_register_requires_a_name(client, head_token) -> None:
    r = await client.post("/v1/admins", json={"name": "  "}, headers=bearer(head_token))
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_deleted_admin_token_stops_resolving(client, head_token) -> None:
    target = (await _register(client, head_token))["token"]

    r = await client.post(
        "/v1/admins/delete", json={"target_token": target}, headers=bearer(head_token)
    )
    assert r.status_code == 200

    r = await client.post("/v1/admins/login", headers=bearer(target))
    assert r.status_code == 401

    r = await client.post(
        "/v1/admins/delete", json={"target_token": target}, headers=bearer(head_token)
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_only_heads_delete(client, head_token) -> None:
    a = (await _register(client, head_token, "A"))["token"]
    b = (await _register(client, head_token, "B"))["token"]

    r = await client.post("/v1/admins/delete", json={"target_token": b}, headers=bearer(a))
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_change_name_self_or_head(client, head_token) -> None:
    a = (await _register(client, head_token, "A"))["token"]
    b = (await _register(client, head_token, "B"))["token"]

    r = await client.post(
        "/v1/admins/name", json={"target_token": a, "name": "Anna"}, headers=bearer(a)
    )
    assert r.status_code == 200 and r.json()["name"] == "Anna"

    r = await client.post(
        "/v1/admins/name", json={"target_token": b, "name": "Boris"}, headers=bearer(head_token)
    )
    assert r.status_code == 200 and r.json()["name"] == "Boris"

    r = await client.post(
        "/v1/admins/name", json={"target_token": b, "name": "Nope"}, headers=bearer(a)
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_get_all_is_head_only_and_hides_tokens(client, head_token) -> None:
    general = (await _register(client, head_token))["token"]

    r = await client.get("/v1/admins", headers=bearer("y" * 48))
    assert r.status_code == 404

    r = await client.get("/v1/admins", headers=bearer(general))
    assert r.status_code == 401

    r = await client.get("/v1/admins", headers=bearer(head_token))
    assert r.status_code == 200
    admins = r.json()
    assert [a["name"] for a in admins] == ["Head", "Alice"]
    assert all("token" not in a for a in admins)


@pytest.mark.asyncio
async def test_revoke_rotates_own_token(client, head_token) -> None:
    old = (await _register(client, head_token))["token"]

    r = await client.post("/v1/admins/revoke", json={"target_token": old}, headers=bearer(old))
    assert r.status_code == 200
    new = r.json()["token"]
    assert new != old

    assert (await client.post("/v1/admins/login", headers=bearer(old))).status_code == 401
    assert (await client.post("/v1/admins/login", headers=bearer(new))).status_code == 200
