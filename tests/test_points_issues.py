"""
tests.test_points_issues

Points (branches), staff binding and issue tickets.
"""

from __future__ import annotations

import uuid

import httpx
import pytest

from conftest import bearer
from opencafe.auth.models import AdminIdentity, Role
from opencafe.services.points import may_manage_staff


async def _point(client: httpx.AsyncClient, head_token: str, address: str = "1 Main St") -> int:
    r = await client.post("/v1/points", json={"address": address}, headers=bearer(head_token))
    assert r.status_code == 201, r.text
    return r.json()["point_id"]


async def _staff(client, token: str, target: str, point_id: int, action: str) -> httpx.Response:
    return await client.post(
        f"/v1/points/{point_id}/staff",
        json={"target_token": target, "action": action},
        headers=bearer(token),
    )


async def _whoami(client, token: str) -> dict:
    return (await client.post("/v1/admins/login", headers=bearer(token))).json()


def _identity(*roles: Role, bound_to: int | None = None) -> AdminIdentity:
    return AdminIdentity(id=uuid.uuid4(), name="x", roles=frozenset(roles), bound_to=bound_to)


def test_staff_rule() -> None:
    head = _identity(Role.head)
    general_5 = _identity(Role.general, bound_to=5)
    supervisor = _identity(Role.supervisor)
    general = _identity(Role.general)

    assert may_manage_staff(general_5, supervisor, 5)
    assert not may_manage_staff(general_5, supervisor, 6)
    assert not may_manage_staff(general_5, general, 5)
    assert may_manage_staff(head, general, 6)
    assert may_manage_staff(head, supervisor, 6)
    assert not may_manage_staff(head, _identity(Role.head), 6)
    assert not may_manage_staff(supervisor, general, 5)

    # Roles are a set: a bound general who is also head keeps the head's reach.
    head_general_5 = _identity(Role.head, Role.general, bound_to=5)
    assert may_manage_staff(head_general_5, general, 5)
    assert may_manage_staff(head_general_5, general, 6)
    assert may_manage_staff(head_general_5, supervisor, 5)
    assert not may_manage_staff(head_general_5, _identity(Role.head), 5)


@pytest.mark.asyncio
async def test_only_heads_create_points(client, head_token, seed_admin) -> None:
    general = await seed_admin(Role.general)
    r = await client.post("/v1/points", json={"address": "x"}, headers=bearer(general))
    assert r.status_code == 401

    point_id = await _point(client, head_token)
    r = await client.get(f"/v1/points/{point_id}")
    assert r.json()["address"] == "1 Main St" and r.json()["supervisors"] == []


@pytest.mark.asyncio
async def test_hire_and_fire(client, head_token, seed_admin) -> None:
    point_id = await _point(client, head_token)
    other_point = await _point(client, head_token, "2 Side St")
    general = await seed_admin(Role.general)
    supervisor = await seed_admin(Role.supervisor)

    r = await _staff(client, head_token, general, point_id, "hire")
    assert r.status_code == 200
    me = await _whoami(client, general)
    assert me["bound_to"] == point_id
    assert r.json()["supervisors"] == [me["id"]]

    # The newly bound general now staffs their point with supervisors.
    r = await _staff(client, general, supervisor, point_id, "hire")
    assert r.status_code == 200
    assert (await _whoami(client, supervisor))["bound_to"] == point_id

    r = await _staff(client, general, supervisor, other_point, "hire")
    assert r.status_code == 401
    r = await _staff(client, head_token, supervisor, other_point, "hire")
    assert r.status_code == 409
    r = await _staff(client, head_token, supervisor, other_point, "fire")
    assert r.status_code == 409

    r = await _staff(client, general, supervisor, point_id, "fire")
    assert r.status_code == 200
    assert (await _whoami(client, supervisor))["bound_to"] is None
    assert r.json()["supervisors"] == [me["id"]]


@pytest.mark.asyncio
async def test_deleted_admin_leaves_the_roster(client, head_token, seed_admin) -> None:
    point_id = await _point(client, head_token)
    general = await seed_admin(Role.general)
    assert (await _staff(client, head_token, general, point_id, "hire")).status_code == 200

    r = await client.post(
        "/v1/admins/delete", json={"target_token": general}, headers=bearer(head_token)
    )
    assert r.status_code == 200
    assert (await client.get(f"/v1/points/{point_id}")).json()["supervisors"] == []


@pytest.mark.asyncio
async def test_point_updates(client, head_token, seed_admin) -> None:
    point_id = await _point(client, head_token)
    bound = await seed_admin(Role.general, bound_to=point_id)
    elsewhere = await seed_admin(Role.general, bound_to=point_id + 1)

    async def patch(token: str, updates: dict[str, str]) -> httpx.Response:
        return await client.patch(
            f"/v1/points/{point_id}", json={"updates": updates}, headers=bearer(token)
        )

    r = await patch(bound, {"address": "3 New St"})
    assert r.status_code == 200 and r.json()["address"] == "3 New St"
    assert (await patch(elsewhere, {"address": "nope"})).status_code == 401
    assert (await patch(head_token, {"+pic": "missing"})).status_code == 409
    assert (await patch(head_token, {"-pic": "missing"})).status_code == 409
    assert (await patch(head_token, {"phone": "123"})).status_code == 400

    image = await client.post(
        "/v1/images", json={"filename": "front.png", "alt": "front"}, headers=bearer(head_token)
    )
    image_id = image.json()["id"]
    r = await patch(head_token, {"+pic": image_id})
    assert r.json()["pics"] == [image_id]


@pytest.mark.asyncio
async def test_point_delete_unbinds_admins(client, head_token, seed_admin) -> None:
    point_id = await _point(client, head_token)
    a = await seed_admin(Role.general, bound_to=point_id)
    b = await seed_admin(Role.supervisor, bound_to=point_id)

    assert (await client.delete(f"/v1/points/{point_id}", headers=bearer(a))).status_code == 401

    r = await client.delete(f"/v1/points/{point_id}", headers=bearer(head_token))
    assert r.status_code == 200 and r.json()["unbound_admins"] == 2
    assert (await _whoami(client, a))["bound_to"] is None
    assert (await _whoami(client, b))["bound_to"] is None
    assert (await client.get(f"/v1/points/{point_id}")).status_code == 404


ISSUE = {"title": "Broken grinder", "contacts": "+1 555 0100", "description": "It rattles."}


@pytest.mark.asyncio
async def test_issue_lifecycle(client, head_token, seed_admin) -> None:
    point_id = await _point(client, head_token)
    supervisor = await seed_admin(Role.supervisor, bound_to=point_id)
    other_supervisor = await seed_admin(Role.supervisor, bound_to=point_id)
    general_here = await seed_admin(Role.general, bound_to=point_id)
    general_elsewhere = await seed_admin(Role.general, bound_to=point_id + 1)

    assert (await client.post("/v1/issues", json=ISSUE, headers=bearer(head_token))).status_code == 401

    r = await client.post("/v1/issues", json=ISSUE, headers=bearer(supervisor))
    assert r.status_code == 201
    issue = r.json()
    assert issue["point"] == point_id and issue["is_active"] is True
    assert (await client.get(f"/v1/points/{point_id}")).json()["active_issues"] == [issue["issue_id"]]

    assert (await client.get("/v1/issues", headers=bearer(supervisor))).status_code == 401
    listed = (await client.get("/v1/issues", headers=bearer(general_elsewhere))).json()
    assert [i["issue_id"] for i in listed] == [issue["issue_id"]]

    async def modify(token: str, action: str) -> httpx.Response:
        return await client.patch(
            f"/v1/issues/{issue['issue_id']}", json={"action": action}, headers=bearer(token)
        )

    assert (await modify(other_supervisor, "+monitor")).status_code == 401
    assert (await modify(general_elsewhere, "+monitor")).status_code == 401

    r = await modify(general_here, "+monitor")
    assert r.status_code == 200 and r.json()["is_monitored"] is True
    r = await modify(supervisor, "-monitor")
    assert r.json()["is_monitored"] is False

    r = await modify(head_token, "close")
    assert r.status_code == 200 and r.json()["is_active"] is False
    assert (await modify(head_token, "close")).status_code == 409
    assert (await client.get(f"/v1/points/{point_id}")).json()["active_issues"] == []

    r = await client.patch("/v1/issues/0", json={"action": "close"}, headers=bearer(head_token))
    assert r.status_code == 404
