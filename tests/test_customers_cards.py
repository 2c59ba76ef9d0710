"""
tests.test_customers_cards

Customer accounts and loyalty card balances.
"""

from __future__ import annotations

import httpx
import pytest

from conftest import bearer
from opencafe.auth.models import Role
from opencafe.services.cards import hash_card_number
from opencafe.services.customers import hash_password, verify_password

CUSTOMER = {"username": "carol", "email": "Carol@Example.com", "password": "s3cret-pass"}


async def _customer_with_card(client: httpx.AsyncClient) -> int:
    r = await client.post("/v1/customers", json=CUSTOMER)
    assert r.status_code == 201, r.text
    internal_id = r.json()["internal_id"]

    r = await client.post("/v1/cards", json={"owner_internal_id": internal_id})
    assert r.status_code == 201, r.text
    return r.json()["id"]


def test_password_hashing_round_trip() -> None:
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("correct horse", "garbage")


def test_card_hash_is_stable_and_hex() -> None:
    assert hash_card_number(42) == hash_card_number(42)
    assert len(hash_card_number(42)) == 64


@pytest.mark.asyncio
async def test_register_and_login(client) -> None:
    r = await client.post("/v1/customers", json=CUSTOMER)
    assert r.status_code == 201
    body = r.json()
    assert body["email"] == "carol@example.com"
    assert body["has_card"] is False
    assert "password" not in body and "password_hash" not in body

    r = await client.post(
        "/v1/customers/login", json={"email": "carol@example.com", "password": "s3cret-pass"}
    )
    assert r.status_code == 200

    r = await client.post(
        "/v1/customers/login", json={"email": "carol@example.com", "password": "wrong-pass"}
    )
    assert r.status_code == 401

    r = await client.post(
        "/v1/customers/login", json={"email": "nobody@example.com", "password": "whatever1"}
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_duplicate_email_conflicts(client) -> None:
    assert (await client.post("/v1/customers", json=CUSTOMER)).status_code == 201
    dup = {**CUSTOMER, "email": "carol@EXAMPLE.com"}
    assert (await client.post("/v1/customers", json=dup)).status_code == 409


@pytest.mark.asyncio
async def test_short_password_is_rejected(client) -> None:
    r = await client.post("/v1/customers", json={**CUSTOMER, "password": "short"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_one_card_per_customer(client) -> None:
    number = await _customer_with_card(client)
    r = await client.post("/v1/customers/login", json=CUSTOMER | {"email": "carol@example.com"})
    internal_id = r.json()["internal_id"]
    assert r.json()["has_card"] is True

    r = await client.post("/v1/cards", json={"owner_internal_id": internal_id})
    assert r.status_code == 409

    r = await client.get(f"/v1/cards/{number}")
    assert r.json() == {"id": number, "valid": True, "balance": 0}


@pytest.mark.asyncio
async def test_card_for_unknown_customer(client) -> None:
    r = await client.post("/v1/cards", json={"owner_internal_id": 777})
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_unknown_card_is_invalid(client) -> None:
    r = await client.get("/v1/cards/12345")
    assert r.status_code == 404
    assert r.json() == {"id": 12345, "valid": False}


@pytest.mark.asyncio
async def test_accrue_and_retract(client, head_token, seed_admin) -> None:
    number = await _customer_with_card(client)
    unbound = await seed_admin(Role.general)

    r = await client.post(
        f"/v1/cards/{number}/accrue", json={"amount": 100}, headers=bearer(head_token)
    )
    assert r.status_code == 200 and r.json()["balance"] == 100

    # Any admin may retract, but never past the balance.
    r = await client.post(
        f"/v1/cards/{number}/retract", json={"amount": 150}, headers=bearer(unbound)
    )
    assert r.status_code == 409

    r = await client.post(
        f"/v1/cards/{number}/retract", json={"amount": 40}, headers=bearer(unbound)
    )
    assert r.status_code == 200 and r.json()["balance"] == 60

    r = await client.post("/v1/cards/mine", json={"email": "carol@example.com", "password": "s3cret-pass"})
    assert r.json() == {"id": number, "valid": True, "balance": 60}


@pytest.mark.asyncio
async def test_accrue_needs_head_or_bound_general(client, seed_admin) -> None:
    number = await _customer_with_card(client)
    unbound = await seed_admin(Role.general)
    bound = await seed_admin(Role.general, bound_to=7)

    r = await client.post(f"/v1/cards/{number}/accrue", json={"amount": 5}, headers=bearer(unbound))
    assert r.status_code == 401

    r = await client.post(f"/v1/cards/{number}/accrue", json={"amount": 5}, headers=bearer(bound))
    assert r.status_code == 200 and r.json()["balance"] == 5


@pytest.mark.asyncio
async def test_customer_without_card(client) -> None:
    assert (await client.post("/v1/customers", json=CUSTOMER)).status_code == 201
    r = await client.post("/v1/cards/mine", json={"email": "carol@example.com", "password": "s3cret-pass"})
    assert r.status_code == 404
