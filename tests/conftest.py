"""
tests.conftest

Shared fixtures: an app on a private in-memory database, an ASGI client,
and helpers that seed admins directly through the repository layer.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable

import httpx
import pytest_asyncio
from fastapi import FastAPI

from opencafe.api.app import create_app
from opencafe.auth.core import AuthCore
from opencafe.auth.models import Role
from opencafe.db.init_db import ensure_head_admin
from opencafe.db.repositories.admins import AdminRepo
from opencafe.settings import Settings

SeedAdmin = Callable[..., Awaitable[str]]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _auth_for(app: FastAPI, session) -> AuthCore:
    return AuthCore(
        store=AdminRepo(session),
        cipher=app.state.encryption.cipher_for("admins"),
        timeout_seconds=5.0,
    )


@pytest_asyncio.fixture
async def app() -> AsyncIterator[FastAPI]:
    application = create_app(
        settings=Settings(env="test", database_url="sqlite+aiosqlite:///:memory:")
    )
    # httpx's ASGITransport does not drive lifespan events; run them explicitly.
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def head_token(app: FastAPI) -> str:
    async with app.state.sessionmaker() as session:
        issued = await ensure_head_admin(session, _auth_for(app, session))
    assert issued is not None
    return issued.plaintext


@pytest_asyncio.fixture
async def seed_admin(app: FastAPI) -> SeedAdmin:
    """Insert an admin with arbitrary roles (the API only ever creates generals)."""

    async def _seed(*roles: Role, bound_to: int | None = None, name: str = "seeded") -> str:
        async with app.state.sessionmaker() as session:
            issued = _auth_for(app, session).issue_token()
            await AdminRepo(session).create(
                name=name,
                roles=[r.value for r in roles],
                bound_to=bound_to,
                token=issued.ciphertext,
            )
            await session.commit()
        return issued.plaintext

    return _seed
