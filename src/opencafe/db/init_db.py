"""
opencafe.db.init_db

DB initialization helpers.

Responsibilities:
- Create tables for local development and tests.
- Seed the first head admin of an empty deployment.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from opencafe.auth.core import AuthCore
from opencafe.auth.models import Role
from opencafe.auth.tokens import IssuedToken
from opencafe.db.base import Base
from opencafe.db.repositories.admins import AdminRepo
from opencafe.observability.logging import get_logger

log = get_logger(__name__)

FIRST_HEAD_NAME = "Head"


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    Production should rely on Alembic migrations.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ensure_head_admin(
    session: AsyncSession, auth: AuthCore, *, name: str = FIRST_HEAD_NAME
) -> IssuedToken | None:
    """
    Insert a head admin when the admins collection is empty.
    Returns the issued token (plaintext included) only when one was created.
    """

    admins = AdminRepo(session)
    if await admins.count() > 0:
        return None

    issued = auth.issue_token()
    admin = await admins.create(
        name=name, roles=[Role.head.value], bound_to=None, token=issued.ciphertext
    )
    await session.commit()
    log.info("bootstrap.head_admin_created", admin_id=str(admin.id))
    return issued
