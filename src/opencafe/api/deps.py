"""
opencafe.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and the encryption provider.
- Build a request-scoped AuthCore and the per-collection services on top of it.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from opencafe.auth.core import AuthCore
from opencafe.auth.crypto import KeyedEncryptionProvider
from opencafe.db.repositories.admins import AdminRepo
from opencafe.services.admins import AdminService
from opencafe.services.cards import CardService
from opencafe.services.catalog import DishService, MenuService
from opencafe.services.customers import CustomerService
from opencafe.services.images import ImageService
from opencafe.services.instance import InstanceService
from opencafe.services.issues import IssueService
from opencafe.services.points import PointService
from opencafe.services.strings import StringService
from opencafe.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The app factory pins the settings it was built with on app.state.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created in the lifespan of `opencafe.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


def encryption_from_app(request: Request) -> KeyedEncryptionProvider:
    return request.app.state.encryption  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def auth_core(
    session: AsyncSession = Depends(db_session),
    encryption: KeyedEncryptionProvider = Depends(encryption_from_app),
    settings: Settings = Depends(settings_dep),
) -> AuthCore:
    return AuthCore(
        store=AdminRepo(session),
        cipher=encryption.cipher_for("admins"),
        timeout_seconds=settings.store_timeout_seconds,
    )


def admin_service(
    session: AsyncSession = Depends(db_session), auth: AuthCore = Depends(auth_core)
) -> AdminService:
    return AdminService(session=session, auth=auth)


def customer_service(session: AsyncSession = Depends(db_session)) -> CustomerService:
    return CustomerService(session=session)


def card_service(
    session: AsyncSession = Depends(db_session),
    auth: AuthCore = Depends(auth_core),
    encryption: KeyedEncryptionProvider = Depends(encryption_from_app),
) -> CardService:
    return CardService(session=session, auth=auth, encryption=encryption)


def dish_service(
    session: AsyncSession = Depends(db_session), auth: AuthCore = Depends(auth_core)
) -> DishService:
    return DishService(session=session, auth=auth)


def menu_service(
    session: AsyncSession = Depends(db_session), auth: AuthCore = Depends(auth_core)
) -> MenuService:
    return MenuService(session=session, auth=auth)


def point_service(
    session: AsyncSession = Depends(db_session), auth: AuthCore = Depends(auth_core)
) -> PointService:
    return PointService(session=session, auth=auth)


def issue_service(
    session: AsyncSession = Depends(db_session), auth: AuthCore = Depends(auth_core)
) -> IssueService:
    return IssueService(session=session, auth=auth)


def instance_service(
    session: AsyncSession = Depends(db_session), auth: AuthCore = Depends(auth_core)
) -> InstanceService:
    return InstanceService(session=session, auth=auth)


def image_service(
    session: AsyncSession = Depends(db_session), auth: AuthCore = Depends(auth_core)
) -> ImageService:
    return ImageService(session=session, auth=auth)


def string_service(session: AsyncSession = Depends(db_session)) -> StringService:
    return StringService(session=session)


# --- Module Notes -----------------------------------------------------------
# FastAPI caches dependencies per request, so every service built for one
# request shares the same session and AuthCore.
