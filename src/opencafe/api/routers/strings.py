"""
opencafe.api.routers.strings

Localized string endpoints.

Responsibilities:
- Public lookup of every culture's content for a string identifier.
- Translation updates by catalog editors.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.api.deps import auth_core, db_session, string_service
from opencafe.auth.core import AuthCore
from opencafe.auth.deps import bearer_token
from opencafe.errors import NotFound
from opencafe.services.catalog import CATALOG_EDITOR
from opencafe.services.strings import StringService, public_strings

router = APIRouter(prefix="/v1/strings", tags=["strings"])


class StringUpdateRequest(BaseModel):
    si: str
    culture: str
    content: str


@router.get("")
async def get_by_si(
    si: str = Query(...), svc: StringService = Depends(string_service)
) -> list[dict[str, Any]]:
    # SIs contain '%', so they travel as a query parameter rather than a path segment.
    strings = await svc.get_by_si(si)
    if not strings:
        raise NotFound(f"No strings exist for {si!r}.")
    return public_strings(strings)


@router.put("")
async def update(
    body: StringUpdateRequest,
    token: str = Depends(bearer_token),
    auth: AuthCore = Depends(auth_core),
    session: AsyncSession = Depends(db_session),
    svc: StringService = Depends(string_service),
) -> list[dict[str, Any]]:
    await auth.require(token, CATALOG_EDITOR)
    await svc.update(si=body.si, culture=body.culture, content=body.content)
    await session.commit()
    return public_strings(await svc.get_by_si(body.si))
