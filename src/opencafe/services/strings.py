"""
opencafe.services.strings

Localized strings keyed by a string identifier (SI).

Responsibilities:
- Build SIs of the form `WHAT%ID%WHERE` (e.g. `DISH%42%NAME`).
- Insert, fetch and update per-culture content; an update outdates the other cultures.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.db.models import LocalizedString
from opencafe.db.repositories.strings import StringRepo
from opencafe.errors import InvalidArgument, NotFound

ALLOWED_WHAT_FOR = ("MENU", "DISH", "CATEGORY", "OTHER")
ALLOWED_WHERE_AT = ("NAME", "DESCRIPTION")
SI_SEPARATOR = "%"


def gen_si(what_for: str, original_id: int, where_at: str) -> str:
    what, where = what_for.upper(), where_at.upper()
    if what not in ALLOWED_WHAT_FOR or where not in ALLOWED_WHERE_AT:
        raise InvalidArgument(
            f"Cannot create an SI outside of {ALLOWED_WHAT_FOR} x {ALLOWED_WHERE_AT}."
        )
    return f"{what}{SI_SEPARATOR}{original_id}{SI_SEPARATOR}{where}"


def validate_si(si: str) -> bool:
    return bool(si) and SI_SEPARATOR in si


class StringService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._strings = StringRepo(session)

    async def insert_new(
        self, *, culture: str, content: str, si: str, outdated: bool = False
    ) -> list[LocalizedString]:
        if not culture or not culture.strip() or not content or not content.strip():
            raise InvalidArgument("Cannot insert a non-detailed string!")
        if not validate_si(si):
            raise InvalidArgument(f"Invalid string identifier: {si!r}")
        await self._strings.insert(culture=culture, content=content, si=si, outdated=outdated)
        return await self._strings.get_by_si(si)

    async def get_by_si(self, si: str) -> list[LocalizedString]:
        return await self._strings.get_by_si(si)

    async def update(self, *, si: str, culture: str, content: str) -> LocalizedString:
        if not content or not content.strip():
            raise InvalidArgument("Cannot set an empty string.")
        if not await self._strings.get_by_si(si):
            raise NotFound(f"No strings exist for {si!r}.")

        existing = await self._strings.get(si, culture)
        if existing is None:
            existing = await self._strings.insert(culture=culture, content=content, si=si)
        else:
            existing.content = content
            existing.outdated = False
        await self._strings.mark_outdated_except(si, culture)
        return existing


def public_strings(strings: list[LocalizedString]) -> list[dict]:
    return [
        {"culture": s.culture, "content": s.content, "si": s.si, "outdated": s.outdated}
        for s in strings
    ]


# --- Module Notes -----------------------------------------------------------
# This service never commits; callers (dishes, menus) fold string writes into
# their own transaction.
