"""
opencafe.db.repositories.cards

Repository for loyalty `Card` records.

Responsibilities:
- Insert cards and look them up by owner or by card-number hash.
- Apply balance changes.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.db.models import Card


class CardRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self, *, owner_internal_id: int, number_ciphertext: str, number_hash: str
    ) -> Card:
        card = Card(
            owner_internal_id=owner_internal_id,
            number_ciphertext=number_ciphertext,
            number_hash=number_hash,
            balance=0,
            orders=[],
        )
        self._session.add(card)
        await self._session.flush()
        return card

    async def get_by_hash(self, number_hash: str) -> Card | None:
        stmt = select(Card).where(Card.number_hash == number_hash)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_by_owner(self, owner_internal_id: int) -> Card | None:
        stmt = select(Card).where(Card.owner_internal_id == owner_internal_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def set_balance(self, card: Card, balance: int) -> Card:
        # Row lock where the backend supports it; SQLite ignores FOR UPDATE.
        locked = await self._session.get(Card, card.id, with_for_update=True)
        if locked is None:
            return card
        locked.balance = balance
        await self._session.flush()
        return locked
