from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.db.models import Customer


class CustomerRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        internal_id: int,
        username: str,
        email: str,
        password_hash: str,
    ) -> Customer:
        customer = Customer(
            internal_id=internal_id,
            username=username,
            email=email,
            is_email_verified=False,
            password_hash=password_hash,
            hearts=[],
            reviews=[],
            card_ref=None,
        )
        self._session.add(customer)
        await self._session.flush()
        return customer

    async def get_by_internal_id(self, internal_id: int) -> Customer | None:
        stmt = select(Customer).where(Customer.internal_id == internal_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_by_email(self, email: str) -> Customer | None:
        stmt = select(Customer).where(Customer.email == email)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def set_card_ref(self, internal_id: int, card_ref: str) -> bool:
        customer = await self.get_by_internal_id(internal_id)
        if customer is None:
            return False
        customer.card_ref = card_ref
        await self._session.flush()
        return True
