"""
opencafe.services.cards

Loyalty cards and point balances.

Responsibilities:
- Issue one card per customer; the card number is stored encrypted and hashed.
- Verify cards by number and expose the balance.
- Accrue/retract points on behalf of admins.
"""

from __future__ import annotations

import hashlib
import secrets
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.auth.core import AuthCore
from opencafe.auth.crypto import DecryptionError, KeyedEncryptionProvider
from opencafe.auth.policy import AnyOf, IsBoundGeneral, IsHead
from opencafe.db.models import Card
from opencafe.db.repositories.cards import CardRepo
from opencafe.db.repositories.customers import CustomerRepo
from opencafe.errors import Conflict, InvalidArgument, NotFound
from opencafe.observability.logging import get_logger
from opencafe.services.customers import CustomerService

log = get_logger(__name__)


def hash_card_number(number: int) -> str:
    return hashlib.sha256(str(number).encode("ascii")).hexdigest()


def _new_card_number() -> int:
    return secrets.randbelow(2**63 - 2) + 1


class CardService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        auth: AuthCore,
        encryption: KeyedEncryptionProvider,
    ) -> None:
        self._session = session
        self._auth = auth
        self._cards = CardRepo(session)
        self._customers = CustomerRepo(session)
        self._card_cipher = encryption.cipher_for("cards")
        self._customer_cipher = encryption.cipher_for("customers")

    async def issue(self, *, owner_internal_id: int) -> int:
        if not owner_internal_id:
            raise InvalidArgument("No owner's ID to issue a card for.")

        customer = await self._customers.get_by_internal_id(owner_internal_id)
        if customer is None:
            raise NotFound("Cannot issue a card for a nonexistent customer.")
        if customer.card_ref is not None or await self._cards.get_by_owner(owner_internal_id):
            raise Conflict("The customer already has a card.")

        number = _new_card_number()
        while await self._cards.get_by_hash(hash_card_number(number)) is not None:
            number = _new_card_number()

        await self._cards.create(
            owner_internal_id=owner_internal_id,
            number_ciphertext=self._card_cipher.encrypt(str(number)),
            number_hash=hash_card_number(number),
        )
        await self._customers.set_card_ref(
            owner_internal_id, self._customer_cipher.encrypt(str(number))
        )
        await self._session.commit()
        log.info("card.issued", owner_internal_id=owner_internal_id)
        return number

    async def _find(self, number: int) -> Card:
        if not number or number < 0:
            raise InvalidArgument("No card ID was provided.")
        card = await self._cards.get_by_hash(hash_card_number(number))
        if card is None:
            raise NotFound("Card not found.", payload={"id": number, "valid": False})
        return card

    async def verify(self, *, number: int) -> dict[str, Any]:
        card = await self._find(number)
        return {"id": number, "valid": True, "balance": card.balance}

    async def get(self, *, email: str, password: str) -> dict[str, Any]:
        customer = await CustomerService(session=self._session).login(
            email=email, password=password
        )
        card = await self._cards.get_by_owner(customer.internal_id)
        if card is None:
            raise NotFound("No card has been registered for this customer.")

        try:
            number = int(self._card_cipher.decrypt(card.number_ciphertext))
        except (DecryptionError, ValueError) as e:
            log.error("card.number_unreadable", owner_internal_id=customer.internal_id)
            raise Conflict("The stored card number cannot be read.") from e
        return await self.verify(number=number)

    async def retract(self, *, token: str, number: int, amount: int) -> dict[str, Any]:
        if not amount or amount < 0:
            raise InvalidArgument("One or more of the request fields is not provided.")
        admin = await self._auth.require_admin(token)

        card = await self._find(number)
        if amount > card.balance:
            raise Conflict("Cannot retract more points than the amount present on balance.")

        card = await self._cards.set_balance(card, card.balance - amount)
        await self._session.commit()
        log.info("card.retracted", amount=amount, by=str(admin.id))
        return {"id": number, "balance": card.balance}

    async def accrue(self, *, token: str, number: int, amount: int) -> dict[str, Any]:
        if not amount or amount < 0:
            raise InvalidArgument("One or more of the request fields is not provided.")
        admin = await self._auth.require(token, AnyOf(IsHead(), IsBoundGeneral()))

        card = await self._find(number)
        card = await self._cards.set_balance(card, card.balance + amount)
        await self._session.commit()
        log.info("card.accrued", amount=amount, by=str(admin.id))
        return {"id": number, "balance": card.balance}
