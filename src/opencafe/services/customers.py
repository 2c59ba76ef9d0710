"""
opencafe.services.customers

Customer accounts (email + password).

Responsibilities:
- Register customers with hashed passwords and a random internal id.
- Authenticate customers for card access.
"""

from __future__ import annotations

import secrets

from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.db.models import Customer
from opencafe.db.repositories.customers import CustomerRepo
from opencafe.errors import Conflict, InvalidArgument, NotFound, Unauthorized
from opencafe.observability.logging import get_logger
from opencafe.services.common import unused_public_id

log = get_logger(__name__)

_pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    return _pwd.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return _pwd.verify(password, password_hash)
    except ValueError:
        # Unrecognized/corrupt hash.
        return False


def _new_internal_id() -> int:
    return secrets.randbelow(2**63 - 2) + 1


class CustomerService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._customers = CustomerRepo(session)

    async def register(self, *, username: str, email: str, password: str) -> Customer:
        if not username or not username.strip() or not email or not email.strip() or not password:
            raise InvalidArgument("One or more of the request fields is not provided.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidArgument("The provided password doesn't match the length requirement.")

        email = email.strip().lower()
        if await self._customers.get_by_email(email) is not None:
            raise Conflict("A customer with the provided email already exists.")

        internal_id = await unused_public_id(
            self._customers.get_by_internal_id, generate=_new_internal_id
        )
        customer = await self._customers.create(
            internal_id=internal_id,
            username=username.strip(),
            email=email,
            password_hash=hash_password(password),
        )
        await self._session.commit()
        log.info("customer.registered", internal_id=internal_id)
        return customer

    async def login(self, *, email: str, password: str) -> Customer:
        if not email or not email.strip() or not password:
            raise InvalidArgument("One or more of the request fields is not provided.")

        customer = await self._customers.get_by_email(email.strip().lower())
        if customer is None:
            raise NotFound("Cannot find a customer with this email.")
        if not verify_password(password, customer.password_hash):
            raise Unauthorized("Wrong password.")
        return customer

    async def get_by_internal_id(self, internal_id: int) -> Customer | None:
        return await self._customers.get_by_internal_id(internal_id)


def public_customer(customer: Customer) -> dict:
    return {
        "internal_id": customer.internal_id,
        "username": customer.username,
        "email": customer.email,
        "is_email_verified": customer.is_email_verified,
        "has_card": customer.card_ref is not None,
    }
