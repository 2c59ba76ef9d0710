"""
opencafe.db.models

Persistence schema: one table per collection.

Responsibilities:
- Admins, customers and loyalty cards (credential fields stored encrypted).
- Catalog: dishes, menus and the localized strings they reference.
- Points (branches), issues, images and instance configurations.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import BigInteger, Index, String, Text, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from opencafe.db.base import Base


def _utcnow() -> datetime:
    return datetime.utcnow()


class Admin(Base):
    __tablename__ = "admins"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    roles: Mapped[list[str]] = mapped_column(nullable=False, default=list)
    bound_to: Mapped[int | None] = mapped_column(nullable=True, index=True)
    # Fernet ciphertext; the plaintext is never persisted.
    token: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, index=True)


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    internal_id: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True, index=True)
    username: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    is_email_verified: Mapped[bool] = mapped_column(nullable=False, default=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    hearts: Mapped[list[int]] = mapped_column(nullable=False, default=list)
    reviews: Mapped[list[int]] = mapped_column(nullable=False, default=list)
    # Card number encrypted with the customers key.
    card_ref: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


class Card(Base):
    __tablename__ = "cards"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    owner_internal_id: Mapped[int] = mapped_column(
        BigInteger, nullable=False, unique=True, index=True
    )
    number_ciphertext: Mapped[str] = mapped_column(Text, nullable=False)
    # sha256 hex of the decimal card number; lookup key for verification.
    number_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    orders: Mapped[list[int]] = mapped_column(nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


class Dish(Base):
    __tablename__ = "dishes"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    dish_id: Mapped[int] = mapped_column(nullable=False, unique=True, index=True)
    price: Mapped[int] = mapped_column(nullable=False)
    is_on_sale: Mapped[bool] = mapped_column(nullable=False, default=False)
    old_price: Mapped[int] = mapped_column(nullable=False)
    name_si: Mapped[str] = mapped_column(String(128), nullable=False)
    description_si: Mapped[str] = mapped_column(String(128), nullable=False)
    nutri_profile: Mapped[dict[str, int]] = mapped_column(nullable=False, default=dict)
    images: Mapped[list[str]] = mapped_column(nullable=False, default=list)


class Menu(Base):
    __tablename__ = "menus"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    menu_id: Mapped[int] = mapped_column(nullable=False, unique=True, index=True)
    name_si: Mapped[str] = mapped_column(String(128), nullable=False)
    description_si: Mapped[str] = mapped_column(String(128), nullable=False)
    dishes: Mapped[list[int]] = mapped_column(nullable=False, default=list)


class Point(Base):
    __tablename__ = "points"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    point_id: Mapped[int] = mapped_column(nullable=False, unique=True, index=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Admin ids (as strings) currently working at this point.
    supervisors: Mapped[list[str]] = mapped_column(nullable=False, default=list)
    pics: Mapped[list[str]] = mapped_column(nullable=False, default=list)
    unavailable: Mapped[list[int]] = mapped_column(nullable=False, default=list)
    reviews: Mapped[list[int]] = mapped_column(nullable=False, default=list)
    active_issues: Mapped[list[int]] = mapped_column(nullable=False, default=list)


class Issue(Base):
    __tablename__ = "issues"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    issue_id: Mapped[int] = mapped_column(nullable=False, unique=True, index=True)
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)
    is_monitored: Mapped[bool] = mapped_column(nullable=False, default=False)
    raiser_id: Mapped[uuid.UUID] = mapped_column(SAUuid(as_uuid=True), nullable=False, index=True)
    point: Mapped[int | None] = mapped_column(nullable=True, index=True)
    raised_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    contacts: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)


class Instance(Base):
    __tablename__ = "instances"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    is_backup: Mapped[bool] = mapped_column(nullable=False, default=False, index=True)
    # Ordered; the first culture is the default for new strings.
    cultures: Mapped[list[str]] = mapped_column(nullable=False, default=list)
    logo: Mapped[str | None] = mapped_column(Text, nullable=True)
    name: Mapped[dict[str, str]] = mapped_column(nullable=False, default=dict)
    description: Mapped[dict[str, str]] = mapped_column(nullable=False, default=dict)
    pics: Mapped[list[str]] = mapped_column(nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    def content(self) -> dict[str, Any]:
        return {
            "cultures": list(self.cultures or []),
            "logo": self.logo,
            "name": dict(self.name or {}),
            "description": dict(self.description or {}),
            "pics": list(self.pics or []),
        }


class LocalizedString(Base):
    __tablename__ = "strings"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    culture: Mapped[str] = mapped_column(String(32), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    si: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    outdated: Mapped[bool] = mapped_column(nullable=False, default=False)

    __table_args__ = (Index("ix_strings_si_culture", "si", "culture"),)


class Image(Base):
    __tablename__ = "images"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    filename: Mapped[str] = mapped_column(String(256), nullable=False)
    author_id: Mapped[uuid.UUID] = mapped_column(SAUuid(as_uuid=True), nullable=False)
    alt: Mapped[str] = mapped_column(String(512), nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


# --- Module Notes -----------------------------------------------------------
# Public numeric ids (dish_id, point_id, ...) are random positive 31-bit ints,
# separate from the UUID primary keys.
