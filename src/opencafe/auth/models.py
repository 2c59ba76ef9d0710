"""
opencafe.auth.models

Auth domain models.

Responsibilities:
- Define the closed role set (`Role`).
- Define the resolved admin identity (`AdminIdentity`) handed to services.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any


class Role(enum.StrEnum):
    # Stored values are the legacy tags; treat them as a stable data contract.
    head = "head"
    supervisor = "sprvsr"
    general = "general"

    @classmethod
    def parse_many(cls, raw: Iterable[str] | None) -> frozenset[Role]:
        # Unknown tags grant nothing.
        known = {r.value: r for r in cls}
        return frozenset(known[t] for t in (raw or ()) if t in known)


@dataclass(frozen=True, slots=True)
class AdminIdentity:
    """
    Authenticated admin, detached from the DB session.
    """

    id: uuid.UUID
    name: str
    roles: frozenset[Role]
    bound_to: int | None = None
    token_ciphertext: str = field(default="", repr=False)

    @property
    def is_head(self) -> bool:
        return Role.head in self.roles

    def has_role(self, role: Role) -> bool:
        return role in self.roles

    @classmethod
    def from_record(cls, record: Any) -> AdminIdentity:
        return cls(
            id=record.id,
            name=record.name,
            roles=Role.parse_many(record.roles),
            bound_to=record.bound_to,
            token_ciphertext=record.token or "",
        )

    def public(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "roles": sorted(r.value for r in self.roles),
            "bound_to": self.bound_to,
        }
