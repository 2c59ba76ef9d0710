"""
opencafe.auth.policy

Capability predicates over a resolved admin.

Responsibilities:
- Name every capability handlers gate on.
- Evaluate them as a pure function (`authorize`): no I/O, no side effects.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Union

from opencafe.auth.models import AdminIdentity, Role


@dataclass(frozen=True, slots=True)
class IsHead:
    pass


@dataclass(frozen=True, slots=True)
class HasRole:
    role: Role


@dataclass(frozen=True, slots=True)
class IsGeneralBoundTo:
    point_id: int


@dataclass(frozen=True, slots=True)
class IsBoundGeneral:
    """General admin bound to any point."""


@dataclass(frozen=True, slots=True)
class IsSupervisorOf:
    # Admin id recorded as the issue's raiser.
    raiser_id: uuid.UUID


@dataclass(frozen=True, slots=True)
class SelfOrHead:
    other_id: uuid.UUID


@dataclass(frozen=True, slots=True)
class AnyOf:
    options: tuple[Capability, ...]

    def __init__(self, *options: Capability) -> None:
        object.__setattr__(self, "options", tuple(options))


@dataclass(frozen=True, slots=True)
class AllOf:
    options: tuple[Capability, ...]

    def __init__(self, *options: Capability) -> None:
        object.__setattr__(self, "options", tuple(options))


Capability = Union[
    IsHead, HasRole, IsGeneralBoundTo, IsBoundGeneral, IsSupervisorOf, SelfOrHead, AnyOf, AllOf
]


def is_head(admin: AdminIdentity) -> bool:
    return Role.head in admin.roles


def authorize(admin: AdminIdentity, capability: Capability) -> bool:
    if isinstance(capability, IsHead):
        return is_head(admin)
    if isinstance(capability, HasRole):
        return capability.role in admin.roles
    if isinstance(capability, IsGeneralBoundTo):
        return Role.general in admin.roles and admin.bound_to == capability.point_id
    if isinstance(capability, IsBoundGeneral):
        return Role.general in admin.roles and admin.bound_to is not None
    if isinstance(capability, IsSupervisorOf):
        return Role.supervisor in admin.roles and admin.id == capability.raiser_id
    if isinstance(capability, SelfOrHead):
        return admin.id == capability.other_id or is_head(admin)
    if isinstance(capability, AnyOf):
        return any(authorize(admin, c) for c in capability.options)
    if isinstance(capability, AllOf):
        return all(authorize(admin, c) for c in capability.options)
    raise TypeError(f"Unknown capability: {capability!r}")


# --- Module Notes -----------------------------------------------------------
# `head` does not imply the other roles; policies that let heads through say so
# explicitly with `AnyOf(IsHead(), ...)`.
