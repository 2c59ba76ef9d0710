"""
opencafe.services.points

Physical branches ("points") and the staff bound to them.

Responsibilities:
- Create, update and delete points (delete unbinds every admin working there).
- Hire/fire staff: binding an admin to a point and recording them on it.
"""

from __future__ import annotations

from typing import Any, Literal

from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.auth.core import AuthCore
from opencafe.auth.models import AdminIdentity, Role
from opencafe.auth.policy import AnyOf, Capability, IsGeneralBoundTo, IsHead, authorize
from opencafe.db.models import Point
from opencafe.db.repositories.admins import AdminRepo
from opencafe.db.repositories.images import ImageRepo
from opencafe.db.repositories.points import PointRepo
from opencafe.errors import Conflict, InvalidArgument, NotFound, Unauthorized
from opencafe.observability.logging import get_logger
from opencafe.services.common import require_fields, unused_public_id

log = get_logger(__name__)

StaffAction = Literal["hire", "fire"]


def public_point(point: Point) -> dict[str, Any]:
    return {
        "point_id": point.point_id,
        "address": point.address,
        "supervisors": list(point.supervisors or []),
        "pics": list(point.pics or []),
        "unavailable": list(point.unavailable or []),
        "active_issues": list(point.active_issues or []),
    }


def staff_managers(target: AdminIdentity, point_id: int) -> Capability:
    # A bound general staffs their own point with supervisors; heads staff anyone below them.
    options: list[Capability] = []
    if target.has_role(Role.supervisor):
        options.append(IsGeneralBoundTo(point_id))
    if target.has_role(Role.general) or target.has_role(Role.supervisor):
        options.append(IsHead())
    return AnyOf(*options)


def may_manage_staff(caller: AdminIdentity, target: AdminIdentity, point_id: int) -> bool:
    return authorize(caller, staff_managers(target, point_id))


class PointService:
    def __init__(self, *, session: AsyncSession, auth: AuthCore) -> None:
        self._session = session
        self._auth = auth
        self._points = PointRepo(session)
        self._admins = AdminRepo(session)
        self._images = ImageRepo(session)

    async def get(self, point_id: int) -> Point:
        point = await self._points.get(point_id)
        if point is None:
            raise NotFound("A point with the provided ID doesn't exist!")
        return point

    async def list_all(self) -> list[Point]:
        return await self._points.list_all()

    async def new(self, *, token: str, address: str) -> Point:
        require_fields(token, address)
        await self._auth.require(token, IsHead())

        point_id = await unused_public_id(self._points.get)
        point = await self._points.create(point_id=point_id, address=address.strip())
        await self._session.commit()
        log.info("point.created", point_id=point_id)
        return point

    async def update(self, *, token: str, point_id: int, updates: dict[str, str]) -> Point:
        require_fields(token, point_id, updates)
        await self._auth.require(token, AnyOf(IsHead(), IsGeneralBoundTo(point_id)))
        point = await self.get(point_id)

        for key, value in updates.items():
            if key == "address":
                require_fields(value)
                await self._points.patch(point, address=value.strip())
            elif key == "+pic":
                if not await self._images.exists(value):
                    raise Conflict("Cannot attach a non-existent image!")
                if value not in point.pics:
                    await self._points.patch(point, pics=[*point.pics, value])
            elif key == "-pic":
                if value not in point.pics:
                    raise Conflict("The picture is not attached to this point!")
                await self._points.patch(point, pics=[p for p in point.pics if p != value])
            else:
                raise InvalidArgument(f"Cannot perform the update {key!r}.")

        await self._session.commit()
        return point

    async def delete(self, *, token: str, point_id: int) -> int:
        require_fields(token, point_id)
        await self._auth.require(token, IsHead())
        await self.get(point_id)

        await self._points.delete(point_id)
        unbound = await self._admins.unbind_point(point_id)
        await self._session.commit()
        log.info("point.deleted", point_id=point_id, unbound_admins=unbound)
        return unbound

    async def staff_action(
        self, *, token: str, target_token: str, point_id: int, action: StaffAction
    ) -> Point:
        require_fields(token, target_token, point_id, action)
        if action not in ("hire", "fire"):
            raise InvalidArgument(f"Unknown staff action {action!r}.")

        caller = await self._auth.require_admin(token)
        target = await self._auth.resolve_token(target_token)
        if target is None:
            raise NotFound("The target token doesn't belong to any admin.")
        if not may_manage_staff(caller, target, point_id):
            raise Unauthorized("Insufficient permissions to manage this point's staff.")
        point = await self.get(point_id)

        target_key = str(target.id)
        if action == "hire":
            if target.bound_to is not None and target.bound_to != point_id:
                raise Conflict("The admin already works at another point.")
            await self._admins.set_bound_to(target.id, point_id)
            if target_key not in point.supervisors:
                await self._points.patch(point, supervisors=[*point.supervisors, target_key])
        else:
            if target.bound_to != point_id:
                raise Conflict("The admin doesn't work at this point.")
            await self._admins.set_bound_to(target.id, None)
            await self._points.patch(
                point, supervisors=[s for s in point.supervisors if s != target_key]
            )

        await self._session.commit()
        log.info("point.staff_changed", point_id=point_id, action=action, admin_id=target_key)
        return point
