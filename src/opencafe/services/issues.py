"""
opencafe.services.issues

Issue tickets raised by supervisors.

Responsibilities:
- Raise issues against the supervisor's bound point.
- List issues for heads and generals.
- Close issues and toggle their monitoring flag.
"""

from __future__ import annotations

from typing import Any, Literal

from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.auth.core import AuthCore
from opencafe.auth.models import Role
from opencafe.auth.policy import (
    AnyOf,
    Capability,
    HasRole,
    IsGeneralBoundTo,
    IsHead,
    IsSupervisorOf,
)
from opencafe.db.models import Issue
from opencafe.db.repositories.issues import IssueRepo
from opencafe.db.repositories.points import PointRepo
from opencafe.errors import Conflict, InvalidArgument, NotFound
from opencafe.observability.logging import get_logger
from opencafe.services.common import require_fields, unused_public_id

log = get_logger(__name__)

IssueAction = Literal["close", "+monitor", "-monitor"]


def public_issue(issue: Issue) -> dict[str, Any]:
    return {
        "issue_id": issue.issue_id,
        "is_active": issue.is_active,
        "is_monitored": issue.is_monitored,
        "raiser_id": str(issue.raiser_id),
        "point": issue.point,
        "raised_at": issue.raised_at.isoformat(),
        "title": issue.title,
        "contacts": issue.contacts,
        "description": issue.description,
    }


def issue_handlers(issue: Issue) -> Capability:
    options: list[Capability] = [IsHead(), IsSupervisorOf(issue.raiser_id)]
    if issue.point is not None:
        options.append(IsGeneralBoundTo(issue.point))
    return AnyOf(*options)


class IssueService:
    def __init__(self, *, session: AsyncSession, auth: AuthCore) -> None:
        self._session = session
        self._auth = auth
        self._issues = IssueRepo(session)
        self._points = PointRepo(session)

    async def raise_issue(
        self, *, token: str, title: str, contacts: str, description: str
    ) -> Issue:
        require_fields(token, title, contacts, description)
        raiser = await self._auth.require(token, HasRole(Role.supervisor))

        issue_id = await unused_public_id(self._issues.get)
        issue = await self._issues.create(
            issue_id=issue_id,
            raiser_id=raiser.id,
            point=raiser.bound_to,
            title=title.strip(),
            contacts=contacts.strip(),
            description=description,
        )
        if raiser.bound_to is not None:
            point = await self._points.get(raiser.bound_to)
            if point is not None:
                await self._points.patch(point, active_issues=[*point.active_issues, issue_id])

        await self._session.commit()
        log.info("issue.raised", issue_id=issue_id, point=raiser.bound_to)
        return issue

    async def list_all(self, *, token: str) -> list[Issue]:
        require_fields(token)
        await self._auth.require(token, AnyOf(IsHead(), HasRole(Role.general)))
        return await self._issues.list_all()

    async def modify(self, *, token: str, issue_id: int, action: IssueAction) -> Issue:
        require_fields(token, issue_id, action)
        if action not in ("close", "+monitor", "-monitor"):
            raise InvalidArgument(f"Unknown issue action {action!r}.")

        issue = await self._issues.get(issue_id)
        if issue is None:
            raise NotFound("An issue with the provided ID doesn't exist!")
        admin = await self._auth.require(token, issue_handlers(issue))

        if action == "close":
            if not issue.is_active:
                raise Conflict("The issue is already closed.")
            await self._issues.set_flags(issue, is_active=False, is_monitored=False)
            point = await self._points.get(issue.point) if issue.point is not None else None
            if point is not None:
                await self._points.patch(
                    point, active_issues=[i for i in point.active_issues if i != issue_id]
                )
        else:
            await self._issues.set_flags(issue, is_monitored=action == "+monitor")

        await self._session.commit()
        log.info("issue.modified", issue_id=issue_id, action=action, by=str(admin.id))
        return issue
