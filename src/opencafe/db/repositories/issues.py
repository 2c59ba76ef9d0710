"""
opencafe.db.repositories.issues

Repository for `Issue` tickets.

Responsibilities:
- Insert issues raised by supervisors.
- List them newest-first and flip their status flags.
"""

from __future__ import annotations

import uuid

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from opencafe.db.models import Issue


class IssueRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        issue_id: int,
        raiser_id: uuid.UUID,
        point: int | None,
        title: str,
        contacts: str,
        description: str,
    ) -> Issue:
        issue = Issue(
            issue_id=issue_id,
            is_active=True,
            is_monitored=False,
            raiser_id=raiser_id,
            point=point,
            title=title,
            contacts=contacts,
            description=description,
        )
        self._session.add(issue)
        await self._session.flush()
        return issue

    async def get(self, issue_id: int) -> Issue | None:
        stmt = select(Issue).where(Issue.issue_id == issue_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_all(self, *, limit: int = 500) -> list[Issue]:
        stmt = select(Issue).order_by(desc(Issue.raised_at)).limit(limit)
        return list((await self._session.execute(stmt)).scalars().all())

    async def set_flags(
        self,
        issue: Issue,
        *,
        is_active: bool | None = None,
        is_monitored: bool | None = None,
    ) -> Issue:
        if is_active is not None:
            issue.is_active = is_active
        if is_monitored is not None:
            issue.is_monitored = is_monitored
        await self._session.flush()
        return issue
