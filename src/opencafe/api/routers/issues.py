from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from opencafe.api.deps import issue_service
from opencafe.auth.deps import bearer_token
from opencafe.services.issues import IssueService, public_issue

router = APIRouter(prefix="/v1/issues", tags=["issues"])


class RaiseIssueRequest(BaseModel):
    title: str
    contacts: str
    description: str


class ModifyIssueRequest(BaseModel):
    action: Literal["close", "+monitor", "-monitor"]


@router.post("", status_code=201)
async def raise_issue(
    body: RaiseIssueRequest,
    token: str = Depends(bearer_token),
    svc: IssueService = Depends(issue_service),
) -> dict[str, Any]:
    issue = await svc.raise_issue(
        token=token, title=body.title, contacts=body.contacts, description=body.description
    )
    return public_issue(issue)


@router.get("")
async def list_issues(
    token: str = Depends(bearer_token), svc: IssueService = Depends(issue_service)
) -> list[dict[str, Any]]:
    return [public_issue(i) for i in await svc.list_all(token=token)]


@router.patch("/{issue_id}")
async def modify_issue(
    issue_id: int,
    body: ModifyIssueRequest,
    token: str = Depends(bearer_token),
    svc: IssueService = Depends(issue_service),
) -> dict[str, Any]:
    return public_issue(await svc.modify(token=token, issue_id=issue_id, action=body.action))
