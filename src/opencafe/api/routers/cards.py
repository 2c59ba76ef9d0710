"""
opencafe.api.routers.cards

Loyalty card endpoints.

Responsibilities:
- Issue a card for a customer and verify cards by number.
- Let customers look up their own card; let admins accrue/retract points.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from opencafe.api.deps import card_service
from opencafe.auth.deps import bearer_token
from opencafe.services.cards import CardService

router = APIRouter(prefix="/v1/cards", tags=["cards"])


class IssueCardRequest(BaseModel):
    owner_internal_id: int


class CardOwnerRequest(BaseModel):
    email: str
    password: str


class BalanceChangeRequest(BaseModel):
    amount: int


@router.post("", status_code=201)
async def issue(body: IssueCardRequest, svc: CardService = Depends(card_service)) -> dict[str, Any]:
    number = await svc.issue(owner_internal_id=body.owner_internal_id)
    return {"id": number}


@router.get("/{number}")
async def verify(number: int, svc: CardService = Depends(card_service)) -> dict[str, Any]:
    return await svc.verify(number=number)


@router.post("/mine")
async def get_own(
    body: CardOwnerRequest, svc: CardService = Depends(card_service)
) -> dict[str, Any]:
    return await svc.get(email=body.email, password=body.password)


@router.post("/{number}/accrue")
async def accrue(
    number: int,
    body: BalanceChangeRequest,
    token: str = Depends(bearer_token),
    svc: CardService = Depends(card_service),
) -> dict[str, Any]:
    return await svc.accrue(token=token, number=number, amount=body.amount)


@router.post("/{number}/retract")
async def retract(
    number: int,
    body: BalanceChangeRequest,
    token: str = Depends(bearer_token),
    svc: CardService = Depends(card_service),
) -> dict[str, Any]:
    return await svc.retract(token=token, number=number, amount=body.amount)
