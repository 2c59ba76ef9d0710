from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from opencafe.api.deps import customer_service
from opencafe.services.customers import CustomerService, public_customer

router = APIRouter(prefix="/v1/customers", tags=["customers"])


class RegisterCustomerRequest(BaseModel):
    username: str
    email: str
    password: str


class CustomerLoginRequest(BaseModel):
    email: str
    password: str


@router.post("", status_code=201)
async def register(
    body: RegisterCustomerRequest, svc: CustomerService = Depends(customer_service)
) -> dict[str, Any]:
    customer = await svc.register(username=body.username, email=body.email, password=body.password)
    return public_customer(customer)


@router.post("/login")
async def login(
    body: CustomerLoginRequest, svc: CustomerService = Depends(customer_service)
) -> dict[str, Any]:
    return public_customer(await svc.login(email=body.email, password=body.password))
