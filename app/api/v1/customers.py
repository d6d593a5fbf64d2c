"""Customer endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize_or_raise, not_found, service_errors
from app.core.dependencies import get_db_session
from app.schemas.customers import CustomerCreateRequest, CustomerResponse, CustomerUpdateRequest
from app.services.customer_service import CustomerService

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=list[CustomerResponse])
def list_customers(
    q: str | None = Query(default=None, max_length=200),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[CustomerResponse]:
    authorize_or_raise(authorization, scopes=["customers.read"])
    return [CustomerResponse.model_validate(row) for row in CustomerService(db).list_customers(q=q)]


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> CustomerResponse:
    authorize_or_raise(authorization, scopes=["customers.read"])
    customer = CustomerService(db).get_customer(customer_id)
    if customer is None:
        raise not_found("Customer", customer_id)
    return CustomerResponse.model_validate(customer)


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> CustomerResponse:
    authorize_or_raise(authorization, scopes=["customers.write"])
    with service_errors():
        customer = CustomerService(db).create_customer(payload.model_dump())
    return CustomerResponse.model_validate(customer)


@router.patch("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    payload: CustomerUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> CustomerResponse:
    authorize_or_raise(authorization, scopes=["customers.write"])
    with service_errors():
        customer = CustomerService(db).update_customer(customer_id, payload.changes())
    if customer is None:
        raise not_found("Customer", customer_id)
    return CustomerResponse.model_validate(customer)


@router.delete("/{customer_id}")
def delete_customer(
    customer_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> dict:
    authorize_or_raise(authorization, scopes=["customers.write"])
    with service_errors():
        deleted = CustomerService(db).delete_customer(customer_id)
    if not deleted:
        raise not_found("Customer", customer_id)
    return {"status": "deleted", "id": customer_id}
