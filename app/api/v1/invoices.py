"""Invoice endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize_or_raise, not_found, service_errors
from app.core.dependencies import get_db_session
from app.models.enums import InvoiceStatus
from app.schemas.invoices import (
    InvoiceCreateRequest,
    InvoiceFromDealRequest,
    InvoiceResponse,
    InvoiceStatusUpdateRequest,
)
from app.services.invoice_service import InvoiceService

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get("", response_model=list[InvoiceResponse])
def list_invoices(
    customer_id: int | None = Query(default=None, ge=1),
    invoice_status: InvoiceStatus | None = Query(default=None, alias="status"),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[InvoiceResponse]:
    authorize_or_raise(authorization, scopes=["invoices.read"])
    rows = InvoiceService(db).list_invoices(customer_id=customer_id, status=invoice_status)
    return [InvoiceResponse.model_validate(row) for row in rows]


@router.get("/next-number")
def next_invoice_number(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> dict:
    authorize_or_raise(authorization, scopes=["invoices.read"])
    return {"invoice_number": InvoiceService(db).next_invoice_number()}


@router.post("/refresh-overdue", response_model=list[InvoiceResponse])
def refresh_overdue(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[InvoiceResponse]:
    authorize_or_raise(authorization, scopes=["invoices.write"])
    with service_errors():
        rows = InvoiceService(db).refresh_overdue()
    return [InvoiceResponse.model_validate(row) for row in rows]


@router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(
    invoice_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> InvoiceResponse:
    authorize_or_raise(authorization, scopes=["invoices.read"])
    invoice = InvoiceService(db).get_invoice(invoice_id)
    if invoice is None:
        raise not_found("Invoice", invoice_id)
    return InvoiceResponse.model_validate(invoice)


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
def create_invoice(
    payload: InvoiceCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> InvoiceResponse:
    authorize_or_raise(authorization, scopes=["invoices.write"])
    with service_errors():
        invoice = InvoiceService(db).create_invoice(payload.model_dump())
    return InvoiceResponse.model_validate(invoice)


@router.post("/from-deal/{deal_id}", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
def create_invoice_from_deal(
    deal_id: int,
    payload: InvoiceFromDealRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> InvoiceResponse:
    authorize_or_raise(authorization, scopes=["invoices.write", "deals.read"])
    with service_errors():
        invoice = InvoiceService(db).create_from_deal(deal_id, due_date=payload.due_date, notes=payload.notes)
    if invoice is None:
        raise not_found("Deal", deal_id)
    return InvoiceResponse.model_validate(invoice)


@router.patch("/{invoice_id}/status", response_model=InvoiceResponse)
def update_invoice_status(
    invoice_id: int,
    payload: InvoiceStatusUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> InvoiceResponse:
    authorize_or_raise(authorization, scopes=["invoices.write"])
    with service_errors():
        invoice = InvoiceService(db).update_status(invoice_id, payload.status)
    if invoice is None:
        raise not_found("Invoice", invoice_id)
    return InvoiceResponse.model_validate(invoice)


@router.post("/{invoice_id}/paid", response_model=InvoiceResponse)
def mark_invoice_paid(
    invoice_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> InvoiceResponse:
    authorize_or_raise(authorization, scopes=["invoices.write"])
    with service_errors():
        invoice = InvoiceService(db).mark_paid(invoice_id)
    if invoice is None:
        raise not_found("Invoice", invoice_id)
    return InvoiceResponse.model_validate(invoice)


@router.delete("/{invoice_id}")
def delete_invoice(
    invoice_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> dict:
    authorize_or_raise(authorization, scopes=["invoices.write"])
    with service_errors():
        deleted = InvoiceService(db).delete_invoice(invoice_id)
    if not deleted:
        raise not_found("Invoice", invoice_id)
    return {"status": "deleted", "id": invoice_id}
