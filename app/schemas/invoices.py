"""Invoice request/response schemas for API contracts."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import InvoiceStatus
from app.schemas.common import FormModel


class InvoiceItemRequest(FormModel):
    product_id: int = Field(ge=1)
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)


class InvoiceCreateRequest(FormModel):
    customer_id: int = Field(ge=1)
    deal_id: int | None = Field(default=None, ge=1)
    due_date: date
    items: list[InvoiceItemRequest] = Field(min_length=1)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    notes: str | None = Field(default=None, max_length=10000)


class InvoiceFromDealRequest(FormModel):
    due_date: date
    notes: str | None = Field(default=None, max_length=10000)


class InvoiceStatusUpdateRequest(BaseModel):
    status: InvoiceStatus


class InvoiceItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int | None = None
    product_name: str
    quantity: int
    price: float
    total: float


class InvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_number: str
    customer_id: int
    deal_id: int | None = None
    items: list[InvoiceItemResponse] = Field(default_factory=list)
    subtotal: float
    tax: float
    total: float
    status: InvoiceStatus
    due_date: date
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
