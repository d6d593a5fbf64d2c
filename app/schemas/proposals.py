"""Proposal request/response schemas for API contracts."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.enums import ProposalItemType, ProposalStatus, SubscriptionInterval
from app.schemas.common import FormModel, PartialUpdateModel


class ProposalItemRequest(FormModel):
    id: str | None = Field(default=None, min_length=1, max_length=36)
    item_type: ProposalItemType = ProposalItemType.PRODUCT
    product_id: int | None = Field(default=None, ge=1)
    product_name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    quantity: int = Field(default=1, ge=1)
    unit_price: float | None = Field(default=None, ge=0)
    is_subscription: bool = False
    subscription_interval: SubscriptionInterval | None = None

    @model_validator(mode="after")
    def _product_or_named_custom(self) -> "ProposalItemRequest":
        if self.item_type is ProposalItemType.PRODUCT and self.product_id is None:
            raise ValueError("product items need a product_id")
        if self.item_type is ProposalItemType.CUSTOM and not self.product_name:
            raise ValueError("custom items need a product_name")
        return self


class ProposalCreateRequest(FormModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    customer_id: int = Field(ge=1)
    deal_id: int | None = Field(default=None, ge=1)
    contact_ids: list[int] = Field(default_factory=list)
    items: list[ProposalItemRequest] = Field(min_length=1)
    discount_percentage: float = Field(default=0, ge=0, le=100)
    tax_percentage: float = Field(default=0, ge=0, le=100)
    valid_until: date | None = None
    notes: str | None = Field(default=None, max_length=10000)
    terms: str | None = Field(default=None, max_length=10000)


class ProposalFromDealRequest(FormModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    contact_ids: list[int] = Field(default_factory=list)
    discount_percentage: float = Field(default=0, ge=0, le=100)
    tax_percentage: float = Field(default=0, ge=0, le=100)
    valid_until: date | None = None
    notes: str | None = Field(default=None, max_length=10000)
    terms: str | None = Field(default=None, max_length=10000)


class ProposalUpdateRequest(PartialUpdateModel):
    required_fields = ("title", "customer_id", "items", "discount_percentage", "tax_percentage")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    customer_id: int | None = Field(default=None, ge=1)
    deal_id: int | None = Field(default=None, ge=1)
    contact_ids: list[int] | None = None
    items: list[ProposalItemRequest] | None = Field(default=None, min_length=1)
    discount_percentage: float | None = Field(default=None, ge=0, le=100)
    tax_percentage: float | None = Field(default=None, ge=0, le=100)
    valid_until: date | None = None
    notes: str | None = Field(default=None, max_length=10000)
    terms: str | None = Field(default=None, max_length=10000)


class ProposalItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    item_type: ProposalItemType
    product_id: int | None = None
    product_name: str
    description: str | None = None
    quantity: int
    unit_price: float
    total: float
    is_subscription: bool
    subscription_interval: SubscriptionInterval | None = None


class ProposalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    customer_id: int
    deal_id: int | None = None
    contact_ids: list[int] = Field(default_factory=list)
    items: list[ProposalItemResponse] = Field(default_factory=list)
    subtotal: float
    discount_percentage: float
    discount_amount: float
    tax_percentage: float
    tax_amount: float
    total: float
    subscription_value: float
    one_time_value: float
    status: ProposalStatus
    valid_until: date | None = None
    notes: str | None = None
    terms: str | None = None
    sent_at: datetime | None = None
    viewed_at: datetime | None = None
    responded_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
