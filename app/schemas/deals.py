"""Deal request/response schemas for API contracts."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import SubscriptionInterval
from app.schemas.common import FormModel, PartialUpdateModel


class DealCreateRequest(FormModel):
    title: str = Field(min_length=1, max_length=255)
    customer_id: int = Field(ge=1)
    stage_id: int = Field(ge=1)
    value: float = Field(default=0, ge=0)
    # Out-of-range probabilities are clamped by the service, not rejected.
    probability: float = 50
    expected_close_date: date | None = None
    description: str | None = Field(default=None, max_length=10000)


class DealUpdateRequest(PartialUpdateModel):
    required_fields = ("title", "customer_id", "stage_id", "value", "probability")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    customer_id: int | None = Field(default=None, ge=1)
    stage_id: int | None = Field(default=None, ge=1)
    value: float | None = Field(default=None, ge=0)
    probability: float | None = None
    expected_close_date: date | None = None
    description: str | None = Field(default=None, max_length=10000)


class DealStageMoveRequest(BaseModel):
    stage_id: int = Field(ge=1)


class LineItemCreateRequest(FormModel):
    # Optional client-generated identifier so optimistic copies keep their id.
    id: str | None = Field(default=None, min_length=1, max_length=36)
    product_id: int = Field(ge=1)
    quantity: int = Field(default=1, ge=1)
    custom_price: float | None = Field(default=None, ge=0)


class DealContactsRequest(BaseModel):
    contact_ids: list[int] = Field(default_factory=list)


class LineItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_id: int | None = None
    product_name: str
    price: float
    quantity: int
    total: float
    is_subscription: bool
    subscription_interval: SubscriptionInterval | None = None


class DealResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    value: float
    probability: int
    customer_id: int
    stage_id: int
    expected_close_date: date | None = None
    subscription_value: float
    one_time_value: float
    line_items: list[LineItemResponse] = Field(default_factory=list)
    contact_ids: list[int] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
