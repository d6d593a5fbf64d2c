"""Product request/response schemas for API contracts."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.enums import SubscriptionInterval
from app.schemas.common import FormModel, PartialUpdateModel


class ProductCreateRequest(FormModel):
    name: str = Field(min_length=2, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    price: float = Field(ge=0)
    is_subscription: bool = False
    subscription_interval: SubscriptionInterval | None = None
    is_active: bool = True

    @model_validator(mode="after")
    def _interval_only_for_subscriptions(self) -> "ProductCreateRequest":
        if not self.is_subscription:
            self.subscription_interval = None
        elif self.subscription_interval is None:
            raise ValueError("subscription_interval is required for subscription products")
        return self


class ProductUpdateRequest(PartialUpdateModel):
    required_fields = ("name", "price", "is_subscription", "is_active")

    name: str | None = Field(default=None, min_length=2, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    price: float | None = Field(default=None, ge=0)
    is_subscription: bool | None = None
    subscription_interval: SubscriptionInterval | None = None
    is_active: bool | None = None


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    price: float
    is_subscription: bool
    subscription_interval: SubscriptionInterval | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
