"""Customer request/response schemas for API contracts."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import Address, EmailText, FormModel, PartialUpdateModel


class CustomerCreateRequest(FormModel):
    name: str = Field(min_length=2, max_length=255)
    email: EmailText = Field(max_length=320)
    phone: str | None = Field(default=None, max_length=64)
    company: str | None = Field(default=None, max_length=255)
    address: Address | None = None


class CustomerUpdateRequest(PartialUpdateModel):
    required_fields = ("name", "email")

    name: str | None = Field(default=None, min_length=2, max_length=255)
    email: EmailText | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=64)
    company: str | None = Field(default=None, max_length=255)
    address: Address | None = None


class CustomerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str | None = None
    company: str | None = None
    address: Address | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
