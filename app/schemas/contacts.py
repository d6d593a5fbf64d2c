"""Contact request/response schemas for API contracts."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import EmailText, FormModel, PartialUpdateModel


class ContactCreateRequest(FormModel):
    customer_id: int | None = Field(default=None, ge=1)
    first_name: str = Field(min_length=1, max_length=120)
    last_name: str = Field(min_length=1, max_length=120)
    email: EmailText = Field(max_length=320)
    phone: str | None = Field(default=None, max_length=64)
    title: str | None = Field(default=None, max_length=120)
    department: str | None = Field(default=None, max_length=120)
    is_primary: bool = False


class ContactUpdateRequest(PartialUpdateModel):
    required_fields = ("first_name", "last_name", "email")

    customer_id: int | None = Field(default=None, ge=1)
    first_name: str | None = Field(default=None, min_length=1, max_length=120)
    last_name: str | None = Field(default=None, min_length=1, max_length=120)
    email: EmailText | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=64)
    title: str | None = Field(default=None, max_length=120)
    department: str | None = Field(default=None, max_length=120)


class ContactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int | None = None
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    title: str | None = None
    department: str | None = None
    is_primary: bool
    deal_ids: list[int] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
