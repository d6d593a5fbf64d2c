"""Company profile request/response schemas for API contracts."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import Address, EmailText, FormModel


class CompanyAddress(FormModel):
    street: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=120)
    state: str = Field(min_length=1, max_length=120)
    zip_code: str = Field(min_length=1, max_length=32)
    country: str = Field(min_length=1, max_length=120)


class CompanyUpsertRequest(FormModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailText = Field(max_length=320)
    phone: str | None = Field(default=None, max_length=64)
    website: str | None = Field(default=None, max_length=500)
    tax_id: str | None = Field(default=None, max_length=64)
    address: CompanyAddress

    @field_validator("website")
    @classmethod
    def _check_website(cls, value: str | None) -> str | None:
        if not value:
            return None
        if not value.startswith(("http://", "https://")):
            raise ValueError("Website must be an http(s) URL")
        return value


class CompanyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str | None = None
    website: str | None = None
    tax_id: str | None = None
    address: Address | None = None
    logo_key: str | None = None
    logo_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UploadLimits(BaseModel):
    max_size: int
    allowed_types: list[str]
    allowed_extensions: list[str]
