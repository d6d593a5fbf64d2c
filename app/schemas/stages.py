"""Deal stage request/response schemas for API contracts."""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from app.schemas.common import FormModel, PartialUpdateModel
from app.utils.validators import is_valid_color


def _check_color(value: str) -> str:
    if not is_valid_color(value):
        raise ValueError("Color must be a hex value such as #3B82F6")
    return value.upper()


HexColor = Annotated[str, AfterValidator(_check_color)]


class StageCreateRequest(FormModel):
    name: str = Field(min_length=1, max_length=100)
    color: HexColor = "#6B7280"
    order_index: int | None = Field(default=None, ge=0)
    is_default: bool = False


class StageUpdateRequest(PartialUpdateModel):
    required_fields = ("name", "color", "order_index", "is_default")

    name: str | None = Field(default=None, min_length=1, max_length=100)
    color: HexColor | None = None
    order_index: int | None = Field(default=None, ge=0)
    is_default: bool | None = None


class StageReorderRequest(BaseModel):
    stage_ids: list[int] = Field(min_length=1)


class StageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str
    order_index: int
    is_default: bool
