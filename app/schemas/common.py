"""Common schema module."""

from __future__ import annotations

from typing import Annotated, Any, ClassVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from app.utils.validators import is_valid_email


class FormModel(BaseModel):
    """Base for request bodies: trims strings so blank input fails ``min_length``; rejects inf and NaN."""

    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)


class PartialUpdateModel(FormModel):
    """Base for PATCH bodies.

    Fields listed in ``required_fields`` may be omitted but not cleared.
    """

    required_fields: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def _reject_cleared_required_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            cleared = sorted(name for name in cls.required_fields if name in data and data[name] is None)
            if cleared:
                raise ValueError(f"Required fields cannot be cleared: {', '.join(cleared)}")
        return data

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class Address(FormModel):
    street: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=120)
    state: str | None = Field(default=None, max_length=120)
    zip_code: str | None = Field(default=None, max_length=32)
    country: str | None = Field(default=None, max_length=120)


def check_email(value: str | None) -> str | None:
    """Shared field validator body for email fields."""
    if value is None:
        return value
    if not is_valid_email(value):
        raise ValueError("Invalid email address")
    return value.lower()


EmailText = Annotated[str, AfterValidator(check_email)]
