"""Activity request/response schemas for API contracts."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import ActivityPriority, ActivityType
from app.schemas.common import FormModel, PartialUpdateModel


class ActivityCreateRequest(FormModel):
    type: ActivityType
    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    customer_id: int | None = Field(default=None, ge=1)
    deal_id: int | None = Field(default=None, ge=1)
    completed: bool = False
    due_date: datetime | None = None
    meeting_date: datetime | None = None
    next_action: str | None = Field(default=None, max_length=500)
    priority: ActivityPriority = ActivityPriority.MEDIUM


class ActivityUpdateRequest(PartialUpdateModel):
    required_fields = ("type", "title", "completed", "priority")

    type: ActivityType | None = None
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=10000)
    customer_id: int | None = Field(default=None, ge=1)
    deal_id: int | None = Field(default=None, ge=1)
    completed: bool | None = None
    due_date: datetime | None = None
    meeting_date: datetime | None = None
    next_action: str | None = Field(default=None, max_length=500)
    priority: ActivityPriority | None = None


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: ActivityType
    title: str
    description: str | None = None
    customer_id: int | None = None
    deal_id: int | None = None
    completed: bool
    due_date: datetime | None = None
    meeting_date: datetime | None = None
    next_action: str | None = None
    priority: ActivityPriority
    created_at: datetime | None = None
    updated_at: datetime | None = None
