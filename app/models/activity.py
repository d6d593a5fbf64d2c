"""Activity model module."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import AuditMixin, Base
from app.models.enums import ActivityPriority, ActivityType


class Activity(Base, AuditMixin):
    __tablename__ = "activities"
    __table_args__ = (
        Index("idx_activities_customer", "customer_id"),
        Index("idx_activities_deal", "deal_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    type: Mapped[ActivityType] = mapped_column(
        Enum(ActivityType, values_callable=lambda e: [m.value for m in e]), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    customer_id: Mapped[int | None] = mapped_column(ForeignKey("customers.id", ondelete="CASCADE"))
    deal_id: Mapped[int | None] = mapped_column(ForeignKey("deals.id", ondelete="CASCADE"))
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    meeting_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    next_action: Mapped[str | None] = mapped_column(String(500))
    priority: Mapped[ActivityPriority] = mapped_column(
        Enum(ActivityPriority, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ActivityPriority.MEDIUM,
    )
