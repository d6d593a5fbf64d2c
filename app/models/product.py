"""Product model module."""

from __future__ import annotations

from sqlalchemy import Boolean, Enum, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import AuditMixin, Base
from app.models.enums import SubscriptionInterval


class Product(Base, AuditMixin):
    __tablename__ = "products"
    __table_args__ = (Index("idx_products_name", "name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    is_subscription: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    subscription_interval: Mapped[SubscriptionInterval | None] = mapped_column(
        Enum(SubscriptionInterval, values_callable=lambda e: [m.value for m in e])
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
