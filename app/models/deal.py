"""Deal and deal line item model module."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Boolean, Date, Enum, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import AuditMixin, Base
from app.models.contact import deal_contacts
from app.models.enums import SubscriptionInterval


class Deal(Base, AuditMixin):
    __tablename__ = "deals"
    __table_args__ = (
        Index("idx_deals_stage", "stage_id"),
        Index("idx_deals_customer", "customer_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    value: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    probability: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False)
    stage_id: Mapped[int] = mapped_column(ForeignKey("deal_stages.id", ondelete="RESTRICT"), nullable=False)
    expected_close_date: Mapped[date | None] = mapped_column(Date)
    subscription_value: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    one_time_value: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)

    customer = relationship("Customer", back_populates="deals")
    stage = relationship("DealStage")
    line_items = relationship(
        "DealLineItem",
        back_populates="deal",
        cascade="all, delete-orphan",
        order_by="DealLineItem.position",
    )
    contacts = relationship("Contact", secondary=deal_contacts, back_populates="deals")

    @property
    def contact_ids(self) -> list[int]:
        return [contact.id for contact in self.contacts]


class DealLineItem(Base):
    __tablename__ = "deal_line_items"
    __table_args__ = (Index("idx_deal_line_items_deal", "deal_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    deal_id: Mapped[int] = mapped_column(ForeignKey("deals.id", ondelete="CASCADE"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    product_id: Mapped[int | None] = mapped_column(ForeignKey("products.id", ondelete="SET NULL"))
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    is_subscription: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    subscription_interval: Mapped[SubscriptionInterval | None] = mapped_column(
        Enum(SubscriptionInterval, values_callable=lambda e: [m.value for m in e])
    )

    deal = relationship("Deal", back_populates="line_items")
