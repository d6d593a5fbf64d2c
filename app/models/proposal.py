"""Proposal (quote) and proposal item model module."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import AuditMixin, Base
from app.models.enums import ProposalItemType, ProposalStatus, SubscriptionInterval

proposal_contacts = Table(
    "proposal_contacts",
    Base.metadata,
    Column("proposal_id", ForeignKey("proposals.id", ondelete="CASCADE"), primary_key=True),
    Column("contact_id", ForeignKey("contacts.id", ondelete="CASCADE"), primary_key=True),
)


class Proposal(Base, AuditMixin):
    __tablename__ = "proposals"
    __table_args__ = (
        Index("idx_proposals_customer", "customer_id"),
        Index("idx_proposals_deal", "deal_id"),
        Index("idx_proposals_status", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False)
    deal_id: Mapped[int | None] = mapped_column(ForeignKey("deals.id", ondelete="SET NULL"))
    subtotal: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    discount_percentage: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False, default=0)
    discount_amount: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    tax_percentage: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False, default=0)
    tax_amount: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    total: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    subscription_value: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    one_time_value: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    status: Mapped[ProposalStatus] = mapped_column(
        Enum(ProposalStatus, values_callable=lambda e: [m.value for m in e]),
        default=ProposalStatus.DRAFT,
        nullable=False,
    )
    valid_until: Mapped[date | None] = mapped_column(Date)
    notes: Mapped[str | None] = mapped_column(Text)
    terms: Mapped[str | None] = mapped_column(Text)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    viewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    customer = relationship("Customer")
    deal = relationship("Deal")
    items = relationship(
        "ProposalItem",
        back_populates="proposal",
        cascade="all, delete-orphan",
        order_by="ProposalItem.position",
    )
    contacts = relationship("Contact", secondary=proposal_contacts)

    @property
    def contact_ids(self) -> list[int]:
        return [contact.id for contact in self.contacts]


class ProposalItem(Base):
    __tablename__ = "proposal_items"
    __table_args__ = (Index("idx_proposal_items_proposal", "proposal_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    proposal_id: Mapped[int] = mapped_column(ForeignKey("proposals.id", ondelete="CASCADE"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    item_type: Mapped[ProposalItemType] = mapped_column(
        Enum(ProposalItemType, values_callable=lambda e: [m.value for m in e]),
        default=ProposalItemType.PRODUCT,
        nullable=False,
    )
    product_id: Mapped[int | None] = mapped_column(ForeignKey("products.id", ondelete="SET NULL"))
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    unit_price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    total: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    is_subscription: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    subscription_interval: Mapped[SubscriptionInterval | None] = mapped_column(
        Enum(SubscriptionInterval, values_callable=lambda e: [m.value for m in e])
    )

    proposal = relationship("Proposal", back_populates="items")
