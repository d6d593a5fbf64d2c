"""Customer model module."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import AuditMixin, Base


class Customer(Base, AuditMixin):
    __tablename__ = "customers"
    __table_args__ = (Index("idx_customers_created_at", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(64))
    company: Mapped[str | None] = mapped_column(String(255))
    # street / city / state / zip_code / country
    address: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    deals = relationship("Deal", back_populates="customer")
    contacts = relationship("Contact", back_populates="customer")
