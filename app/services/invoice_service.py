"""Invoice service: numbering, totals, status transitions."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, timezone
from typing import Any

from app.core.config import get_config
from app.core.exceptions import ValidationError
from app.models import Customer, Deal, Invoice, InvoiceItem, InvoiceStatus, Product
from app.services.base_service import BaseService
from app.services.deal_values import line_total
from app.utils.ids import format_invoice_number

logger = logging.getLogger(__name__)


class InvoiceService(BaseService):
    """Service for invoice CRUD and payment status transitions."""

    def __init__(self, db=None, tax_rate: float | None = None) -> None:
        super().__init__(db)
        self.tax_rate = get_config().INVOICE_TAX_RATE if tax_rate is None else tax_rate

    def _to_date(self, due_date: str | date | datetime) -> date:
        if isinstance(due_date, datetime):
            return due_date.date()
        if isinstance(due_date, date):
            return due_date
        return datetime.strptime(due_date, "%Y-%m-%d").date()

    def list_invoices(self, customer_id: int | None = None, status: InvoiceStatus | None = None) -> list[Invoice]:
        query = self.db.query(Invoice)
        if customer_id is not None:
            query = query.filter(Invoice.customer_id == customer_id)
        if status is not None:
            query = query.filter(Invoice.status == status)
        return query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()

    def get_invoice(self, invoice_id: int) -> Invoice | None:
        return self.db.query(Invoice).filter(Invoice.id == invoice_id).first()

    def next_invoice_number(self) -> str:
        """Next sequential number; skips ahead if a number is already taken."""
        sequence = self.db.query(Invoice).count() + 1
        number = format_invoice_number(sequence)
        while self.db.query(Invoice.id).filter(Invoice.invoice_number == number).first() is not None:
            sequence += 1
            number = format_invoice_number(sequence)
        return number

    def _build_invoice(
        self,
        customer_id: int,
        deal_id: int | None,
        due_date: str | date | datetime,
        items: Iterable[InvoiceItem],
        status: InvoiceStatus,
        notes: str | None,
    ) -> Invoice:
        invoice_items = list(items)
        if not invoice_items:
            raise ValidationError("An invoice needs at least one item.")
        subtotal = round(sum(item.total for item in invoice_items), 2)
        tax = round(subtotal * self.tax_rate, 2)
        invoice = Invoice(
            invoice_number=self.next_invoice_number(),
            customer_id=customer_id,
            deal_id=deal_id,
            subtotal=subtotal,
            tax=tax,
            total=round(subtotal + tax, 2),
            status=status,
            due_date=self._to_date(due_date),
            notes=notes,
        )
        invoice.items = invoice_items
        invoice = self.save(invoice)
        logger.info(
            "invoice.created",
            extra={"event": "invoice.created", "invoice_id": invoice.id, "invoice_number": invoice.invoice_number},
        )
        return invoice

    def create_invoice(self, data: dict[str, Any]) -> Invoice:
        customer_id = data["customer_id"]
        deal_id = data.get("deal_id")
        if self.db.get(Customer, customer_id) is None:
            raise ValidationError(f"Unknown customer: {customer_id}")
        if deal_id is not None and self.db.get(Deal, deal_id) is None:
            raise ValidationError(f"Unknown deal: {deal_id}")

        items = []
        for line in data.get("items") or []:
            if line["quantity"] < 1:
                raise ValidationError("Quantity must be at least 1.")
            if line["unit_price"] < 0:
                raise ValidationError("Price cannot be negative.")
            product = self.db.get(Product, line["product_id"])
            if product is None:
                raise ValidationError(f"Unknown product: {line['product_id']}")
            items.append(
                InvoiceItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=line["quantity"],
                    price=line["unit_price"],
                    total=line_total(line["unit_price"], line["quantity"]),
                )
            )

        return self._build_invoice(
            customer_id=customer_id,
            deal_id=deal_id,
            due_date=data["due_date"],
            items=items,
            status=data.get("status") or InvoiceStatus.DRAFT,
            notes=data.get("notes"),
        )

    def create_from_deal(self, deal_id: int, due_date: str | date | datetime, notes: str | None = None) -> Invoice | None:
        """Draft an invoice for a deal's customer from the deal's line items."""
        deal = self.db.get(Deal, deal_id)
        if deal is None:
            return None
        if not deal.line_items:
            raise ValidationError("Deal has no line items to invoice.")
        items = [
            InvoiceItem(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity,
                price=line.price,
                total=line_total(line.price, line.quantity),
            )
            for line in deal.line_items
        ]
        return self._build_invoice(
            customer_id=deal.customer_id,
            deal_id=deal.id,
            due_date=due_date,
            items=items,
            status=InvoiceStatus.DRAFT,
            notes=notes,
        )

    def update_status(self, invoice_id: int, status: InvoiceStatus) -> Invoice | None:
        invoice = self.get_invoice(invoice_id)
        if invoice is None:
            return None
        invoice.status = status
        self.commit()
        self.db.refresh(invoice)
        return invoice

    def mark_paid(self, invoice_id: int) -> Invoice | None:
        return self.update_status(invoice_id, InvoiceStatus.PAID)

    def refresh_overdue(self, today: date | None = None) -> list[Invoice]:
        """Flip sent invoices past their due date to overdue."""
        current = today or datetime.now(timezone.utc).date()
        overdue = (
            self.db.query(Invoice)
            .filter(Invoice.status == InvoiceStatus.SENT, Invoice.due_date < current)
            .all()
        )
        for invoice in overdue:
            invoice.status = InvoiceStatus.OVERDUE
        if overdue:
            self.commit()
            logger.info("invoice.overdue.updated", extra={"event": "invoice.overdue.updated", "count": len(overdue)})
        return overdue

    def delete_invoice(self, invoice_id: int) -> bool:
        invoice = self.get_invoice(invoice_id)
        if invoice is None:
            return False
        self.remove(invoice)
        return True
