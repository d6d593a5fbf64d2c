from __future__ import annotations

from datetime import date

import pytest

from app.core.exceptions import ValidationError
from app.models import Customer, Deal, DealLineItem, DealStage, Invoice, InvoiceStatus, Product
from app.services.invoice_service import InvoiceService


def _seed(session):
    customer = Customer(name="Globex", email="ap@globex.com")
    stage = DealStage(name="Proposal", color="#F59E0B", order_index=1)
    product = Product(name="Consulting", price=150, is_subscription=False)
    session.add_all([customer, stage, product])
    session.commit()
    return customer, stage, product


def _service(session, tax_rate=0.1):
    return InvoiceService(db=session, tax_rate=tax_rate)


def _invoice_payload(customer, product, **extra):
    return {
        "customer_id": customer.id,
        "due_date": date(2026, 11, 15),
        "items": [{"product_id": product.id, "quantity": 3, "unit_price": 100}],
        **extra,
    }


def test_create_invoice_computes_totals_and_sequential_numbers(session):
    customer, _, product = _seed(session)
    service = _service(session)

    assert service.next_invoice_number() == "INV-0001"
    first = service.create_invoice(_invoice_payload(customer, product))
    second = service.create_invoice(_invoice_payload(customer, product, status=InvoiceStatus.SENT))

    assert first.invoice_number == "INV-0001"
    assert second.invoice_number == "INV-0002"
    assert first.subtotal == 300
    assert first.tax == 30
    assert first.total == 330
    assert first.status == InvoiceStatus.DRAFT
    assert second.status == InvoiceStatus.SENT
    assert first.items[0].product_name == "Consulting"


def test_next_number_skips_taken_numbers(session):
    customer, _, _ = _seed(session)
    session.add(
        Invoice(invoice_number="INV-0001", customer_id=customer.id, due_date=date(2026, 11, 1), status=InvoiceStatus.DRAFT)
    )
    session.add(
        Invoice(invoice_number="INV-0003", customer_id=customer.id, due_date=date(2026, 11, 1), status=InvoiceStatus.DRAFT)
    )
    session.commit()

    assert _service(session).next_invoice_number() == "INV-0004"


def test_create_invoice_rejects_unknown_references(session):
    customer, _, product = _seed(session)
    service = _service(session)

    with pytest.raises(ValidationError, match="Unknown customer"):
        service.create_invoice(_invoice_payload(customer, product, customer_id=999))
    with pytest.raises(ValidationError, match="Unknown product"):
        service.create_invoice(
            {**_invoice_payload(customer, product), "items": [{"product_id": 999, "quantity": 1, "unit_price": 1}]}
        )
    with pytest.raises(ValidationError, match="at least one item"):
        service.create_invoice({**_invoice_payload(customer, product), "items": []})


def test_create_from_deal_copies_line_items(session):
    customer, stage, product = _seed(session)
    deal = Deal(title="Audit", customer_id=customer.id, stage_id=stage.id, value=0, probability=50)
    deal.line_items = [
        DealLineItem(id="li-1", position=0, product_id=product.id, product_name="Consulting", price=150, quantity=2, total=300)
    ]
    empty = Deal(title="Empty", customer_id=customer.id, stage_id=stage.id, value=0, probability=10)
    session.add_all([deal, empty])
    session.commit()
    service = _service(session, tax_rate=0)

    invoice = service.create_from_deal(deal.id, due_date="2026-12-01", notes="Net 30")
    assert invoice.deal_id == deal.id
    assert invoice.customer_id == customer.id
    assert invoice.total == 300
    assert invoice.due_date == date(2026, 12, 1)
    assert [(item.product_name, item.quantity) for item in invoice.items] == [("Consulting", 2)]

    with pytest.raises(ValidationError, match="no line items"):
        service.create_from_deal(empty.id, due_date="2026-12-01")
    assert service.create_from_deal(999, due_date="2026-12-01") is None


def test_refresh_overdue_only_touches_sent_invoices(session):
    customer, _, product = _seed(session)
    service = _service(session)
    sent = service.create_invoice(_invoice_payload(customer, product, status=InvoiceStatus.SENT))
    draft = service.create_invoice(_invoice_payload(customer, product))
    future = service.create_invoice(
        _invoice_payload(customer, product, status=InvoiceStatus.SENT, due_date=date(2027, 1, 1))
    )

    changed = service.refresh_overdue(today=date(2026, 11, 20))

    assert [invoice.id for invoice in changed] == [sent.id]
    assert service.get_invoice(sent.id).status == InvoiceStatus.OVERDUE
    assert service.get_invoice(draft.id).status == InvoiceStatus.DRAFT
    assert service.get_invoice(future.id).status == InvoiceStatus.SENT


def test_status_updates_filters_and_delete(session):
    customer, _, product = _seed(session)
    service = _service(session)
    invoice = service.create_invoice(_invoice_payload(customer, product))

    assert service.mark_paid(invoice.id).status == InvoiceStatus.PAID
    assert [item.id for item in service.list_invoices(status=InvoiceStatus.PAID)] == [invoice.id]
    assert service.list_invoices(status=InvoiceStatus.SENT) == []
    assert service.update_status(999, InvoiceStatus.SENT) is None

    assert service.delete_invoice(invoice.id) is True
    assert service.delete_invoice(invoice.id) is False
