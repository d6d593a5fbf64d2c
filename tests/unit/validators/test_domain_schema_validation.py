from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from app.schemas.company import CompanyUpsertRequest
from app.schemas.customers import CustomerCreateRequest, CustomerUpdateRequest
from app.schemas.deals import DealCreateRequest, DealUpdateRequest, LineItemCreateRequest
from app.schemas.invoices import InvoiceCreateRequest
from app.schemas.products import ProductCreateRequest
from app.schemas.stages import StageCreateRequest


def test_customer_requires_name_and_valid_email():
    payload = CustomerCreateRequest(name="  Acme Corp ", email="Sales@Acme.io")
    assert payload.name == "Acme Corp"
    assert payload.email == "sales@acme.io"

    with pytest.raises(ValidationError):
        CustomerCreateRequest(name="   ", email="sales@acme.io")
    with pytest.raises(ValidationError):
        CustomerCreateRequest(name="A", email="sales@acme.io")
    with pytest.raises(ValidationError):
        CustomerCreateRequest(name="Acme", email="not-an-email")


def test_partial_update_allows_omitting_but_not_clearing_required_fields():
    assert CustomerUpdateRequest(phone="555").changes() == {"phone": "555"}
    assert CustomerUpdateRequest(phone=None).changes() == {"phone": None}
    with pytest.raises(ValidationError, match="cannot be cleared"):
        CustomerUpdateRequest(name=None)


def test_deal_rejects_negative_value_and_empty_title():
    with pytest.raises(ValidationError):
        DealCreateRequest(title="Renewal", customer_id=1, stage_id=1, value=-1)
    with pytest.raises(ValidationError):
        DealCreateRequest(title="", customer_id=1, stage_id=1)
    with pytest.raises(ValidationError):
        DealUpdateRequest(value=-0.01)


def test_deal_accepts_out_of_range_probability_for_clamping():
    payload = DealCreateRequest(title="Upsell", customer_id=1, stage_id=1, probability=140)
    assert payload.probability == 140


def test_line_item_rejects_zero_quantity_and_negative_price():
    with pytest.raises(ValidationError):
        LineItemCreateRequest(product_id=1, quantity=0)
    with pytest.raises(ValidationError):
        LineItemCreateRequest(product_id=1, custom_price=-5)


def test_product_validation_rules():
    with pytest.raises(ValidationError):
        ProductCreateRequest(name="Support", price=-10)
    with pytest.raises(ValidationError):
        ProductCreateRequest(name="", price=10)
    with pytest.raises(ValidationError, match="subscription_interval"):
        ProductCreateRequest(name="Hosting", price=10, is_subscription=True)

    one_time = ProductCreateRequest(name="Setup", price=10, subscription_interval="yearly")
    assert one_time.subscription_interval is None


def test_invoice_needs_items_with_positive_quantity():
    with pytest.raises(ValidationError):
        InvoiceCreateRequest(customer_id=1, due_date=date(2026, 11, 1), items=[])
    with pytest.raises(ValidationError):
        InvoiceCreateRequest(
            customer_id=1,
            due_date=date(2026, 11, 1),
            items=[{"product_id": 1, "quantity": 0, "unit_price": 5}],
        )
    payload = InvoiceCreateRequest(
        customer_id=1,
        due_date=date(2026, 11, 1),
        items=[{"product_id": 1, "quantity": 2, "unit_price": 5}],
    )
    assert payload.status.value == "draft"


def test_company_requires_full_address_and_http_website():
    base = {
        "name": "PipeDesk Ltd",
        "email": "billing@pipedesk.io",
        "address": {"street": "1 Main St", "city": "Austin", "state": "TX", "zip_code": "78701", "country": "US"},
    }
    assert CompanyUpsertRequest(**base, website="https://pipedesk.io").website == "https://pipedesk.io"
    with pytest.raises(ValidationError):
        CompanyUpsertRequest(**base, website="pipedesk.io")
    with pytest.raises(ValidationError):
        CompanyUpsertRequest(**{**base, "address": {**base["address"], "city": " "}})


def test_stage_color_must_be_hex():
    assert StageCreateRequest(name="Demo", color="#3b82f6").color == "#3B82F6"
    with pytest.raises(ValidationError):
        StageCreateRequest(name="Demo", color="blue")


@pytest.mark.parametrize("amount", [float("inf"), float("-inf"), float("nan")])
def test_amounts_must_be_finite(amount):
    with pytest.raises(ValidationError):
        DealCreateRequest(title="Rollout", customer_id=1, stage_id=1, value=amount)
    with pytest.raises(ValidationError):
        ProductCreateRequest(name="Hosting", price=amount)
    with pytest.raises(ValidationError):
        LineItemCreateRequest(product_id=1, custom_price=amount)
    with pytest.raises(ValidationError):
        InvoiceCreateRequest(
            customer_id=1,
            due_date=date(2026, 11, 1),
            items=[{"product_id": 1, "quantity": 1, "unit_price": amount}],
        )
