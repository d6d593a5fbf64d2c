from __future__ import annotations

import pytest

from app.core.exceptions import ValidationError
from app.models import Activity, ActivityType, Customer, DealStage, Invoice, Product, SubscriptionInterval
from app.services.deal_service import DealService
from app.services.invoice_service import InvoiceService


def _seed(session):
    customer = Customer(name="Acme Corp", email="ops@acme.io")
    lead = DealStage(name="Lead", color="#6B7280", order_index=1)
    proposal = DealStage(name="Proposal", color="#F59E0B", order_index=2)
    hosting = Product(
        name="Hosting",
        price=100,
        is_subscription=True,
        subscription_interval=SubscriptionInterval.MONTHLY,
    )
    setup = Product(name="Setup", price=50, is_subscription=False)
    session.add_all([customer, lead, proposal, hosting, setup])
    session.commit()
    return customer, lead, proposal, hosting, setup


def _create_deal(service, customer, stage, **extra):
    return service.create_deal({"title": "Platform rollout", "customer_id": customer.id, "stage_id": stage.id, **extra})


def test_create_deal_clamps_probability(session):
    customer, lead, *_ = _seed(session)
    service = DealService(db=session)

    high = _create_deal(service, customer, lead, probability=150)
    low = _create_deal(service, customer, lead, probability=-5)

    assert high.probability == 100
    assert low.probability == 0
    assert high.value == 0


def test_create_deal_rejects_unknown_references(session):
    customer, lead, *_ = _seed(session)
    service = DealService(db=session)

    with pytest.raises(ValidationError, match="Unknown customer"):
        service.create_deal({"title": "Ghost", "customer_id": 999, "stage_id": lead.id})
    with pytest.raises(ValidationError, match="Unknown stage"):
        service.create_deal({"title": "Ghost", "customer_id": customer.id, "stage_id": 999})


def test_line_items_drive_deal_value(session):
    customer, lead, _, hosting, setup = _seed(session)
    service = DealService(db=session)
    deal = _create_deal(service, customer, lead)

    service.add_line_item(deal.id, hosting.id, quantity=2)
    deal = service.add_line_item(deal.id, setup.id, quantity=1, custom_price=75)

    assert deal.subscription_value == 200
    assert deal.one_time_value == 75
    assert deal.value == 275
    assert [item.product_name for item in deal.line_items] == ["Hosting", "Setup"]
    assert deal.line_items[0].subscription_interval == SubscriptionInterval.MONTHLY
    assert deal.line_items[1].subscription_interval is None


def test_remove_line_item_recalculates_down_to_zero(session):
    customer, lead, _, hosting, setup = _seed(session)
    service = DealService(db=session)
    deal = _create_deal(service, customer, lead)
    service.add_line_item(deal.id, hosting.id, item_id="line-a")
    service.add_line_item(deal.id, setup.id, item_id="line-b")

    deal = service.remove_line_item(deal.id, "line-a")
    assert [item.id for item in deal.line_items] == ["line-b"]
    assert deal.subscription_value == 0
    assert deal.value == 50

    deal = service.remove_line_item(deal.id, "line-b")
    assert deal.line_items == []
    assert deal.value == 0


def test_remove_unknown_line_item_returns_none(session):
    customer, lead, _, hosting, _ = _seed(session)
    service = DealService(db=session)
    deal = _create_deal(service, customer, lead)
    service.add_line_item(deal.id, hosting.id, item_id="line-a")

    assert service.remove_line_item(deal.id, "missing") is None
    assert service.remove_line_item(999, "line-a") is None
    assert len(service.get_deal(deal.id).line_items) == 1


def test_add_line_item_validates_input(session):
    customer, lead, _, hosting, _ = _seed(session)
    service = DealService(db=session)
    deal = _create_deal(service, customer, lead)

    with pytest.raises(ValidationError, match="Quantity"):
        service.add_line_item(deal.id, hosting.id, quantity=0)
    with pytest.raises(ValidationError, match="negative"):
        service.add_line_item(deal.id, hosting.id, custom_price=-1)
    with pytest.raises(ValidationError, match="Unknown product"):
        service.add_line_item(deal.id, 999)
    assert service.add_line_item(999, hosting.id) is None


def test_manual_value_only_without_line_items(session):
    customer, lead, _, hosting, _ = _seed(session)
    service = DealService(db=session)
    deal = _create_deal(service, customer, lead)

    updated = service.update_deal(deal.id, {"value": 1200, "probability": 400})
    assert updated.value == 1200
    assert updated.probability == 100

    service.add_line_item(deal.id, hosting.id)
    with pytest.raises(ValidationError, match="derived"):
        service.update_deal(deal.id, {"value": 5})
    assert service.update_deal(999, {"title": "Nope"}) is None


def test_move_to_stage_and_list_by_stage(session):
    customer, lead, proposal, *_ = _seed(session)
    service = DealService(db=session)
    deal = _create_deal(service, customer, lead)

    moved = service.move_to_stage(deal.id, proposal.id)
    assert moved.stage_id == proposal.id
    assert [item.id for item in service.list_by_stage(proposal.id)] == [deal.id]
    assert service.list_by_stage(lead.id) == []
    assert [item.id for item in service.list_by_customer(customer.id)] == [deal.id]

    with pytest.raises(ValidationError):
        service.move_to_stage(deal.id, 999)


def test_delete_deal_detaches_invoices_and_drops_activities(session):
    customer, lead, _, hosting, _ = _seed(session)
    service = DealService(db=session)
    deal = _create_deal(service, customer, lead)
    service.add_line_item(deal.id, hosting.id)
    invoice = InvoiceService(db=session, tax_rate=0).create_from_deal(deal.id, due_date="2026-11-30")
    session.add(Activity(type=ActivityType.NOTE, title="Kickoff", deal_id=deal.id))
    session.commit()

    assert service.delete_deal(deal.id) is True
    session.expire_all()
    assert session.get(Invoice, invoice.id).deal_id is None
    assert session.query(Activity).count() == 0
    assert service.delete_deal(deal.id) is False


def test_set_contacts_rejects_unknown_ids(session):
    customer, lead, *_ = _seed(session)
    service = DealService(db=session)
    deal = _create_deal(service, customer, lead)

    with pytest.raises(ValidationError, match="Unknown contacts"):
        service.set_contacts(deal.id, [41])
    assert service.set_contacts(deal.id, []).contact_ids == []
