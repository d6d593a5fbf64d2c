from __future__ import annotations

import pytest

from app.core.exceptions import ConflictError, ValidationError
from app.models import Customer, Deal, DealLineItem, SubscriptionInterval
from app.services.deal_stage_service import DEFAULT_STAGES, DealStageService, is_lost_stage, is_won_stage
from app.services.product_service import ProductService


def test_list_stages_seeds_defaults_once(session):
    service = DealStageService(db=session)

    stages = service.list_stages()
    assert [stage.name for stage in stages] == [name for name, _ in DEFAULT_STAGES]
    assert [stage.order_index for stage in stages] == [1, 2, 3, 4, 5, 6]
    assert all(stage.is_default for stage in stages)

    assert len(service.initialize_default_stages()) == len(DEFAULT_STAGES)
    assert len(service.list_stages()) == len(DEFAULT_STAGES)


def test_won_and_lost_stage_names():
    assert is_won_stage("Closed Won")
    assert is_lost_stage("closed lost")
    assert not is_won_stage("Negotiation")
    assert not is_lost_stage(None)


def test_create_stage_appends_to_end(session):
    service = DealStageService(db=session)
    service.list_stages()

    stage = service.create_stage({"name": "On Hold", "color": "#000000"})
    assert stage.order_index == len(DEFAULT_STAGES) + 1
    assert service.update_stage(stage.id, {"name": "Paused"}).name == "Paused"


def test_delete_stage_in_use_conflicts(session):
    service = DealStageService(db=session)
    lead, qualified, *_ = service.list_stages()
    customer = Customer(name="Acme", email="ops@acme.io")
    session.add(customer)
    session.commit()
    session.add(Deal(title="Pilot", customer_id=customer.id, stage_id=lead.id, value=0, probability=10))
    session.commit()

    with pytest.raises(ConflictError, match="used by 1 deal"):
        service.delete_stage(lead.id)
    assert service.delete_stage(qualified.id) is True
    assert service.delete_stage(qualified.id) is False


def test_reorder_stages(session):
    service = DealStageService(db=session)
    stages = service.list_stages()
    reversed_ids = [stage.id for stage in reversed(stages)]

    reordered = service.reorder_stages(reversed_ids)
    assert [stage.id for stage in reordered] == reversed_ids

    with pytest.raises(ValidationError, match="must not repeat"):
        service.reorder_stages([reversed_ids[0], reversed_ids[0]])
    with pytest.raises(ValidationError, match="Unknown stage ids"):
        service.reorder_stages([999])


def test_product_interval_only_kept_for_subscriptions(session):
    service = ProductService(db=session)
    one_time = service.create_product(
        {"name": "Setup", "price": 500, "is_subscription": False, "subscription_interval": SubscriptionInterval.YEARLY}
    )
    assert one_time.subscription_interval is None

    plan = service.create_product(
        {"name": "Hosting", "price": 99, "is_subscription": True, "subscription_interval": SubscriptionInterval.MONTHLY}
    )
    assert service.update_product(plan.id, {"is_subscription": False}).subscription_interval is None

    with pytest.raises(ValidationError, match="subscription_interval"):
        service.create_product({"name": "Support", "price": 10, "is_subscription": True})
    with pytest.raises(ValidationError, match="subscription_interval"):
        service.update_product(one_time.id, {"is_subscription": True})
    assert service.get_product(one_time.id).is_subscription is False


def test_list_products_active_only(session):
    service = ProductService(db=session)
    service.create_product({"name": "Legacy", "price": 1, "is_active": False})
    current = service.create_product({"name": "Current", "price": 2})

    assert [item.id for item in service.list_products(active_only=True)] == [current.id]
    assert len(service.list_products()) == 2


def test_delete_product_keeps_line_item_copy(session):
    products = ProductService(db=session)
    product = products.create_product({"name": "Setup", "price": 50})
    stages = DealStageService(db=session).list_stages()
    customer = Customer(name="Acme", email="ops@acme.io")
    session.add(customer)
    session.commit()
    deal = Deal(title="Pilot", customer_id=customer.id, stage_id=stages[0].id, value=50, probability=10)
    deal.line_items = [
        DealLineItem(id="li-1", position=0, product_id=product.id, product_name="Setup", price=50, quantity=1, total=50)
    ]
    session.add(deal)
    session.commit()

    assert products.delete_product(product.id) is True
    session.expire_all()
    item = session.get(DealLineItem, "li-1")
    assert item.product_id is None
    assert item.product_name == "Setup"
    assert products.delete_product(product.id) is False
