"""Deal service: CRUD, stage moves and product line items.

A deal's ``value`` follows its line items: every add or remove re-runs
:func:`app.services.deal_values.summarize_line_items` and stores the
subscription and one-time sub-totals next to the total.
"""

from __future__ import annotations

import logging
from typing import Any

from app.core.exceptions import ValidationError
from app.models import Activity, Contact, Customer, Deal, DealLineItem, DealStage, Invoice, Product, Proposal
from app.services.base_service import BaseService
from app.services.deal_values import (
    check_line_item,
    check_manual_value,
    line_total,
    remove_by_id,
    summarize_line_items,
)
from app.utils.ids import new_line_item_id
from app.utils.validators import clamp_probability

logger = logging.getLogger(__name__)


def recalculate_deal_value(deal: Deal) -> None:
    totals = summarize_line_items(deal.line_items)
    deal.subscription_value = totals.subscription_value
    deal.one_time_value = totals.one_time_value
    deal.value = totals.total_value


class DealService(BaseService):
    """Service for deal CRUD, stage transitions and line items."""

    def list_deals(self, stage_id: int | None = None, customer_id: int | None = None) -> list[Deal]:
        query = self.db.query(Deal)
        if stage_id is not None:
            query = query.filter(Deal.stage_id == stage_id)
        if customer_id is not None:
            query = query.filter(Deal.customer_id == customer_id)
        return query.order_by(Deal.created_at.desc(), Deal.id.desc()).all()

    def list_by_stage(self, stage_id: int) -> list[Deal]:
        return self.list_deals(stage_id=stage_id)

    def list_by_customer(self, customer_id: int) -> list[Deal]:
        return self.list_deals(customer_id=customer_id)

    def get_deal(self, deal_id: int) -> Deal | None:
        return self.db.query(Deal).filter(Deal.id == deal_id).first()

    def _check_references(self, customer_id: int | None = None, stage_id: int | None = None) -> None:
        if customer_id is not None and self.db.get(Customer, customer_id) is None:
            raise ValidationError(f"Unknown customer: {customer_id}")
        if stage_id is not None and self.db.get(DealStage, stage_id) is None:
            raise ValidationError(f"Unknown stage: {stage_id}")

    def create_deal(self, data: dict[str, Any]) -> Deal:
        payload = dict(data)
        self._check_references(payload.get("customer_id"), payload.get("stage_id"))
        payload["probability"] = clamp_probability(payload.get("probability"))
        payload.setdefault("value", 0)
        deal = Deal(subscription_value=0, one_time_value=0, **payload)
        deal = self.save(deal)
        logger.info("deal.created", extra={"event": "deal.created", "deal_id": deal.id})
        return deal

    def update_deal(self, deal_id: int, changes: dict[str, Any]) -> Deal | None:
        deal = self.get_deal(deal_id)
        if deal is None:
            return None

        payload = dict(changes)
        if "value" in payload:
            check_manual_value(payload["value"], deal.line_items)
        self._check_references(payload.get("customer_id"), payload.get("stage_id"))
        if "probability" in payload:
            payload["probability"] = clamp_probability(payload["probability"])

        self.apply_changes(deal, payload)
        self.commit()
        self.db.refresh(deal)
        return deal

    def move_to_stage(self, deal_id: int, stage_id: int) -> Deal | None:
        deal = self.get_deal(deal_id)
        if deal is None:
            return None
        self._check_references(stage_id=stage_id)
        previous = deal.stage_id
        deal.stage_id = stage_id
        self.commit()
        self.db.refresh(deal)
        logger.info(
            "deal.stage.moved",
            extra={"event": "deal.stage.moved", "deal_id": deal_id, "from_stage": previous, "to_stage": stage_id},
        )
        return deal

    def delete_deal(self, deal_id: int) -> bool:
        deal = self.get_deal(deal_id)
        if deal is None:
            return False
        self.db.query(Activity).filter(Activity.deal_id == deal_id).delete(synchronize_session=False)
        for model in (Invoice, Proposal):
            self.db.query(model).filter(model.deal_id == deal_id).update(
                {"deal_id": None}, synchronize_session=False
            )
        self.remove(deal)
        return True

    def add_line_item(
        self,
        deal_id: int,
        product_id: int,
        quantity: int = 1,
        custom_price: float | None = None,
        item_id: str | None = None,
    ) -> Deal | None:
        """Append a product line to a deal and re-derive its value."""
        deal = self.get_deal(deal_id)
        if deal is None:
            return None
        check_line_item(quantity, custom_price)
        product = self.db.get(Product, product_id)
        if product is None:
            raise ValidationError(f"Unknown product: {product_id}")

        price = product.price if custom_price is None else custom_price
        position = max((item.position for item in deal.line_items), default=-1) + 1
        deal.line_items.append(
            DealLineItem(
                id=item_id or new_line_item_id(),
                position=position,
                product_id=product.id,
                product_name=product.name,
                price=price,
                quantity=quantity,
                total=line_total(price, quantity),
                is_subscription=product.is_subscription,
                subscription_interval=product.subscription_interval if product.is_subscription else None,
            )
        )
        recalculate_deal_value(deal)
        self.commit()
        self.db.refresh(deal)
        return deal

    def remove_line_item(self, deal_id: int, item_id: str) -> Deal | None:
        """Remove exactly one line item by id; ``None`` when deal or item is missing."""
        deal = self.get_deal(deal_id)
        if deal is None:
            return None
        remaining, removed = remove_by_id(deal.line_items, item_id)
        if not removed:
            return None
        deal.line_items = remaining
        recalculate_deal_value(deal)
        self.commit()
        self.db.refresh(deal)
        return deal

    def set_contacts(self, deal_id: int, contact_ids: list[int]) -> Deal | None:
        deal = self.get_deal(deal_id)
        if deal is None:
            return None
        wanted = list(dict.fromkeys(contact_ids))
        contacts = self.db.query(Contact).filter(Contact.id.in_(wanted)).all() if wanted else []
        found = {contact.id for contact in contacts}
        missing = [contact_id for contact_id in wanted if contact_id not in found]
        if missing:
            raise ValidationError(f"Unknown contacts: {', '.join(str(item) for item in missing)}")
        deal.contacts = contacts
        self.commit()
        self.db.refresh(deal)
        return deal
