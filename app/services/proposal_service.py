"""Proposal service: quotes with their own items, discount, tax and status workflow.

Proposal totals never feed back into ``Deal.value``; a deal's value stays
derived from its own line items.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

from app.core.exceptions import ConflictError, ValidationError
from app.models import (
    Contact,
    Customer,
    Deal,
    Product,
    Proposal,
    ProposalItem,
    ProposalItemType,
    ProposalStatus,
    SubscriptionInterval,
)
from app.services.base_service import BaseService
from app.services.deal_values import check_line_item, line_total, summarize_line_items
from app.utils.ids import new_line_item_id

logger = logging.getLogger(__name__)

# Target status -> statuses it may be reached from.
ALLOWED_TRANSITIONS: dict[ProposalStatus, set[ProposalStatus]] = {
    ProposalStatus.SENT: {ProposalStatus.DRAFT},
    ProposalStatus.VIEWED: {ProposalStatus.SENT},
    ProposalStatus.ACCEPTED: {ProposalStatus.SENT, ProposalStatus.VIEWED},
    ProposalStatus.REJECTED: {ProposalStatus.SENT, ProposalStatus.VIEWED},
    ProposalStatus.EXPIRED: {ProposalStatus.SENT, ProposalStatus.VIEWED},
}
PRICING_FIELDS = ("items", "discount_percentage", "tax_percentage")


@dataclass(frozen=True)
class ProposalTotals:
    subtotal: float
    discount_amount: float
    tax_amount: float
    total: float
    subscription_value: float
    one_time_value: float


def _check_percentage(name: str, value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 <= value <= 100:
        raise ValidationError(f"{name} must be between 0 and 100.")
    return float(value)


def calculate_totals(items: Iterable[Any], discount_percentage: float = 0, tax_percentage: float = 0) -> ProposalTotals:
    """Subtotal, then a percentage discount, then tax on the discounted amount."""
    lines = list(items)
    split = summarize_line_items(lines)
    subtotal = split.total_value
    discount = round(subtotal * discount_percentage / 100, 2)
    tax = round((subtotal - discount) * tax_percentage / 100, 2)
    return ProposalTotals(
        subtotal=subtotal,
        discount_amount=discount,
        tax_amount=tax,
        total=round(subtotal - discount + tax, 2),
        subscription_value=split.subscription_value,
        one_time_value=split.one_time_value,
    )


def apply_totals(proposal: Proposal) -> None:
    totals = calculate_totals(proposal.items, proposal.discount_percentage or 0, proposal.tax_percentage or 0)
    proposal.subtotal = totals.subtotal
    proposal.discount_amount = totals.discount_amount
    proposal.tax_amount = totals.tax_amount
    proposal.total = totals.total
    proposal.subscription_value = totals.subscription_value
    proposal.one_time_value = totals.one_time_value


class ProposalService(BaseService):
    """Service for proposal CRUD, lookups and the send/accept/reject workflow."""

    def list_proposals(
        self,
        customer_id: int | None = None,
        deal_id: int | None = None,
        status: ProposalStatus | None = None,
    ) -> list[Proposal]:
        query = self.db.query(Proposal)
        if customer_id is not None:
            query = query.filter(Proposal.customer_id == customer_id)
        if deal_id is not None:
            query = query.filter(Proposal.deal_id == deal_id)
        if status is not None:
            query = query.filter(Proposal.status == status)
        return query.order_by(Proposal.created_at.desc(), Proposal.id.desc()).all()

    def list_by_customer(self, customer_id: int) -> list[Proposal]:
        return self.list_proposals(customer_id=customer_id)

    def list_by_deal(self, deal_id: int) -> list[Proposal]:
        return self.list_proposals(deal_id=deal_id)

    def get_proposal(self, proposal_id: int) -> Proposal | None:
        return self.db.query(Proposal).filter(Proposal.id == proposal_id).first()

    def _check_references(self, customer_id: int, deal_id: int | None) -> None:
        if self.db.get(Customer, customer_id) is None:
            raise ValidationError(f"Unknown customer: {customer_id}")
        if deal_id is None:
            return
        deal = self.db.get(Deal, deal_id)
        if deal is None:
            raise ValidationError(f"Unknown deal: {deal_id}")
        if deal.customer_id != customer_id:
            raise ValidationError(f"Deal {deal_id} belongs to a different customer.")

    def _contacts(self, contact_ids: Iterable[int]) -> list[Contact]:
        wanted = list(dict.fromkeys(contact_ids))
        if not wanted:
            return []
        contacts = self.db.query(Contact).filter(Contact.id.in_(wanted)).all()
        found = {contact.id for contact in contacts}
        missing = [contact_id for contact_id in wanted if contact_id not in found]
        if missing:
            raise ValidationError(f"Unknown contacts: {', '.join(str(item) for item in missing)}")
        return contacts

    def _build_item(self, line: dict[str, Any], position: int) -> ProposalItem:
        item_type = ProposalItemType(line.get("item_type") or ProposalItemType.PRODUCT)
        quantity = line.get("quantity", 1)
        unit_price = line.get("unit_price")
        check_line_item(quantity, unit_price)

        if item_type is ProposalItemType.PRODUCT:
            product_id = line.get("product_id")
            product = self.db.get(Product, product_id) if product_id is not None else None
            if product is None:
                raise ValidationError(f"Unknown product: {line.get('product_id')}")
            name = line.get("product_name") or product.name
            description = line.get("description") if line.get("description") is not None else product.description
            price = product.price if unit_price is None else unit_price
            is_subscription = product.is_subscription
            interval = product.subscription_interval if product.is_subscription else None
            product_id = product.id
        else:
            name = line.get("product_name")
            if not name:
                raise ValidationError("Custom items need a name.")
            description = line.get("description")
            price = unit_price or 0
            is_subscription = bool(line.get("is_subscription"))
            raw_interval = line.get("subscription_interval") if is_subscription else None
            interval = SubscriptionInterval(raw_interval) if raw_interval else None
            if is_subscription and interval is None:
                raise ValidationError("Subscription items need a subscription_interval.")
            product_id = None

        return ProposalItem(
            id=line.get("id") or new_line_item_id(),
            position=position,
            item_type=item_type,
            product_id=product_id,
            product_name=name,
            description=description,
            quantity=quantity,
            unit_price=price,
            total=line_total(price, quantity),
            is_subscription=is_subscription,
            subscription_interval=interval,
        )

    def _build_items(self, lines: Iterable[dict[str, Any]]) -> list[ProposalItem]:
        items = [self._build_item(line, position) for position, line in enumerate(lines)]
        if not items:
            raise ValidationError("A proposal needs at least one item.")
        return items

    def create_proposal(self, data: dict[str, Any]) -> Proposal:
        customer_id = data["customer_id"]
        deal_id = data.get("deal_id")
        self._check_references(customer_id, deal_id)
        proposal = Proposal(
            title=data["title"],
            description=data.get("description"),
            customer_id=customer_id,
            deal_id=deal_id,
            discount_percentage=_check_percentage("discount_percentage", data.get("discount_percentage")),
            tax_percentage=_check_percentage("tax_percentage", data.get("tax_percentage")),
            status=ProposalStatus.DRAFT,
            valid_until=data.get("valid_until"),
            notes=data.get("notes"),
            terms=data.get("terms"),
        )
        proposal.items = self._build_items(data.get("items") or [])
        proposal.contacts = self._contacts(data.get("contact_ids") or [])
        apply_totals(proposal)
        proposal = self.save(proposal)
        logger.info(
            "proposal.created",
            extra={"event": "proposal.created", "proposal_id": proposal.id, "total": proposal.total},
        )
        return proposal

    def create_from_deal(self, deal_id: int, data: dict[str, Any]) -> Proposal | None:
        """Draft a proposal for a deal's customer, quoting the deal's line items."""
        deal = self.db.get(Deal, deal_id)
        if deal is None:
            return None
        if not deal.line_items:
            raise ValidationError("Deal has no line items to quote.")
        lines = []
        for line in deal.line_items:
            if line.product_id is None:
                lines.append(
                    {
                        "item_type": ProposalItemType.CUSTOM,
                        "product_name": line.product_name,
                        "quantity": line.quantity,
                        "unit_price": line.price,
                        "is_subscription": line.is_subscription,
                        "subscription_interval": line.subscription_interval,
                    }
                )
            else:
                lines.append({"product_id": line.product_id, "quantity": line.quantity, "unit_price": line.price})
        payload = {
            **data,
            "title": data.get("title") or deal.title,
            "customer_id": deal.customer_id,
            "deal_id": deal.id,
            "items": lines,
            "contact_ids": data.get("contact_ids") or deal.contact_ids,
        }
        return self.create_proposal(payload)

    def update_proposal(self, proposal_id: int, changes: dict[str, Any]) -> Proposal | None:
        """Edit a proposal; items and pricing are frozen once it leaves draft."""
        proposal = self.get_proposal(proposal_id)
        if proposal is None:
            return None

        payload = dict(changes)
        if proposal.status is not ProposalStatus.DRAFT and any(name in payload for name in PRICING_FIELDS):
            raise ConflictError(f"Proposal {proposal_id} is {proposal.status.value}; only drafts can be repriced.")

        if "customer_id" in payload or "deal_id" in payload:
            self._check_references(
                payload.get("customer_id", proposal.customer_id),
                payload.get("deal_id", proposal.deal_id),
            )
        if "items" in payload:
            proposal.items = self._build_items(payload.pop("items"))
        if "contact_ids" in payload:
            proposal.contacts = self._contacts(payload.pop("contact_ids") or [])
        for name in ("discount_percentage", "tax_percentage"):
            if name in payload:
                payload[name] = _check_percentage(name, payload[name])

        self.apply_changes(proposal, payload)
        apply_totals(proposal)
        self.commit()
        self.db.refresh(proposal)
        return proposal

    def _transition(self, proposal_id: int, target: ProposalStatus, stamp: str | None) -> Proposal | None:
        proposal = self.get_proposal(proposal_id)
        if proposal is None:
            return None
        if proposal.status not in ALLOWED_TRANSITIONS[target]:
            raise ConflictError(
                f"Proposal {proposal_id} cannot move from {proposal.status.value} to {target.value}."
            )
        previous = proposal.status
        proposal.status = target
        if stamp is not None:
            setattr(proposal, stamp, datetime.now(timezone.utc))
        self.commit()
        self.db.refresh(proposal)
        logger.info(
            "proposal.status.changed",
            extra={
                "event": "proposal.status.changed",
                "proposal_id": proposal_id,
                "from_status": previous.value,
                "to_status": target.value,
            },
        )
        return proposal

    def mark_sent(self, proposal_id: int) -> Proposal | None:
        return self._transition(proposal_id, ProposalStatus.SENT, "sent_at")

    def mark_viewed(self, proposal_id: int) -> Proposal | None:
        """Record the first view of a sent proposal; other statuses are left as they are."""
        proposal = self.get_proposal(proposal_id)
        if proposal is None or proposal.status is not ProposalStatus.SENT:
            return proposal
        return self._transition(proposal_id, ProposalStatus.VIEWED, "viewed_at")

    def mark_accepted(self, proposal_id: int) -> Proposal | None:
        return self._transition(proposal_id, ProposalStatus.ACCEPTED, "responded_at")

    def mark_rejected(self, proposal_id: int) -> Proposal | None:
        return self._transition(proposal_id, ProposalStatus.REJECTED, "responded_at")

    def refresh_expired(self, today: date | None = None) -> list[Proposal]:
        """Expire sent or viewed proposals whose ``valid_until`` has passed."""
        current = today or datetime.now(timezone.utc).date()
        expired = (
            self.db.query(Proposal)
            .filter(
                Proposal.status.in_(ALLOWED_TRANSITIONS[ProposalStatus.EXPIRED]),
                Proposal.valid_until.is_not(None),
                Proposal.valid_until < current,
            )
            .all()
        )
        for proposal in expired:
            proposal.status = ProposalStatus.EXPIRED
        if expired:
            self.commit()
            logger.info("proposal.expired.updated", extra={"event": "proposal.expired.updated", "count": len(expired)})
        return expired

    def delete_proposal(self, proposal_id: int) -> bool:
        proposal = self.get_proposal(proposal_id)
        if proposal is None:
            return False
        self.remove(proposal)
        return True
