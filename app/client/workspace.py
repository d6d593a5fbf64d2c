"""Optimistic in-memory copies of server records.

Edits are applied to the local copy first and the write is issued
afterwards. A failed write is logged and appended to ``failed_writes``;
the local copy is left as edited until the caller runs ``refresh()``,
which also clears ``failed_writes``. Input the server would reject with a
422 raises ``ValidationError`` before the local copy is touched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from app.client.api import CRMClient
from app.core.exceptions import CRMException
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


@dataclass(frozen=True)
class FailedWrite:
    operation: str
    record_id: Any
    error: str


class OptimisticCollection:
    """A list of records kept in memory and written through to the server."""

    def __init__(
        self,
        name: str,
        loader: Callable[[], list[dict]],
        creator: Callable[[dict], dict] | None = None,
        updater: Callable[[Any, dict], dict] | None = None,
        deleter: Callable[[Any], Any] | None = None,
        key: str = "id",
    ) -> None:
        self.name = name
        self.loader = loader
        self.creator = creator
        self.updater = updater
        self.deleter = deleter
        self.key = key
        self.records: list[dict] = []
        self.failed_writes: list[FailedWrite] = []

    def _record_failure(self, operation: str, record_id: Any, exc: Exception) -> None:
        logger.error(
            "client.write.failed",
            extra={
                "event": "client.write.failed",
                "collection": self.name,
                "operation": operation,
                "record_id": record_id,
                "error": str(exc),
            },
        )
        self.failed_writes.append(FailedWrite(operation=operation, record_id=record_id, error=str(exc)))

    def refresh(self) -> list[dict]:
        """Replace the local copy with the server's records."""
        self.records = list(self.loader())
        self.failed_writes.clear()
        return self.records

    def get(self, record_id: Any) -> dict | None:
        for record in self.records:
            if record.get(self.key) == record_id:
                return record
        return None

    def create(self, data: dict) -> dict | None:
        """Create on the server; the new record is added once the server assigns its id."""
        if self.creator is None:
            raise NotImplementedError(f"{self.name} does not support create")
        try:
            created = self.creator(data)
        except CRMException as exc:
            self._record_failure("create", None, exc)
            return None
        self.records.insert(0, created)
        return created

    def update(self, record_id: Any, changes: dict) -> dict | None:
        if self.updater is None:
            raise NotImplementedError(f"{self.name} does not support update")
        record = self.get(record_id)
        if record is None:
            return None
        record.update(changes)
        try:
            self.updater(record_id, changes)
        except CRMException as exc:
            self._record_failure("update", record_id, exc)
        return record

    def remove(self, record_id: Any) -> bool:
        if self.deleter is None:
            raise NotImplementedError(f"{self.name} does not support delete")
        remaining = [record for record in self.records if record.get(self.key) != record_id]
        if len(remaining) == len(self.records):
            return False
        self.records = remaining
        try:
            self.deleter(record_id)
        except CRMException as exc:
            self._record_failure("delete", record_id, exc)
        return True

    @classmethod
    def customers(cls, client: CRMClient) -> "OptimisticCollection":
        return cls(
            "customers",
            loader=client.list_customers,
            creator=client.create_customer,
            updater=client.update_customer,
            deleter=client.delete_customer,
        )

    @classmethod
    def deals(cls, client: CRMClient) -> "OptimisticCollection":
        return cls(
            "deals",
            loader=client.list_deals,
            creator=client.create_deal,
            updater=client.update_deal,
            deleter=client.delete_deal,
        )

    @classmethod
    def proposals(cls, client: CRMClient) -> "OptimisticCollection":
        return cls(
            "proposals",
            loader=client.list_proposals,
            creator=client.create_proposal,
            updater=client.update_proposal,
            deleter=client.delete_proposal,
        )

    @classmethod
    def products(cls, client: CRMClient) -> "OptimisticCollection":
        return cls(
            "products",
            loader=client.list_products,
            updater=client.update_product,
            deleter=client.delete_product,
        )


class DealWorkspace:
    """Local copy of one deal whose value follows its line items."""

    def __init__(self, client: CRMClient, deal: dict) -> None:
        self.client = client
        self.deal = deal
        self.deal.setdefault("line_items", [])
        self.failed_writes: list[FailedWrite] = []

    @classmethod
    def load(cls, client: CRMClient, deal_id: int) -> "DealWorkspace":
        return cls(client, client.get_deal(deal_id))

    @property
    def deal_id(self) -> Any:
        return self.deal.get("id")

    @property
    def line_items(self) -> list[dict]:
        return self.deal["line_items"]

    def _record_failure(self, operation: str, exc: Exception) -> None:
        logger.error(
            "client.deal.write_failed",
            extra={
                "event": "client.deal.write_failed",
                "deal_id": self.deal_id,
                "operation": operation,
                "error": str(exc),
            },
        )
        self.failed_writes.append(FailedWrite(operation=operation, record_id=self.deal_id, error=str(exc)))

    def recalculate(self) -> None:
        totals = summarize_line_items(self.line_items)
        self.deal["subscription_value"] = totals.subscription_value
        self.deal["one_time_value"] = totals.one_time_value
        self.deal["value"] = totals.total_value

    def add_line_item(self, product: dict, quantity: int = 1, custom_price: float | None = None) -> dict:
        check_line_item(quantity, custom_price)
        price = product.get("price") if custom_price is None else custom_price
        is_subscription = bool(product.get("is_subscription"))
        item = {
            "id": new_line_item_id(),
            "product_id": product.get("id"),
            "product_name": product.get("name", ""),
            "price": price,
            "quantity": quantity,
            "total": line_total(price, quantity),
            "is_subscription": is_subscription,
            "subscription_interval": product.get("subscription_interval") if is_subscription else None,
        }
        self.line_items.append(item)
        self.recalculate()
        try:
            self.client.add_line_item(
                self.deal_id,
                product_id=product.get("id"),
                quantity=quantity,
                custom_price=custom_price,
                item_id=item["id"],
            )
        except CRMException as exc:
            self._record_failure("add_line_item", exc)
        return item

    def remove_line_item(self, item_id: str) -> bool:
        remaining, removed = remove_by_id(self.line_items, item_id)
        if not removed:
            return False
        self.deal["line_items"] = remaining
        self.recalculate()
        try:
            self.client.remove_line_item(self.deal_id, item_id)
        except CRMException as exc:
            self._record_failure("remove_line_item", exc)
        return True

    def update(self, changes: dict) -> dict:
        payload = dict(changes)
        if "value" in payload:
            check_manual_value(payload["value"], self.line_items)
        if "probability" in payload:
            payload["probability"] = clamp_probability(payload["probability"])
        self.deal.update(payload)
        try:
            self.client.update_deal(self.deal_id, payload)
        except CRMException as exc:
            self._record_failure("update", exc)
        return self.deal

    def set_probability(self, value: Any) -> int:
        self.update({"probability": value})
        return self.deal["probability"]

    def refresh(self) -> dict:
        self.deal = self.client.get_deal(self.deal_id)
        self.failed_writes.clear()
        return self.deal
