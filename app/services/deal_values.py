"""Deal value aggregation over product line items.

The same functions back the server-side deal service and the client-side
deal workspace, so a deal's ``value`` is always the subscription sub-total
plus the one-time sub-total of its line items.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from app.core.exceptions import ValidationError
from app.utils.validators import as_number


@dataclass(frozen=True)
class LineItemTotals:
    subscription_value: float
    one_time_value: float

    @property
    def total_value(self) -> float:
        return round(self.subscription_value + self.one_time_value, 2)


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def line_total(price: Any, quantity: Any) -> float:
    """Total for a single line; missing price or quantity counts as zero."""
    return round(as_number(price) * as_number(quantity), 2)


def item_total(item: Any) -> float:
    """Stored total of a line item, falling back to price * quantity."""
    total = _field(item, "total")
    if total is None:
        return line_total(_field(item, "price"), _field(item, "quantity"))
    return as_number(total)


def summarize_line_items(items: Iterable[Any]) -> LineItemTotals:
    """Partition line items into subscription vs one-time and sum each side."""
    subscription = 0.0
    one_time = 0.0
    for item in items:
        if _field(item, "is_subscription"):
            subscription += item_total(item)
        else:
            one_time += item_total(item)
    return LineItemTotals(subscription_value=round(subscription, 2), one_time_value=round(one_time, 2))


def _is_amount(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


def check_line_item(quantity: Any, custom_price: Any = None) -> None:
    """Reject a line before it reaches any copy of the deal."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("Quantity must be at least 1.")
    if custom_price is not None and not _is_amount(custom_price):
        raise ValidationError("Price cannot be negative.")


def check_manual_value(value: Any, line_items: Iterable[Any]) -> None:
    """A typed-in value is only allowed on deals without line items."""
    if any(True for _ in line_items):
        raise ValidationError("Deal value is derived from its line items.")
    if not _is_amount(value):
        raise ValidationError("Deal value must be a non-negative number.")


def remove_by_id(items: Iterable[Any], item_id: str) -> tuple[list[Any], bool]:
    """Drop the first line item whose id matches; report whether one was removed."""
    remaining: list[Any] = []
    removed = False
    for item in items:
        if not removed and _field(item, "id") == item_id:
            removed = True
            continue
        remaining.append(item)
    return remaining, removed
