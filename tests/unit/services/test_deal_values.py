from __future__ import annotations

from app.services.deal_values import item_total, line_total, remove_by_id, summarize_line_items


def _item(item_id, price, quantity, subscription=False, total=None):
    item = {"id": item_id, "price": price, "quantity": quantity, "is_subscription": subscription}
    if total is not None:
        item["total"] = total
    return item


def test_summarize_partitions_subscription_and_one_time_lines():
    totals = summarize_line_items(
        [
            _item("a", 100, 2, subscription=True),
            _item("b", 49.5, 1),
            _item("c", 10, 3, subscription=True),
        ]
    )
    assert totals.subscription_value == 230.0
    assert totals.one_time_value == 49.5
    assert totals.total_value == totals.subscription_value + totals.one_time_value


def test_missing_numeric_fields_count_as_zero():
    totals = summarize_line_items(
        [
            {"id": "a", "is_subscription": True},
            {"id": "b", "price": None, "quantity": 4},
            {"id": "c", "price": "12.5", "quantity": None},
            {"id": "d", "price": "junk", "quantity": 2},
        ]
    )
    assert totals.subscription_value == 0.0
    assert totals.one_time_value == 0.0
    assert totals.total_value == 0.0


def test_stored_total_wins_over_price_times_quantity():
    assert item_total({"price": 10, "quantity": 2, "total": 15}) == 15.0
    assert item_total({"price": 10, "quantity": 2}) == 20.0
    assert line_total(19.99, 3) == 59.97


def test_empty_deal_has_zero_totals():
    totals = summarize_line_items([])
    assert (totals.subscription_value, totals.one_time_value, totals.total_value) == (0.0, 0.0, 0.0)


def test_total_stays_equal_to_sum_of_partitions_through_adds_and_removes():
    items: list[dict] = []
    operations = [
        ("add", _item("1", 120, 1, subscription=True)),
        ("add", _item("2", 80, 2)),
        ("add", _item("3", 15.25, 4, subscription=True)),
        ("remove", "2"),
        ("add", _item("4", 0, 1)),
        ("remove", "1"),
        ("remove", "missing"),
    ]
    for action, payload in operations:
        if action == "add":
            items.append(payload)
        else:
            items, _ = remove_by_id(items, payload)
        totals = summarize_line_items(items)
        assert totals.total_value == round(totals.subscription_value + totals.one_time_value, 2)

    assert [item["id"] for item in items] == ["3", "4"]
    assert summarize_line_items(items).subscription_value == 61.0


def test_remove_by_id_drops_exactly_one_entry():
    items = [_item("x", 1, 1), _item("y", 2, 1), _item("x", 3, 1)]
    remaining, removed = remove_by_id(items, "x")
    assert removed is True
    assert len(remaining) == 2
    assert [item["price"] for item in remaining] == [2, 3]


def test_remove_by_id_reports_missing_identifier():
    items = [_item("x", 1, 1)]
    remaining, removed = remove_by_id(items, "nope")
    assert removed is False
    assert remaining == items
