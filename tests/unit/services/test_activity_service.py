from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from app.core.exceptions import ValidationError
from app.models import ActivityPriority, ActivityType, Customer, Deal, DealStage
from app.services.activity_service import ActivityService

TODAY = date(2026, 10, 19)


def _at(day: int, hour: int = 9) -> datetime:
    return datetime(2026, 10, day, hour, 0, tzinfo=timezone.utc)


def _seed(session):
    customer = Customer(name="Acme", email="ops@acme.io")
    other = Customer(name="Globex", email="ap@globex.com")
    stage = DealStage(name="Lead", color="#6B7280", order_index=1)
    session.add_all([customer, other, stage])
    session.commit()
    deal = Deal(title="Pilot", customer_id=customer.id, stage_id=stage.id, value=0, probability=20)
    session.add(deal)
    session.commit()
    return customer, other, deal


def test_customer_timeline_can_include_deal_activities(session):
    customer, other, deal = _seed(session)
    service = ActivityService(db=session)
    on_customer = service.create_activity({"type": ActivityType.NOTE, "title": "Account note", "customer_id": customer.id})
    on_deal = service.create_activity({"type": ActivityType.CALL, "title": "Pricing call", "deal_id": deal.id})
    service.create_activity({"type": ActivityType.NOTE, "title": "Elsewhere", "customer_id": other.id})

    assert [item.id for item in service.list_by_customer(customer.id)] == [on_customer.id]
    assert {item.id for item in service.list_by_customer(customer.id, include_deals=True)} == {on_customer.id, on_deal.id}
    assert [item.id for item in service.list_by_deal(deal.id)] == [on_deal.id]
    assert len(service.list_activities()) == 3


def test_create_activity_rejects_unknown_references(session):
    service = ActivityService(db=session)
    with pytest.raises(ValidationError, match="Unknown customer"):
        service.create_activity({"type": ActivityType.NOTE, "title": "Orphan", "customer_id": 5})
    with pytest.raises(ValidationError, match="Unknown deal"):
        service.create_activity({"type": ActivityType.NOTE, "title": "Orphan", "deal_id": 5})


def test_todays_agenda_lists_meetings_first(session):
    customer, _, _ = _seed(session)
    service = ActivityService(db=session)
    task = service.create_activity(
        {"type": ActivityType.TASK, "title": "Send quote", "customer_id": customer.id, "due_date": _at(19, 8)}
    )
    meeting = service.create_activity(
        {"type": ActivityType.MEETING, "title": "Demo", "customer_id": customer.id, "meeting_date": _at(19, 15)}
    )
    service.create_activity(
        {"type": ActivityType.MEETING, "title": "Next week", "customer_id": customer.id, "meeting_date": _at(26, 15)}
    )

    assert [item.id for item in service.todays_activities(TODAY)] == [meeting.id, task.id]


def test_open_items_sorted_by_due_date_then_priority(session):
    customer, _, _ = _seed(session)
    service = ActivityService(db=session)
    no_due = service.create_activity(
        {"type": ActivityType.TASK, "title": "Someday", "customer_id": customer.id, "priority": ActivityPriority.HIGH}
    )
    low = service.create_activity(
        {
            "type": ActivityType.CALL,
            "title": "Follow up",
            "customer_id": customer.id,
            "due_date": _at(18),
            "priority": ActivityPriority.LOW,
        }
    )
    high = service.create_activity(
        {
            "type": ActivityType.TASK,
            "title": "Contract",
            "customer_id": customer.id,
            "due_date": _at(18),
            "priority": ActivityPriority.HIGH,
        }
    )
    follow_up = service.create_activity(
        {"type": ActivityType.NOTE, "title": "Noted", "customer_id": customer.id, "next_action": "Email pricing"}
    )
    service.create_activity(
        {"type": ActivityType.NOTE, "title": "Future", "customer_id": customer.id, "due_date": _at(30)}
    )
    done = service.create_activity(
        {"type": ActivityType.TASK, "title": "Done", "customer_id": customer.id, "completed": True}
    )

    items = service.open_items(TODAY)
    ids = [item.id for item in items]
    assert ids[:2] == [high.id, low.id]
    assert set(ids[2:]) == {no_due.id, follow_up.id}
    assert done.id not in ids


def test_mark_complete_closes_task(session):
    customer, _, _ = _seed(session)
    service = ActivityService(db=session)
    task = service.create_activity({"type": ActivityType.TASK, "title": "Call back", "customer_id": customer.id})

    assert service.mark_complete(task.id).completed is True
    assert service.open_items(TODAY) == []
    assert service.mark_complete(999) is None
    assert service.delete_activity(task.id) is True
