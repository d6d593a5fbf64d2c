"""Activity service: notes, calls, meetings and tasks on customers and deals."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

from sqlalchemy import and_, or_, select

from app.core.exceptions import ValidationError
from app.models import Activity, ActivityPriority, ActivityType, Customer, Deal
from app.services.base_service import BaseService
from app.utils.dates import day_bounds, ensure_utc

PRIORITY_RANK = {
    ActivityPriority.HIGH: 0,
    ActivityPriority.MEDIUM: 1,
    ActivityPriority.LOW: 2,
}


def is_open_item(activity: Activity, end_of_today: datetime) -> bool:
    """Incomplete tasks, items due by the end of today, and pending follow-ups."""
    if activity.type == ActivityType.TASK and not activity.completed:
        return True
    due = ensure_utc(activity.due_date)
    if due is not None and due <= end_of_today:
        return True
    return bool((activity.next_action or "").strip()) and not activity.completed


def _open_item_sort_key(activity: Activity) -> tuple:
    due = ensure_utc(activity.due_date)
    return (
        due is None,
        due or datetime.max.replace(tzinfo=timezone.utc),
        PRIORITY_RANK.get(activity.priority, 1),
    )


def _normalize_dates(data: dict[str, Any]) -> dict[str, Any]:
    payload = dict(data)
    for name in ("due_date", "meeting_date"):
        if payload.get(name) is not None:
            payload[name] = ensure_utc(payload[name])
    return payload


def _agenda_sort_key(activity: Activity) -> tuple:
    meeting = ensure_utc(activity.meeting_date)
    due = ensure_utc(activity.due_date)
    if meeting is not None:
        return (0, meeting)
    return (1, due or datetime.max.replace(tzinfo=timezone.utc))


class ActivityService(BaseService):
    """Service for the activity timeline and the daily agenda."""

    def _newest_first(self, query):
        return query.order_by(Activity.created_at.desc(), Activity.id.desc()).all()

    def list_activities(self) -> list[Activity]:
        return self._newest_first(self.db.query(Activity))

    def list_by_customer(self, customer_id: int, include_deals: bool = False) -> list[Activity]:
        """Activities on a customer; optionally also those on the customer's deals."""
        condition = Activity.customer_id == customer_id
        if include_deals:
            deal_ids = select(Deal.id).where(Deal.customer_id == customer_id)
            condition = or_(condition, Activity.deal_id.in_(deal_ids))
        return self._newest_first(self.db.query(Activity).filter(condition))

    def list_by_deal(self, deal_id: int) -> list[Activity]:
        return self._newest_first(self.db.query(Activity).filter(Activity.deal_id == deal_id))

    def get_activity(self, activity_id: int) -> Activity | None:
        return self.db.query(Activity).filter(Activity.id == activity_id).first()

    def _check_references(self, customer_id: int | None, deal_id: int | None) -> None:
        if customer_id is not None and self.db.get(Customer, customer_id) is None:
            raise ValidationError(f"Unknown customer: {customer_id}")
        if deal_id is not None and self.db.get(Deal, deal_id) is None:
            raise ValidationError(f"Unknown deal: {deal_id}")

    def create_activity(self, data: dict[str, Any]) -> Activity:
        self._check_references(data.get("customer_id"), data.get("deal_id"))
        return self.save(Activity(**_normalize_dates(data)))

    def update_activity(self, activity_id: int, changes: dict[str, Any]) -> Activity | None:
        activity = self.get_activity(activity_id)
        if activity is None:
            return None
        self._check_references(changes.get("customer_id"), changes.get("deal_id"))
        self.apply_changes(activity, _normalize_dates(changes))
        self.commit()
        self.db.refresh(activity)
        return activity

    def mark_complete(self, activity_id: int) -> Activity | None:
        return self.update_activity(activity_id, {"completed": True})

    def delete_activity(self, activity_id: int) -> bool:
        activity = self.get_activity(activity_id)
        if activity is None:
            return False
        self.remove(activity)
        return True

    def todays_activities(self, today: date | None = None) -> list[Activity]:
        """Meetings and items due today, meetings first."""
        start, end = day_bounds(today or datetime.now(timezone.utc).date())
        rows = (
            self.db.query(Activity)
            .filter(
                or_(
                    and_(Activity.meeting_date >= start, Activity.meeting_date < end),
                    and_(Activity.due_date >= start, Activity.due_date < end),
                )
            )
            .all()
        )
        return sorted(rows, key=_agenda_sort_key)

    def open_items(self, today: date | None = None) -> list[Activity]:
        _, end = day_bounds(today or datetime.now(timezone.utc).date())
        end_of_today = end - timedelta(microseconds=1)
        rows = [activity for activity in self.db.query(Activity).all() if is_open_item(activity, end_of_today)]
        return sorted(rows, key=_open_item_sort_key)
