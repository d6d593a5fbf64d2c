"""Dashboard statistics and pipeline forecast."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timezone

from sqlalchemy import func

from app.core.config import get_config
from app.models import Activity, ActivityType, Customer, Deal, DealStage, Invoice, InvoiceStatus, Product
from app.services.base_service import BaseService
from app.services.deal_stage_service import is_lost_stage, is_won_stage
from app.utils.dates import add_months, ensure_utc, month_key, month_start
from app.utils.validators import as_number


def weighted_value(deal: Deal) -> float:
    return round(as_number(deal.value) * (as_number(deal.probability) / 100.0), 2)


def _bucket() -> dict[str, float | int]:
    return {"count": 0, "sum": 0.0, "weighted": 0.0}


def _add_to_bucket(bucket: dict[str, float | int], deal: Deal) -> None:
    bucket["count"] += 1
    bucket["sum"] += as_number(deal.value)
    bucket["weighted"] += weighted_value(deal)


class AnalyticsService(BaseService):
    """Read-only aggregates over deals, invoices and activities."""

    def dashboard_stats(self) -> dict:
        deal_value, subscription_value, one_time_value = self.db.query(
            func.coalesce(func.sum(Deal.value), 0),
            func.coalesce(func.sum(Deal.subscription_value), 0),
            func.coalesce(func.sum(Deal.one_time_value), 0),
        ).one()
        revenue = (
            self.db.query(func.coalesce(func.sum(Invoice.total), 0))
            .filter(Invoice.status == InvoiceStatus.PAID)
            .scalar()
        )
        open_tasks = (
            self.db.query(Activity)
            .filter(Activity.type == ActivityType.TASK, Activity.completed.is_(False))
            .count()
        )
        return {
            "total_customers": self.db.query(Customer).count(),
            "total_deals": self.db.query(Deal).count(),
            "total_products": self.db.query(Product).count(),
            "total_invoices": self.db.query(Invoice).count(),
            "total_revenue": round(as_number(revenue), 2),
            "total_deal_value": round(as_number(deal_value), 2),
            "subscription_deal_value": round(as_number(subscription_value), 2),
            "one_time_deal_value": round(as_number(one_time_value), 2),
            "open_tasks": open_tasks,
        }

    def forecast(self, today: date | None = None, months: int | None = None) -> dict:
        """Open pipeline by close month and by stage.

        Open deals are all deals outside "lost" stages; closed-won deals
        count as actuals for the month they were last updated in.
        """
        current = today or datetime.now(timezone.utc).date()
        horizon = months or get_config().FORECAST_MONTHS
        stages = self.db.query(DealStage).order_by(DealStage.order_index, DealStage.id).all()
        lost_ids = {stage.id for stage in stages if is_lost_stage(stage.name)}
        won_ids = {stage.id for stage in stages if is_won_stage(stage.name)}
        deals = self.db.query(Deal).all()
        open_deals = [deal for deal in deals if deal.stage_id not in lost_ids]

        first_month = month_start(current)
        month_starts = [add_months(first_month, offset) for offset in range(horizon)]
        by_month: dict[str, dict[str, float | int]] = {month_key(start): _bucket() for start in month_starts}
        by_stage: dict[int, dict[str, float | int]] = defaultdict(_bucket)
        for deal in open_deals:
            _add_to_bucket(by_stage[deal.stage_id], deal)
            if deal.expected_close_date is not None:
                key = month_key(month_start(deal.expected_close_date))
                if key in by_month:
                    _add_to_bucket(by_month[key], deal)

        next_month = add_months(first_month, 1)
        closed_won = 0.0
        for deal in deals:
            updated = ensure_utc(deal.updated_at)
            if deal.stage_id in won_ids and updated is not None and first_month <= updated.date() < next_month:
                closed_won += as_number(deal.value)

        return {
            "open_pipeline_total": round(sum(as_number(deal.value) for deal in open_deals), 2),
            "weighted_pipeline": round(sum(weighted_value(deal) for deal in open_deals), 2),
            "closed_won_this_month": round(closed_won, 2),
            "by_month": [
                {
                    "key": month_key(start),
                    "label": start.strftime("%b %Y"),
                    "count": int(by_month[month_key(start)]["count"]),
                    "sum": round(float(by_month[month_key(start)]["sum"]), 2),
                    "weighted": round(float(by_month[month_key(start)]["weighted"]), 2),
                }
                for start in month_starts
            ],
            "by_stage": [
                {
                    "key": str(stage.id),
                    "label": stage.name,
                    "count": int(by_stage[stage.id]["count"]),
                    "sum": round(float(by_stage[stage.id]["sum"]), 2),
                    "weighted": round(float(by_stage[stage.id]["weighted"]), 2),
                }
                for stage in stages
            ],
        }
