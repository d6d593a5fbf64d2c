from __future__ import annotations

from datetime import date, datetime, timezone

from app.models import (
    Activity,
    ActivityType,
    Customer,
    Deal,
    DealStage,
    Invoice,
    InvoiceStatus,
    Product,
)
from app.services.analytics_service import AnalyticsService, weighted_value


def _seed(session):
    customer = Customer(name="Acme", email="ops@acme.io")
    proposal = DealStage(name="Proposal", color="#F59E0B", order_index=1)
    won = DealStage(name="Closed Won", color="#10B981", order_index=2)
    lost = DealStage(name="Closed Lost", color="#6B7280", order_index=3)
    session.add_all([customer, proposal, won, lost, Product(name="Setup", price=10)])
    session.commit()
    session.add_all(
        [
            Deal(
                title="Open A",
                customer_id=customer.id,
                stage_id=proposal.id,
                value=1000,
                subscription_value=600,
                one_time_value=400,
                probability=50,
                expected_close_date=date(2026, 11, 3),
            ),
            Deal(title="Open B", customer_id=customer.id, stage_id=proposal.id, value=200, one_time_value=200, probability=25),
            Deal(
                title="Won",
                customer_id=customer.id,
                stage_id=won.id,
                value=300,
                one_time_value=300,
                probability=100,
                expected_close_date=date(2026, 10, 30),
                updated_at=datetime(2026, 10, 5, tzinfo=timezone.utc),
            ),
            Deal(title="Lost", customer_id=customer.id, stage_id=lost.id, value=5000, probability=0),
            Invoice(invoice_number="INV-0001", customer_id=customer.id, total=300, status=InvoiceStatus.PAID, due_date=date(2026, 10, 1)),
            Invoice(invoice_number="INV-0002", customer_id=customer.id, total=999, status=InvoiceStatus.SENT, due_date=date(2026, 11, 1)),
            Activity(type=ActivityType.TASK, title="Open task", customer_id=customer.id),
            Activity(type=ActivityType.TASK, title="Done task", customer_id=customer.id, completed=True),
        ]
    )
    session.commit()
    return proposal, won, lost


def test_weighted_value_uses_probability():
    assert weighted_value(Deal(value=1000, probability=35)) == 350
    assert weighted_value(Deal(value=None, probability=None)) == 0


def test_dashboard_stats_counts_and_sums(session):
    _seed(session)
    stats = AnalyticsService(db=session).dashboard_stats()

    assert stats["total_customers"] == 1
    assert stats["total_deals"] == 4
    assert stats["total_products"] == 1
    assert stats["total_invoices"] == 2
    assert stats["total_revenue"] == 300
    assert stats["total_deal_value"] == 6500
    assert stats["subscription_deal_value"] == 600
    assert stats["one_time_deal_value"] == 900
    assert stats["open_tasks"] == 1


def test_forecast_excludes_lost_deals_and_buckets_by_month(session):
    proposal, won, lost = _seed(session)
    forecast = AnalyticsService(db=session).forecast(today=date(2026, 10, 19), months=3)

    assert forecast["open_pipeline_total"] == 1500
    assert forecast["weighted_pipeline"] == 850
    assert forecast["closed_won_this_month"] == 300
    assert [bucket["key"] for bucket in forecast["by_month"]] == ["2026-10", "2026-11", "2026-12"]
    assert forecast["by_month"][0]["label"] == "Oct 2026"
    assert forecast["by_month"][0]["sum"] == 300
    assert forecast["by_month"][1] == {"key": "2026-11", "label": "Nov 2026", "count": 1, "sum": 1000, "weighted": 500}

    by_stage = {bucket["label"]: bucket for bucket in forecast["by_stage"]}
    assert by_stage["Proposal"]["count"] == 2
    assert by_stage["Proposal"]["weighted"] == 550
    assert by_stage["Closed Lost"]["count"] == 0
