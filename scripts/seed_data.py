"""Seed default pipeline stages, an admin user and a few demo records.

Usage: ``python scripts/seed_data.py [--admin-email EMAIL] [--admin-password PASSWORD]``
"""

from __future__ import annotations

import argparse
import logging
from datetime import date, timedelta

from app.database.db import get_db_session
from app.database.init_db import init_db
from app.models import Customer, Product, SubscriptionInterval, UserRole
from app.services.auth_service import AuthService
from app.services.deal_service import DealService
from app.services.deal_stage_service import DealStageService

logger = logging.getLogger(__name__)

DEMO_EMAIL = "hello@northwind.example"


def seed(admin_email: str, admin_password: str) -> None:
    init_db()
    with get_db_session() as session:
        stages = DealStageService(session).initialize_default_stages()

        auth = AuthService(session)
        if auth.get_user_by_email(admin_email) is None:
            auth.sign_up(admin_email, admin_password, name="Administrator", role=UserRole.ADMIN)

        if session.query(Customer).filter(Customer.email == DEMO_EMAIL).first() is not None:
            print("Demo records already exist.")
            return

        customer = Customer(
            name="Northwind Traders",
            email=DEMO_EMAIL,
            phone="+1 555 0100",
            company="Northwind Traders Ltd.",
            address={"street": "1 Harbor Way", "city": "Seattle", "state": "WA", "zip_code": "98101", "country": "US"},
        )
        hosting = Product(
            name="Managed Hosting",
            description="Hosting with monitoring and backups",
            price=199.0,
            is_subscription=True,
            subscription_interval=SubscriptionInterval.MONTHLY,
            is_active=True,
        )
        setup = Product(name="Onboarding Package", price=1500.0, is_subscription=False, is_active=True)
        session.add_all([customer, hosting, setup])
        session.commit()

        deals = DealService(session)
        deal = deals.create_deal(
            {
                "title": "Northwind platform rollout",
                "customer_id": customer.id,
                "stage_id": stages[1].id,
                "probability": 60,
                "expected_close_date": date.today() + timedelta(days=30),
            }
        )
        deals.add_line_item(deal.id, product_id=hosting.id, quantity=2)
        deals.add_line_item(deal.id, product_id=setup.id, quantity=1)
        logger.info("seed.completed", extra={"event": "seed.completed", "deal_id": deal.id})
        print(f"Seeded customer {customer.name} with deal #{deal.id}.")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--admin-email", default="admin@pipedesk.local")
    parser.add_argument("--admin-password", default="change-me-now")
    args = parser.parse_args()
    seed(args.admin_email, args.admin_password)


if __name__ == "__main__":
    main()
