"""Export the main CRM tables to CSV files with pandas.

Usage: ``python scripts/export_data.py [output_dir]``
"""

from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd

from app.database.db import get_active_database_url, get_engine

EXPORTS = {
    "customers": "SELECT id, name, email, phone, company, created_at FROM customers",
    "deals": (
        "SELECT d.id, d.title, c.name AS customer, s.name AS stage, d.value, d.probability, "
        "d.subscription_value, d.one_time_value, d.expected_close_date "
        "FROM deals d JOIN customers c ON c.id = d.customer_id JOIN deal_stages s ON s.id = d.stage_id"
    ),
    "deal_line_items": (
        "SELECT deal_id, id, product_name, price, quantity, total, is_subscription, subscription_interval "
        "FROM deal_line_items ORDER BY deal_id, position"
    ),
    "products": "SELECT id, name, price, is_subscription, subscription_interval, is_active FROM products",
    "invoices": "SELECT id, invoice_number, customer_id, deal_id, subtotal, tax, total, status, due_date FROM invoices",
}


def export(output_dir: Path) -> dict[str, int]:
    output_dir.mkdir(parents=True, exist_ok=True)
    engine = get_engine()
    counts: dict[str, int] = {}
    for name, sql in EXPORTS.items():
        frame = pd.read_sql(sql, engine)
        frame.to_csv(output_dir / f"{name}.csv", index=False)
        counts[name] = len(frame)
    return counts


if __name__ == "__main__":
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("exports")
    print(f"Exporting from: {get_active_database_url().split('://', 1)[0]} database")
    for table, rows in export(target).items():
        print(f"{table}: {rows} rows -> {target / (table + '.csv')}")
