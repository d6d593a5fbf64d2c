from __future__ import annotations

import pandas as pd

import scripts.export_data as export_module
from app.models import Customer, Deal, DealStage


def test_export_writes_one_csv_per_table(session, tmp_path, monkeypatch):
    customer = Customer(name="Acme", email="ops@acme.io")
    stage = DealStage(name="Lead", color="#6B7280", order_index=1)
    session.add_all([customer, stage])
    session.commit()
    session.add(Deal(title="Pilot", customer_id=customer.id, stage_id=stage.id, value=250, probability=40))
    session.commit()
    monkeypatch.setattr(export_module, "get_engine", lambda: session.get_bind())

    counts = export_module.export(tmp_path / "out")

    assert counts["customers"] == 1
    assert counts["deals"] == 1
    assert counts["invoices"] == 0
    deals = pd.read_csv(tmp_path / "out" / "deals.csv")
    assert deals.loc[0, "customer"] == "Acme"
    assert deals.loc[0, "stage"] == "Lead"
