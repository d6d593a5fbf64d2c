from __future__ import annotations

from app.models import Base
import app.models  # noqa: F401


def test_modular_model_metadata_contains_target_tables():
    expected = {
        "users",
        "customers",
        "contacts",
        "deal_stages",
        "products",
        "deals",
        "deal_line_items",
        "deal_contacts",
        "invoices",
        "invoice_items",
        "companies",
        "activities",
        "proposals",
        "proposal_items",
        "proposal_contacts",
    }
    assert expected == set(Base.metadata.tables.keys())


def test_deal_line_items_cascade_with_deal():
    fk = next(iter(Base.metadata.tables["deal_line_items"].c.deal_id.foreign_keys))
    assert fk.ondelete == "CASCADE"


def test_proposal_items_cascade_and_deal_link_is_nullable():
    item_fk = next(iter(Base.metadata.tables["proposal_items"].c.proposal_id.foreign_keys))
    deal_fk = next(iter(Base.metadata.tables["proposals"].c.deal_id.foreign_keys))
    assert item_fk.ondelete == "CASCADE"
    assert deal_fk.ondelete == "SET NULL"
