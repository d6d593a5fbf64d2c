"""proposals: quotes with their own line items, discount and tax

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:00:02
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None

MONEY = sa.Numeric(12, 2, asdecimal=False)
PERCENT = sa.Numeric(5, 2, asdecimal=False)
INTERVALS = ("monthly", "quarterly", "yearly")


def _subscription_interval() -> sa.Enum:
    # The type already exists on PostgreSQL from the baseline revision.
    if op.get_bind().dialect.name == "postgresql":
        return postgresql.ENUM(*INTERVALS, name="subscriptioninterval", create_type=False)
    return sa.Enum(*INTERVALS, name="subscriptioninterval")


def upgrade() -> None:
    op.create_table(
        "proposals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("customer_id", sa.Integer(), nullable=False),
        sa.Column("deal_id", sa.Integer(), nullable=True),
        sa.Column("subtotal", MONEY, nullable=False),
        sa.Column("discount_percentage", PERCENT, nullable=False),
        sa.Column("discount_amount", MONEY, nullable=False),
        sa.Column("tax_percentage", PERCENT, nullable=False),
        sa.Column("tax_amount", MONEY, nullable=False),
        sa.Column("total", MONEY, nullable=False),
        sa.Column("subscription_value", MONEY, nullable=False),
        sa.Column("one_time_value", MONEY, nullable=False),
        sa.Column(
            "status",
            sa.Enum("draft", "sent", "viewed", "accepted", "rejected", "expired", name="proposalstatus"),
            nullable=False,
        ),
        sa.Column("valid_until", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("terms", sa.Text(), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("viewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["deal_id"], ["deals.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_proposals_customer", "proposals", ["customer_id"])
    op.create_index("idx_proposals_deal", "proposals", ["deal_id"])
    op.create_index("idx_proposals_status", "proposals", ["status"])

    op.create_table(
        "proposal_items",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("proposal_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("item_type", sa.Enum("product", "custom", name="proposalitemtype"), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("product_name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", MONEY, nullable=False),
        sa.Column("total", MONEY, nullable=False),
        sa.Column("is_subscription", sa.Boolean(), nullable=False),
        sa.Column("subscription_interval", _subscription_interval(), nullable=True),
        sa.ForeignKeyConstraint(["proposal_id"], ["proposals.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_proposal_items_proposal", "proposal_items", ["proposal_id"])

    op.create_table(
        "proposal_contacts",
        sa.Column("proposal_id", sa.Integer(), nullable=False),
        sa.Column("contact_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["proposal_id"], ["proposals.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["contact_id"], ["contacts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("proposal_id", "contact_id"),
    )


def downgrade() -> None:
    op.drop_table("proposal_contacts")
    op.drop_table("proposal_items")
    op.drop_table("proposals")
    sa.Enum(name="proposalitemtype").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="proposalstatus").drop(op.get_bind(), checkfirst=True)
