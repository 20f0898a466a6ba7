# Overview: Alembic migration widening product prices to six decimals.

"""Widen products.purchase_price / sale_price from (12,2) to (15,6)

Revision ID: 20260218000001
Revises: 20260214000010
Create Date: 2026-02-18 00:00:01
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260218000001"
down_revision = "20260214000010"
branch_labels = None
depends_on = None

PRICE_COLUMNS = ("purchase_price", "sale_price")


def upgrade():
    with op.batch_alter_table("products", schema=None) as batch_op:
        for column in PRICE_COLUMNS:
            batch_op.alter_column(
                column,
                existing_type=sa.Numeric(12, 2),
                type_=sa.Numeric(15, 6),
                existing_nullable=False,
            )


def downgrade():
    # Values with more than two decimals are rounded by the database.
    with op.batch_alter_table("products", schema=None) as batch_op:
        for column in PRICE_COLUMNS:
            batch_op.alter_column(
                column,
                existing_type=sa.Numeric(15, 6),
                type_=sa.Numeric(12, 2),
                existing_nullable=False,
            )
