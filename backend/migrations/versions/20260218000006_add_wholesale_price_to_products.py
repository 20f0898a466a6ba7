# Overview: Alembic migration for the wholesale price on products.

"""Add products.wholesale_price

Revision ID: 20260218000006
Revises: 20260218000005
Create Date: 2026-02-18 00:00:06
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260218000006"
down_revision = "20260218000005"
branch_labels = None
depends_on = None


def upgrade():
    columns = {c["name"] for c in sa.inspect(op.get_bind()).get_columns("products")}
    if "wholesale_price" in columns:
        return

    with op.batch_alter_table("products", schema=None) as batch_op:
        batch_op.add_column(
            sa.Column("wholesale_price", sa.Numeric(15, 6), nullable=True, server_default="0")
        )


def downgrade():
    with op.batch_alter_table("products", schema=None) as batch_op:
        batch_op.drop_column("wholesale_price")
