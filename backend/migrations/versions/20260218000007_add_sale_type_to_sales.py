# Overview: Alembic migration for the retail / wholesale marker on sales.

"""Add sales.sale_type

Revision ID: 20260218000007
Revises: 20260218000006
Create Date: 2026-02-18 00:00:07
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260218000007"
down_revision = "20260218000006"
branch_labels = None
depends_on = None


def upgrade():
    columns = {c["name"] for c in sa.inspect(op.get_bind()).get_columns("sales")}
    if "sale_type" in columns:
        return

    with op.batch_alter_table("sales", schema=None) as batch_op:
        batch_op.add_column(sa.Column("sale_type", sa.String(20), nullable=True, server_default="retail"))
        batch_op.create_index("ix_sales_sale_type", ["sale_type"], unique=False)


def downgrade():
    with op.batch_alter_table("sales", schema=None) as batch_op:
        batch_op.drop_index("ix_sales_sale_type")
        batch_op.drop_column("sale_type")
