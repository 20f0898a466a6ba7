# Overview: Alembic migration for the "invoice issued" flag on sales.

"""Add sales.invoice_issued

Revision ID: 20260218000003
Revises: 20260218000002
Create Date: 2026-02-18 00:00:03
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260218000003"
down_revision = "20260218000002"
branch_labels = None
depends_on = None


def upgrade():
    columns = {c["name"] for c in sa.inspect(op.get_bind()).get_columns("sales")}
    if "invoice_issued" in columns:
        return

    with op.batch_alter_table("sales", schema=None) as batch_op:
        batch_op.add_column(
            sa.Column("invoice_issued", sa.Boolean(), nullable=False, server_default=sa.false())
        )


def downgrade():
    with op.batch_alter_table("sales", schema=None) as batch_op:
        batch_op.drop_column("invoice_issued")
