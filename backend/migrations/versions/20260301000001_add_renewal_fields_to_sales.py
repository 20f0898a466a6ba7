# Overview: Alembic migration for subscription-style renewal tracking on sales.

"""Add renewal fields to sales

Revision ID: 20260301000001
Revises: 20260221000001
Create Date: 2026-03-01 00:00:01
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260301000001"
down_revision = "20260221000001"
branch_labels = None
depends_on = None


def upgrade():
    columns = {c["name"] for c in sa.inspect(op.get_bind()).get_columns("sales")}
    if "has_renewal" in columns:
        return

    with op.batch_alter_table("sales", schema=None) as batch_op:
        batch_op.add_column(sa.Column("has_renewal", sa.Boolean(), nullable=True, server_default=sa.false()))
        batch_op.add_column(sa.Column("renewal_date", sa.Date(), nullable=True))
        batch_op.add_column(sa.Column("reminder_days_before", sa.Integer(), nullable=True, server_default="30"))
        batch_op.add_column(sa.Column("reminder_note", sa.Text(), nullable=True))
        batch_op.create_index("ix_sales_renewal_date", ["renewal_date"], unique=False)
        batch_op.create_index("ix_sales_has_renewal", ["has_renewal"], unique=False)


def downgrade():
    with op.batch_alter_table("sales", schema=None) as batch_op:
        batch_op.drop_index("ix_sales_renewal_date")
        batch_op.drop_index("ix_sales_has_renewal")
        batch_op.drop_column("reminder_note")
        batch_op.drop_column("reminder_days_before")
        batch_op.drop_column("renewal_date")
        batch_op.drop_column("has_renewal")
