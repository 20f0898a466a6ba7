# Overview: Alembic migration for per-customer renewal urgency thresholds.

"""Add customers.renewal_red_days / renewal_yellow_days

Revision ID: 20260302000001
Revises: 20260301000001
Create Date: 2026-03-02 00:00:01
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260302000001"
down_revision = "20260301000001"
branch_labels = None
depends_on = None


def upgrade():
    columns = {c["name"] for c in sa.inspect(op.get_bind()).get_columns("customers")}

    with op.batch_alter_table("customers", schema=None) as batch_op:
        if "renewal_red_days" not in columns:
            batch_op.add_column(sa.Column("renewal_red_days", sa.Integer(), nullable=True, server_default="30"))
        if "renewal_yellow_days" not in columns:
            batch_op.add_column(sa.Column("renewal_yellow_days", sa.Integer(), nullable=True, server_default="60"))


def downgrade():
    with op.batch_alter_table("customers", schema=None) as batch_op:
        batch_op.drop_column("renewal_yellow_days")
        batch_op.drop_column("renewal_red_days")
