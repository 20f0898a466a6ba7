# Overview: Alembic migration recording which user rang up a sale.

"""Add sales.created_by

Revision ID: 20260218000002
Revises: 20260218000001
Create Date: 2026-02-18 00:00:02
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260218000002"
down_revision = "20260218000001"
branch_labels = None
depends_on = None


def upgrade():
    columns = {c["name"] for c in sa.inspect(op.get_bind()).get_columns("sales")}
    if "created_by" in columns:
        return

    with op.batch_alter_table("sales", schema=None) as batch_op:
        batch_op.add_column(sa.Column("created_by", sa.Uuid(), nullable=True))
        batch_op.create_foreign_key(
            "fk_sales_created_by_users", "users", ["created_by"], ["id"], ondelete="SET NULL"
        )
        batch_op.create_index("ix_sales_created_by", ["created_by"], unique=False)


def downgrade():
    with op.batch_alter_table("sales", schema=None) as batch_op:
        batch_op.drop_index("ix_sales_created_by")
        batch_op.drop_constraint("fk_sales_created_by_users", type_="foreignkey")
        batch_op.drop_column("created_by")
