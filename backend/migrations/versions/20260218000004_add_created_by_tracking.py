# Overview: Alembic migration recording the creating user on catalog and document tables.

"""Add created_by to products, customers, returns, expenses and quotes

Revision ID: 20260218000004
Revises: 20260218000003
Create Date: 2026-02-18 00:00:04
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260218000004"
down_revision = "20260218000003"
branch_labels = None
depends_on = None

TABLES = ("products", "customers", "returns", "expenses", "quotes")


def _has_column(table, column):
    return column in {c["name"] for c in sa.inspect(op.get_bind()).get_columns(table)}


def upgrade():
    for table in TABLES:
        if _has_column(table, "created_by"):
            continue
        with op.batch_alter_table(table, schema=None) as batch_op:
            batch_op.add_column(sa.Column("created_by", sa.Uuid(), nullable=True))
            batch_op.create_foreign_key(
                f"fk_{table}_created_by_users", "users", ["created_by"], ["id"], ondelete="SET NULL"
            )
            batch_op.create_index(f"ix_{table}_created_by", ["created_by"], unique=False)


def downgrade():
    for table in reversed(TABLES):
        with op.batch_alter_table(table, schema=None) as batch_op:
            batch_op.drop_index(f"ix_{table}_created_by")
            batch_op.drop_constraint(f"fk_{table}_created_by_users", type_="foreignkey")
            batch_op.drop_column("created_by")
