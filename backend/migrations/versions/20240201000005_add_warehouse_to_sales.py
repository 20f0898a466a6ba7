# Overview: Alembic migration recording the source warehouse on sales and returns.

"""Add warehouse_id to sales and returns (skipped per table when present)

Revision ID: 20240201000005
Revises: 20240201000004
Create Date: 2024-02-01 00:00:05
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20240201000005"
down_revision = "20240201000004"
branch_labels = None
depends_on = None

TABLES = ("sales", "returns")


def _has_column(table, column):
    return column in {c["name"] for c in sa.inspect(op.get_bind()).get_columns(table)}


def upgrade():
    for table in TABLES:
        if _has_column(table, "warehouse_id"):
            continue
        with op.batch_alter_table(table, schema=None) as batch_op:
            batch_op.add_column(sa.Column("warehouse_id", sa.Uuid(), nullable=True))
            batch_op.create_foreign_key(
                f"fk_{table}_warehouse_id_warehouses", "warehouses", ["warehouse_id"], ["id"], ondelete="SET NULL"
            )
            batch_op.create_index(f"ix_{table}_warehouse_id", ["warehouse_id"], unique=False)


def downgrade():
    for table in reversed(TABLES):
        with op.batch_alter_table(table, schema=None) as batch_op:
            batch_op.drop_index(f"ix_{table}_warehouse_id")
            batch_op.drop_constraint(f"fk_{table}_warehouse_id_warehouses", type_="foreignkey")
            batch_op.drop_column("warehouse_id")
