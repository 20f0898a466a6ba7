# Overview: Alembic migration scoping every business table to a tenant.

"""Add tenant_id to all business tables

Each table is altered only when it exists and does not already carry
tenant_id, so the revision also runs on databases that were partially
migrated by hand. The column stays nullable; rows created before
multi-tenancy are assigned in 20260221000001.

Revision ID: 20260214000008
Revises: 20260214000007
Create Date: 2026-02-14 00:00:08
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260214000008"
down_revision = "20260214000007"
branch_labels = None
depends_on = None

TABLES = (
    "customers",
    "products",
    "sales",
    "sale_items",
    "returns",
    "return_items",
    "payments",
    "expenses",
    "account_transactions",
    "accounts",
    "account_movements",
    "account_transfers",
    "warehouses",
    "warehouse_stocks",
    "stock_transfers",
    "stock_transfer_items",
    "stock_movements",
    "quotes",
    "quote_items",
    "e_documents",
    "e_document_logs",
)


def _has_column(inspector, table, column):
    return column in {c["name"] for c in inspector.get_columns(table)}


def upgrade():
    for table in TABLES:
        inspector = sa.inspect(op.get_bind())
        if not inspector.has_table(table) or _has_column(inspector, table, "tenant_id"):
            continue

        with op.batch_alter_table(table, schema=None) as batch_op:
            batch_op.add_column(sa.Column("tenant_id", sa.Uuid(), nullable=True))
            batch_op.create_foreign_key(
                f"fk_{table}_tenant_id_tenants", "tenants", ["tenant_id"], ["id"], ondelete="CASCADE"
            )
            batch_op.create_index(f"ix_{table}_tenant_id", ["tenant_id"], unique=False)


def downgrade():
    for table in reversed(TABLES):
        inspector = sa.inspect(op.get_bind())
        if not inspector.has_table(table) or not _has_column(inspector, table, "tenant_id"):
            continue

        with op.batch_alter_table(table, schema=None) as batch_op:
            batch_op.drop_index(f"ix_{table}_tenant_id")
            batch_op.drop_constraint(f"fk_{table}_tenant_id_tenants", type_="foreignkey")
            batch_op.drop_column("tenant_id")
