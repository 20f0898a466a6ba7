# Overview: Alembic migration for warehouses and per-warehouse stock.

"""Create warehouses and warehouse_stocks

Revision ID: 20240201000003
Revises: 20240201000002
Create Date: 2024-02-01 00:00:03
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20240201000003"
down_revision = "20240201000002"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "warehouses",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("code", sa.String(20), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("manager_name", sa.String(100), nullable=True),
        sa.Column("is_default", sa.Boolean(), nullable=True, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("warehouses", schema=None) as batch_op:
        batch_op.create_index("ix_warehouses_code", ["code"], unique=True)
        batch_op.create_index("ix_warehouses_is_active", ["is_active"], unique=False)
        batch_op.create_index("ix_warehouses_is_default", ["is_default"], unique=False)

    op.create_table(
        "warehouse_stocks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("warehouse_id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("min_stock_level", sa.Integer(), nullable=True, server_default="5"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouses.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("warehouse_id", "product_id", name="warehouse_stocks_warehouse_id_product_id_unique"),
    )

    with op.batch_alter_table("warehouse_stocks", schema=None) as batch_op:
        batch_op.create_index("ix_warehouse_stocks_warehouse_id", ["warehouse_id"], unique=False)
        batch_op.create_index("ix_warehouse_stocks_product_id", ["product_id"], unique=False)


def downgrade():
    op.drop_table("warehouse_stocks")
    op.drop_table("warehouses")
