# Overview: Alembic migration for inter-warehouse transfers and the stock movement journal.

"""Create stock_transfers, stock_transfer_items and stock_movements

Revision ID: 20240201000004
Revises: 20240201000003
Create Date: 2024-02-01 00:00:04
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20240201000004"
down_revision = "20240201000003"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "stock_transfers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("transfer_number", sa.String(50), nullable=False),
        sa.Column("from_warehouse_id", sa.Uuid(), nullable=False),
        sa.Column("to_warehouse_id", sa.Uuid(), nullable=False),
        sa.Column("transfer_date", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        # pending / in_transit / completed / cancelled
        sa.Column("status", sa.String(20), nullable=True, server_default="pending"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["from_warehouse_id"], ["warehouses.id"]),
        sa.ForeignKeyConstraint(["to_warehouse_id"], ["warehouses.id"]),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("stock_transfers", schema=None) as batch_op:
        batch_op.create_index("ix_stock_transfers_transfer_number", ["transfer_number"], unique=True)
        batch_op.create_index("ix_stock_transfers_from_warehouse_id", ["from_warehouse_id"], unique=False)
        batch_op.create_index("ix_stock_transfers_to_warehouse_id", ["to_warehouse_id"], unique=False)
        batch_op.create_index("ix_stock_transfers_status", ["status"], unique=False)
        batch_op.create_index("ix_stock_transfers_transfer_date", ["transfer_date"], unique=False)

    op.create_table(
        "stock_transfer_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("transfer_id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["transfer_id"], ["stock_transfers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"]),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("stock_transfer_items", schema=None) as batch_op:
        batch_op.create_index("ix_stock_transfer_items_transfer_id", ["transfer_id"], unique=False)
        batch_op.create_index("ix_stock_transfer_items_product_id", ["product_id"], unique=False)

    op.create_table(
        "stock_movements",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("warehouse_id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=False),
        # sale / return / transfer_in / transfer_out / adjustment / purchase
        sa.Column("movement_type", sa.String(20), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("stock_after", sa.Integer(), nullable=False),
        sa.Column("reference_type", sa.String(20), nullable=True),
        sa.Column("reference_id", sa.Uuid(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("movement_date", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouses.id"]),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"]),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("stock_movements", schema=None) as batch_op:
        batch_op.create_index("ix_stock_movements_warehouse_id", ["warehouse_id"], unique=False)
        batch_op.create_index("ix_stock_movements_product_id", ["product_id"], unique=False)
        batch_op.create_index("ix_stock_movements_movement_type", ["movement_type"], unique=False)
        batch_op.create_index("ix_stock_movements_reference_type", ["reference_type"], unique=False)
        batch_op.create_index("ix_stock_movements_movement_date", ["movement_date"], unique=False)


def downgrade():
    op.drop_table("stock_movements")
    op.drop_table("stock_transfer_items")
    op.drop_table("stock_transfers")
