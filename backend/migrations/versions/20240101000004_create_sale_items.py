# Overview: Alembic migration for the sale_items table.

"""Create sale_items

Revision ID: 20240101000004
Revises: 20240101000003
Create Date: 2024-01-01 00:00:04
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20240101000004"
down_revision = "20240101000003"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "sale_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("sale_id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount_rate", sa.Numeric(5, 2), nullable=True, server_default="0"),
        sa.Column("vat_rate", sa.Numeric(5, 2), nullable=True, server_default="0"),
        sa.Column("vat_amount", sa.Numeric(12, 2), nullable=True, server_default="0"),
        sa.Column("line_total", sa.Numeric(12, 2), nullable=False),
        sa.ForeignKeyConstraint(["sale_id"], ["sales.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("sale_items", schema=None) as batch_op:
        batch_op.create_index("ix_sale_items_sale_id", ["sale_id"], unique=False)
        batch_op.create_index("ix_sale_items_product_id", ["product_id"], unique=False)


def downgrade():
    op.drop_table("sale_items")
