# Overview: Alembic migration for the sales table.

"""Create sales

Revision ID: 20240101000003
Revises: 20240101000002
Create Date: 2024-01-01 00:00:03
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20240101000003"
down_revision = "20240101000002"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "sales",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("invoice_number", sa.String(50), nullable=False),
        sa.Column("customer_id", sa.Uuid(), nullable=True),
        sa.Column("sale_date", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=True, server_default="0"),
        sa.Column("discount_amount", sa.Numeric(12, 2), nullable=True, server_default="0"),
        sa.Column("discount_rate", sa.Numeric(5, 2), nullable=True, server_default="0"),
        sa.Column("vat_total", sa.Numeric(12, 2), nullable=True, server_default="0"),
        sa.Column("grand_total", sa.Numeric(12, 2), nullable=False),
        sa.Column("include_vat", sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column("payment_method", sa.String(20), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(20), nullable=True, server_default="completed"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("sales", schema=None) as batch_op:
        batch_op.create_index("ix_sales_invoice_number", ["invoice_number"], unique=True)
        batch_op.create_index("ix_sales_customer_id", ["customer_id"], unique=False)
        batch_op.create_index("ix_sales_sale_date", ["sale_date"], unique=False)
        batch_op.create_index("ix_sales_status", ["status"], unique=False)
        batch_op.create_index("ix_sales_payment_method", ["payment_method"], unique=False)


def downgrade():
    op.drop_table("sales")
