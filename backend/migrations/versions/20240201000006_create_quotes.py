# Overview: Alembic migration for quotes and their line items.

"""Create quotes and quote_items

Revision ID: 20240201000006
Revises: 20240201000005
Create Date: 2024-02-01 00:00:06
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20240201000006"
down_revision = "20240201000005"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "quotes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("quote_number", sa.String(50), nullable=False),
        sa.Column("customer_id", sa.Uuid(), nullable=True),
        sa.Column("quote_date", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("valid_until", sa.Date(), nullable=False),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=True, server_default="0"),
        sa.Column("discount_amount", sa.Numeric(12, 2), nullable=True, server_default="0"),
        sa.Column("discount_rate", sa.Numeric(5, 2), nullable=True, server_default="0"),
        sa.Column("vat_total", sa.Numeric(12, 2), nullable=True, server_default="0"),
        sa.Column("grand_total", sa.Numeric(12, 2), nullable=False),
        sa.Column("include_vat", sa.Boolean(), nullable=True, server_default=sa.true()),
        # draft / sent / accepted / rejected / expired / converted
        sa.Column("status", sa.String(20), nullable=True, server_default="draft"),
        sa.Column("converted_sale_id", sa.Uuid(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["converted_sale_id"], ["sales.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("quotes", schema=None) as batch_op:
        batch_op.create_index("ix_quotes_quote_number", ["quote_number"], unique=True)
        batch_op.create_index("ix_quotes_customer_id", ["customer_id"], unique=False)
        batch_op.create_index("ix_quotes_status", ["status"], unique=False)
        batch_op.create_index("ix_quotes_quote_date", ["quote_date"], unique=False)
        batch_op.create_index("ix_quotes_valid_until", ["valid_until"], unique=False)

    op.create_table(
        "quote_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("quote_id", sa.Uuid(), nullable=False),
        sa.Column("product_id", sa.Uuid(), nullable=True),
        sa.Column("product_name", sa.String(255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount_rate", sa.Numeric(5, 2), nullable=True, server_default="0"),
        sa.Column("vat_rate", sa.Numeric(5, 2), nullable=True, server_default="0"),
        sa.Column("vat_amount", sa.Numeric(12, 2), nullable=True, server_default="0"),
        sa.Column("line_total", sa.Numeric(12, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["quote_id"], ["quotes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("quote_items", schema=None) as batch_op:
        batch_op.create_index("ix_quote_items_quote_id", ["quote_id"], unique=False)
        batch_op.create_index("ix_quote_items_product_id", ["product_id"], unique=False)


def downgrade():
    op.drop_table("quote_items")
    op.drop_table("quotes")
