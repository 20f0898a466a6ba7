# Overview: Alembic migration for the customer ledger (account_transactions).

"""Create account_transactions

Revision ID: 20240101000009
Revises: 20240101000008
Create Date: 2024-01-01 00:00:09
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20240101000009"
down_revision = "20240101000008"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "account_transactions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("customer_id", sa.Uuid(), nullable=False),
        # borc / alacak
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        # sale / return / payment
        sa.Column("reference_type", sa.String(20), nullable=True),
        sa.Column("reference_id", sa.Uuid(), nullable=True),
        sa.Column("transaction_date", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("account_transactions", schema=None) as batch_op:
        batch_op.create_index("ix_account_transactions_customer_id", ["customer_id"], unique=False)
        batch_op.create_index("ix_account_transactions_type", ["type"], unique=False)
        batch_op.create_index("ix_account_transactions_reference_type", ["reference_type"], unique=False)
        batch_op.create_index("ix_account_transactions_transaction_date", ["transaction_date"], unique=False)


def downgrade():
    op.drop_table("account_transactions")
