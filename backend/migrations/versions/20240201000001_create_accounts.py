# Overview: Alembic migration for cash/bank accounts, their movements and transfers.

"""Create accounts, account_movements and account_transfers

Revision ID: 20240201000001
Revises: 20240101000009
Create Date: 2024-02-01 00:00:01
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20240201000001"
down_revision = "20240101000009"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        # kasa / banka
        sa.Column("account_type", sa.String(20), nullable=False),
        sa.Column("bank_name", sa.String(100), nullable=True),
        sa.Column("iban", sa.String(34), nullable=True),
        sa.Column("account_number", sa.String(50), nullable=True),
        sa.Column("branch_name", sa.String(100), nullable=True),
        sa.Column("currency", sa.String(3), nullable=True, server_default="TRY"),
        sa.Column("opening_balance", sa.Numeric(12, 2), nullable=True, server_default="0"),
        sa.Column("current_balance", sa.Numeric(12, 2), nullable=True, server_default="0"),
        sa.Column("is_default", sa.Boolean(), nullable=True, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("accounts", schema=None) as batch_op:
        batch_op.create_index("ix_accounts_account_type", ["account_type"], unique=False)
        batch_op.create_index("ix_accounts_is_active", ["is_active"], unique=False)
        batch_op.create_index("ix_accounts_is_default", ["is_default"], unique=False)

    op.create_table(
        "account_movements",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("account_id", sa.Uuid(), nullable=False),
        # gelir / gider / transfer_in / transfer_out
        sa.Column("movement_type", sa.String(20), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("balance_after", sa.Numeric(12, 2), nullable=False),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("reference_type", sa.String(20), nullable=True),
        sa.Column("reference_id", sa.Uuid(), nullable=True),
        sa.Column("movement_date", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("account_movements", schema=None) as batch_op:
        batch_op.create_index("ix_account_movements_account_id", ["account_id"], unique=False)
        batch_op.create_index("ix_account_movements_movement_type", ["movement_type"], unique=False)
        batch_op.create_index("ix_account_movements_reference_type", ["reference_type"], unique=False)
        batch_op.create_index("ix_account_movements_movement_date", ["movement_date"], unique=False)

    op.create_table(
        "account_transfers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("from_account_id", sa.Uuid(), nullable=False),
        sa.Column("to_account_id", sa.Uuid(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("transfer_date", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["from_account_id"], ["accounts.id"]),
        sa.ForeignKeyConstraint(["to_account_id"], ["accounts.id"]),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("account_transfers", schema=None) as batch_op:
        batch_op.create_index("ix_account_transfers_from_account_id", ["from_account_id"], unique=False)
        batch_op.create_index("ix_account_transfers_to_account_id", ["to_account_id"], unique=False)
        batch_op.create_index("ix_account_transfers_transfer_date", ["transfer_date"], unique=False)


def downgrade():
    op.drop_table("account_transfers")
    op.drop_table("account_movements")
    op.drop_table("accounts")
