# Overview: Alembic migration linking payments and expenses to an account.

"""Add account_id to payments and expenses

Revision ID: 20240201000002
Revises: 20240201000001
Create Date: 2024-02-01 00:00:02
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20240201000002"
down_revision = "20240201000001"
branch_labels = None
depends_on = None

TABLES = ("payments", "expenses")


def _has_column(table, column):
    return column in {c["name"] for c in sa.inspect(op.get_bind()).get_columns(table)}


def upgrade():
    for table in TABLES:
        if _has_column(table, "account_id"):
            continue
        with op.batch_alter_table(table, schema=None) as batch_op:
            batch_op.add_column(sa.Column("account_id", sa.Uuid(), nullable=True))
            batch_op.create_foreign_key(
                f"fk_{table}_account_id_accounts", "accounts", ["account_id"], ["id"], ondelete="SET NULL"
            )
            batch_op.create_index(f"ix_{table}_account_id", ["account_id"], unique=False)


def downgrade():
    for table in reversed(TABLES):
        with op.batch_alter_table(table, schema=None) as batch_op:
            batch_op.drop_index(f"ix_{table}_account_id")
            batch_op.drop_constraint(f"fk_{table}_account_id_accounts", type_="foreignkey")
            batch_op.drop_column("account_id")
