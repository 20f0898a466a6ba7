# Overview: Alembic migration for the Google account link on users.

"""Add users.google_id

Revision ID: 20260214000009
Revises: 20260214000008
Create Date: 2026-02-14 00:00:09
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260214000009"
down_revision = "20260214000008"
branch_labels = None
depends_on = None


def upgrade():
    columns = {c["name"] for c in sa.inspect(op.get_bind()).get_columns("users")}
    if "google_id" in columns:
        return

    with op.batch_alter_table("users", schema=None) as batch_op:
        batch_op.add_column(sa.Column("google_id", sa.String(255), nullable=True))
        batch_op.create_index("ix_users_google_id", ["google_id"], unique=False)


def downgrade():
    with op.batch_alter_table("users", schema=None) as batch_op:
        batch_op.drop_index("ix_users_google_id")
        batch_op.drop_column("google_id")
