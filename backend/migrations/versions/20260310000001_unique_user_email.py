# Overview: Alembic migration making user emails unique across tenants, case-insensitively.

"""Add unique index on lower(users.email)

Login and password reset look users up by email alone, so one address may
only belong to one account. Upgrading fails if duplicate addresses already
exist; resolve them before running it.

Revision ID: 20260310000001
Revises: 20260302000001
Create Date: 2026-03-10 00:00:01
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260310000001"
down_revision = "20260302000001"
branch_labels = None
depends_on = None


INDEX_NAME = "users_email_lower_unique"


def upgrade():
    op.create_index(INDEX_NAME, "users", [sa.text("lower(email)")], unique=True, if_not_exists=True)


def downgrade():
    op.drop_index(INDEX_NAME, table_name="users", if_exists=True)
