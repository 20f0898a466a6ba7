# Overview: Alembic migration for tenants (one row per subscribing business).

"""Create tenants

owner_id gets its foreign key in the users revision; users reference
tenants, so the pair is created in two steps.

Revision ID: 20260214000002
Revises: 20260214000001
Create Date: 2026-02-14 00:00:02
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20260214000002"
down_revision = "20260214000001"
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade():
    op.create_table(
        "tenants",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("domain", sa.String(255), nullable=True),
        sa.Column("logo_url", sa.String(500), nullable=True),
        sa.Column("plan_id", sa.Uuid(), nullable=True),
        sa.Column("settings", JSON_TYPE, nullable=True),
        # active / suspended / cancelled / trial
        sa.Column("status", sa.String(20), nullable=True, server_default="active"),
        sa.Column("trial_ends_at", sa.DateTime(), nullable=True),
        sa.Column("subscription_starts_at", sa.DateTime(), nullable=True),
        sa.Column("subscription_ends_at", sa.DateTime(), nullable=True),
        sa.Column("billing_email", sa.String(255), nullable=True),
        sa.Column("owner_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["plan_id"], ["plans.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug", name="tenants_slug_unique"),
    )

    with op.batch_alter_table("tenants", schema=None) as batch_op:
        batch_op.create_index("ix_tenants_plan_id", ["plan_id"], unique=False)
        batch_op.create_index("ix_tenants_status", ["status"], unique=False)


def downgrade():
    op.drop_table("tenants")
