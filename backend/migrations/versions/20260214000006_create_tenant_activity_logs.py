# Overview: Alembic migration for the tenant activity trail.

"""Create tenant_activity_logs

Revision ID: 20260214000006
Revises: 20260214000005
Create Date: 2026-02-14 00:00:06
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20260214000006"
down_revision = "20260214000005"
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade():
    op.create_table(
        "tenant_activity_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=True),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("entity_type", sa.String(50), nullable=True),
        sa.Column("entity_id", sa.Uuid(), nullable=True),
        sa.Column("old_values", JSON_TYPE, nullable=True),
        sa.Column("new_values", JSON_TYPE, nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("metadata", JSON_TYPE, nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("tenant_activity_logs", schema=None) as batch_op:
        batch_op.create_index("ix_tenant_activity_logs_tenant_id", ["tenant_id"], unique=False)
        batch_op.create_index("ix_tenant_activity_logs_user_id", ["user_id"], unique=False)
        batch_op.create_index("ix_tenant_activity_logs_action", ["action"], unique=False)
        batch_op.create_index("ix_tenant_activity_logs_entity_type", ["entity_type"], unique=False)
        batch_op.create_index("ix_tenant_activity_logs_created_at", ["created_at"], unique=False)


def downgrade():
    op.drop_table("tenant_activity_logs")
