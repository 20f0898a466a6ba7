# Overview: Alembic migration for users and the tenant owner link.

"""Create users; add tenants.owner_id foreign key

Revision ID: 20260214000003
Revises: 20260214000002
Create Date: 2026-02-14 00:00:03
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20260214000003"
down_revision = "20260214000002"
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        # NULL for the platform super admin
        sa.Column("tenant_id", sa.Uuid(), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        # super_admin / tenant_admin / manager / user
        sa.Column("role", sa.String(50), nullable=False, server_default="user"),
        sa.Column("permissions", JSON_TYPE, nullable=True),
        sa.Column("status", sa.String(20), nullable=True, server_default="active"),
        sa.Column("email_verified_at", sa.DateTime(), nullable=True),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "email", name="users_tenant_id_email_unique"),
    )

    with op.batch_alter_table("users", schema=None) as batch_op:
        batch_op.create_index("ix_users_tenant_id", ["tenant_id"], unique=False)
        batch_op.create_index("ix_users_email", ["email"], unique=False)
        batch_op.create_index("ix_users_role", ["role"], unique=False)
        batch_op.create_index("ix_users_status", ["status"], unique=False)

    with op.batch_alter_table("tenants", schema=None) as batch_op:
        batch_op.create_foreign_key(
            "fk_tenants_owner_id_users", "users", ["owner_id"], ["id"], ondelete="SET NULL"
        )


def downgrade():
    with op.batch_alter_table("tenants", schema=None) as batch_op:
        batch_op.drop_constraint("fk_tenants_owner_id_users", type_="foreignkey")

    op.drop_table("users")
