# Overview: Alembic migration for platform invoices issued to tenants.

"""Create tenant_invoices

Revision ID: 20260214000007
Revises: 20260214000006
Create Date: 2026-02-14 00:00:07
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260214000007"
down_revision = "20260214000006"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "tenant_invoices",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), nullable=False),
        sa.Column("invoice_number", sa.String(50), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=True),
        sa.Column("period_end", sa.Date(), nullable=True),
        sa.Column("plan_id", sa.Uuid(), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("tax_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=True),
        # pending / paid / overdue / cancelled
        sa.Column("status", sa.String(20), nullable=True, server_default="pending"),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["plan_id"], ["plans.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("invoice_number", name="tenant_invoices_invoice_number_unique"),
    )

    with op.batch_alter_table("tenant_invoices", schema=None) as batch_op:
        batch_op.create_index("ix_tenant_invoices_tenant_id", ["tenant_id"], unique=False)
        batch_op.create_index("ix_tenant_invoices_status", ["status"], unique=False)
        batch_op.create_index("ix_tenant_invoices_due_date", ["due_date"], unique=False)


def downgrade():
    op.drop_table("tenant_invoices")
