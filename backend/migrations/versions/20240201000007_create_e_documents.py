# Overview: Alembic migration for e-documents and their status log.

"""Create e_documents and e_document_logs

Revision ID: 20240201000007
Revises: 20240201000006
Create Date: 2024-02-01 00:00:07
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20240201000007"
down_revision = "20240201000006"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "e_documents",
        sa.Column("id", sa.Uuid(), nullable=False),
        # e_fatura / e_arsiv / e_ihracat / e_irsaliye / e_smm
        sa.Column("document_type", sa.String(30), nullable=False),
        sa.Column("document_number", sa.String(50), nullable=False),
        sa.Column("gib_uuid", sa.String(50), nullable=True),
        # sale / return / waybill
        sa.Column("reference_type", sa.String(20), nullable=False),
        sa.Column("reference_id", sa.Uuid(), nullable=False),
        sa.Column("customer_id", sa.Uuid(), nullable=True),
        sa.Column("issue_date", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("vat_amount", sa.Numeric(12, 2), nullable=True, server_default="0"),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        # draft / pending / sent / approved / rejected / cancelled
        sa.Column("status", sa.String(20), nullable=True, server_default="draft"),
        sa.Column("gib_response_code", sa.String(10), nullable=True),
        sa.Column("gib_response_message", sa.Text(), nullable=True),
        sa.Column("envelope_uuid", sa.String(50), nullable=True),
        sa.Column("xml_content", sa.Text(), nullable=True),
        sa.Column("pdf_path", sa.String(255), nullable=True),
        sa.Column("sent_at", sa.DateTime(), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("e_documents", schema=None) as batch_op:
        batch_op.create_index("ix_e_documents_document_type", ["document_type"], unique=False)
        batch_op.create_index("ix_e_documents_document_number", ["document_number"], unique=True)
        batch_op.create_index("ix_e_documents_gib_uuid", ["gib_uuid"], unique=False)
        batch_op.create_index("ix_e_documents_reference_type", ["reference_type"], unique=False)
        batch_op.create_index("ix_e_documents_reference_id", ["reference_id"], unique=False)
        batch_op.create_index("ix_e_documents_customer_id", ["customer_id"], unique=False)
        batch_op.create_index("ix_e_documents_status", ["status"], unique=False)
        batch_op.create_index("ix_e_documents_issue_date", ["issue_date"], unique=False)

    op.create_table(
        "e_document_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("document_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(30), nullable=False),
        sa.Column("status_before", sa.String(20), nullable=True),
        sa.Column("status_after", sa.String(20), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["document_id"], ["e_documents.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    with op.batch_alter_table("e_document_logs", schema=None) as batch_op:
        batch_op.create_index("ix_e_document_logs_document_id", ["document_id"], unique=False)
        batch_op.create_index("ix_e_document_logs_action", ["action"], unique=False)


def downgrade():
    op.drop_table("e_document_logs")
    op.drop_table("e_documents")
