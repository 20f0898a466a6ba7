# Overview: Alembic data migration flagging imported e-invoices as issued.

"""Mark sales imported from e-invoices as invoice_issued

Sales created by the e-invoice importer carry "E-Fatura import:" in their
notes; they already have an invoice.

One-way: flags set here cannot be told apart from flags set by hand, so
downgrade() leaves the data as it is.

Revision ID: 20260219000001
Revises: 20260218000007
Create Date: 2026-02-19 00:00:01
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260219000001"
down_revision = "20260218000007"
branch_labels = None
depends_on = None

sales = sa.table(
    "sales",
    sa.column("notes", sa.Text()),
    sa.column("invoice_issued", sa.Boolean()),
)


def upgrade():
    op.get_bind().execute(
        sales.update()
        .where(sales.c.notes.like("%E-Fatura import:%"))
        .where(sales.c.invoice_issued == sa.false())
        .values(invoice_issued=True)
    )


def downgrade():
    # Irreversible: no record of which rows were flagged here.
    pass
