# Overview: Alembic data migration assigning pre-tenancy rows to the oldest tenant.

"""Assign rows without tenant_id to the oldest tenant

Rows written before multi-tenancy was enforced have tenant_id NULL.
Without any tenant the revision does nothing.

One-way: assignment is intentional and the previous NULLs are not kept,
so downgrade() leaves the data as it is.

Revision ID: 20260221000001
Revises: 20260219000002
Create Date: 2026-02-21 00:00:01
"""

import logging

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260221000001"
down_revision = "20260219000002"
branch_labels = None
depends_on = None

logger = logging.getLogger("alembic.runtime.migration")

TABLES = (
    "products",
    "customers",
    "sales",
    "sale_items",
    "payments",
    "expenses",
    "returns",
    "return_items",
    "account_transactions",
    "accounts",
    "warehouses",
    "quotes",
)

tenants = sa.table(
    "tenants",
    sa.column("id", sa.Uuid()),
    sa.column("name", sa.String()),
    sa.column("created_at", sa.DateTime()),
)


def upgrade():
    bind = op.get_bind()
    tenant = bind.execute(
        sa.select(tenants.c.id, tenants.c.name).order_by(tenants.c.created_at.asc()).limit(1)
    ).first()
    if tenant is None:
        logger.info("No tenants found, skipping orphan data assignment")
        return

    logger.info("Assigning orphan data to tenant: %s (%s)", tenant.name, tenant.id)
    inspector = sa.inspect(bind)
    for name in TABLES:
        if "tenant_id" not in {c["name"] for c in inspector.get_columns(name)}:
            continue
        table = sa.table(name, sa.column("tenant_id", sa.Uuid()))
        result = bind.execute(
            table.update().where(table.c.tenant_id.is_(None)).values(tenant_id=tenant.id)
        )
        if result.rowcount:
            logger.info("  %s: %s records updated", name, result.rowcount)


def downgrade():
    # Irreversible: the rows' previous NULL tenant is not recorded.
    pass
