# Overview: Alembic data migration replacing Starter / Pro / Enterprise with Basic / Pro / Plus.

"""Plans: Basic / Pro / Plus

- upsert basic, pro and plus (keyed by code)
- tenants on starter move to basic, tenants on enterprise move to plus
- starter and enterprise are deleted

Prices here are the launch prices; `flask seed plans` refreshes them to
the current price list.

Revision ID: 20260219000002
Revises: 20260219000001
Create Date: 2026-02-19 00:00:02
"""

import uuid
from decimal import Decimal

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20260219000002"
down_revision = "20260219000001"
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")

plans = sa.table(
    "plans",
    sa.column("id", sa.Uuid()),
    sa.column("name", sa.String()),
    sa.column("code", sa.String()),
    sa.column("price", sa.Numeric(12, 2)),
    sa.column("billing_period", sa.String()),
    sa.column("features", JSON_TYPE),
    sa.column("limits", JSON_TYPE),
    sa.column("is_active", sa.Boolean()),
    sa.column("sort_order", sa.Integer()),
)

tenants = sa.table(
    "tenants",
    sa.column("plan_id", sa.Uuid()),
)

_FEATURE_KEYS = (
    "sales", "returns", "quotes", "eDocuments", "warehouses", "integrations",
    "crm", "fieldTeam", "invoiceImport", "advancedReports", "multiWarehouse", "apiAccess",
)


def _features(*enabled):
    return {key: key in enabled for key in _FEATURE_KEYS}


NEW_PLANS = (
    {
        "name": "Basic",
        "code": "basic",
        "price": Decimal("79.00"),
        "sort_order": 1,
        "features": _features("sales", "returns"),
        "limits": {"maxUsers": 1, "maxProducts": 200, "maxCustomers": 100,
                   "maxWarehouses": 1, "maxIntegrations": 0, "storageGb": 5},
    },
    {
        "name": "Pro",
        "code": "pro",
        "price": Decimal("179.00"),
        "sort_order": 2,
        "features": _features("sales", "returns", "quotes", "eDocuments", "warehouses", "integrations",
                              "invoiceImport", "advancedReports", "multiWarehouse"),
        "limits": {"maxUsers": 5, "maxProducts": 5000, "maxCustomers": 2000,
                   "maxWarehouses": 3, "maxIntegrations": 3, "storageGb": 25},
    },
    {
        "name": "Plus",
        "code": "plus",
        "price": Decimal("349.00"),
        "sort_order": 3,
        "features": _features(*_FEATURE_KEYS),
        "limits": {"maxUsers": -1, "maxProducts": -1, "maxCustomers": -1,
                   "maxWarehouses": -1, "maxIntegrations": -1, "storageGb": 100},
    },
)

# retired code -> replacement code
REPLACED = {"starter": "basic", "enterprise": "plus"}


def _plan_id(bind, code):
    return bind.execute(sa.select(plans.c.id).where(plans.c.code == code)).scalar()


def upgrade():
    bind = op.get_bind()

    for plan in NEW_PLANS:
        values = {k: v for k, v in plan.items() if k != "code"}
        if _plan_id(bind, plan["code"]) is None:
            bind.execute(
                plans.insert().values(
                    id=uuid.uuid4(), code=plan["code"], billing_period="monthly", is_active=True, **values
                )
            )
        else:
            bind.execute(plans.update().where(plans.c.code == plan["code"]).values(**values))

    for old_code, new_code in REPLACED.items():
        old_id = _plan_id(bind, old_code)
        if old_id is None:
            continue
        bind.execute(
            tenants.update().where(tenants.c.plan_id == old_id).values(plan_id=_plan_id(bind, new_code))
        )
        bind.execute(plans.delete().where(plans.c.id == old_id))


def downgrade():
    """Restore Starter and Enterprise and move tenants back; Pro keeps its row."""
    bind = op.get_bind()

    restored = {
        "starter": {"name": "Starter", "price": Decimal("99.00"), "sort_order": 1,
                    "features": _features("sales", "returns", "quotes"),
                    "limits": {"maxUsers": 3, "maxProducts": 500, "maxCustomers": 200,
                               "maxWarehouses": 1, "maxIntegrations": 0, "storageGb": 5}},
        "enterprise": {"name": "Enterprise", "price": Decimal("499.00"), "sort_order": 3,
                       "features": _features(*_FEATURE_KEYS),
                       "limits": {"maxUsers": -1, "maxProducts": -1, "maxCustomers": -1,
                                  "maxWarehouses": -1, "maxIntegrations": -1, "storageGb": 100}},
    }

    for old_code, new_code in REPLACED.items():
        if _plan_id(bind, old_code) is None:
            bind.execute(
                plans.insert().values(
                    id=uuid.uuid4(), code=old_code, billing_period="monthly", is_active=True,
                    **restored[old_code]
                )
            )
        new_id = _plan_id(bind, new_code)
        if new_id is None:
            continue
        bind.execute(
            tenants.update().where(tenants.c.plan_id == new_id).values(plan_id=_plan_id(bind, old_code))
        )
        bind.execute(plans.delete().where(plans.c.id == new_id))
