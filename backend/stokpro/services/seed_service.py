# Overview: Idempotent bootstrap data; subscription plans and the platform super admin.

"""
Seeds.

Both seeds can run any number of times:
- seed_plans() upserts Basic / Pro / Plus keyed by plan code
- seed_super_admin() keeps exactly one super_admin row, the one whose
  email is configured (SUPER_ADMIN_EMAIL / SUPER_ADMIN_PASSWORD)
"""

from __future__ import annotations

from decimal import Decimal

from flask import current_app

from ..config import Config, get_config
from ..extensions import db
from ..models import Plan, User
from ..constants import ROLE_SUPER_ADMIN, WILDCARD_PERMISSION
from ..time_utils import utcnow
from ..errors import ConflictError
from .auth_service import find_user_by_email, hash_password, normalize_email


SUPER_ADMIN_NAME = "Platform Admin"

UNLIMITED = -1

DEFAULT_PLANS = (
    {
        "name": "Basic",
        "code": "basic",
        "price": Decimal("199.00"),
        "sort_order": 1,
        "features": {
            "sales": True,
            "returns": True,
            "quotes": False,
            "eDocuments": False,
            "warehouses": False,
            "integrations": False,
            "crm": False,
            "fieldTeam": False,
            "invoiceImport": False,
            "advancedReports": False,
            "multiWarehouse": False,
            "apiAccess": False,
        },
        "limits": {
            "maxUsers": 1,
            "maxProducts": 200,
            "maxCustomers": 100,
            "maxWarehouses": 1,
            "maxIntegrations": 0,
            "storageGb": 5,
        },
    },
    {
        "name": "Pro",
        "code": "pro",
        "price": Decimal("449.00"),
        "sort_order": 2,
        "features": {
            "sales": True,
            "returns": True,
            "quotes": True,
            "eDocuments": True,
            "warehouses": True,
            "integrations": True,
            "crm": False,
            "fieldTeam": False,
            "invoiceImport": True,
            "advancedReports": True,
            "multiWarehouse": True,
            "apiAccess": False,
        },
        "limits": {
            "maxUsers": 5,
            "maxProducts": 5000,
            "maxCustomers": 2000,
            "maxWarehouses": 3,
            "maxIntegrations": 3,
            "storageGb": 25,
        },
    },
    {
        "name": "Plus",
        "code": "plus",
        "price": Decimal("799.00"),
        "sort_order": 3,
        "features": {
            "sales": True,
            "returns": True,
            "quotes": True,
            "eDocuments": True,
            "warehouses": True,
            "integrations": True,
            "crm": True,
            "fieldTeam": True,
            "invoiceImport": True,
            "advancedReports": True,
            "multiWarehouse": True,
            "apiAccess": True,
        },
        "limits": {
            "maxUsers": UNLIMITED,
            "maxProducts": UNLIMITED,
            "maxCustomers": UNLIMITED,
            "maxWarehouses": UNLIMITED,
            "maxIntegrations": UNLIMITED,
            "storageGb": 100,
        },
    },
)


def seed_plans() -> tuple[int, int]:
    """Upsert the default plans. Returns (created, updated)."""
    created = updated = 0
    for definition in DEFAULT_PLANS:
        plan = Plan.query.filter_by(code=definition["code"]).first()
        if plan is None:
            plan = Plan(code=definition["code"], billing_period="monthly", is_active=True)
            db.session.add(plan)
            created += 1
        else:
            updated += 1
        plan.name = definition["name"]
        plan.price = definition["price"]
        plan.sort_order = definition["sort_order"]
        plan.features = dict(definition["features"])
        plan.limits = dict(definition["limits"])

    db.session.commit()
    current_app.logger.info("Plans seeded: %d created, %d updated", created, updated)
    return created, updated


def seed_super_admin(config: Config | None = None) -> tuple[User, bool]:
    """
    Make the configured super admin the only super_admin row.

    Stale super admins (any other email) are deleted first; the
    configured one is created, or has its password, name and
    permissions refreshed. Returns (user, created).
    """
    config = config or get_config()
    email = normalize_email(config.super_admin_email)

    stale = User.query.filter(User.role == ROLE_SUPER_ADMIN, db.func.lower(User.email) != email).all()
    for user in stale:
        db.session.delete(user)
    if stale:
        current_app.logger.info("Removed %d stale super admin account(s)", len(stale))

    user = User.query.filter(User.role == ROLE_SUPER_ADMIN, db.func.lower(User.email) == email).first()
    created = user is None
    if created:
        if find_user_by_email(email) is not None:
            raise ConflictError(f"{email} already belongs to a tenant user")
        user = User(email=email, role=ROLE_SUPER_ADMIN, tenant_id=None, email_verified_at=utcnow())
        db.session.add(user)

    user.name = SUPER_ADMIN_NAME
    user.password_hash = hash_password(config.super_admin_password)
    user.permissions = [WILDCARD_PERMISSION]
    user.status = "active"

    db.session.commit()
    current_app.logger.info("Super admin %s: %s", "created" if created else "refreshed", email)
    return user, created
