# Overview: Service-layer operations for tenant self-service settings; profile, plan usage, features and limits.

"""
Tenant settings (the tenant's own view, behind a session).

Plan limits live in plans.limits as maxUsers / maxProducts /
maxCustomers / maxWarehouses. A missing key, 0 or -1 means unlimited;
a tenant without a plan has no limits and no features.

Usage counts every row the tenant owns in the table, soft-deleted rows
included, so deactivating a product does not free a slot.
"""

from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Customer, Product, User, Warehouse
from ..errors import PermissionDeniedError
from .tenant_service import get_tenant, record_activity


UNLIMITED = -1

LIMITED_RESOURCES = {
    "users": ("maxUsers", User),
    "products": ("maxProducts", Product),
    "customers": ("maxCustomers", Customer),
    "warehouses": ("maxWarehouses", Warehouse),
}

RESOURCE_LABELS = {
    "users": "kullanici",
    "products": "urun",
    "customers": "musteri",
    "warehouses": "depo",
}

_EDITABLE = ("name", "domain", "logo_url", "billing_email", "settings")


def _plan_limits(tenant) -> dict:
    return (tenant.plan.limits or {}) if tenant.plan is not None else {}


def _limit(limits: dict, key: str) -> int:
    value = limits.get(key)
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        return UNLIMITED
    return value


def get_settings(tenant_id) -> dict:
    tenant = get_tenant(tenant_id)
    plan = tenant.plan
    data = tenant.to_dict()
    data["plan_name"] = plan.name if plan else None
    data["plan_code"] = plan.code if plan else None
    data["plan_features"] = (plan.features or {}) if plan else {}
    data["plan_limits"] = (plan.limits or {}) if plan else {}
    return data


def update_settings(tenant_id, data: dict, user_id=None, ip_address: str | None = None) -> dict:
    """Edit the tenant profile; plan and status stay with the platform admin."""
    tenant = get_tenant(tenant_id)

    old_values, new_values = {}, {}
    for key in _EDITABLE:
        if key in data and getattr(tenant, key) != data[key]:
            old_values[key] = getattr(tenant, key)
            new_values[key] = data[key]
            setattr(tenant, key, data[key])

    if new_values:
        record_activity(tenant.id, "tenant.settings_updated", entity_type="tenant", entity_id=tenant.id,
                        user_id=user_id, old_values=old_values, new_values=new_values, ip_address=ip_address)
    db.session.commit()
    return get_settings(tenant_id)


def _count(model, tenant_id) -> int:
    return db.session.query(db.func.count(model.id)).filter(model.tenant_id == tenant_id).scalar() or 0


def usage(tenant_id) -> dict:
    """{resource: {"current": n, "limit": n}} for every limited resource."""
    limits = _plan_limits(get_tenant(tenant_id))
    return {
        resource: {"current": _count(model, tenant_id), "limit": _limit(limits, key)}
        for resource, (key, model) in LIMITED_RESOURCES.items()
    }


def check_feature(tenant_id, feature: str) -> bool:
    tenant = get_tenant(tenant_id)
    if tenant.plan is None:
        return False
    return (tenant.plan.features or {}).get(feature) is True


def check_limit(tenant_id, resource: str) -> dict:
    """Unknown resources are never limited."""
    if resource not in LIMITED_RESOURCES:
        return {"allowed": True, "current": 0, "limit": UNLIMITED}

    key, model = LIMITED_RESOURCES[resource]
    limit = _limit(_plan_limits(get_tenant(tenant_id)), key)
    current = _count(model, tenant_id)
    return {
        "allowed": limit == UNLIMITED or current < limit,
        "current": current,
        "limit": limit,
    }


def ensure_within_limit(tenant_id, resource: str) -> None:
    """
    Refuse to create one more row of a limited resource.

    Raises PermissionDeniedError (403) once the plan quota is used up.
    """
    result = check_limit(tenant_id, resource)
    if result["allowed"]:
        return
    current_app.logger.info(
        "Plan limit reached: tenant=%s resource=%s limit=%s", tenant_id, resource, result["limit"],
    )
    raise PermissionDeniedError(
        f"Planinizin {RESOURCE_LABELS[resource]} limitine ulasildi ({result['limit']}). "
        "Daha fazlasi icin planinizi yukseltin."
    )
