# Overview: Service-layer operations for tenants; platform-admin lifecycle, stats and the activity trail.

"""
Tenant administration (platform side, behind the admin API key).

Every create/update/status change appends a tenant_activity_logs row so
the platform keeps an audit trail per tenant.
"""

import re

from ..extensions import db
from ..models import (
    Tenant,
    Plan,
    User,
    TenantActivityLog,
    Product,
    Customer,
    Sale,
    Return,
    Quote,
    Warehouse,
    Account,
    Expense,
    EDocument,
    Invitation,
)
from ..errors import BusinessRuleError, ConflictError, NotFoundError
from .pagination import like_pattern, paginate


_TURKISH_MAP = str.maketrans({
    "ğ": "g", "ü": "u", "ş": "s", "ı": "i", "ö": "o", "ç": "c",
    "Ğ": "g", "Ü": "u", "Ş": "s", "İ": "i", "Ö": "o", "Ç": "c",
})

TENANT_SORTABLE = {
    "created_at": Tenant.created_at,
    "name": Tenant.name,
    "slug": Tenant.slug,
    "status": Tenant.status,
}

STATS_TABLES = {
    "users": User,
    "products": Product,
    "customers": Customer,
    "sales": Sale,
    "returns": Return,
    "quotes": Quote,
    "warehouses": Warehouse,
    "accounts": Account,
    "expenses": Expense,
    "e_documents": EDocument,
    "invitations": Invitation,
}


def slugify(name: str) -> str:
    """
    URL slug with Turkish transliteration.

    "Özgür Çiçek Ltd." -> "ozgur-cicek-ltd"
    """
    text = name.translate(_TURKISH_MAP).lower()
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return text.strip("-")


def record_activity(tenant_id, action: str, entity_type: str | None = None, entity_id=None,
                    user_id=None, old_values: dict | None = None, new_values: dict | None = None,
                    ip_address: str | None = None, metadata: dict | None = None) -> TenantActivityLog:
    """Append an activity row. The caller commits."""
    log = TenantActivityLog(
        tenant_id=tenant_id,
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        old_values=old_values,
        new_values=new_values,
        ip_address=ip_address,
        extra=metadata or {},
    )
    db.session.add(log)
    return log


def _user_counts(tenant_ids) -> dict:
    if not tenant_ids:
        return {}
    rows = (
        db.session.query(User.tenant_id, db.func.count(User.id))
        .filter(User.tenant_id.in_(tenant_ids))
        .group_by(User.tenant_id)
        .all()
    )
    return {tenant_id: count for tenant_id, count in rows}


def list_tenants(params: dict) -> dict:
    query = Tenant.query
    if params.get("status"):
        query = query.filter(Tenant.status == params["status"])
    if params.get("search"):
        pattern = like_pattern(params["search"])
        query = query.filter(db.or_(
            Tenant.name.ilike(pattern, escape="\\"),
            Tenant.slug.ilike(pattern, escape="\\"),
        ))

    page = paginate(query, params, TENANT_SORTABLE, serialize=lambda t: t)
    tenants = page["items"]
    counts = _user_counts([t.id for t in tenants])
    items = []
    for tenant in tenants:
        data = tenant.to_dict(include_plan=True)
        data["user_count"] = counts.get(tenant.id, 0)
        items.append(data)
    page["items"] = items
    return page


def get_tenant(tenant_id) -> Tenant:
    tenant = db.session.get(Tenant, tenant_id)
    if tenant is None:
        raise NotFoundError("Kiracı bulunamadı")
    return tenant


def tenant_detail(tenant_id) -> dict:
    tenant = get_tenant(tenant_id)
    data = tenant.to_dict(include_plan=True)
    data["user_count"] = _user_counts([tenant.id]).get(tenant.id, 0)
    return data


def _check_plan(plan_id):
    if plan_id is not None and db.session.get(Plan, plan_id) is None:
        raise BusinessRuleError("Geçersiz plan")


def create_tenant(data: dict) -> Tenant:
    """
    Create a tenant from the admin panel.

    slug defaults to the transliterated name and must be unique.
    """
    slug = data.get("slug") or slugify(data["name"])
    if not slug:
        raise BusinessRuleError("Slug üretilemedi")
    if Tenant.query.filter_by(slug=slug).first() is not None:
        raise ConflictError("Bu slug zaten kullanımda")

    _check_plan(data.get("plan_id"))

    tenant = Tenant(
        name=data["name"],
        slug=slug,
        domain=data.get("domain"),
        plan_id=data.get("plan_id"),
        billing_email=data.get("billing_email"),
        status=data.get("status") or "active",
        settings={},
    )
    db.session.add(tenant)
    db.session.flush()

    record_activity(tenant.id, "tenant.created", entity_type="tenant", entity_id=tenant.id,
                    new_values={"name": tenant.name, "slug": tenant.slug, "status": tenant.status})
    db.session.commit()
    return tenant


_UPDATABLE = ("name", "domain", "plan_id", "billing_email", "status", "settings")


def _jsonable(value):
    return str(value) if value is not None and not isinstance(value, (str, int, float, bool, dict, list)) else value


def update_tenant(tenant_id, data: dict) -> Tenant:
    tenant = get_tenant(tenant_id)
    if "plan_id" in data:
        _check_plan(data["plan_id"])

    old_values, new_values = {}, {}
    for key in _UPDATABLE:
        if key in data and getattr(tenant, key) != data[key]:
            old_values[key] = _jsonable(getattr(tenant, key))
            new_values[key] = _jsonable(data[key])
            setattr(tenant, key, data[key])

    if new_values:
        record_activity(tenant.id, "tenant.updated", entity_type="tenant", entity_id=tenant.id,
                        old_values=old_values, new_values=new_values)
    db.session.commit()
    return tenant


def _set_status(tenant_id, status: str, refuse_message: str) -> Tenant:
    tenant = get_tenant(tenant_id)
    if tenant.status == status:
        raise BusinessRuleError(refuse_message)
    previous = tenant.status
    tenant.status = status
    record_activity(tenant.id, f"tenant.{'suspended' if status == 'suspended' else 'activated'}",
                    entity_type="tenant", entity_id=tenant.id,
                    old_values={"status": previous}, new_values={"status": status})
    db.session.commit()
    return tenant


def suspend_tenant(tenant_id) -> Tenant:
    return _set_status(tenant_id, "suspended", "Kiracı zaten askıya alınmış")


def activate_tenant(tenant_id) -> Tenant:
    return _set_status(tenant_id, "active", "Kiracı zaten aktif")


def delete_tenant(tenant_id) -> None:
    """Hard delete; every tenant-owned row goes with it through ON DELETE CASCADE."""
    tenant = get_tenant(tenant_id)
    db.session.delete(tenant)
    db.session.commit()


def tenant_stats(tenant_id) -> dict:
    get_tenant(tenant_id)
    stats = {}
    for name, model in STATS_TABLES.items():
        stats[name] = (
            db.session.query(db.func.count(model.id))
            .filter(model.tenant_id == tenant_id)
            .scalar()
        ) or 0
    return stats


def list_activity(tenant_id, params: dict) -> dict:
    get_tenant(tenant_id)
    query = TenantActivityLog.query.filter(TenantActivityLog.tenant_id == tenant_id)
    if params.get("action"):
        query = query.filter(TenantActivityLog.action == params["action"])
    return paginate(query, params, {"created_at": TenantActivityLog.created_at})
