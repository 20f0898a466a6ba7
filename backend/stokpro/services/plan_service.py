# Overview: Service-layer operations for subscription plans (platform admin).

from ..extensions import db
from ..models import Plan, Tenant
from ..errors import BusinessRuleError, ConflictError, NotFoundError


def list_plans(include_inactive: bool = False) -> list[dict]:
    """Plans by sort order, each with the number of tenants on it."""
    query = Plan.query
    if not include_inactive:
        query = query.filter(Plan.is_active.is_(True))
    plans = query.order_by(Plan.sort_order.asc(), Plan.created_at.asc()).all()

    counts = dict(
        db.session.query(Tenant.plan_id, db.func.count(Tenant.id))
        .filter(Tenant.plan_id.isnot(None))
        .group_by(Tenant.plan_id)
        .all()
    )
    items = []
    for plan in plans:
        data = plan.to_dict()
        data["tenant_count"] = counts.get(plan.id, 0)
        items.append(data)
    return items


def get_plan(plan_id) -> Plan:
    plan = db.session.get(Plan, plan_id)
    if plan is None:
        raise NotFoundError("Plan bulunamadı")
    return plan


def create_plan(data: dict) -> Plan:
    if Plan.query.filter_by(code=data["code"]).first() is not None:
        raise ConflictError("Bu plan kodu zaten kullanımda")

    plan = Plan(
        name=data["name"],
        code=data["code"],
        price=data["price"],
        billing_period=data.get("billing_period", "monthly"),
        features=data.get("features") or {},
        limits=data.get("limits") or {},
        is_active=data.get("is_active", True),
        sort_order=data.get("sort_order", 0),
    )
    db.session.add(plan)
    db.session.commit()
    return plan


def update_plan(plan_id, data: dict) -> Plan:
    plan = get_plan(plan_id)
    for key, value in data.items():
        setattr(plan, key, value)
    db.session.commit()
    return plan


def delete_plan(plan_id) -> None:
    plan = get_plan(plan_id)
    in_use = Tenant.query.filter_by(plan_id=plan.id).count()
    if in_use:
        raise BusinessRuleError("Plan silinemedi. Bu plan kullanımda olabilir.")
    db.session.delete(plan)
    db.session.commit()
