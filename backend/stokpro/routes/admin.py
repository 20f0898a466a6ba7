# Overview: Flask API routes for platform administration (plans, tenants); gated by the admin API key.

"""
Platform Admin API Routes

Every route requires the X-API-Key header to match ADMIN_API_KEY (see
require_api_key). When the key is not configured, every request is
rejected.

- plans: list (with tenant counts), get, create, update, delete
- tenants: list, get, stats, activity, create, update, suspend,
  activate, delete, users
- invitations: list (by derived status), create, resend, cancel
"""

from flask import Blueprint, request, jsonify

from ..dtos import (
    ActivityListDto,
    CreateInvitationDto,
    CreatePlanDto,
    CreateTenantDto,
    CreateUserDto,
    InvitationListDto,
    PlanListDto,
    TenantListDto,
    UpdatePlanDto,
    UpdateTenantDto,
)
from ..models import User
from ..services import auth_service, invitation_service, plan_service, tenant_service
from ..decorators import require_api_key


admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


# =============================================================================
# PLANS
# =============================================================================

@admin_bp.get("/plans")
@require_api_key
def list_plans_route():
    params = PlanListDto.validate(request.args.to_dict())
    plans = plan_service.list_plans(include_inactive=bool(params.get("include_inactive")))
    return jsonify({"items": plans}), 200


@admin_bp.get("/plans/<uuid:plan_id>")
@require_api_key
def get_plan_route(plan_id):
    return jsonify({"plan": plan_service.get_plan(plan_id).to_dict()}), 200


@admin_bp.post("/plans")
@require_api_key
def create_plan_route():
    """
    Returns:
        201: {"plan": {...}}
        409: plan code already in use
    """
    data = CreatePlanDto.validate(request.get_json(silent=True))
    plan = plan_service.create_plan(data)
    return jsonify({"plan": plan.to_dict()}), 201


@admin_bp.put("/plans/<uuid:plan_id>")
@require_api_key
def update_plan_route(plan_id):
    data = UpdatePlanDto.validate(request.get_json(silent=True))
    plan = plan_service.update_plan(plan_id, data)
    return jsonify({"plan": plan.to_dict()}), 200


@admin_bp.delete("/plans/<uuid:plan_id>")
@require_api_key
def delete_plan_route(plan_id):
    """Refused while any tenant is on the plan."""
    plan_service.delete_plan(plan_id)
    return jsonify({"message": "Plan silindi"}), 200


# =============================================================================
# TENANTS
# =============================================================================

@admin_bp.get("/tenants")
@require_api_key
def list_tenants_route():
    params = TenantListDto.validate(request.args.to_dict())
    return jsonify(tenant_service.list_tenants(params)), 200


@admin_bp.get("/tenants/<uuid:tenant_id>")
@require_api_key
def get_tenant_route(tenant_id):
    return jsonify({"tenant": tenant_service.tenant_detail(tenant_id)}), 200


@admin_bp.get("/tenants/<uuid:tenant_id>/stats")
@require_api_key
def tenant_stats_route(tenant_id):
    """Row counts per business table."""
    return jsonify({"stats": tenant_service.tenant_stats(tenant_id)}), 200


@admin_bp.get("/tenants/<uuid:tenant_id>/activity")
@require_api_key
def tenant_activity_route(tenant_id):
    params = ActivityListDto.validate(request.args.to_dict())
    return jsonify(tenant_service.list_activity(tenant_id, params)), 200


@admin_bp.post("/tenants")
@require_api_key
def create_tenant_route():
    """
    Returns:
        201: {"tenant": {...}}
        400: unknown plan
        409: slug already in use
    """
    data = CreateTenantDto.validate(request.get_json(silent=True))
    tenant = tenant_service.create_tenant(data)
    return jsonify({"tenant": tenant.to_dict(include_plan=True)}), 201


@admin_bp.put("/tenants/<uuid:tenant_id>")
@require_api_key
def update_tenant_route(tenant_id):
    data = UpdateTenantDto.validate(request.get_json(silent=True))
    tenant = tenant_service.update_tenant(tenant_id, data)
    return jsonify({"tenant": tenant.to_dict(include_plan=True)}), 200


@admin_bp.post("/tenants/<uuid:tenant_id>/suspend")
@require_api_key
def suspend_tenant_route(tenant_id):
    tenant = tenant_service.suspend_tenant(tenant_id)
    return jsonify({"tenant": tenant.to_dict()}), 200


@admin_bp.post("/tenants/<uuid:tenant_id>/activate")
@require_api_key
def activate_tenant_route(tenant_id):
    tenant = tenant_service.activate_tenant(tenant_id)
    return jsonify({"tenant": tenant.to_dict()}), 200


@admin_bp.delete("/tenants/<uuid:tenant_id>")
@require_api_key
def delete_tenant_route(tenant_id):
    """Hard delete; the tenant's business rows cascade."""
    tenant_service.delete_tenant(tenant_id)
    return jsonify({"message": "Kiracı silindi"}), 200


# =============================================================================
# TENANT USERS
# =============================================================================

@admin_bp.get("/tenants/<uuid:tenant_id>/users")
@require_api_key
def list_tenant_users_route(tenant_id):
    tenant = tenant_service.get_tenant(tenant_id)
    users = User.query.filter_by(tenant_id=tenant.id).order_by(User.created_at.asc()).all()
    return jsonify({"items": [u.to_dict() for u in users]}), 200


@admin_bp.post("/tenants/<uuid:tenant_id>/users")
@require_api_key
def create_tenant_user_route(tenant_id):
    """
    Returns:
        201: {"user": {...}}
        409: email already used inside the tenant
    """
    data = CreateUserDto.validate(request.get_json(silent=True))
    tenant = tenant_service.get_tenant(tenant_id)
    user = auth_service.create_user(
        tenant, data["email"], data["name"], data["password"],
        role=data["role"], phone=data.get("phone"),
    )
    return jsonify({"user": user.to_dict()}), 201


# =============================================================================
# INVITATIONS
# =============================================================================

@admin_bp.get("/invitations")
@require_api_key
def list_invitations_route():
    params = InvitationListDto.validate(request.args.to_dict())
    return jsonify(invitation_service.list_invitations(params)), 200


@admin_bp.post("/invitations")
@require_api_key
def create_invitation_route():
    """
    Returns:
        201: {"invitation": {...}, "token": "...", "invitation_link": "..."}
        400: email already registered, pending invitation, or no tenant given
        404: unknown tenant_id
    """
    data = CreateInvitationDto.validate(request.get_json(silent=True))
    return jsonify(invitation_service.create_invitation(data)), 201


@admin_bp.post("/invitations/<uuid:invitation_id>/resend")
@require_api_key
def resend_invitation_route(invitation_id):
    """The old token stops working."""
    return jsonify(invitation_service.resend_invitation(invitation_id)), 201


@admin_bp.delete("/invitations/<uuid:invitation_id>")
@require_api_key
def cancel_invitation_route(invitation_id):
    invitation_service.cancel_invitation(invitation_id)
    return jsonify({"message": "Davet iptal edildi"}), 200
