# Overview: Flask API routes for a tenant's own users; parses input and returns JSON responses.

"""
Tenant User API Routes

Users of the caller's tenant only. Listing needs users.view, changes
need users.manage; changing one's own password needs just a session.
"""

from flask import Blueprint, request, jsonify, g

from ..dtos import ChangePasswordDto, CreateTenantUserDto, UpdateUserDto, UserListDto
from ..services import users_service
from ..decorators import require_auth, require_permission
from .. import permissions


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
@require_auth
@require_permission(permissions.USERS_VIEW)
def list_users_route():
    params = UserListDto.validate(request.args.to_dict())
    return jsonify(users_service.list_users(g.tenant_id, params)), 200


@users_bp.get("/stats/by-role")
@require_auth
@require_permission(permissions.USERS_VIEW)
def users_by_role_route():
    return jsonify({"items": users_service.stats_by_role(g.tenant_id)}), 200


@users_bp.get("/<uuid:user_id>")
@require_auth
@require_permission(permissions.USERS_VIEW)
def get_user_route(user_id):
    return jsonify({"user": users_service.get_user(g.tenant_id, user_id).to_dict()}), 200


@users_bp.post("")
@require_auth
@require_permission(permissions.USERS_MANAGE)
def create_user_route():
    """
    Returns:
        201: {"user": {...}}
        403: plan user limit reached
        409: email already registered on the platform
    """
    data = CreateTenantUserDto.validate(request.get_json(silent=True))
    user = users_service.create_user(g.tenant_id, data, g.current_user)
    return jsonify({"user": user.to_dict()}), 201


@users_bp.route("/<uuid:user_id>", methods=["PUT", "PATCH"])
@require_auth
@require_permission(permissions.USERS_MANAGE)
def update_user_route(user_id):
    data = UpdateUserDto.validate(request.get_json(silent=True))
    user = users_service.update_user(g.tenant_id, user_id, data, g.current_user)
    return jsonify({"user": user.to_dict()}), 200


@users_bp.delete("/<uuid:user_id>")
@require_auth
@require_permission(permissions.USERS_MANAGE)
def delete_user_route(user_id):
    """400 for the tenant_admin and for the caller's own account."""
    users_service.delete_user(g.tenant_id, user_id, g.current_user)
    return jsonify({"message": "Kullanici silindi"}), 200


@users_bp.post("/change-password")
@require_auth
def change_password_route():
    data = ChangePasswordDto.validate(request.get_json(silent=True))
    revoked = users_service.change_password(
        g.current_user, data["current_password"], data["new_password"],
        keep_session_id=g.user_session.id,
    )
    return jsonify({"message": "Şifreniz başarıyla değiştirildi", "revoked": revoked}), 200
