# Overview: Flask API routes for the tenant's own settings, plan usage and plan checks.

from flask import Blueprint, request, jsonify, g

from ..dtos import FeatureQueryDto, LimitQueryDto, UpdateSettingsDto
from ..services import settings_service
from ..decorators import require_auth, require_permission
from .. import permissions


settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


@settings_bp.get("")
@require_auth
@require_permission(permissions.SETTINGS_VIEW)
def get_settings_route():
    """Tenant profile with plan_name, plan_code, plan_features and plan_limits."""
    return jsonify({"settings": settings_service.get_settings(g.tenant_id)}), 200


@settings_bp.route("", methods=["PUT", "PATCH"])
@require_auth
@require_permission(permissions.SETTINGS_MANAGE)
def update_settings_route():
    data = UpdateSettingsDto.validate(request.get_json(silent=True))
    settings = settings_service.update_settings(g.tenant_id, data, g.current_user.id, request.remote_addr)
    return jsonify({"settings": settings}), 200


@settings_bp.get("/usage")
@require_auth
@require_permission(permissions.SETTINGS_VIEW)
def usage_route():
    """-1 as a limit means unlimited."""
    return jsonify({"usage": settings_service.usage(g.tenant_id)}), 200


@settings_bp.get("/check-feature")
@require_auth
def check_feature_route():
    params = FeatureQueryDto.validate(request.args.to_dict())
    allowed = settings_service.check_feature(g.tenant_id, params["feature"])
    return jsonify({"feature": params["feature"], "allowed": allowed}), 200


@settings_bp.get("/check-limit")
@require_auth
def check_limit_route():
    params = LimitQueryDto.validate(request.args.to_dict())
    return jsonify(settings_service.check_limit(g.tenant_id, params["resource"])), 200
