# Overview: Flask API routes for the dashboard widgets; read-only.

from flask import Blueprint, jsonify, g

from ..services import dashboard_service
from ..decorators import require_auth, require_permission
from .. import permissions


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("/summary")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def dashboard_summary_route():
    return jsonify(dashboard_service.summary(g.tenant_id)), 200


@dashboard_bp.get("/recent-sales")
@require_auth
@require_permission(permissions.SALES_VIEW)
def recent_sales_route():
    return jsonify({"items": dashboard_service.recent_sales(g.tenant_id)}), 200


@dashboard_bp.get("/low-stock")
@require_auth
@require_permission(permissions.PRODUCTS_VIEW)
def dashboard_low_stock_route():
    return jsonify({"items": dashboard_service.low_stock(g.tenant_id)}), 200


@dashboard_bp.get("/top-debtors")
@require_auth
@require_permission(permissions.CUSTOMERS_VIEW)
def top_debtors_route():
    return jsonify({"items": dashboard_service.top_debtors(g.tenant_id)}), 200
