# Overview: Flask API routes for reports; validates the date range and returns aggregates as JSON.

"""
Report API Routes

Every report needs reports.view. Ranged reports take optional
start_date / end_date (YYYY-MM-DD, inclusive); top lists also take
limit (default 10, at most 100).
"""

from flask import Blueprint, request, jsonify, g

from ..dtos import DateRangeDto, ReportRangeDto, UpcomingPaymentsDto
from ..services import report_service
from ..decorators import require_auth, require_permission
from .. import permissions


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


def _range() -> dict:
    return DateRangeDto.validate(request.args.to_dict())


@reports_bp.get("/sales-summary")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def sales_summary_route():
    """
    Returns:
        200: {"summary": {...}, "by_payment_method": [...], "daily_sales": [...]}
    """
    return jsonify(report_service.sales_summary(g.tenant_id, _range())), 200


@reports_bp.get("/debt-overview")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def debt_overview_route():
    return jsonify(report_service.debt_overview(g.tenant_id)), 200


@reports_bp.get("/vat")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def vat_report_route():
    return jsonify(report_service.vat_report(g.tenant_id, _range())), 200


@reports_bp.get("/profit-loss")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def profit_loss_route():
    return jsonify(report_service.profit_loss(g.tenant_id, _range())), 200


@reports_bp.get("/top-products")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def top_products_route():
    params = ReportRangeDto.validate(request.args.to_dict())
    return jsonify({"items": report_service.top_products(g.tenant_id, params)}), 200


@reports_bp.get("/top-customers")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def top_customers_route():
    params = ReportRangeDto.validate(request.args.to_dict())
    return jsonify({"items": report_service.top_customers(g.tenant_id, params)}), 200


@reports_bp.get("/upcoming-payments")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def upcoming_payments_route():
    """Veresiye sales falling due within `days` (default 30)."""
    params = UpcomingPaymentsDto.validate(request.args.to_dict())
    return jsonify({"items": report_service.upcoming_payments(g.tenant_id, params["days"])}), 200


@reports_bp.get("/overdue-payments")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def overdue_payments_route():
    return jsonify({"items": report_service.overdue_payments(g.tenant_id)}), 200


@reports_bp.get("/stock-report")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def stock_report_route():
    return jsonify(report_service.stock_report(g.tenant_id)), 200


@reports_bp.get("/returns-report")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def returns_report_route():
    return jsonify(report_service.returns_report(g.tenant_id, _range())), 200


@reports_bp.get("/customer-sales")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def customer_sales_route():
    return jsonify({"items": report_service.customer_sales(g.tenant_id, _range())}), 200


@reports_bp.get("/customer-product-purchases")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def customer_product_purchases_route():
    return jsonify({"items": report_service.customer_product_purchases(g.tenant_id, _range())}), 200


@reports_bp.get("/expenses-by-category")
@require_auth
@require_permission(permissions.REPORTS_VIEW)
def expenses_by_category_route():
    return jsonify(report_service.expenses_by_category(g.tenant_id, _range())), 200
