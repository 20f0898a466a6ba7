# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

"""
Sales API Routes

- POST creates a completed sale: stock is checked and decremented, a
  veresiye (credit) sale debits the customer's ledger
- PATCH /<id>/cancel reverses stock and ledger effects
- PATCH /<id>/invoice-issued toggles the invoice flag
- GET /renewals lists sales whose renewal date falls within ?days
"""

from flask import Blueprint, request, jsonify, g

from ..dtos import CreateSaleDto, RenewalQueryDto, SaleListDto, UpdateInvoiceIssuedDto
from ..services import sale_service
from ..decorators import require_auth, require_permission
from .. import permissions


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.get("")
@require_auth
@require_permission(permissions.SALES_VIEW)
def list_sales_route():
    params = SaleListDto.validate(request.args.to_dict())
    return jsonify(sale_service.list_sales(g.tenant_id, params)), 200


@sales_bp.get("/renewals")
@require_auth
@require_permission(permissions.SALES_VIEW)
def renewals_route():
    """Overdue and upcoming renewals, each with days_left and urgency (red/yellow/green)."""
    params = RenewalQueryDto.validate(request.args.to_dict())
    items = sale_service.upcoming_renewals(g.tenant_id, params["days"])
    return jsonify({"items": items, "days": params["days"]}), 200


@sales_bp.get("/<uuid:sale_id>")
@require_auth
@require_permission(permissions.SALES_VIEW)
def get_sale_route(sale_id):
    return jsonify({"sale": sale_service.sale_detail(g.tenant_id, sale_id)}), 200


@sales_bp.post("")
@require_auth
@require_permission(permissions.SALES_CREATE)
def create_sale_route():
    """
    Returns:
        201: {"sale": {... with items}}
        400: validation failed, insufficient stock, veresiye without customer
        404: customer, product or warehouse not found
    """
    data = CreateSaleDto.validate(request.get_json(silent=True))
    sale = sale_service.create_sale(g.tenant_id, data, g.current_user.id)
    return jsonify({"sale": sale.to_dict(include_items=True)}), 201


@sales_bp.patch("/<uuid:sale_id>/cancel")
@require_auth
@require_permission(permissions.SALES_DELETE)
def cancel_sale_route(sale_id):
    sale = sale_service.cancel_sale(g.tenant_id, sale_id)
    return jsonify({"sale": sale.to_dict(include_items=True)}), 200


@sales_bp.patch("/<uuid:sale_id>/invoice-issued")
@require_auth
@require_permission(permissions.SALES_UPDATE)
def invoice_issued_route(sale_id):
    data = UpdateInvoiceIssuedDto.validate(request.get_json(silent=True))
    sale = sale_service.set_invoice_issued(g.tenant_id, sale_id, data["invoice_issued"])
    return jsonify({"sale": sale.to_dict()}), 200
