# Overview: Flask API routes for customers operations; parses input and returns JSON responses.

"""
Customer API Routes

A customer's balance is the running result of its ledger (account
transactions): veresiye sales push it down (borc), payments and returns
push it up (alacak). The ledger is read-only here; it is written by the
sales, payments and returns services.
"""

from flask import Blueprint, request, jsonify, g

from ..dtos import CreateCustomerDto, CustomerListDto, PaginationDto, UpdateCustomerDto
from ..services import customer_service
from ..decorators import require_auth, require_permission
from .. import permissions


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
@require_auth
@require_permission(permissions.CUSTOMERS_VIEW)
def list_customers_route():
    params = CustomerListDto.validate(request.args.to_dict())
    return jsonify(customer_service.list_customers(g.tenant_id, params)), 200


@customers_bp.get("/with-debt")
@require_auth
@require_permission(permissions.CUSTOMERS_VIEW)
def customers_with_debt_route():
    customers = customer_service.customers_with_debt(g.tenant_id)
    return jsonify({"items": [c.to_dict() for c in customers]}), 200


@customers_bp.get("/with-credit")
@require_auth
@require_permission(permissions.CUSTOMERS_VIEW)
def customers_with_credit_route():
    customers = customer_service.customers_with_credit(g.tenant_id)
    return jsonify({"items": [c.to_dict() for c in customers]}), 200


@customers_bp.get("/<uuid:customer_id>")
@require_auth
@require_permission(permissions.CUSTOMERS_VIEW)
def get_customer_route(customer_id):
    """Customer with its sales, returns, payments and ledger."""
    return jsonify({"customer": customer_service.customer_detail(g.tenant_id, customer_id)}), 200


@customers_bp.get("/<uuid:customer_id>/stats")
@require_auth
@require_permission(permissions.CUSTOMERS_VIEW)
def customer_stats_route(customer_id):
    return jsonify({"stats": customer_service.customer_stats(g.tenant_id, customer_id)}), 200


@customers_bp.get("/<uuid:customer_id>/sales")
@require_auth
@require_permission(permissions.CUSTOMERS_VIEW)
def customer_sales_route(customer_id):
    sales = customer_service.customer_sales(g.tenant_id, customer_id)
    return jsonify({"items": [s.to_dict() for s in sales]}), 200


@customers_bp.get("/<uuid:customer_id>/returns")
@require_auth
@require_permission(permissions.CUSTOMERS_VIEW)
def customer_returns_route(customer_id):
    returns = customer_service.customer_returns(g.tenant_id, customer_id)
    return jsonify({"items": [r.to_dict() for r in returns]}), 200


@customers_bp.get("/<uuid:customer_id>/payments")
@require_auth
@require_permission(permissions.CUSTOMERS_VIEW)
def customer_payments_route(customer_id):
    payments = customer_service.customer_payments(g.tenant_id, customer_id)
    return jsonify({"items": [p.to_dict() for p in payments]}), 200


@customers_bp.get("/<uuid:customer_id>/transactions")
@require_auth
@require_permission(permissions.CUSTOMERS_VIEW)
def customer_transactions_route(customer_id):
    params = PaginationDto.validate(request.args.to_dict())
    return jsonify(customer_service.list_transactions(g.tenant_id, customer_id, params)), 200


@customers_bp.post("")
@require_auth
@require_permission(permissions.CUSTOMERS_CREATE)
def create_customer_route():
    """
    Returns:
        201: {"customer": {...}}
        409: email already used by another customer
    """
    data = CreateCustomerDto.validate(request.get_json(silent=True))
    customer = customer_service.create_customer(g.tenant_id, data, g.current_user.id)
    return jsonify({"customer": customer.to_dict()}), 201


@customers_bp.put("/<uuid:customer_id>")
@require_auth
@require_permission(permissions.CUSTOMERS_UPDATE)
def update_customer_route(customer_id):
    data = UpdateCustomerDto.validate(request.get_json(silent=True))
    customer = customer_service.update_customer(g.tenant_id, customer_id, data)
    return jsonify({"customer": customer.to_dict()}), 200


@customers_bp.delete("/<uuid:customer_id>")
@require_auth
@require_permission(permissions.CUSTOMERS_DELETE)
def delete_customer_route(customer_id):
    """409 while the balance is not zero."""
    customer_service.delete_customer(g.tenant_id, customer_id)
    return jsonify({"message": "Musteri silindi"}), 200
