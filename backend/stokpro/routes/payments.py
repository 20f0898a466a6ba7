# Overview: Flask API routes for payments operations; parses input and returns JSON responses.

"""
Payment (tahsilat) API Routes

A payment credits the customer's ledger (alacak) and, with account_id,
books the money into a kasa/banka account as gelir.
"""

from flask import Blueprint, request, jsonify, g

from ..dtos import CreatePaymentDto, PaymentListDto
from ..services import payment_service
from ..decorators import require_auth, require_permission
from .. import permissions


payments_bp = Blueprint("payments", __name__, url_prefix="/api/payments")


@payments_bp.get("")
@require_auth
@require_permission(permissions.PAYMENTS_VIEW)
def list_payments_route():
    params = PaymentListDto.validate(request.args.to_dict())
    return jsonify(payment_service.list_payments(g.tenant_id, params)), 200


@payments_bp.get("/<uuid:payment_id>")
@require_auth
@require_permission(permissions.PAYMENTS_VIEW)
def get_payment_route(payment_id):
    payment = payment_service.get_payment(g.tenant_id, payment_id)
    return jsonify({"payment": payment.to_dict()}), 200


@payments_bp.post("")
@require_auth
@require_permission(permissions.PAYMENTS_CREATE)
def create_payment_route():
    """
    Returns:
        201: {"payment": {...}}
        400: validation failed, sale of another customer, inactive account
        404: customer, sale or account not found
    """
    data = CreatePaymentDto.validate(request.get_json(silent=True))
    payment = payment_service.create_payment(g.tenant_id, data)
    return jsonify({"payment": payment.to_dict()}), 201
