# Overview: Flask API routes for quotes operations; parses input and returns JSON responses.

"""
Quote (teklif) API Routes

STATUS FLOW:
    draft --send--> sent
    draft | sent --accept/reject--> accepted | rejected
    draft | sent | accepted --convert--> converted (creates a sale)
"""

from flask import Blueprint, request, jsonify, g

from ..dtos import ConvertToSaleDto, CreateQuoteDto, QuoteListDto, UpdateQuoteDto
from ..services import quote_service
from ..decorators import require_auth, require_permission
from .. import permissions


quotes_bp = Blueprint("quotes", __name__, url_prefix="/api/quotes")


@quotes_bp.get("")
@require_auth
@require_permission(permissions.QUOTES_VIEW)
def list_quotes_route():
    params = QuoteListDto.validate(request.args.to_dict())
    return jsonify(quote_service.list_quotes(g.tenant_id, params)), 200


@quotes_bp.get("/<uuid:quote_id>")
@require_auth
@require_permission(permissions.QUOTES_VIEW)
def get_quote_route(quote_id):
    quote = quote_service.get_quote(g.tenant_id, quote_id)
    return jsonify({"quote": quote.to_dict(include_items=True)}), 200


@quotes_bp.post("")
@require_auth
@require_permission(permissions.QUOTES_CREATE)
def create_quote_route():
    data = CreateQuoteDto.validate(request.get_json(silent=True))
    quote = quote_service.create_quote(g.tenant_id, data, g.current_user.id)
    return jsonify({"quote": quote.to_dict(include_items=True)}), 201


@quotes_bp.put("/<uuid:quote_id>")
@require_auth
@require_permission(permissions.QUOTES_UPDATE)
def update_quote_route(quote_id):
    """Draft and sent quotes only; items, when given, replace the old ones."""
    data = UpdateQuoteDto.validate(request.get_json(silent=True))
    quote = quote_service.update_quote(g.tenant_id, quote_id, data)
    return jsonify({"quote": quote.to_dict(include_items=True)}), 200


@quotes_bp.delete("/<uuid:quote_id>")
@require_auth
@require_permission(permissions.QUOTES_DELETE)
def delete_quote_route(quote_id):
    quote_service.delete_quote(g.tenant_id, quote_id)
    return jsonify({"message": "Teklif silindi"}), 200


# =============================================================================
# STATUS TRANSITIONS
# =============================================================================

@quotes_bp.post("/<uuid:quote_id>/send")
@require_auth
@require_permission(permissions.QUOTES_UPDATE)
def send_quote_route(quote_id):
    quote = quote_service.send_quote(g.tenant_id, quote_id)
    return jsonify({"quote": quote.to_dict()}), 200


@quotes_bp.post("/<uuid:quote_id>/accept")
@require_auth
@require_permission(permissions.QUOTES_UPDATE)
def accept_quote_route(quote_id):
    quote = quote_service.accept_quote(g.tenant_id, quote_id)
    return jsonify({"quote": quote.to_dict()}), 200


@quotes_bp.post("/<uuid:quote_id>/reject")
@require_auth
@require_permission(permissions.QUOTES_UPDATE)
def reject_quote_route(quote_id):
    quote = quote_service.reject_quote(g.tenant_id, quote_id)
    return jsonify({"quote": quote.to_dict()}), 200


@quotes_bp.post("/<uuid:quote_id>/convert")
@require_auth
@require_permission(permissions.QUOTES_UPDATE)
def convert_quote_route(quote_id):
    """
    Returns:
        201: {"quote": {... status converted}, "sale": {... with items}}
        400: quote not convertible, insufficient stock, veresiye without customer
    """
    data = ConvertToSaleDto.validate(request.get_json(silent=True))
    quote, sale = quote_service.convert_to_sale(g.tenant_id, quote_id, data, g.current_user.id)
    return jsonify({
        "quote": quote.to_dict(),
        "sale": sale.to_dict(include_items=True),
    }), 201
