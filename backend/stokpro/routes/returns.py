# Overview: Flask API routes for returns operations; parses input and returns JSON responses.

"""
Return (iade) API Routes

Returns are completed on creation: stock comes back (product and, when
known, warehouse) and the customer is credited with the return total.
"""

from flask import Blueprint, request, jsonify, g

from ..dtos import CreateReturnDto, ReturnListDto
from ..services import return_service
from ..decorators import require_auth, require_permission
from .. import permissions


returns_bp = Blueprint("returns", __name__, url_prefix="/api/returns")


@returns_bp.get("")
@require_auth
@require_permission(permissions.RETURNS_VIEW)
def list_returns_route():
    params = ReturnListDto.validate(request.args.to_dict())
    return jsonify(return_service.list_returns(g.tenant_id, params)), 200


@returns_bp.get("/<uuid:return_id>")
@require_auth
@require_permission(permissions.RETURNS_VIEW)
def get_return_route(return_id):
    return_doc = return_service.get_return(g.tenant_id, return_id)
    return jsonify({"return": return_doc.to_dict(include_items=True)}), 200


@returns_bp.post("")
@require_auth
@require_permission(permissions.RETURNS_CREATE)
def create_return_route():
    """
    Returns:
        201: {"return": {... with items}}
        400: cancelled sale, product not in sale, quantity above what is left to return
        404: sale, sale item, customer, product or warehouse not found
    """
    data = CreateReturnDto.validate(request.get_json(silent=True))
    return_doc = return_service.create_return(g.tenant_id, data, g.current_user.id)
    return jsonify({"return": return_doc.to_dict(include_items=True)}), 201
