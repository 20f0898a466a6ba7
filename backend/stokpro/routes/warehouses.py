# Overview: Flask API routes for warehouses operations; parses input and returns JSON responses.

"""
Warehouse API Routes

- warehouses with per-warehouse stock rows and summary stats
- manual stock adjustment (add / subtract / set)
- stock movement history across warehouses
- stock transfers: pending -> completed | cancelled

Static paths (/movements, /transfers) are registered before /<uuid>.
"""

from flask import Blueprint, request, jsonify, g

from ..dtos import (
    AdjustStockDto,
    CreateStockTransferDto,
    CreateWarehouseDto,
    StockMovementListDto,
    StockTransferListDto,
    UpdateWarehouseDto,
    WarehouseListDto,
)
from ..services import warehouse_service
from ..decorators import require_auth, require_permission
from .. import permissions


warehouses_bp = Blueprint("warehouses", __name__, url_prefix="/api/warehouses")


@warehouses_bp.get("")
@require_auth
@require_permission(permissions.WAREHOUSES_VIEW)
def list_warehouses_route():
    params = WarehouseListDto.validate(request.args.to_dict())
    return jsonify(warehouse_service.list_warehouses(g.tenant_id, params)), 200


@warehouses_bp.get("/movements")
@require_auth
@require_permission(permissions.WAREHOUSES_VIEW)
def list_movements_route():
    params = StockMovementListDto.validate(request.args.to_dict())
    return jsonify(warehouse_service.list_movements(g.tenant_id, params)), 200


# =============================================================================
# TRANSFERS
# =============================================================================

@warehouses_bp.get("/transfers")
@require_auth
@require_permission(permissions.WAREHOUSES_VIEW)
def list_transfers_route():
    params = StockTransferListDto.validate(request.args.to_dict())
    return jsonify(warehouse_service.list_transfers(g.tenant_id, params)), 200


@warehouses_bp.get("/transfers/<uuid:transfer_id>")
@require_auth
@require_permission(permissions.WAREHOUSES_VIEW)
def get_transfer_route(transfer_id):
    transfer = warehouse_service.get_transfer(g.tenant_id, transfer_id)
    return jsonify({"transfer": transfer.to_dict(include_items=True)}), 200


@warehouses_bp.post("/transfers")
@require_auth
@require_permission(permissions.WAREHOUSES_UPDATE)
def create_transfer_route():
    """
    Returns:
        201: {"transfer": {... status pending}}
        400: same warehouse, inactive warehouse, insufficient stock
    """
    data = CreateStockTransferDto.validate(request.get_json(silent=True))
    transfer = warehouse_service.create_transfer(g.tenant_id, data)
    return jsonify({"transfer": transfer.to_dict(include_items=True)}), 201


@warehouses_bp.post("/transfers/<uuid:transfer_id>/complete")
@require_auth
@require_permission(permissions.WAREHOUSES_UPDATE)
def complete_transfer_route(transfer_id):
    transfer = warehouse_service.complete_transfer(g.tenant_id, transfer_id)
    return jsonify({"transfer": transfer.to_dict(include_items=True)}), 200


@warehouses_bp.post("/transfers/<uuid:transfer_id>/cancel")
@require_auth
@require_permission(permissions.WAREHOUSES_UPDATE)
def cancel_transfer_route(transfer_id):
    transfer = warehouse_service.cancel_transfer(g.tenant_id, transfer_id)
    return jsonify({"transfer": transfer.to_dict(include_items=True)}), 200


# =============================================================================
# WAREHOUSES
# =============================================================================

@warehouses_bp.get("/<uuid:warehouse_id>")
@require_auth
@require_permission(permissions.WAREHOUSES_VIEW)
def get_warehouse_route(warehouse_id):
    return jsonify({"warehouse": warehouse_service.warehouse_detail(g.tenant_id, warehouse_id)}), 200


@warehouses_bp.get("/<uuid:warehouse_id>/stocks")
@require_auth
@require_permission(permissions.WAREHOUSES_VIEW)
def list_stocks_route(warehouse_id):
    stocks = warehouse_service.list_stocks(g.tenant_id, warehouse_id)
    return jsonify({"items": [s.to_dict() for s in stocks]}), 200


@warehouses_bp.post("")
@require_auth
@require_permission(permissions.WAREHOUSES_CREATE)
def create_warehouse_route():
    """
    Returns:
        201: {"warehouse": {...}}
        409: code already in use
    """
    data = CreateWarehouseDto.validate(request.get_json(silent=True))
    warehouse = warehouse_service.create_warehouse(g.tenant_id, data)
    return jsonify({"warehouse": warehouse.to_dict()}), 201


@warehouses_bp.put("/<uuid:warehouse_id>")
@require_auth
@require_permission(permissions.WAREHOUSES_UPDATE)
def update_warehouse_route(warehouse_id):
    data = UpdateWarehouseDto.validate(request.get_json(silent=True))
    warehouse = warehouse_service.update_warehouse(g.tenant_id, warehouse_id, data)
    return jsonify({"warehouse": warehouse.to_dict()}), 200


@warehouses_bp.delete("/<uuid:warehouse_id>")
@require_auth
@require_permission(permissions.WAREHOUSES_DELETE)
def delete_warehouse_route(warehouse_id):
    """The default warehouse cannot be deleted."""
    warehouse_service.delete_warehouse(g.tenant_id, warehouse_id)
    return jsonify({"message": "Depo silindi"}), 200


@warehouses_bp.post("/<uuid:warehouse_id>/adjust-stock")
@require_auth
@require_permission(permissions.WAREHOUSES_UPDATE)
def adjust_stock_route(warehouse_id):
    """
    Returns:
        200: {"success": true, "new_quantity": n}
        400: inactive warehouse, result below zero
    """
    data = AdjustStockDto.validate(request.get_json(silent=True))
    return jsonify(warehouse_service.adjust_stock(g.tenant_id, warehouse_id, data)), 200
