# Overview: Flask API routes for products operations; parses input and returns JSON responses.

"""
Product Catalog API Routes

- list with search (name, barcode), category and active filters
- low-stock report and distinct categories
- create / update / soft delete

Static paths (/low-stock, /categories) are registered before /<uuid>.
"""

from flask import Blueprint, request, jsonify, g

from ..dtos import CreateProductDto, ProductListDto, UpdateProductDto
from ..services import product_service
from ..decorators import require_auth, require_permission
from .. import permissions


products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
@require_permission(permissions.PRODUCTS_VIEW)
def list_products_route():
    params = ProductListDto.validate(request.args.to_dict())
    return jsonify(product_service.list_products(g.tenant_id, params)), 200


@products_bp.get("/low-stock")
@require_auth
@require_permission(permissions.PRODUCTS_VIEW)
def low_stock_route():
    """Active products at or below their minimum stock level."""
    products = product_service.low_stock_products(g.tenant_id)
    return jsonify({"items": [p.to_dict() for p in products]}), 200


@products_bp.get("/categories")
@require_auth
@require_permission(permissions.PRODUCTS_VIEW)
def categories_route():
    return jsonify({"categories": product_service.categories(g.tenant_id)}), 200


@products_bp.get("/<uuid:product_id>")
@require_auth
@require_permission(permissions.PRODUCTS_VIEW)
def get_product_route(product_id):
    product = product_service.get_product(g.tenant_id, product_id)
    return jsonify({"product": product.to_dict()}), 200


@products_bp.post("")
@require_auth
@require_permission(permissions.PRODUCTS_CREATE)
def create_product_route():
    """
    Returns:
        201: {"product": {...}}
        400: validation failed
        409: barcode already in use
    """
    data = CreateProductDto.validate(request.get_json(silent=True))
    product = product_service.create_product(g.tenant_id, data, g.current_user.id)
    return jsonify({"product": product.to_dict()}), 201


@products_bp.put("/<uuid:product_id>")
@require_auth
@require_permission(permissions.PRODUCTS_UPDATE)
def update_product_route(product_id):
    data = UpdateProductDto.validate(request.get_json(silent=True))
    product = product_service.update_product(g.tenant_id, product_id, data)
    return jsonify({"product": product.to_dict()}), 200


@products_bp.delete("/<uuid:product_id>")
@require_auth
@require_permission(permissions.PRODUCTS_DELETE)
def delete_product_route(product_id):
    product_service.delete_product(g.tenant_id, product_id)
    return jsonify({"message": "Urun silindi"}), 200
