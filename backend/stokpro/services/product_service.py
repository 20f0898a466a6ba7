# Overview: Service-layer operations for products; catalogue CRUD, low-stock and category views.

from __future__ import annotations

from ..extensions import db
from ..models import Product
from ..errors import ConflictError
from . import settings_service
from .pagination import like_pattern, paginate
from .scope import get_scoped, scoped


NOT_FOUND = "Urun bulunamadi"

PRODUCT_SORTABLE = {
    "created_at": Product.created_at,
    "updated_at": Product.updated_at,
    "name": Product.name,
    "sale_price": Product.sale_price,
    "stock_quantity": Product.stock_quantity,
    "category": Product.category,
}


def get_product(tenant_id, product_id) -> Product:
    return get_scoped(Product, tenant_id, product_id, NOT_FOUND)


def list_products(tenant_id, params: dict) -> dict:
    query = scoped(Product, tenant_id)
    if params.get("is_active") is not None:
        query = query.filter(Product.is_active.is_(params["is_active"]))
    if params.get("category"):
        query = query.filter(Product.category == params["category"])
    if params.get("search"):
        pattern = like_pattern(params["search"])
        query = query.filter(db.or_(
            Product.name.ilike(pattern, escape="\\"),
            Product.barcode.ilike(pattern, escape="\\"),
        ))
    return paginate(query, params, PRODUCT_SORTABLE)


def _check_barcode(barcode: str | None, exclude_id=None) -> None:
    """products.barcode carries a database-wide unique index."""
    if not barcode:
        return
    query = Product.query.filter(Product.barcode == barcode)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    if query.first() is not None:
        raise ConflictError("Bu barkod zaten kullaniliyor")


def create_product(tenant_id, data: dict, user_id=None) -> Product:
    settings_service.ensure_within_limit(tenant_id, "products")
    _check_barcode(data.get("barcode"))
    product = Product(tenant_id=tenant_id, created_by=user_id, **data)
    db.session.add(product)
    db.session.commit()
    return product


def update_product(tenant_id, product_id, data: dict) -> Product:
    product = get_product(tenant_id, product_id)
    if data.get("barcode"):
        _check_barcode(data["barcode"], exclude_id=product.id)
    for key, value in data.items():
        setattr(product, key, value)
    db.session.commit()
    return product


def delete_product(tenant_id, product_id) -> None:
    """Soft delete: sale and return lines keep pointing at the product."""
    product = get_product(tenant_id, product_id)
    product.is_active = False
    db.session.commit()


def low_stock_products(tenant_id) -> list[Product]:
    return (
        scoped(Product, tenant_id)
        .filter(Product.is_active.is_(True), Product.stock_quantity <= Product.min_stock_level)
        .order_by(Product.stock_quantity.asc(), Product.name.asc())
        .all()
    )


def categories(tenant_id) -> list[str]:
    rows = (
        scoped(Product, tenant_id)
        .with_entities(Product.category)
        .filter(Product.category.isnot(None), Product.category != "")
        .distinct()
        .order_by(Product.category.asc())
        .all()
    )
    return [row[0] for row in rows]
