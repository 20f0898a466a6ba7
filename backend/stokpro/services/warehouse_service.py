# Overview: Service-layer operations for warehouses; locations, per-warehouse stock, adjustments and transfers.

"""
Warehouse (depo) service.

Per-warehouse quantities live in warehouse_stocks; every change to one of
them goes through change_warehouse_stock(), which also appends the
stock_movements row (signed quantity, stock_after).

Adjustments and transfers move warehouse quantities only. The
company-wide products.stock_quantity is owned by sales and returns.

TRANSFER LIFECYCLE:
1. pending: created, source stock already deducted (transfer_out)
2. completed: destination credited (transfer_in)
3. cancelled: source credited back (adjustment, "Transfer iptali")
"""

from __future__ import annotations

from ..extensions import db
from ..models import Warehouse, WarehouseStock, StockMovement, StockTransfer, StockTransferItem, Product
from ..errors import BusinessRuleError, ConflictError
from ..time_utils import utcnow
from .concurrency import lock_for_update
from .numbering import next_document_number
from . import settings_service
from .pagination import like_pattern, paginate
from .scope import get_scoped, scoped


NOT_FOUND = "Depo bulunamadi"
TRANSFER_NOT_FOUND = "Transfer bulunamadi"
PRODUCT_NOT_FOUND = "Urun bulunamadi"

TRANSFER_PREFIX = "TRN"

WAREHOUSE_SORTABLE = {
    "created_at": Warehouse.created_at,
    "name": Warehouse.name,
    "code": Warehouse.code,
}


def get_warehouse(tenant_id, warehouse_id) -> Warehouse:
    return get_scoped(Warehouse, tenant_id, warehouse_id, NOT_FOUND)


def list_warehouses(tenant_id, params: dict) -> dict:
    query = scoped(Warehouse, tenant_id)
    if params.get("is_active") is not None:
        query = query.filter(Warehouse.is_active.is_(params["is_active"]))
    if params.get("search"):
        pattern = like_pattern(params["search"])
        query = query.filter(db.or_(
            Warehouse.name.ilike(pattern, escape="\\"),
            Warehouse.code.ilike(pattern, escape="\\"),
        ))
    return paginate(query, params, WAREHOUSE_SORTABLE)


def warehouse_detail(tenant_id, warehouse_id) -> dict:
    warehouse = get_warehouse(tenant_id, warehouse_id)
    stocks = scoped(WarehouseStock, tenant_id).filter(WarehouseStock.warehouse_id == warehouse.id)

    total_products = stocks.filter(WarehouseStock.quantity > 0).count()
    total_quantity = stocks.with_entities(db.func.coalesce(db.func.sum(WarehouseStock.quantity), 0)).scalar()
    low_stock_count = stocks.filter(WarehouseStock.quantity <= WarehouseStock.min_stock_level).count()
    pending_transfers = (
        scoped(StockTransfer, tenant_id)
        .filter(
            StockTransfer.status == "pending",
            db.or_(
                StockTransfer.from_warehouse_id == warehouse.id,
                StockTransfer.to_warehouse_id == warehouse.id,
            ),
        )
        .count()
    )

    data = warehouse.to_dict()
    data["stats"] = {
        "total_products": total_products,
        "total_quantity": int(total_quantity or 0),
        "low_stock_count": low_stock_count,
        "pending_transfers": pending_transfers,
    }
    return data


def _check_code(code: str, exclude_id=None) -> None:
    """warehouses.code carries a database-wide unique index."""
    query = Warehouse.query.filter(Warehouse.code == code)
    if exclude_id is not None:
        query = query.filter(Warehouse.id != exclude_id)
    if query.first() is not None:
        raise ConflictError("Bu depo kodu zaten kullanimda")


def _clear_default(tenant_id, keep_id=None) -> None:
    query = scoped(Warehouse, tenant_id).filter(Warehouse.is_default.is_(True))
    if keep_id is not None:
        query = query.filter(Warehouse.id != keep_id)
    for warehouse in query.all():
        warehouse.is_default = False


def create_warehouse(tenant_id, data: dict) -> Warehouse:
    settings_service.ensure_within_limit(tenant_id, "warehouses")
    _check_code(data["code"])
    if data.get("is_default"):
        _clear_default(tenant_id)

    warehouse = Warehouse(tenant_id=tenant_id, is_active=True, **data)
    db.session.add(warehouse)
    db.session.commit()
    return warehouse


def update_warehouse(tenant_id, warehouse_id, data: dict) -> Warehouse:
    warehouse = get_warehouse(tenant_id, warehouse_id)
    if data.get("code"):
        _check_code(data["code"], exclude_id=warehouse.id)
    if data.get("is_default"):
        _clear_default(tenant_id, keep_id=warehouse.id)

    for key, value in data.items():
        setattr(warehouse, key, value)
    db.session.commit()
    return warehouse


def delete_warehouse(tenant_id, warehouse_id) -> None:
    """Soft delete; the default warehouse cannot be removed."""
    warehouse = get_warehouse(tenant_id, warehouse_id)
    if warehouse.is_default:
        raise BusinessRuleError("Varsayilan depo silinemez")
    warehouse.is_active = False
    db.session.commit()


# =============================================================================
# STOCK
# =============================================================================

def list_stocks(tenant_id, warehouse_id) -> list[WarehouseStock]:
    warehouse = get_warehouse(tenant_id, warehouse_id)
    return (
        scoped(WarehouseStock, tenant_id)
        .join(Product, WarehouseStock.product_id == Product.id)
        .filter(WarehouseStock.warehouse_id == warehouse.id)
        .order_by(Product.name.asc())
        .all()
    )


def _stock_row(tenant_id, warehouse_id, product_id) -> WarehouseStock | None:
    return lock_for_update(
        scoped(WarehouseStock, tenant_id).filter(
            WarehouseStock.warehouse_id == warehouse_id,
            WarehouseStock.product_id == product_id,
        )
    ).first()


def warehouse_quantity(tenant_id, warehouse_id, product_id) -> int:
    row = _stock_row(tenant_id, warehouse_id, product_id)
    return row.quantity if row is not None else 0


def change_warehouse_stock(tenant_id, warehouse_id, product: Product, delta: int, movement_type: str,
                           reference_type: str | None = None, reference_id=None,
                           notes: str | None = None) -> int:
    """
    Apply a signed quantity change to one warehouse and log the movement.

    Creates the warehouse_stocks row on first use. Raises
    BusinessRuleError when the result would go below zero. The caller
    commits. Returns the new quantity.
    """
    row = _stock_row(tenant_id, warehouse_id, product.id)
    current = row.quantity if row is not None else 0
    new_quantity = current + delta
    if new_quantity < 0:
        raise BusinessRuleError(f"Yetersiz stok: {product.name}")

    if row is None:
        row = WarehouseStock(
            tenant_id=tenant_id,
            warehouse_id=warehouse_id,
            product_id=product.id,
            quantity=0,
            min_stock_level=product.min_stock_level,
        )
        db.session.add(row)
    row.quantity = new_quantity

    db.session.add(StockMovement(
        tenant_id=tenant_id,
        warehouse_id=warehouse_id,
        product_id=product.id,
        movement_type=movement_type,
        quantity=delta,
        stock_after=new_quantity,
        reference_type=reference_type,
        reference_id=reference_id,
        notes=notes,
        movement_date=utcnow(),
    ))
    return new_quantity


def adjust_stock(tenant_id, warehouse_id, data: dict) -> dict:
    """
    Manual count correction.

    add / subtract move by `quantity`, set replaces the count.
    """
    warehouse = get_warehouse(tenant_id, warehouse_id)
    if not warehouse.is_active:
        raise BusinessRuleError("Pasif depoda stok ayarlamasi yapilamaz")
    product = get_scoped(Product, tenant_id, data["product_id"], PRODUCT_NOT_FOUND)

    quantity = data["quantity"]
    current = warehouse_quantity(tenant_id, warehouse.id, product.id)
    if data["adjustment_type"] == "add":
        delta = quantity
    elif data["adjustment_type"] == "subtract":
        delta = -quantity
    else:
        delta = quantity - current

    new_quantity = change_warehouse_stock(
        tenant_id, warehouse.id, product, delta, "adjustment",
        reference_type="adjustment", notes=data.get("notes"),
    )
    db.session.commit()
    return {"success": True, "new_quantity": new_quantity}


MOVEMENT_SORTABLE = {
    "created_at": StockMovement.created_at,
    "movement_date": StockMovement.movement_date,
}


def list_movements(tenant_id, params: dict) -> dict:
    query = scoped(StockMovement, tenant_id)
    if params.get("warehouse_id"):
        query = query.filter(StockMovement.warehouse_id == params["warehouse_id"])
    if params.get("product_id"):
        query = query.filter(StockMovement.product_id == params["product_id"])
    if params.get("movement_type"):
        query = query.filter(StockMovement.movement_type == params["movement_type"])
    if params.get("start_date"):
        query = query.filter(db.func.date(StockMovement.movement_date) >= params["start_date"])
    if params.get("end_date"):
        query = query.filter(db.func.date(StockMovement.movement_date) <= params["end_date"])
    return paginate(query, params, MOVEMENT_SORTABLE, default_sort="movement_date")


# =============================================================================
# TRANSFERS
# =============================================================================

TRANSFER_SORTABLE = {
    "created_at": StockTransfer.created_at,
    "transfer_date": StockTransfer.transfer_date,
    "transfer_number": StockTransfer.transfer_number,
}


def get_transfer(tenant_id, transfer_id) -> StockTransfer:
    return get_scoped(StockTransfer, tenant_id, transfer_id, TRANSFER_NOT_FOUND)


def list_transfers(tenant_id, params: dict) -> dict:
    query = scoped(StockTransfer, tenant_id)
    if params.get("status"):
        query = query.filter(StockTransfer.status == params["status"])
    if params.get("warehouse_id"):
        query = query.filter(db.or_(
            StockTransfer.from_warehouse_id == params["warehouse_id"],
            StockTransfer.to_warehouse_id == params["warehouse_id"],
        ))
    return paginate(query, params, TRANSFER_SORTABLE)


def create_transfer(tenant_id, data: dict) -> StockTransfer:
    """
    Open a transfer and take the goods out of the source warehouse.

    Every line is checked before any stock moves, so a failing line
    leaves nothing behind.
    """
    if data["from_warehouse_id"] == data["to_warehouse_id"]:
        raise BusinessRuleError("Ayni depolar arasinda transfer yapilamaz")

    source = get_warehouse(tenant_id, data["from_warehouse_id"])
    destination = get_warehouse(tenant_id, data["to_warehouse_id"])
    if not source.is_active or not destination.is_active:
        raise BusinessRuleError("Pasif depolar arasinda transfer yapilamaz")

    requested: dict = {}
    products: dict = {}
    for item in data["items"]:
        product = get_scoped(Product, tenant_id, item["product_id"], PRODUCT_NOT_FOUND)
        products[product.id] = product
        requested[product.id] = requested.get(product.id, 0) + item["quantity"]

    for product_id, quantity in requested.items():
        if warehouse_quantity(tenant_id, source.id, product_id) < quantity:
            raise BusinessRuleError(f"Yetersiz stok: {products[product_id].name}")

    transfer = StockTransfer(
        tenant_id=tenant_id,
        transfer_number=next_document_number(StockTransfer.transfer_number, TRANSFER_PREFIX),
        from_warehouse_id=source.id,
        to_warehouse_id=destination.id,
        transfer_date=data.get("transfer_date") or utcnow(),
        status="pending",
        notes=data.get("notes"),
    )
    db.session.add(transfer)
    db.session.flush()

    for item in data["items"]:
        product = products[item["product_id"]]
        db.session.add(StockTransferItem(
            tenant_id=tenant_id,
            transfer_id=transfer.id,
            product_id=product.id,
            quantity=item["quantity"],
        ))
        change_warehouse_stock(
            tenant_id, source.id, product, -item["quantity"], "transfer_out",
            reference_type="transfer", reference_id=transfer.id,
        )

    db.session.commit()
    return transfer


def complete_transfer(tenant_id, transfer_id) -> StockTransfer:
    transfer = get_transfer(tenant_id, transfer_id)
    if transfer.status == "completed":
        raise BusinessRuleError("Transfer zaten tamamlanmis")
    if transfer.status == "cancelled":
        raise BusinessRuleError("Iptal edilmis transfer tamamlanamaz")

    for item in transfer.items:
        change_warehouse_stock(
            tenant_id, transfer.to_warehouse_id, item.product, item.quantity, "transfer_in",
            reference_type="transfer", reference_id=transfer.id,
        )
    transfer.status = "completed"
    db.session.commit()
    return transfer


def cancel_transfer(tenant_id, transfer_id) -> StockTransfer:
    transfer = get_transfer(tenant_id, transfer_id)
    if transfer.status == "completed":
        raise BusinessRuleError("Tamamlanmis transfer iptal edilemez")
    if transfer.status == "cancelled":
        raise BusinessRuleError("Transfer zaten iptal edilmis")

    for item in transfer.items:
        change_warehouse_stock(
            tenant_id, transfer.from_warehouse_id, item.product, item.quantity, "adjustment",
            reference_type="transfer", reference_id=transfer.id, notes="Transfer iptali",
        )
    transfer.status = "cancelled"
    db.session.commit()
    return transfer
