from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .common import decimal_str, new_id, uuid_str


class Product(db.Model):
    """
    Product master data.

    stock_quantity is the company-wide on-hand count; per-warehouse counts
    live in WarehouseStock. Prices carry 6 decimal places (purchase and
    sale prices were widened from 2), computed totals are rounded to 2.
    """
    __tablename__ = "products"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    barcode = db.Column(db.String(50), nullable=True, unique=True, index=True)
    category = db.Column(db.String(100), nullable=True, index=True)
    unit = db.Column(db.String(20), nullable=True, default="adet")
    purchase_price = db.Column(db.Numeric(15, 6), nullable=False)
    sale_price = db.Column(db.Numeric(15, 6), nullable=False)
    wholesale_price = db.Column(db.Numeric(15, 6), nullable=True, default=Decimal("0"))
    vat_rate = db.Column(db.Numeric(5, 2), nullable=True, default=Decimal("20"))
    stock_quantity = db.Column(db.Integer, nullable=True, default=0, index=True)
    min_stock_level = db.Column(db.Integer, nullable=True, default=5)
    is_active = db.Column(db.Boolean, nullable=True, default=True, index=True)
    created_by = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def is_low_stock(self) -> bool:
        return (self.stock_quantity or 0) <= (self.min_stock_level or 0)

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "tenant_id": uuid_str(self.tenant_id),
            "name": self.name,
            "barcode": self.barcode,
            "category": self.category,
            "unit": self.unit,
            "purchase_price": decimal_str(self.purchase_price),
            "sale_price": decimal_str(self.sale_price),
            "wholesale_price": decimal_str(self.wholesale_price),
            "vat_rate": decimal_str(self.vat_rate),
            "stock_quantity": self.stock_quantity,
            "min_stock_level": self.min_stock_level,
            "is_active": self.is_active,
            "is_low_stock": self.is_low_stock,
            "created_by": uuid_str(self.created_by),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class Warehouse(db.Model):
    """Stock location (depo). Exactly one per tenant may be the default."""
    __tablename__ = "warehouses"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    name = db.Column(db.String(100), nullable=False)
    code = db.Column(db.String(20), nullable=False, unique=True, index=True)
    address = db.Column(db.Text, nullable=True)
    phone = db.Column(db.String(20), nullable=True)
    manager_name = db.Column(db.String(100), nullable=True)
    is_default = db.Column(db.Boolean, nullable=True, default=False, index=True)
    is_active = db.Column(db.Boolean, nullable=True, default=True, index=True)

    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "name": self.name,
            "code": self.code,
            "address": self.address,
            "phone": self.phone,
            "manager_name": self.manager_name,
            "is_default": self.is_default,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class WarehouseStock(db.Model):
    __tablename__ = "warehouse_stocks"
    __table_args__ = (
        db.UniqueConstraint("warehouse_id", "product_id", name="warehouse_stocks_warehouse_id_product_id_unique"),
    )

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    warehouse_id = db.Column(db.Uuid, db.ForeignKey("warehouses.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = db.Column(db.Uuid, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    min_stock_level = db.Column(db.Integer, nullable=True, default=5)

    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow, onupdate=utcnow)

    product = db.relationship("Product")
    warehouse = db.relationship("Warehouse", backref=db.backref("stocks", lazy=True, passive_deletes=True))

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "warehouse_id": uuid_str(self.warehouse_id),
            "product_id": uuid_str(self.product_id),
            "product_name": self.product.name if self.product else None,
            "barcode": self.product.barcode if self.product else None,
            "quantity": self.quantity,
            "min_stock_level": self.min_stock_level,
            "updated_at": to_utc_z(self.updated_at),
        }


class StockTransfer(db.Model):
    """
    Inter-warehouse transfer document.

    Lifecycle: pending -> completed | cancelled. Stock leaves the source
    when the transfer is created and reaches the destination on complete.
    """
    __tablename__ = "stock_transfers"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    transfer_number = db.Column(db.String(50), nullable=False, unique=True, index=True)
    from_warehouse_id = db.Column(db.Uuid, db.ForeignKey("warehouses.id"), nullable=False, index=True)
    to_warehouse_id = db.Column(db.Uuid, db.ForeignKey("warehouses.id"), nullable=False, index=True)
    transfer_date = db.Column(db.DateTime, nullable=True, default=utcnow, index=True)
    status = db.Column(db.String(20), nullable=True, default="pending", index=True)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow, onupdate=utcnow)

    from_warehouse = db.relationship("Warehouse", foreign_keys=[from_warehouse_id])
    to_warehouse = db.relationship("Warehouse", foreign_keys=[to_warehouse_id])
    items = db.relationship(
        "StockTransferItem",
        backref="transfer",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="StockTransferItem.created_at",
    )

    def to_dict(self, include_items: bool = False) -> dict:
        data = {
            "id": uuid_str(self.id),
            "transfer_number": self.transfer_number,
            "from_warehouse_id": uuid_str(self.from_warehouse_id),
            "from_warehouse_name": self.from_warehouse.name if self.from_warehouse else None,
            "to_warehouse_id": uuid_str(self.to_warehouse_id),
            "to_warehouse_name": self.to_warehouse.name if self.to_warehouse else None,
            "transfer_date": to_utc_z(self.transfer_date),
            "status": self.status,
            "notes": self.notes,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


class StockTransferItem(db.Model):
    __tablename__ = "stock_transfer_items"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    transfer_id = db.Column(db.Uuid, db.ForeignKey("stock_transfers.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = db.Column(db.Uuid, db.ForeignKey("products.id"), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)

    product = db.relationship("Product")

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "product_id": uuid_str(self.product_id),
            "product_name": self.product.name if self.product else None,
            "quantity": self.quantity,
        }


class StockMovement(db.Model):
    """
    Append-only per-warehouse stock history.

    movement_type: sale, return, transfer_in, transfer_out, adjustment,
    purchase. quantity is signed; stock_after is the warehouse count after
    the movement.
    """
    __tablename__ = "stock_movements"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    warehouse_id = db.Column(db.Uuid, db.ForeignKey("warehouses.id"), nullable=False, index=True)
    product_id = db.Column(db.Uuid, db.ForeignKey("products.id"), nullable=False, index=True)
    movement_type = db.Column(db.String(20), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    stock_after = db.Column(db.Integer, nullable=False)
    reference_type = db.Column(db.String(20), nullable=True, index=True)
    reference_id = db.Column(db.Uuid, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    movement_date = db.Column(db.DateTime, nullable=True, default=utcnow, index=True)
    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)

    product = db.relationship("Product")
    warehouse = db.relationship("Warehouse")

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "warehouse_id": uuid_str(self.warehouse_id),
            "warehouse_name": self.warehouse.name if self.warehouse else None,
            "product_id": uuid_str(self.product_id),
            "product_name": self.product.name if self.product else None,
            "movement_type": self.movement_type,
            "quantity": self.quantity,
            "stock_after": self.stock_after,
            "reference_type": self.reference_type,
            "reference_id": uuid_str(self.reference_id),
            "notes": self.notes,
            "movement_date": to_utc_z(self.movement_date),
        }
