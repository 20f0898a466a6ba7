from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from ..time_utils import to_iso_date, to_utc_z, utcnow
from .common import decimal_str, new_id, uuid_str


class Sale(db.Model):
    """
    Sales invoice (satis).

    Totals are snapshots computed at creation time:
        grand_total = subtotal - discount_amount + vat_total
    status: completed | cancelled. A cancelled sale has its stock and any
    veresiye debit reversed.
    """
    __tablename__ = "sales"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    invoice_number = db.Column(db.String(50), nullable=False, unique=True, index=True)
    customer_id = db.Column(db.Uuid, db.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    warehouse_id = db.Column(db.Uuid, db.ForeignKey("warehouses.id", ondelete="SET NULL"), nullable=True, index=True)
    sale_date = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    subtotal = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    discount_amount = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    discount_rate = db.Column(db.Numeric(5, 2), nullable=True, default=Decimal("0"))
    vat_total = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    grand_total = db.Column(db.Numeric(12, 2), nullable=False)
    include_vat = db.Column(db.Boolean, nullable=True, default=True)
    payment_method = db.Column(db.String(20), nullable=False, index=True)
    due_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), nullable=True, default="completed", index=True)
    notes = db.Column(db.Text, nullable=True)
    sale_type = db.Column(db.String(20), nullable=True, default="retail", index=True)
    invoice_issued = db.Column(db.Boolean, nullable=False, default=False)
    has_renewal = db.Column(db.Boolean, nullable=True, default=False, index=True)
    renewal_date = db.Column(db.Date, nullable=True, index=True)
    reminder_days_before = db.Column(db.Integer, nullable=True, default=30)
    reminder_note = db.Column(db.Text, nullable=True)
    created_by = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    customer = db.relationship("Customer", backref=db.backref("sales", lazy=True))
    items = db.relationship("SaleItem", backref="sale", lazy=True, cascade="all, delete-orphan")

    def to_dict(self, include_items: bool = False) -> dict:
        data = {
            "id": uuid_str(self.id),
            "invoice_number": self.invoice_number,
            "customer_id": uuid_str(self.customer_id),
            "customer_name": self.customer.name if self.customer else None,
            "warehouse_id": uuid_str(self.warehouse_id),
            "sale_date": to_utc_z(self.sale_date),
            "subtotal": decimal_str(self.subtotal),
            "discount_amount": decimal_str(self.discount_amount),
            "discount_rate": decimal_str(self.discount_rate),
            "vat_total": decimal_str(self.vat_total),
            "grand_total": decimal_str(self.grand_total),
            "include_vat": self.include_vat,
            "payment_method": self.payment_method,
            "due_date": to_iso_date(self.due_date),
            "status": self.status,
            "notes": self.notes,
            "sale_type": self.sale_type,
            "invoice_issued": self.invoice_issued,
            "has_renewal": self.has_renewal,
            "renewal_date": to_iso_date(self.renewal_date),
            "reminder_days_before": self.reminder_days_before,
            "reminder_note": self.reminder_note,
            "created_by": uuid_str(self.created_by),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


class SaleItem(db.Model):
    __tablename__ = "sale_items"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    sale_id = db.Column(db.Uuid, db.ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = db.Column(db.Uuid, db.ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    discount_rate = db.Column(db.Numeric(5, 2), nullable=True, default=Decimal("0"))
    vat_rate = db.Column(db.Numeric(5, 2), nullable=True, default=Decimal("0"))
    vat_amount = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    line_total = db.Column(db.Numeric(12, 2), nullable=False)

    product = db.relationship("Product")

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "sale_id": uuid_str(self.sale_id),
            "product_id": uuid_str(self.product_id),
            "product_name": self.product.name if self.product else None,
            "quantity": self.quantity,
            "unit_price": decimal_str(self.unit_price),
            "discount_rate": decimal_str(self.discount_rate),
            "vat_rate": decimal_str(self.vat_rate),
            "vat_amount": decimal_str(self.vat_amount),
            "line_total": decimal_str(self.line_total),
        }


class Payment(db.Model):
    """Collection (tahsilat) from a customer; raises the customer balance."""
    __tablename__ = "payments"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    customer_id = db.Column(db.Uuid, db.ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    sale_id = db.Column(db.Uuid, db.ForeignKey("sales.id", ondelete="SET NULL"), nullable=True, index=True)
    account_id = db.Column(db.Uuid, db.ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True, index=True)
    payment_date = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    method = db.Column(db.String(20), nullable=False, index=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)

    customer = db.relationship("Customer", backref=db.backref("payments", lazy=True, passive_deletes=True))

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "customer_id": uuid_str(self.customer_id),
            "customer_name": self.customer.name if self.customer else None,
            "sale_id": uuid_str(self.sale_id),
            "account_id": uuid_str(self.account_id),
            "payment_date": to_utc_z(self.payment_date),
            "amount": decimal_str(self.amount),
            "method": self.method,
            "notes": self.notes,
            "created_at": to_utc_z(self.created_at),
        }
