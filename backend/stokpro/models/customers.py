from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .common import decimal_str, new_id, uuid_str


class Customer(db.Model):
    """
    Customer (cari) master data.

    balance is the running account: negative when the customer owes
    money (veresiye sales), raised by payments and returns. Every change
    is mirrored by an AccountTransaction row.
    """
    __tablename__ = "customers"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(20), nullable=True, index=True)
    email = db.Column(db.String(255), nullable=True)
    address = db.Column(db.Text, nullable=True)
    tax_number = db.Column(db.String(20), nullable=True)
    tax_office = db.Column(db.String(100), nullable=True)
    balance = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    notes = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, nullable=True, default=True, index=True)
    renewal_red_days = db.Column(db.Integer, nullable=True, default=30)
    renewal_yellow_days = db.Column(db.Integer, nullable=True, default=60)
    created_by = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "tenant_id": uuid_str(self.tenant_id),
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "tax_number": self.tax_number,
            "tax_office": self.tax_office,
            "balance": decimal_str(self.balance),
            "notes": self.notes,
            "is_active": self.is_active,
            "renewal_red_days": self.renewal_red_days,
            "renewal_yellow_days": self.renewal_yellow_days,
            "created_by": uuid_str(self.created_by),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class AccountTransaction(db.Model):
    """
    Customer ledger entry.

    type is "borc" (debit, customer owes) or "alacak" (credit);
    reference_type names the document that caused it (sale / return /
    payment).
    """
    __tablename__ = "account_transactions"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    customer_id = db.Column(db.Uuid, db.ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    type = db.Column(db.String(20), nullable=False, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    description = db.Column(db.Text, nullable=True)
    reference_type = db.Column(db.String(20), nullable=True, index=True)
    reference_id = db.Column(db.Uuid, nullable=True)
    transaction_date = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)

    customer = db.relationship("Customer", backref=db.backref("transactions", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "customer_id": uuid_str(self.customer_id),
            "type": self.type,
            "amount": decimal_str(self.amount),
            "description": self.description,
            "reference_type": self.reference_type,
            "reference_id": uuid_str(self.reference_id),
            "transaction_date": to_utc_z(self.transaction_date),
            "created_at": to_utc_z(self.created_at),
        }
