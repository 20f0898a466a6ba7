from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from ..time_utils import to_iso_date, to_utc_z, utcnow
from .common import decimal_str, new_id, uuid_str


class Account(db.Model):
    """
    Cash box (kasa) or bank account (banka).

    current_balance starts at opening_balance and only moves through
    AccountMovement rows; balance_after on each movement is the running
    balance.
    """
    __tablename__ = "accounts"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    name = db.Column(db.String(100), nullable=False)
    account_type = db.Column(db.String(20), nullable=False, index=True)
    bank_name = db.Column(db.String(100), nullable=True)
    iban = db.Column(db.String(34), nullable=True)
    account_number = db.Column(db.String(50), nullable=True)
    branch_name = db.Column(db.String(100), nullable=True)
    currency = db.Column(db.String(3), nullable=True, default="TRY")
    opening_balance = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    current_balance = db.Column(db.Numeric(12, 2), nullable=True, default=Decimal("0"))
    is_default = db.Column(db.Boolean, nullable=True, default=False, index=True)
    is_active = db.Column(db.Boolean, nullable=True, default=True, index=True)

    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "name": self.name,
            "account_type": self.account_type,
            "bank_name": self.bank_name,
            "iban": self.iban,
            "account_number": self.account_number,
            "branch_name": self.branch_name,
            "currency": self.currency,
            "opening_balance": decimal_str(self.opening_balance),
            "current_balance": decimal_str(self.current_balance),
            "is_default": self.is_default,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class AccountMovement(db.Model):
    """movement_type: gelir (+), gider (-), transfer_in (+), transfer_out (-)."""
    __tablename__ = "account_movements"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    account_id = db.Column(db.Uuid, db.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    movement_type = db.Column(db.String(20), nullable=False, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    balance_after = db.Column(db.Numeric(12, 2), nullable=False)
    category = db.Column(db.String(50), nullable=True)
    description = db.Column(db.Text, nullable=True)
    reference_type = db.Column(db.String(20), nullable=True, index=True)
    reference_id = db.Column(db.Uuid, nullable=True)
    movement_date = db.Column(db.DateTime, nullable=True, default=utcnow, index=True)
    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)

    account = db.relationship("Account", backref=db.backref("movements", lazy=True, passive_deletes=True))

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "account_id": uuid_str(self.account_id),
            "account_name": self.account.name if self.account else None,
            "movement_type": self.movement_type,
            "amount": decimal_str(self.amount),
            "balance_after": decimal_str(self.balance_after),
            "category": self.category,
            "description": self.description,
            "reference_type": self.reference_type,
            "reference_id": uuid_str(self.reference_id),
            "movement_date": to_utc_z(self.movement_date),
            "created_at": to_utc_z(self.created_at),
        }


class AccountTransfer(db.Model):
    __tablename__ = "account_transfers"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    from_account_id = db.Column(db.Uuid, db.ForeignKey("accounts.id"), nullable=False, index=True)
    to_account_id = db.Column(db.Uuid, db.ForeignKey("accounts.id"), nullable=False, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    description = db.Column(db.Text, nullable=True)
    transfer_date = db.Column(db.DateTime, nullable=True, default=utcnow, index=True)
    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)

    from_account = db.relationship("Account", foreign_keys=[from_account_id])
    to_account = db.relationship("Account", foreign_keys=[to_account_id])

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "from_account_id": uuid_str(self.from_account_id),
            "from_account_name": self.from_account.name if self.from_account else None,
            "to_account_id": uuid_str(self.to_account_id),
            "to_account_name": self.to_account.name if self.to_account else None,
            "amount": decimal_str(self.amount),
            "description": self.description,
            "transfer_date": to_utc_z(self.transfer_date),
            "created_at": to_utc_z(self.created_at),
        }


class Expense(db.Model):
    """Business expense (gider): rent, tax, salary, utility bills, other."""
    __tablename__ = "expenses"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    category = db.Column(db.String(50), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    expense_date = db.Column(db.Date, nullable=False, index=True)
    is_recurring = db.Column(db.Boolean, nullable=True, default=False, index=True)
    recurrence_period = db.Column(db.String(20), nullable=True)
    account_id = db.Column(db.Uuid, db.ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "category": self.category,
            "description": self.description,
            "amount": decimal_str(self.amount),
            "expense_date": to_iso_date(self.expense_date),
            "is_recurring": self.is_recurring,
            "recurrence_period": self.recurrence_period,
            "account_id": uuid_str(self.account_id),
            "created_by": uuid_str(self.created_by),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
