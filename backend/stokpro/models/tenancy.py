from __future__ import annotations

from ..extensions import db
from ..time_utils import to_iso_date, to_utc_z, utcnow
from .common import JSONType, decimal_str, new_id, uuid_str


class Plan(db.Model):
    """
    Subscription plan (basic / pro / plus).

    features is a map of module flags, limits a map of quotas where -1
    means unlimited.
    """
    __tablename__ = "plans"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    code = db.Column(db.String(50), nullable=False, unique=True)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    billing_period = db.Column(db.String(20), nullable=True, default="monthly")
    features = db.Column(JSONType, nullable=True, default=dict)
    limits = db.Column(JSONType, nullable=True, default=dict)
    is_active = db.Column(db.Boolean, nullable=True, default=True)
    sort_order = db.Column(db.Integer, nullable=True, default=0)

    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "name": self.name,
            "code": self.code,
            "price": decimal_str(self.price),
            "billing_period": self.billing_period,
            "features": self.features or {},
            "limits": self.limits or {},
            "is_active": self.is_active,
            "sort_order": self.sort_order,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class Tenant(db.Model):
    """
    A company using the back office. Every business row carries tenant_id.

    status: active, trial, suspended, cancelled. Only active and trial
    tenants may log in.
    """
    __tablename__ = "tenants"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(100), nullable=False, unique=True)
    domain = db.Column(db.String(255), nullable=True)
    logo_url = db.Column(db.String(500), nullable=True)
    plan_id = db.Column(db.Uuid, db.ForeignKey("plans.id", ondelete="SET NULL"), nullable=True, index=True)
    settings = db.Column(JSONType, nullable=True, default=dict)
    status = db.Column(db.String(20), nullable=True, default="active", index=True)
    trial_ends_at = db.Column(db.DateTime, nullable=True)
    subscription_starts_at = db.Column(db.DateTime, nullable=True)
    subscription_ends_at = db.Column(db.DateTime, nullable=True)
    billing_email = db.Column(db.String(255), nullable=True)
    owner_id = db.Column(
        db.Uuid,
        db.ForeignKey("users.id", ondelete="SET NULL", use_alter=True, name="fk_tenants_owner_id_users"),
        nullable=True,
    )

    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow, onupdate=utcnow)

    plan = db.relationship("Plan", backref=db.backref("tenants", lazy=True))

    def to_dict(self, include_plan: bool = False) -> dict:
        data = {
            "id": uuid_str(self.id),
            "name": self.name,
            "slug": self.slug,
            "domain": self.domain,
            "logo_url": self.logo_url,
            "plan_id": uuid_str(self.plan_id),
            "settings": self.settings or {},
            "status": self.status,
            "trial_ends_at": to_utc_z(self.trial_ends_at),
            "subscription_starts_at": to_utc_z(self.subscription_starts_at),
            "subscription_ends_at": to_utc_z(self.subscription_ends_at),
            "billing_email": self.billing_email,
            "owner_id": uuid_str(self.owner_id),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        if include_plan:
            data["plan"] = self.plan.to_dict() if self.plan else None
        return data


class TenantActivityLog(db.Model):
    """Append-only audit trail of tenant-level administrative actions."""
    __tablename__ = "tenant_activity_logs"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action = db.Column(db.String(100), nullable=False, index=True)
    entity_type = db.Column(db.String(50), nullable=True, index=True)
    entity_id = db.Column(db.Uuid, nullable=True)
    old_values = db.Column(JSONType, nullable=True)
    new_values = db.Column(JSONType, nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)
    # "metadata" is reserved on declarative classes
    extra = db.Column("metadata", JSONType, nullable=True, default=dict)
    created_at = db.Column(db.DateTime, nullable=True, default=utcnow, index=True)

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "tenant_id": uuid_str(self.tenant_id),
            "user_id": uuid_str(self.user_id),
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": uuid_str(self.entity_id),
            "old_values": self.old_values,
            "new_values": self.new_values,
            "ip_address": self.ip_address,
            "metadata": self.extra or {},
            "created_at": to_utc_z(self.created_at),
        }


class TenantInvoice(db.Model):
    __tablename__ = "tenant_invoices"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    invoice_number = db.Column(db.String(50), nullable=False, unique=True)
    period_start = db.Column(db.Date, nullable=True)
    period_end = db.Column(db.Date, nullable=True)
    plan_id = db.Column(db.Uuid, db.ForeignKey("plans.id", ondelete="SET NULL"), nullable=True)
    amount = db.Column(db.Numeric(12, 2), nullable=True)
    tax_amount = db.Column(db.Numeric(12, 2), nullable=True)
    total_amount = db.Column(db.Numeric(12, 2), nullable=True)
    status = db.Column(db.String(20), nullable=True, default="pending", index=True)
    due_date = db.Column(db.Date, nullable=True, index=True)
    paid_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "tenant_id": uuid_str(self.tenant_id),
            "invoice_number": self.invoice_number,
            "period_start": to_iso_date(self.period_start),
            "period_end": to_iso_date(self.period_end),
            "plan_id": uuid_str(self.plan_id),
            "amount": decimal_str(self.amount),
            "tax_amount": decimal_str(self.tax_amount),
            "total_amount": decimal_str(self.total_amount),
            "status": self.status,
            "due_date": to_iso_date(self.due_date),
            "paid_at": to_utc_z(self.paid_at),
            "created_at": to_utc_z(self.created_at),
        }



class Invitation(db.Model):
    """Pending invitation to join (or create) a tenant; only the token hash is kept."""
    __tablename__ = "invitations"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    email = db.Column(db.String(255), nullable=False, index=True)
    token = db.Column(db.String(255), nullable=False, unique=True, index=True)
    role = db.Column(db.String(50), nullable=False, default="user")
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    # Name for the tenant to create when tenant_id is empty
    tenant_name = db.Column(db.String(255), nullable=True)
    invited_by = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    accepted_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "email": self.email,
            "role": self.role,
            "tenant_id": uuid_str(self.tenant_id),
            "tenant_name": self.tenant_name,
            "invited_by": uuid_str(self.invited_by),
            "expires_at": to_utc_z(self.expires_at),
            "accepted_at": to_utc_z(self.accepted_at),
            "created_at": to_utc_z(self.created_at),
        }
