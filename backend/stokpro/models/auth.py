from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from ..constants import ROLE_SUPER_ADMIN, ROLE_TENANT_ADMIN, WILDCARD_PERMISSION
from .common import JSONType, new_id, uuid_str


class User(db.Model):
    """
    Back-office user.

    MULTI-TENANT: tenant_id is NULL only for the platform super admin.
    Email is unique across all tenants, case-insensitively; login resolves
    a user by email alone.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("tenant_id", "email", name="users_tenant_id_email_unique"),
    )

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    tenant_id = db.Column(db.Uuid, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    email = db.Column(db.String(255), nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(20), nullable=True)
    avatar_url = db.Column(db.String(500), nullable=True)
    role = db.Column(db.String(50), nullable=False, default="user", index=True)
    permissions = db.Column(JSONType, nullable=True, default=list)
    status = db.Column(db.String(20), nullable=True, default="active", index=True)
    email_verified_at = db.Column(db.DateTime, nullable=True)
    last_login_at = db.Column(db.DateTime, nullable=True)
    google_id = db.Column(db.String(255), nullable=True, index=True)

    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow, onupdate=utcnow)

    tenant = db.relationship("Tenant", foreign_keys=[tenant_id], backref=db.backref("users", lazy=True, passive_deletes=True))

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def has_permission(self, code: str) -> bool:
        if self.role in (ROLE_SUPER_ADMIN, ROLE_TENANT_ADMIN):
            return True
        perms = self.permissions or []
        return WILDCARD_PERMISSION in perms or code in perms

    def to_dict(self) -> dict:
        return {
            "id": uuid_str(self.id),
            "tenant_id": uuid_str(self.tenant_id),
            "email": self.email,
            "name": self.name,
            "phone": self.phone,
            "avatar_url": self.avatar_url,
            "role": self.role,
            "permissions": self.permissions or [],
            "status": self.status,
            "email_verified_at": to_utc_z(self.email_verified_at),
            "last_login_at": to_utc_z(self.last_login_at),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


db.Index("users_email_lower_unique", db.func.lower(User.email), unique=True)


class UserSession(db.Model):
    """
    Login session. Only SHA-256 hashes of the access and refresh tokens
    are stored; the plaintext tokens leave the server once, at login.
    """
    __tablename__ = "user_sessions"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = db.Column(db.String(255), nullable=False, index=True)
    refresh_token_hash = db.Column(db.String(255), nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.Text, nullable=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    is_valid = db.Column(db.Boolean, nullable=True, default=True, index=True)

    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, default=utcnow, onupdate=utcnow)

    user = db.relationship("User", backref=db.backref("sessions", lazy=True, cascade="all, delete-orphan"))


class PasswordResetToken(db.Model):
    __tablename__ = "password_reset_tokens"

    id = db.Column(db.Uuid, primary_key=True, default=new_id)
    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = db.Column(db.String(255), nullable=False, index=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    used_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=True, default=utcnow)

    user = db.relationship("User", backref=db.backref("password_reset_tokens", lazy=True, cascade="all, delete-orphan"))
