# Overview: Service-layer operations for a tenant's own users; listing, role stats, CRUD and password change.

"""
Tenant user management (tenant side, behind a session).

Emails stay unique across every tenant because login resolves a user
by email alone. The tenant_admin account cannot be deleted, and nobody
deletes their own account.
"""

from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import User
from ..constants import ROLE_TENANT_ADMIN, WILDCARD_PERMISSION
from ..errors import BusinessRuleError, ConflictError
from . import auth_service, session_service, settings_service
from .pagination import like_pattern, paginate
from .scope import get_scoped, scoped
from .tenant_service import get_tenant, record_activity


NOT_FOUND = "Kullanici bulunamadi"

USER_SORTABLE = {
    "created_at": User.created_at,
    "name": User.name,
    "email": User.email,
    "role": User.role,
    "last_login_at": User.last_login_at,
}

_EDITABLE = ("name", "phone", "role", "permissions", "status", "avatar_url")


def get_user(tenant_id, user_id) -> User:
    return get_scoped(User, tenant_id, user_id, NOT_FOUND)


def list_users(tenant_id, params: dict) -> dict:
    query = scoped(User, tenant_id)
    if params.get("role"):
        query = query.filter(User.role == params["role"])
    if params.get("status"):
        query = query.filter(User.status == params["status"])
    if params.get("search"):
        pattern = like_pattern(params["search"])
        query = query.filter(db.or_(
            User.name.ilike(pattern, escape="\\"),
            User.email.ilike(pattern, escape="\\"),
        ))
    return paginate(query, params, USER_SORTABLE)


def stats_by_role(tenant_id) -> list[dict]:
    rows = (
        scoped(User, tenant_id)
        .with_entities(User.role, db.func.count(User.id))
        .group_by(User.role)
        .order_by(User.role.asc())
        .all()
    )
    return [{"role": role, "count": count} for role, count in rows]


def create_user(tenant_id, data: dict, actor: User) -> User:
    """
    Add a user to the caller's tenant.

    New users get the wildcard permission unless a list is given.
    Raises PermissionDeniedError when the plan's user quota is used up and
    ConflictError when the email belongs to any user on the platform.
    """
    settings_service.ensure_within_limit(tenant_id, "users")
    tenant = get_tenant(tenant_id)

    permissions = data.get("permissions")
    if permissions is None:
        permissions = [WILDCARD_PERMISSION]

    user = auth_service.create_user(
        tenant, data["email"], data["name"], data["password"],
        role=data["role"], phone=data.get("phone"), permissions=permissions,
    )
    record_activity(tenant_id, "user.created", entity_type="user", entity_id=user.id, user_id=actor.id,
                    new_values={"email": user.email, "role": user.role})
    db.session.commit()
    current_app.logger.info("User %s added to tenant %s", user.email, tenant_id)
    return user


def update_user(tenant_id, user_id, data: dict, actor: User) -> User:
    user = get_user(tenant_id, user_id)

    if "email" in data and data["email"] is not None:
        email = auth_service.normalize_email(data["email"])
        existing = auth_service.find_user_by_email(email)
        if existing is not None and existing.id != user.id:
            raise ConflictError("Bu e-posta adresi zaten kullanımda")
        user.email = email

    if user.id == actor.id and data.get("status") not in (None, "active"):
        raise BusinessRuleError("Kendi hesabinizi pasif yapamazsiniz")

    for key in _EDITABLE:
        if key in data:
            setattr(user, key, data[key])

    if not user.is_active:
        session_service.revoke_all_user_sessions(user.id)

    db.session.commit()
    return user


def delete_user(tenant_id, user_id, actor: User) -> None:
    user = get_user(tenant_id, user_id)
    if user.role == ROLE_TENANT_ADMIN:
        raise BusinessRuleError("Tenant admin kullanıcılar silinemez")
    if user.id == actor.id:
        raise BusinessRuleError("Kendi hesabinizi silemezsiniz")

    record_activity(tenant_id, "user.deleted", entity_type="user", entity_id=user.id, user_id=actor.id,
                    old_values={"email": user.email, "role": user.role})
    db.session.delete(user)
    db.session.commit()


def change_password(user: User, current_password: str, new_password: str, keep_session_id=None) -> int:
    """Other sessions of the user are closed; keep_session_id stays open. Returns how many closed."""
    if not auth_service.verify_password(current_password, user.password_hash):
        raise BusinessRuleError("Mevcut şifre hatalı")

    user.password_hash = auth_service.hash_password(new_password)
    revoked = session_service.revoke_all_user_sessions(user.id, keep_session_id=keep_session_id)
    db.session.commit()
    return revoked
