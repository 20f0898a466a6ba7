# Overview: Service-layer operations for auth; registration, login, token refresh and password reset.

"""
Authentication Service with Multi-Tenant Support

MULTI-TENANT: every user except the platform super admin belongs to one
tenant. Self-service registration creates the tenant (trial) together
with its first tenant_admin user.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor 12)
- Login requires an active user and an active or trial tenant
- Forgot-password answers identically whether or not the email exists
- A password reset invalidates every session of the user
"""

from datetime import timedelta

import bcrypt
from flask import current_app

from ..config import get_config
from ..extensions import db
from ..models import User, Tenant, Plan, PasswordResetToken
from ..constants import (
    LOGIN_TENANT_STATUSES,
    ROLE_TENANT_ADMIN,
    ROLE_USER,
    WILDCARD_PERMISSION,
)
from ..errors import AuthenticationError, ConflictError, FieldViolation, NotFoundError, ValidationError
from ..time_utils import utcnow
from . import session_service
from .tenant_service import slugify, record_activity


TRIAL_PERIOD = timedelta(days=14)
RESET_TOKEN_LIFETIME = timedelta(hours=1)
FORGOT_PASSWORD_MESSAGE = "Şifre sıfırlama bağlantısı e-posta adresinize gönderildi"
RESET_PASSWORD_MESSAGE = "Şifreniz başarıyla değiştirildi"
RESET_SENDER_KEY = "stokpro.reset_sender"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """bcrypt.checkpw is timing-safe; a malformed hash counts as a mismatch."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(email: str) -> User | None:
    return (
        User.query
        .filter(db.func.lower(User.email) == normalize_email(email))
        .order_by(User.created_at.asc())
        .first()
    )


def auth_payload(user: User, tokens: dict) -> dict:
    tenant = user.tenant
    profile = user.to_dict()
    if tenant is not None:
        profile["tenant"] = {
            "id": str(tenant.id),
            "name": tenant.name,
            "slug": tenant.slug,
            "status": tenant.status,
        }
    return {"user": profile, "tokens": tokens}


def _default_plan() -> Plan | None:
    return (
        Plan.query
        .filter(Plan.is_active.is_(True))
        .order_by(Plan.sort_order.asc(), Plan.created_at.asc())
        .first()
    )


def register(data: dict, ip_address: str | None = None, user_agent: str | None = None) -> dict:
    """
    Self-service sign-up: new trial tenant plus its tenant_admin.

    Raises ConflictError if the email or the company slug is taken.
    """
    email = normalize_email(data["email"])
    if find_user_by_email(email) is not None:
        raise ConflictError("Bu e-posta adresi zaten kullanımda")

    slug = slugify(data["company_name"])
    if not slug:
        raise ValidationError([FieldViolation("company_name", "company_name must contain letters or digits")])
    if Tenant.query.filter_by(slug=slug).first() is not None:
        raise ConflictError("Bu şirket adı zaten kullanımda")

    plan = _default_plan()
    now = utcnow()
    tenant = Tenant(
        name=data["company_name"].strip(),
        slug=slug,
        plan_id=plan.id if plan else None,
        status="trial",
        trial_ends_at=now + TRIAL_PERIOD,
        billing_email=email,
        settings={},
    )
    db.session.add(tenant)
    db.session.flush()

    user = User(
        tenant_id=tenant.id,
        email=email,
        password_hash=hash_password(data["password"]),
        name=data["name"].strip(),
        phone=data.get("phone"),
        role=ROLE_TENANT_ADMIN,
        permissions=[WILDCARD_PERMISSION],
        status="active",
        last_login_at=now,
    )
    db.session.add(user)
    db.session.flush()
    tenant.owner_id = user.id

    record_activity(tenant.id, "tenant.registered", entity_type="tenant", entity_id=tenant.id,
                    user_id=user.id, new_values={"name": tenant.name, "slug": slug}, ip_address=ip_address)

    tokens = session_service.create_session(user, ip_address=ip_address, user_agent=user_agent)
    db.session.commit()

    current_app.logger.info("Tenant registered: %s (%s)", tenant.slug, tenant.id)
    return auth_payload(user, tokens)


def login(email: str, password: str, ip_address: str | None = None, user_agent: str | None = None) -> dict:
    """
    Verify credentials and open a session.

    Raises AuthenticationError for unknown email, wrong password, inactive
    user, or a tenant that is not active/trial.
    """
    user = find_user_by_email(email)
    if user is None:
        raise AuthenticationError("E-posta veya şifre hatalı")

    if not user.is_active:
        raise AuthenticationError("Hesabınız aktif değil")

    if not verify_password(password, user.password_hash):
        raise AuthenticationError("E-posta veya şifre hatalı")

    if user.tenant_id is not None:
        tenant = user.tenant
        if tenant is not None and tenant.status not in LOGIN_TENANT_STATUSES:
            raise AuthenticationError("Şirket hesabı askıya alınmış veya iptal edilmiş")

    user.last_login_at = utcnow()
    tokens = session_service.create_session(user, ip_address=ip_address, user_agent=user_agent)
    db.session.commit()
    return auth_payload(user, tokens)


def refresh(refresh_token: str) -> dict:
    """Rotate a session: the old one is invalidated, new tokens issued."""
    old = session_service.find_by_refresh_token(refresh_token)
    if old is None:
        raise AuthenticationError("Geçersiz refresh token")

    user = old.user
    if user is None or not user.is_active:
        raise AuthenticationError("Kullanıcı bulunamadı veya aktif değil")

    old.is_valid = False
    tokens = session_service.create_session(user, ip_address=old.ip_address, user_agent=old.user_agent)
    db.session.commit()
    return tokens


def logout(access_token: str) -> None:
    session_service.revoke_session(access_token)
    db.session.commit()


def logout_all(user_id) -> int:
    count = session_service.revoke_all_user_sessions(user_id)
    db.session.commit()
    return count


def forgot_password(email: str) -> dict:
    """
    Store a one-hour reset token for the user, if any.

    The plaintext token goes to the sender registered under
    app.extensions["stokpro.reset_sender"] (a callable taking the user and
    the token). Without one it is written to the log, except in production.
    The response never reveals whether the email is known.
    """
    user = find_user_by_email(email)
    if user is None:
        return {"message": FORGOT_PASSWORD_MESSAGE}

    token = session_service.generate_token()
    db.session.add(PasswordResetToken(
        user_id=user.id,
        token_hash=session_service.hash_token(token),
        expires_at=utcnow() + RESET_TOKEN_LIFETIME,
    ))
    db.session.commit()

    sender = current_app.extensions.get(RESET_SENDER_KEY)
    if sender is not None:
        sender(user, token)
        current_app.logger.info("Password reset token sent to %s", user.email)
    elif get_config().is_production:
        current_app.logger.warning("Password reset requested for %s but no sender is registered", user.email)
    else:
        current_app.logger.info("Password reset token for %s: %s", user.email, token)
    return {"message": FORGOT_PASSWORD_MESSAGE}


def reset_password(token: str, new_password: str) -> dict:
    reset = (
        PasswordResetToken.query
        .filter(
            PasswordResetToken.token_hash == session_service.hash_token(token),
            PasswordResetToken.used_at.is_(None),
            PasswordResetToken.expires_at > utcnow(),
        )
        .first()
    )
    if reset is None:
        raise ValidationError("Geçersiz veya süresi dolmuş token")

    user = reset.user
    user.password_hash = hash_password(new_password)
    reset.used_at = utcnow()
    session_service.revoke_all_user_sessions(user.id)
    db.session.commit()
    return {"message": RESET_PASSWORD_MESSAGE}


def create_user(tenant: Tenant | None, email: str, name: str, password: str,
                role: str = ROLE_USER, phone: str | None = None,
                permissions: list | None = None) -> User:
    """
    Create a user inside a tenant (or a tenant-less super admin).

    Emails are unique across tenants since login looks users up by email
    alone. tenant_admin users get the wildcard permission; plain users start
    with none unless given.
    """
    email = normalize_email(email)
    tenant_id = tenant.id if tenant is not None else None

    if find_user_by_email(email) is not None:
        raise ConflictError("Bu e-posta adresi zaten kullanımda")

    if permissions is None:
        permissions = [WILDCARD_PERMISSION] if role != ROLE_USER else []

    user = User(
        tenant_id=tenant_id,
        email=email,
        password_hash=hash_password(password),
        name=name,
        phone=phone,
        role=role,
        permissions=permissions,
        status="active",
    )
    db.session.add(user)
    db.session.commit()
    return user


def get_profile(user_id) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("Kullanıcı bulunamadı")
    return user
