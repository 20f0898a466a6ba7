# Overview: Service-layer operations for invitations; platform-admin issuing and invitee registration.

"""
Invitations.

The platform admin invites an email either into an existing tenant
(tenant_id) or as the tenant_admin of a tenant to be created on
acceptance (tenant_name). Only the SHA-256 hash of the token is stored;
the plaintext token and its registration link are returned once, when
the invitation is issued.

Status is derived, never stored:
- accepted: accepted_at is set
- expired: not accepted and expires_at has passed
- pending: everything else
"""

from __future__ import annotations

from datetime import timedelta

from flask import current_app

from ..config import get_config
from ..extensions import db
from ..models import Invitation, User
from ..constants import LOGIN_TENANT_STATUSES, ROLE_TENANT_ADMIN, ROLE_USER, WILDCARD_PERMISSION
from ..errors import BusinessRuleError, ConflictError, NotFoundError
from ..time_utils import utcnow
from . import auth_service, session_service, settings_service
from .pagination import like_pattern, paginate
from .tenant_service import get_tenant, record_activity


INVITATION_LIFETIME = timedelta(days=7)
NOT_FOUND = "Davet bulunamadi"

INVITATION_SORTABLE = {
    "created_at": Invitation.created_at,
    "email": Invitation.email,
    "expires_at": Invitation.expires_at,
}


def invitation_link(token: str) -> str:
    return f"{get_config().frontend_url}/register?token={token}"


def invitation_status(invitation: Invitation, now=None) -> str:
    if invitation.accepted_at is not None:
        return "accepted"
    if invitation.expires_at <= (now or utcnow()):
        return "expired"
    return "pending"


def _serialize(invitation: Invitation, now=None) -> dict:
    data = invitation.to_dict()
    data["status"] = invitation_status(invitation, now)
    return data


def get_invitation(invitation_id) -> Invitation:
    invitation = db.session.get(Invitation, invitation_id)
    if invitation is None:
        raise NotFoundError(NOT_FOUND)
    return invitation


def list_invitations(params: dict) -> dict:
    now = utcnow()
    query = Invitation.query
    status = params.get("status")
    if status == "accepted":
        query = query.filter(Invitation.accepted_at.isnot(None))
    elif status == "expired":
        query = query.filter(Invitation.accepted_at.is_(None), Invitation.expires_at <= now)
    elif status == "pending":
        query = query.filter(Invitation.accepted_at.is_(None), Invitation.expires_at > now)
    if params.get("search"):
        query = query.filter(Invitation.email.ilike(like_pattern(params["search"]), escape="\\"))
    return paginate(query, params, INVITATION_SORTABLE, serialize=lambda i: _serialize(i, now))


def _pending_for(email: str) -> Invitation | None:
    return (
        Invitation.query
        .filter(
            Invitation.email == email,
            Invitation.accepted_at.is_(None),
            Invitation.expires_at > utcnow(),
        )
        .first()
    )


def _issue(email: str, role: str, tenant_id, tenant_name: str | None, invited_by=None) -> dict:
    token = session_service.generate_token()
    invitation = Invitation(
        email=email,
        token=session_service.hash_token(token),
        role=role,
        tenant_id=tenant_id,
        tenant_name=tenant_name,
        invited_by=invited_by,
        expires_at=utcnow() + INVITATION_LIFETIME,
    )
    db.session.add(invitation)
    db.session.commit()
    current_app.logger.info("Invitation issued for %s (role=%s)", email, role)
    return {
        "invitation": _serialize(invitation),
        "token": token,
        "invitation_link": invitation_link(token),
    }


def create_invitation(data: dict, invited_by=None) -> dict:
    """
    Issue an invitation.

    Returns {"invitation", "token", "invitation_link"}; the token is not
    retrievable afterwards.
    """
    email = auth_service.normalize_email(data["email"])
    if auth_service.find_user_by_email(email) is not None:
        raise BusinessRuleError("Bu e-posta adresi zaten kayitli")
    if _pending_for(email) is not None:
        raise BusinessRuleError("Bu e-posta adresine zaten bir davet gonderilmis")

    role = data.get("role") or ROLE_USER
    tenant_id = data.get("tenant_id")
    tenant_name = data.get("tenant_name")

    if tenant_id is not None:
        tenant = get_tenant(tenant_id)
        tenant_name = tenant.name
    elif role == ROLE_TENANT_ADMIN:
        if not tenant_name:
            raise BusinessRuleError("Yeni kiraci icin tenant_id veya tenant_name gerekli")
    else:
        raise BusinessRuleError("Kullanici daveti icin tenant_id gerekli")

    return _issue(email, role, tenant_id, tenant_name, invited_by)


def resend_invitation(invitation_id) -> dict:
    """Replace the invitation with a fresh token and a new seven-day window."""
    invitation = get_invitation(invitation_id)
    if invitation.accepted_at is not None:
        raise BusinessRuleError("Kabul edilmis davet yeniden gonderilemez")

    fields = (invitation.email, invitation.role, invitation.tenant_id, invitation.tenant_name,
              invitation.invited_by)
    db.session.delete(invitation)
    db.session.flush()
    return _issue(*fields)


def cancel_invitation(invitation_id) -> None:
    invitation = get_invitation(invitation_id)
    db.session.delete(invitation)
    db.session.commit()


def find_by_token(token: str) -> Invitation:
    """Raises NotFoundError for unknown tokens, BusinessRuleError for used or expired ones."""
    invitation = Invitation.query.filter_by(token=session_service.hash_token(token)).first()
    if invitation is None:
        raise NotFoundError("Gecersiz davet")
    status = invitation_status(invitation)
    if status == "accepted":
        raise BusinessRuleError("Bu davet zaten kullanilmis")
    if status == "expired":
        raise BusinessRuleError("Davetin suresi dolmus")
    return invitation


def describe(token: str) -> dict:
    """What the registration page shows before the invitee sets a password."""
    invitation = find_by_token(token)
    return {
        "email": invitation.email,
        "role": invitation.role,
        "tenant_name": invitation.tenant_name,
        "expires_at": invitation.to_dict()["expires_at"],
    }


def register_with_invitation(data: dict, ip_address: str | None = None, user_agent: str | None = None) -> dict:
    """
    Accept an invitation and sign the invitee in.

    With a tenant_id the invitee joins that tenant; otherwise a trial
    tenant named tenant_name is created with the invitee as tenant_admin.
    Returns the same payload as login.
    """
    invitation = find_by_token(data["token"])
    if auth_service.find_user_by_email(invitation.email) is not None:
        raise ConflictError("Bu e-posta adresi zaten kullanımda")

    invitation.accepted_at = utcnow()

    if invitation.tenant_id is None:
        return auth_service.register({
            "company_name": invitation.tenant_name,
            "name": data["name"],
            "email": invitation.email,
            "password": data["password"],
            "phone": data.get("phone"),
        }, ip_address=ip_address, user_agent=user_agent)

    tenant = get_tenant(invitation.tenant_id)
    if tenant.status not in LOGIN_TENANT_STATUSES:
        raise BusinessRuleError("Şirket hesabı askıya alınmış veya iptal edilmiş")
    settings_service.ensure_within_limit(tenant.id, "users")

    user = User(
        tenant_id=tenant.id,
        email=invitation.email,
        password_hash=auth_service.hash_password(data["password"]),
        name=data["name"].strip(),
        phone=data.get("phone"),
        role=invitation.role,
        permissions=[WILDCARD_PERMISSION],
        status="active",
        email_verified_at=invitation.accepted_at,
        last_login_at=invitation.accepted_at,
    )
    db.session.add(user)
    db.session.flush()

    record_activity(tenant.id, "invitation.accepted", entity_type="user", entity_id=user.id, user_id=user.id,
                    new_values={"email": user.email, "role": user.role}, ip_address=ip_address)
    tokens = session_service.create_session(user, ip_address=ip_address, user_agent=user_agent)
    db.session.commit()
    return auth_service.auth_payload(user, tokens)
