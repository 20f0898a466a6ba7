# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

- register: self-service sign-up (new trial tenant + tenant_admin)
- login / refresh / logout / logout-all: session lifecycle
- forgot-password / reset-password: one-hour reset tokens
- me: profile of the current user
- invitation / register-with-invitation: accept a platform-admin invitation

Every body is validated by its DTO before the service runs; service
errors surface through the app-wide error handlers.
"""

from flask import Blueprint, request, jsonify, g

from ..dtos import (
    ForgotPasswordDto,
    LoginDto,
    RefreshTokenDto,
    RegisterDto,
    RegisterWithInvitationDto,
    ResetPasswordDto,
)
from ..services import auth_service, invitation_service
from ..decorators import require_auth


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _client() -> dict:
    return {
        "ip_address": request.remote_addr,
        "user_agent": request.headers.get("User-Agent"),
    }


@auth_bp.post("/register")
def register_route():
    """
    Returns:
        201: {"user": {...}, "tokens": {...}}
        400: validation failed
        409: email or company name already in use
    """
    data = RegisterDto.validate(request.get_json(silent=True))
    result = auth_service.register(data, **_client())
    return jsonify(result), 201


@auth_bp.post("/login")
def login_route():
    """
    Returns:
        200: {"user": {...}, "tokens": {...}}
        401: bad credentials, inactive user or suspended tenant
    """
    data = LoginDto.validate(request.get_json(silent=True))
    result = auth_service.login(data["email"], data["password"], **_client())
    return jsonify(result), 200


@auth_bp.post("/refresh")
def refresh_route():
    """Rotate the session behind a refresh token."""
    data = RefreshTokenDto.validate(request.get_json(silent=True))
    return jsonify(auth_service.refresh(data["refresh_token"])), 200


@auth_bp.post("/logout")
@require_auth
def logout_route():
    auth_service.logout(g.access_token)
    return jsonify({"message": "Cikis yapildi"}), 200


@auth_bp.post("/logout-all")
@require_auth
def logout_all_route():
    revoked = auth_service.logout_all(g.current_user.id)
    return jsonify({"message": "Tum oturumlar kapatildi", "revoked": revoked}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    user = auth_service.get_profile(g.current_user.id)
    data = user.to_dict()
    if user.tenant is not None:
        data["tenant"] = user.tenant.to_dict(include_plan=True)
    return jsonify({"user": data}), 200


@auth_bp.post("/forgot-password")
def forgot_password_route():
    """Same answer whether or not the email is registered."""
    data = ForgotPasswordDto.validate(request.get_json(silent=True))
    return jsonify(auth_service.forgot_password(data["email"])), 200


@auth_bp.post("/reset-password")
def reset_password_route():
    data = ResetPasswordDto.validate(request.get_json(silent=True))
    return jsonify(auth_service.reset_password(data["token"], data["password"])), 200


@auth_bp.get("/invitation/<token>")
def invitation_route(token):
    """
    Returns:
        200: {"invitation": {"email", "role", "tenant_name", "expires_at"}}
        400: invitation already used or expired
        404: unknown token
    """
    return jsonify({"invitation": invitation_service.describe(token)}), 200


@auth_bp.post("/register-with-invitation")
def register_with_invitation_route():
    data = RegisterWithInvitationDto.validate(request.get_json(silent=True))
    result = invitation_service.register_with_invitation(data, **_client())
    return jsonify(result), 201
