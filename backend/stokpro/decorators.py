# Overview: Request decorators for API routes: session auth, permission checks and the admin API-key guard.

import hmac
from functools import wraps

from flask import request, jsonify, g, current_app

from .config import get_config
from .constants import LOGIN_TENANT_STATUSES
from .services import session_service


API_KEY_HEADER = "X-API-Key"


def _is_authenticated() -> bool:
    return hasattr(g, "current_user") and hasattr(g, "tenant_id")


def require_auth(f):
    """
    Require a valid session and establish tenant context.

    MULTI-TENANT: Sets the following Flask g attributes:
    - g.current_user: the authenticated User
    - g.tenant_id: the user's tenant (REQUIRED)
    - g.user_session: the UserSession row
    - g.access_token: the plaintext bearer token of this request

    Returns 401 if:
    - No Authorization header
    - Invalid, revoked or expired token
    - User is not active
    - User has no tenant (the platform super admin uses the admin API)
    - Tenant is suspended or cancelled
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify({"error": "Authentication required"}), 401

        token = auth_header.split(" ", 1)[1].strip()

        user_session = session_service.validate_session(token)
        if user_session is None:
            return jsonify({"error": "Invalid or expired token"}), 401

        user = user_session.user
        if user.tenant_id is None:
            return jsonify({"error": "Invalid session: missing tenant context"}), 401

        tenant = user.tenant
        if tenant is None or tenant.status not in LOGIN_TENANT_STATUSES:
            return jsonify({"error": "Tenant account is suspended or cancelled"}), 401

        g.current_user = user
        g.tenant_id = user.tenant_id
        g.user_session = user_session
        g.access_token = token

        return f(*args, **kwargs)

    return decorated_function


def require_permission(permission_code: str):
    """
    Require a permission code (see stokpro.permissions).

    Must be stacked under @require_auth.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _is_authenticated():
                return jsonify({"error": "Authentication required"}), 401

            user = g.current_user
            if not user.has_permission(permission_code):
                current_app.logger.warning(
                    "Permission denied: user=%s tenant=%s permission=%s path=%s",
                    user.id, g.tenant_id, permission_code, request.path,
                )
                return jsonify({
                    "error": "Permission denied",
                    "required_permission": permission_code,
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def require_api_key(f):
    """
    Gate platform-admin routes behind the static ADMIN_API_KEY.

    States:
    - key not configured: every request is rejected
    - key configured: the X-API-Key header must match it exactly
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        expected = get_config().admin_api_key

        if not expected:
            current_app.logger.error("Admin request rejected: ADMIN_API_KEY is not configured")
            return jsonify({"error": "ADMIN_API_KEY is not configured"}), 401

        provided = request.headers.get(API_KEY_HEADER)
        if not provided or not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
            return jsonify({"error": "Invalid or missing API key"}), 401

        return f(*args, **kwargs)

    return decorated_function
