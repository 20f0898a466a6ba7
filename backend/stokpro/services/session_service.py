# Overview: Service-layer operations for login sessions; opaque bearer tokens stored as SHA-256 hashes.

"""
Session Token Management

Each login creates one user_sessions row holding the SHA-256 hashes of a
random access token and a random refresh token. The plaintext tokens are
returned to the client once and never stored.

- Tokens: secrets.token_hex(32) (64 hex chars)
- Lifetime: 7 days (SESSION_LIFETIME)
- Refresh rotates: the old session is invalidated and a new one issued
- Logout invalidates one session, logout-all every session of the user
"""

import hashlib
import secrets
from datetime import timedelta

from ..extensions import db
from ..models import UserSession, User
from ..time_utils import utcnow


SESSION_LIFETIME = timedelta(days=7)


def generate_token() -> str:
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _token_payload(access_token: str, refresh_token: str) -> dict:
    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "Bearer",
        "expires_in": int(SESSION_LIFETIME.total_seconds()),
    }


def create_session(user: User, ip_address: str | None = None, user_agent: str | None = None) -> dict:
    """
    Open a session for `user` and return the plaintext tokens.

    The caller commits.
    """
    access_token = generate_token()
    refresh_token = generate_token()

    db.session.add(UserSession(
        user_id=user.id,
        token_hash=hash_token(access_token),
        refresh_token_hash=hash_token(refresh_token),
        ip_address=ip_address,
        user_agent=user_agent,
        expires_at=utcnow() + SESSION_LIFETIME,
        is_valid=True,
    ))
    return _token_payload(access_token, refresh_token)


def _live(query):
    return query.filter(UserSession.is_valid.is_(True), UserSession.expires_at > utcnow())


def validate_session(token: str) -> UserSession | None:
    """
    Resolve a bearer token to its live session.

    Returns None for unknown, revoked or expired tokens and for sessions
    whose user is no longer active.
    """
    if not token:
        return None
    user_session = _live(UserSession.query.filter_by(token_hash=hash_token(token))).first()
    if user_session is None or user_session.user is None or not user_session.user.is_active:
        return None
    return user_session


def find_by_refresh_token(refresh_token: str) -> UserSession | None:
    return _live(UserSession.query.filter_by(refresh_token_hash=hash_token(refresh_token))).first()


def revoke_session(token: str) -> bool:
    user_session = UserSession.query.filter_by(token_hash=hash_token(token), is_valid=True).first()
    if user_session is None:
        return False
    user_session.is_valid = False
    return True


def revoke_all_user_sessions(user_id, keep_session_id=None) -> int:
    """Invalidate every live session of a user but keep_session_id; returns how many were open."""
    query = UserSession.query.filter(UserSession.user_id == user_id, UserSession.is_valid.is_(True))
    if keep_session_id is not None:
        query = query.filter(UserSession.id != keep_session_id)
    return (
        query
        .update({UserSession.is_valid: False}, synchronize_session=False)
    )


def cleanup_expired_sessions() -> int:
    count = (
        UserSession.query
        .filter(db.or_(UserSession.expires_at <= utcnow(), UserSession.is_valid.is_(False)))
        .delete(synchronize_session=False)
    )
    db.session.commit()
    return count
