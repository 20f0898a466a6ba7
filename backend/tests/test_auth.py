# Overview: Pytest coverage for registration, login, session tokens and password reset.

from datetime import timedelta
import uuid

import pytest

from stokpro.errors import ConflictError
from stokpro.extensions import db
from stokpro.models import PasswordResetToken, Tenant, TenantActivityLog, User, UserSession
from stokpro.services import auth_service, session_service
from stokpro.time_utils import utcnow

from conftest import PASSWORD, auth_headers


REGISTER_PAYLOAD = {
    "company_name": "Özgür Çiçek Ltd.",
    "name": "Özgür",
    "email": "Ozgur@Cicek.test",
    "password": PASSWORD,
}


class TestRegister:

    def test_register_creates_trial_tenant_and_admin(self, client):
        response = client.post('/api/auth/register', json=REGISTER_PAYLOAD)
        assert response.status_code == 201
        body = response.get_json()

        assert body["user"]["email"] == "ozgur@cicek.test"
        assert body["user"]["role"] == "tenant_admin"
        assert body["user"]["tenant"]["slug"] == "ozgur-cicek-ltd"
        assert body["user"]["tenant"]["status"] == "trial"
        assert body["tokens"]["token_type"] == "Bearer"
        assert body["tokens"]["expires_in"] == 7 * 24 * 3600

        user = User.query.filter_by(email="ozgur@cicek.test").one()
        assert user.permissions == ["*"]
        assert TenantActivityLog.query.filter_by(tenant_id=user.tenant_id, action="tenant.registered").count() == 1

    def test_duplicate_email_conflicts(self, client, tenant_a):
        payload = dict(REGISTER_PAYLOAD, email=tenant_a["email"])
        response = client.post('/api/auth/register', json=payload)
        assert response.status_code == 409

    def test_duplicate_company_conflicts(self, client):
        assert client.post('/api/auth/register', json=REGISTER_PAYLOAD).status_code == 201
        payload = dict(REGISTER_PAYLOAD, email="other@cicek.test")
        response = client.post('/api/auth/register', json=payload)
        assert response.status_code == 409

    def test_weak_password_rejected(self, client):
        payload = dict(REGISTER_PAYLOAD, password="short")
        response = client.post('/api/auth/register', json=payload)
        assert response.status_code == 400
        body = response.get_json()
        assert body["error"] == "Validation failed"
        assert {e["field"] for e in body["errors"]} == {"password"}


class TestLogin:

    def test_login_returns_tokens(self, client, tenant_a):
        response = client.post('/api/auth/login', json={"email": "ADMIN@acme.test", "password": PASSWORD})
        assert response.status_code == 200
        body = response.get_json()
        assert body["user"]["tenant"]["id"] == tenant_a["tenant_id"]
        assert len(body["tokens"]["access_token"]) == 64

    def test_wrong_password(self, client, tenant_a):
        response = client.post('/api/auth/login', json={"email": tenant_a["email"], "password": "Wrong1234"})
        assert response.status_code == 401

    def test_unknown_email(self, client):
        response = client.post('/api/auth/login', json={"email": "nobody@x.test", "password": PASSWORD})
        assert response.status_code == 401

    def test_suspended_tenant_cannot_login(self, client, tenant_a):
        tenant = db.session.get(Tenant, uuid.UUID(tenant_a["tenant_id"]))
        tenant.status = "suspended"
        db.session.commit()

        response = client.post('/api/auth/login', json={"email": tenant_a["email"], "password": PASSWORD})
        assert response.status_code == 401

    def test_suspended_tenant_session_rejected(self, client, tenant_a):
        tenant = db.session.get(Tenant, uuid.UUID(tenant_a["tenant_id"]))
        tenant.status = "suspended"
        db.session.commit()

        response = client.get('/api/products', headers=tenant_a["headers"])
        assert response.status_code == 401


class TestSessions:

    def test_me(self, client, tenant_a):
        response = client.get('/api/auth/me', headers=tenant_a["headers"])
        assert response.status_code == 200
        assert response.get_json()["user"]["email"] == tenant_a["email"]

    def test_missing_token(self, client):
        response = client.get('/api/auth/me')
        assert response.status_code == 401
        assert response.get_json()["error"] == "Authentication required"

    def test_garbage_token(self, client, tenant_a):
        response = client.get('/api/auth/me', headers=auth_headers("deadbeef"))
        assert response.status_code == 401
        assert response.get_json()["error"] == "Invalid or expired token"

    def test_only_hashes_stored(self, tenant_a):
        token = tenant_a["tokens"]["access_token"]
        session = UserSession.query.filter_by(user_id=uuid.UUID(tenant_a["user_id"])).one()
        assert session.token_hash != token
        assert session.token_hash == session_service.hash_token(token)

    def test_expired_session_rejected(self, client, tenant_a):
        session = UserSession.query.filter_by(user_id=uuid.UUID(tenant_a["user_id"])).one()
        session.expires_at = utcnow() - timedelta(minutes=1)
        db.session.commit()

        response = client.get('/api/auth/me', headers=tenant_a["headers"])
        assert response.status_code == 401

    def test_logout_invalidates_token(self, client, tenant_a):
        response = client.post('/api/auth/logout', headers=tenant_a["headers"])
        assert response.status_code == 200

        response = client.get('/api/auth/me', headers=tenant_a["headers"])
        assert response.status_code == 401

    def test_refresh_rotates_session(self, client, tenant_a):
        response = client.post('/api/auth/refresh', json={"refresh_token": tenant_a["tokens"]["refresh_token"]})
        assert response.status_code == 200
        new_tokens = response.get_json()

        assert client.get('/api/auth/me', headers=tenant_a["headers"]).status_code == 401
        assert client.get('/api/auth/me', headers=auth_headers(new_tokens["access_token"])).status_code == 200

        # the old refresh token is spent
        response = client.post('/api/auth/refresh', json={"refresh_token": tenant_a["tokens"]["refresh_token"]})
        assert response.status_code == 401

    def test_logout_all(self, client, tenant_a):
        second = auth_service.login(tenant_a["email"], PASSWORD)["tokens"]["access_token"]

        response = client.post('/api/auth/logout-all', headers=tenant_a["headers"])
        assert response.status_code == 200
        assert response.get_json()["revoked"] == 2
        assert client.get('/api/auth/me', headers=auth_headers(second)).status_code == 401

    def test_cleanup_expired_sessions(self, tenant_a):
        session = UserSession.query.filter_by(user_id=uuid.UUID(tenant_a["user_id"])).one()
        session.expires_at = utcnow() - timedelta(days=1)
        db.session.commit()

        assert session_service.cleanup_expired_sessions() == 1
        assert UserSession.query.count() == 0


class TestPasswordReset:

    def test_forgot_password_same_answer(self, client, tenant_a):
        known = client.post('/api/auth/forgot-password', json={"email": tenant_a["email"]})
        unknown = client.post('/api/auth/forgot-password', json={"email": "ghost@x.test"})
        assert known.status_code == unknown.status_code == 200
        assert known.get_json() == unknown.get_json()
        assert PasswordResetToken.query.count() == 1

    def test_reset_password_flow(self, client, tenant_a):
        token = session_service.generate_token()
        db.session.add(PasswordResetToken(
            user_id=uuid.UUID(tenant_a["user_id"]),
            token_hash=session_service.hash_token(token),
            expires_at=utcnow() + timedelta(hours=1),
        ))
        db.session.commit()

        response = client.post('/api/auth/reset-password', json={"token": token, "password": "NewPass123"})
        assert response.status_code == 200

        # every session is revoked and the new password works
        assert client.get('/api/auth/me', headers=tenant_a["headers"]).status_code == 401
        response = client.post('/api/auth/login', json={"email": tenant_a["email"], "password": "NewPass123"})
        assert response.status_code == 200

        # a used token cannot be replayed
        response = client.post('/api/auth/reset-password', json={"token": token, "password": "Other1234"})
        assert response.status_code == 400

    def test_registered_sender_receives_token(self, app, client, tenant_a, monkeypatch):
        sent = []
        monkeypatch.setitem(app.extensions, auth_service.RESET_SENDER_KEY,
                            lambda user, token: sent.append((user.email, token)))

        client.post('/api/auth/forgot-password', json={"email": tenant_a["email"]})
        assert [email for email, _ in sent] == [tenant_a["email"]]

        response = client.post('/api/auth/reset-password', json={"token": sent[0][1], "password": "NewPass123"})
        assert response.status_code == 200

    def test_unknown_reset_token(self, client):
        response = client.post('/api/auth/reset-password', json={"token": "nope", "password": "NewPass123"})
        assert response.status_code == 400


class TestPermissions:

    def test_plain_user_without_permission_forbidden(self, client, tenant_a):
        tenant = db.session.get(Tenant, uuid.UUID(tenant_a["tenant_id"]))
        auth_service.create_user(tenant, "clerk@acme.test", "Clerk", PASSWORD, role="user",
                                 permissions=["products.view"])
        token = auth_service.login("clerk@acme.test", PASSWORD)["tokens"]["access_token"]

        assert client.get('/api/products', headers=auth_headers(token)).status_code == 200

        response = client.post('/api/products', headers=auth_headers(token),
                               json={"name": "Kalem", "purchase_price": 1, "sale_price": 2})
        assert response.status_code == 403
        assert response.get_json() == {"error": "Permission denied", "required_permission": "products.create"}

    def test_duplicate_user_in_tenant(self, tenant_a):
        tenant = db.session.get(Tenant, uuid.UUID(tenant_a["tenant_id"]))
        with pytest.raises(ConflictError):
            auth_service.create_user(tenant, tenant_a["email"], "Again", PASSWORD)
