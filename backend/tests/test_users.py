# Overview: Pytest coverage for tenant-side user management and password change.

import uuid

from stokpro.extensions import db
from stokpro.models import Plan, Tenant, TenantActivityLog, User
from stokpro.services import auth_service

from conftest import PASSWORD, auth_headers


def _create(client, headers, **overrides):
    payload = {"email": "kasiyer@acme.test", "name": "Kasiyer", "password": PASSWORD}
    payload.update(overrides)
    return client.post('/api/users', headers=headers, json=payload)


def _login(email, password=PASSWORD):
    return auth_service.login(email, password)["tokens"]["access_token"]


class TestCreate:

    def test_create_defaults_to_wildcard(self, client, headers, tenant_a):
        response = _create(client, headers)
        assert response.status_code == 201
        user = response.get_json()["user"]
        assert user["tenant_id"] == tenant_a["tenant_id"]
        assert user["role"] == "user"
        assert user["permissions"] == ["*"]

        assert TenantActivityLog.query.filter_by(action="user.created").count() == 1
        assert client.get('/api/auth/me', headers=auth_headers(_login("kasiyer@acme.test"))).status_code == 200

    def test_explicit_permissions(self, client, headers):
        response = _create(client, headers, permissions=["sales.view", "sales.create"])
        assert response.get_json()["user"]["permissions"] == ["sales.view", "sales.create"]

    def test_unknown_permission_rejected(self, client, headers):
        response = _create(client, headers, permissions=["sales.view", "everything"])
        assert response.status_code == 400
        assert [e["field"] for e in response.get_json()["errors"]] == ["permissions"]

    def test_super_admin_role_rejected(self, client, headers):
        response = _create(client, headers, role="super_admin")
        assert response.status_code == 400

    def test_email_of_other_tenant_conflicts(self, client, headers, tenant_b):
        response = _create(client, headers, email="Admin@Beta.test")
        assert response.status_code == 409

    def test_plan_user_limit(self, client, headers, tenant_a):
        plan = Plan(name="Basic", code="basic", price=199, limits={"maxUsers": 1}, features={})
        db.session.add(plan)
        db.session.flush()
        db.session.get(Tenant, uuid.UUID(tenant_a["tenant_id"])).plan_id = plan.id
        db.session.commit()

        response = _create(client, headers)
        assert response.status_code == 403
        assert "limit" in response.get_json()["error"]
        assert User.query.filter_by(email="kasiyer@acme.test").first() is None


class TestListAndStats:

    def test_list_filters(self, client, headers):
        _create(client, headers)
        _create(client, headers, email="muhasebe@acme.test", name="Muhasebe", role="tenant_admin")

        body = client.get('/api/users?role=user', headers=headers).get_json()
        assert [u["email"] for u in body["items"]] == ["kasiyer@acme.test"]

        body = client.get('/api/users?search=muhas', headers=headers).get_json()
        assert body["total"] == 1

        body = client.get('/api/users?sort_by=email&sort_order=asc', headers=headers).get_json()
        assert [u["email"] for u in body["items"]] == [
            "admin@acme.test", "kasiyer@acme.test", "muhasebe@acme.test",
        ]

    def test_stats_by_role(self, client, headers):
        _create(client, headers)
        items = client.get('/api/users/stats/by-role', headers=headers).get_json()["items"]
        assert items == [{"role": "tenant_admin", "count": 1}, {"role": "user", "count": 1}]

    def test_other_tenant_user_hidden(self, client, headers, tenant_b):
        response = client.get(f'/api/users/{tenant_b["user_id"]}', headers=headers)
        assert response.status_code == 404

    def test_view_permission_required(self, client, headers):
        _create(client, headers, permissions=["sales.view"])
        token = _login("kasiyer@acme.test")
        response = client.get('/api/users', headers=auth_headers(token))
        assert response.status_code == 403
        assert response.get_json()["required_permission"] == "users.view"


class TestUpdateAndDelete:

    def test_deactivate_closes_sessions(self, client, headers):
        user = _create(client, headers).get_json()["user"]
        token = _login("kasiyer@acme.test")

        response = client.patch(f'/api/users/{user["id"]}', headers=headers, json={"status": "inactive"})
        assert response.status_code == 200
        assert client.get('/api/auth/me', headers=auth_headers(token)).status_code == 401

        response = client.post('/api/auth/login', json={"email": "kasiyer@acme.test", "password": PASSWORD})
        assert response.status_code == 401

    def test_email_change_checks_every_tenant(self, client, headers, tenant_b):
        user = _create(client, headers).get_json()["user"]
        response = client.put(f'/api/users/{user["id"]}', headers=headers, json={"email": "admin@beta.test"})
        assert response.status_code == 409

        response = client.put(f'/api/users/{user["id"]}', headers=headers, json={"email": "Kasa@Acme.test"})
        assert response.get_json()["user"]["email"] == "kasa@acme.test"

    def test_cannot_deactivate_self(self, client, headers, tenant_a):
        response = client.patch(f'/api/users/{tenant_a["user_id"]}', headers=headers, json={"status": "inactive"})
        assert response.status_code == 400

    def test_tenant_admin_not_deletable(self, client, headers, tenant_a):
        response = client.delete(f'/api/users/{tenant_a["user_id"]}', headers=headers)
        assert response.status_code == 400
        assert response.get_json()["error"] == "Tenant admin kullanıcılar silinemez"

    def test_delete_user(self, client, headers):
        user = _create(client, headers).get_json()["user"]
        _login("kasiyer@acme.test")

        assert client.delete(f'/api/users/{user["id"]}', headers=headers).status_code == 200
        assert db.session.get(User, uuid.UUID(user["id"])) is None
        assert client.get(f'/api/users/{user["id"]}', headers=headers).status_code == 404

    def test_cannot_delete_self(self, client, headers):
        user = _create(client, headers, permissions=["users.manage"]).get_json()["user"]
        token = _login("kasiyer@acme.test")
        response = client.delete(f'/api/users/{user["id"]}', headers=auth_headers(token))
        assert response.status_code == 400


class TestChangePassword:

    def test_wrong_current_password(self, client, headers):
        response = client.post('/api/users/change-password', headers=headers, json={
            "current_password": "Wrong1234", "new_password": "NewPass123",
        })
        assert response.status_code == 400
        assert response.get_json()["error"] == "Mevcut şifre hatalı"

    def test_change_keeps_calling_session(self, client, headers, tenant_a):
        other = _login(tenant_a["email"])

        response = client.post('/api/users/change-password', headers=headers, json={
            "current_password": PASSWORD, "new_password": "NewPass123",
        })
        assert response.status_code == 200
        assert response.get_json()["revoked"] == 1

        assert client.get('/api/auth/me', headers=headers).status_code == 200
        assert client.get('/api/auth/me', headers=auth_headers(other)).status_code == 401
        assert client.post('/api/auth/login', json={
            "email": tenant_a["email"], "password": "NewPass123",
        }).status_code == 200
