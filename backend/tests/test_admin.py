# Overview: Pytest coverage for the API-key gated platform admin endpoints and the health check.

import dataclasses
import uuid

from stokpro.extensions import db
from stokpro.models import Tenant

from conftest import PASSWORD, admin_headers


PLAN_PAYLOAD = {"name": "Kurumsal", "code": "kurumsal", "price": 1299, "sort_order": 4}


class TestApiKey:

    def test_correct_key(self, client):
        response = client.get('/api/admin/plans', headers=admin_headers())
        assert response.status_code == 200

    def test_missing_key(self, client):
        response = client.get('/api/admin/plans')
        assert response.status_code == 401
        assert response.get_json() == {"error": "Invalid or missing API key"}

    def test_wrong_key(self, client):
        response = client.get('/api/admin/plans', headers={"X-API-Key": "nope"})
        assert response.status_code == 401

    def test_unconfigured_key_rejects_everything(self, app, client, monkeypatch):
        config = app.extensions["stokpro"]
        monkeypatch.setitem(app.extensions, "stokpro", dataclasses.replace(config, admin_api_key=None))

        response = client.get('/api/admin/plans', headers=admin_headers())
        assert response.status_code == 401
        assert response.get_json() == {"error": "ADMIN_API_KEY is not configured"}

    def test_session_token_is_not_enough(self, client, tenant_a):
        response = client.get('/api/admin/tenants', headers=tenant_a["headers"])
        assert response.status_code == 401


class TestPlans:

    def test_crud(self, client):
        response = client.post('/api/admin/plans', headers=admin_headers(), json=PLAN_PAYLOAD)
        assert response.status_code == 201
        plan = response.get_json()["plan"]
        assert plan["price"] == "1299.00"
        assert plan["billing_period"] == "monthly"

        assert client.post('/api/admin/plans', headers=admin_headers(), json=PLAN_PAYLOAD).status_code == 409

        response = client.put(f'/api/admin/plans/{plan["id"]}', headers=admin_headers(), json={"price": 1499})
        assert response.get_json()["plan"]["price"] == "1499.00"
        assert response.get_json()["plan"]["code"] == "kurumsal"

        items = client.get('/api/admin/plans', headers=admin_headers()).get_json()["items"]
        assert [(p["code"], p["tenant_count"]) for p in items] == [("kurumsal", 0)]

        assert client.delete(f'/api/admin/plans/{plan["id"]}', headers=admin_headers()).status_code == 200
        assert client.get(f'/api/admin/plans/{plan["id"]}', headers=admin_headers()).status_code == 404

    def test_plan_in_use_cannot_be_deleted(self, client):
        plan = client.post('/api/admin/plans', headers=admin_headers(), json=PLAN_PAYLOAD).get_json()["plan"]
        client.post('/api/admin/tenants', headers=admin_headers(), json={"name": "Planli Firma", "plan_id": plan["id"]})

        response = client.delete(f'/api/admin/plans/{plan["id"]}', headers=admin_headers())
        assert response.status_code == 400


class TestTenants:

    def _create(self, client, **payload):
        response = client.post('/api/admin/tenants', headers=admin_headers(), json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["tenant"]

    def test_create_slugifies_name(self, client):
        tenant = self._create(client, name="Şahin İnşaat A.Ş.")
        assert tenant["slug"] == "sahin-insaat-a-s"
        assert tenant["status"] == "active"

        response = client.post('/api/admin/tenants', headers=admin_headers(), json={"name": "Sahin Insaat A.S."})
        assert response.status_code == 409

    def test_unknown_plan(self, client):
        response = client.post('/api/admin/tenants', headers=admin_headers(),
                               json={"name": "Plansiz", "plan_id": str(uuid.uuid4())})
        assert response.status_code == 400

    def test_suspend_and_activate(self, client):
        tenant = self._create(client, name="Gecici Firma")

        response = client.post(f'/api/admin/tenants/{tenant["id"]}/suspend', headers=admin_headers())
        assert response.get_json()["tenant"]["status"] == "suspended"
        assert client.post(f'/api/admin/tenants/{tenant["id"]}/suspend', headers=admin_headers()).status_code == 400

        response = client.post(f'/api/admin/tenants/{tenant["id"]}/activate', headers=admin_headers())
        assert response.get_json()["tenant"]["status"] == "active"

        activity = client.get(f'/api/admin/tenants/{tenant["id"]}/activity', headers=admin_headers()).get_json()
        assert sorted(a["action"] for a in activity["items"]) == [
            "tenant.activated", "tenant.created", "tenant.suspended",
        ]

    def test_update_records_changes(self, client):
        tenant = self._create(client, name="Eski Ad")
        response = client.put(f'/api/admin/tenants/{tenant["id"]}', headers=admin_headers(), json={"name": "Yeni Ad"})
        assert response.get_json()["tenant"]["name"] == "Yeni Ad"

        activity = client.get(f'/api/admin/tenants/{tenant["id"]}/activity?action=tenant.updated',
                              headers=admin_headers()).get_json()
        assert activity["total"] == 1
        assert activity["items"][0]["new_values"] == {"name": "Yeni Ad"}

    def test_update_refuses_null_name(self, client):
        tenant = self._create(client, name="Bos Olmaz")
        response = client.put(f'/api/admin/tenants/{tenant["id"]}', headers=admin_headers(), json={"name": None})
        assert response.status_code == 400
        assert response.get_json()["errors"][0]["field"] == "name"

    def test_stats(self, client, tenant_a, create_product, create_customer):
        create_product()
        create_customer()

        stats = client.get(f'/api/admin/tenants/{tenant_a["tenant_id"]}/stats', headers=admin_headers()).get_json()
        assert stats["stats"]["users"] == 1
        assert stats["stats"]["products"] == 1
        assert stats["stats"]["customers"] == 1
        assert stats["stats"]["sales"] == 0
        assert stats["stats"]["invitations"] == 0

    def test_list_with_user_counts(self, client, tenant_a, tenant_b):
        body = client.get('/api/admin/tenants?sort_by=name&sort_order=asc', headers=admin_headers()).get_json()
        assert body["total"] == 2
        assert [(t["name"], t["user_count"]) for t in body["items"]] == [
            ("Acme Ticaret", 1), ("Beta Pazarlama", 1),
        ]

    def test_tenant_users(self, client, tenant_a):
        response = client.post(f'/api/admin/tenants/{tenant_a["tenant_id"]}/users', headers=admin_headers(), json={
            "email": "depo@acme.test", "name": "Depo Sorumlusu", "password": PASSWORD,
        })
        assert response.status_code == 201
        assert response.get_json()["user"]["role"] == "user"

        response = client.post(f'/api/admin/tenants/{tenant_a["tenant_id"]}/users', headers=admin_headers(), json={
            "email": "depo@acme.test", "name": "Tekrar", "password": PASSWORD,
        })
        assert response.status_code == 409

        users = client.get(f'/api/admin/tenants/{tenant_a["tenant_id"]}/users', headers=admin_headers()).get_json()
        assert len(users["items"]) == 2

        response = client.post('/api/auth/login', json={"email": "depo@acme.test", "password": PASSWORD})
        assert response.status_code == 200
        assert response.get_json()["user"]["tenant"]["id"] == tenant_a["tenant_id"]

    def test_tenant_user_email_taken_in_other_tenant(self, client, tenant_a, tenant_b):
        response = client.post(f'/api/admin/tenants/{tenant_b["tenant_id"]}/users', headers=admin_headers(), json={
            "email": "ADMIN@acme.test", "name": "Kopya", "password": "Another123",
        })
        assert response.status_code == 409

        response = client.post('/api/auth/login', json={"email": "admin@acme.test", "password": PASSWORD})
        assert response.status_code == 200
        assert response.get_json()["user"]["tenant"]["id"] == tenant_a["tenant_id"]

    def test_delete_empty_tenant(self, client):
        tenant = self._create(client, name="Silinecek")
        assert client.delete(f'/api/admin/tenants/{tenant["id"]}', headers=admin_headers()).status_code == 200
        assert db.session.get(Tenant, uuid.UUID(tenant["id"])) is None

    def test_unknown_tenant(self, client):
        response = client.get(f'/api/admin/tenants/{uuid.uuid4()}', headers=admin_headers())
        assert response.status_code == 404


class TestHealth:

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        body = response.get_json()
        assert body["status"] == "ok"
        assert body["database"] == "up"
        assert body["timestamp"].endswith("Z")
