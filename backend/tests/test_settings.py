# Overview: Pytest coverage for tenant settings, plan usage and plan limit enforcement.

import uuid

import pytest

from stokpro.extensions import db
from stokpro.models import Plan, Tenant, TenantActivityLog

from conftest import PASSWORD, auth_headers


@pytest.fixture
def assign_plan(tenant_a):
    """Attach a fresh plan with the given limits and features to tenant A."""
    def _assign(limits=None, features=None):
        plan = Plan(name="Basic", code="basic", price=199, limits=limits or {}, features=features or {})
        db.session.add(plan)
        db.session.flush()
        db.session.get(Tenant, uuid.UUID(tenant_a["tenant_id"])).plan_id = plan.id
        db.session.commit()
        return plan
    return _assign


class TestSettings:

    def test_get_without_plan(self, client, headers, tenant_a):
        response = client.get('/api/settings', headers=headers)
        assert response.status_code == 200
        settings = response.get_json()["settings"]
        assert settings["id"] == tenant_a["tenant_id"]
        assert settings["name"] == "Acme Ticaret"
        assert settings["plan_name"] is None
        assert settings["plan_features"] == {}

    def test_get_with_plan(self, client, headers, assign_plan):
        assign_plan(limits={"maxUsers": 3}, features={"einvoice": True})
        settings = client.get('/api/settings', headers=headers).get_json()["settings"]
        assert settings["plan_code"] == "basic"
        assert settings["plan_limits"] == {"maxUsers": 3}
        assert settings["plan_features"] == {"einvoice": True}

    def test_update_logs_changes(self, client, headers):
        response = client.patch('/api/settings', headers=headers, json={
            "name": "Acme Ticaret AS",
            "billing_email": "fatura@acme.test",
            "settings": {"currency": "TRY"},
        })
        assert response.status_code == 200
        settings = response.get_json()["settings"]
        assert settings["name"] == "Acme Ticaret AS"
        assert settings["settings"] == {"currency": "TRY"}

        log = TenantActivityLog.query.filter_by(action="tenant.settings_updated").one()
        assert log.old_values["name"] == "Acme Ticaret"
        assert log.new_values["billing_email"] == "fatura@acme.test"

    def test_update_refuses_null_name(self, client, headers):
        response = client.put('/api/settings', headers=headers, json={"name": None})
        assert response.status_code == 400

    def test_plan_fields_not_editable(self, client, headers, tenant_a):
        client.put('/api/settings', headers=headers, json={"status": "active", "plan_id": str(uuid.uuid4())})
        tenant = db.session.get(Tenant, uuid.UUID(tenant_a["tenant_id"]))
        assert tenant.status == "trial"
        assert tenant.plan_id is None

    def test_plain_user_needs_settings_view(self, client, headers):
        client.post('/api/users', headers=headers, json={
            "email": "kasiyer@acme.test", "name": "Kasiyer", "password": PASSWORD, "permissions": [],
        })
        login = client.post('/api/auth/login', json={"email": "kasiyer@acme.test", "password": PASSWORD})
        token = login.get_json()["tokens"]["access_token"]
        response = client.get('/api/settings', headers=auth_headers(token))
        assert response.status_code == 403


class TestUsage:

    def test_no_plan_is_unlimited(self, client, headers, create_product):
        create_product()
        usage = client.get('/api/settings/usage', headers=headers).get_json()["usage"]
        assert usage["products"] == {"current": 1, "limit": -1}
        assert usage["users"] == {"current": 1, "limit": -1}

    def test_zero_limit_means_unlimited(self, client, headers, assign_plan):
        assign_plan(limits={"maxProducts": 0, "maxCustomers": 25})
        usage = client.get('/api/settings/usage', headers=headers).get_json()["usage"]
        assert usage["products"]["limit"] == -1
        assert usage["customers"] == {"current": 0, "limit": 25}

    def test_check_feature(self, client, headers, assign_plan):
        response = client.get('/api/settings/check-feature?feature=einvoice', headers=headers)
        assert response.get_json() == {"feature": "einvoice", "allowed": False}

        assign_plan(features={"einvoice": True, "reports": "yes"})
        assert client.get('/api/settings/check-feature?feature=einvoice', headers=headers).get_json()["allowed"]
        assert not client.get('/api/settings/check-feature?feature=reports', headers=headers).get_json()["allowed"]

    def test_check_feature_requires_name(self, client, headers):
        assert client.get('/api/settings/check-feature', headers=headers).status_code == 400

    def test_check_limit_unknown_resource(self, client, headers):
        response = client.get('/api/settings/check-limit?resource=invoices', headers=headers)
        assert response.get_json() == {"allowed": True, "current": 0, "limit": -1}


class TestLimits:

    def test_product_limit(self, client, headers, assign_plan, create_product):
        assign_plan(limits={"maxProducts": 1})
        create_product()

        response = client.post('/api/products', headers=headers, json={
            "name": "Ikinci Urun", "purchase_price": 10, "sale_price": 20,
        })
        assert response.status_code == 403
        assert "urun limitine" in response.get_json()["error"]

        check = client.get('/api/settings/check-limit?resource=products', headers=headers).get_json()
        assert check == {"allowed": False, "current": 1, "limit": 1}

    def test_deleted_rows_still_count(self, client, headers, assign_plan, create_customer):
        assign_plan(limits={"maxCustomers": 1})
        customer = create_customer()
        assert client.delete(f'/api/customers/{customer["id"]}', headers=headers).status_code == 200

        response = client.post('/api/customers', headers=headers, json={"name": "Yeni Musteri"})
        assert response.status_code == 403

    def test_warehouse_limit(self, client, headers, assign_plan, create_warehouse):
        assign_plan(limits={"maxWarehouses": 1})
        create_warehouse()
        response = client.post('/api/warehouses', headers=headers, json={"name": "Sube Depo", "code": "sube"})
        assert response.status_code == 403

    def test_limit_is_per_tenant(self, client, assign_plan, create_product, tenant_b):
        assign_plan(limits={"maxProducts": 1})
        create_product()
        create_product(request_headers=tenant_b["headers"])
        create_product(request_headers=tenant_b["headers"], name="Beta Urun 2")
