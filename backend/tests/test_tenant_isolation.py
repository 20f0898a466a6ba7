# Overview: Pytest coverage for tenant isolation behavior.

"""
Multi-Tenant Isolation Tests

SECURITY TESTS: Prove that cross-tenant access is denied for core resources.

Two tenants are registered side by side; each test checks that:
1. Tenant A cannot read, change or delete Tenant B's rows
2. Foreign ids inside a payload are treated as unknown (404, not 403)
3. Lists only ever contain the caller's own rows

Lookups answer 404 for foreign rows so their existence is not revealed.
"""

import uuid

from stokpro.extensions import db
from stokpro.models import Customer, Product
from stokpro.services.scope import get_scoped, scoped
from stokpro.errors import NotFoundError

import pytest


class TestScopeHelpers:
    """Test the scoped query helpers every service builds on."""

    def test_scoped_only_returns_own_rows(self, tenant_a, tenant_b, create_product):
        create_product(name="A Urun")
        create_product(request_headers=tenant_b["headers"], name="B Urun")

        rows = scoped(Product, uuid.UUID(tenant_a["tenant_id"])).all()
        assert [p.name for p in rows] == ["A Urun"]

    def test_get_scoped_foreign_row_is_not_found(self, tenant_a, tenant_b, create_product):
        foreign = create_product(request_headers=tenant_b["headers"])
        with pytest.raises(NotFoundError):
            get_scoped(Product, uuid.UUID(tenant_a["tenant_id"]), uuid.UUID(foreign["id"]), "Urun bulunamadi")


class TestProductIsolation:

    def test_cannot_read_foreign_product(self, client, headers, tenant_b, create_product):
        foreign = create_product(request_headers=tenant_b["headers"])
        response = client.get(f'/api/products/{foreign["id"]}', headers=headers)
        assert response.status_code == 404

    def test_cannot_update_foreign_product(self, client, headers, tenant_b, create_product):
        foreign = create_product(request_headers=tenant_b["headers"])
        response = client.put(f'/api/products/{foreign["id"]}', headers=headers, json={"name": "Ele gecirildi"})
        assert response.status_code == 404
        assert db.session.get(Product, uuid.UUID(foreign["id"])).name == "Test Urun"

    def test_cannot_delete_foreign_product(self, client, headers, tenant_b, create_product):
        foreign = create_product(request_headers=tenant_b["headers"])
        response = client.delete(f'/api/products/{foreign["id"]}', headers=headers)
        assert response.status_code == 404
        assert db.session.get(Product, uuid.UUID(foreign["id"])).is_active is True

    def test_lists_and_categories_are_scoped(self, client, headers, tenant_b, create_product):
        create_product(name="Bizim", category="Kendi")
        create_product(request_headers=tenant_b["headers"], name="Onlarin", category="Yabanci", stock_quantity=0)

        body = client.get('/api/products', headers=headers).get_json()
        assert [p["name"] for p in body["items"]] == ["Bizim"]
        assert client.get('/api/products/categories', headers=headers).get_json()["categories"] == ["Kendi"]
        assert client.get('/api/products/low-stock', headers=headers).get_json()["items"] == []


class TestCustomerIsolation:

    def test_cannot_read_or_delete_foreign_customer(self, client, headers, tenant_b, create_customer):
        foreign = create_customer(request_headers=tenant_b["headers"])

        assert client.get(f'/api/customers/{foreign["id"]}', headers=headers).status_code == 404
        assert client.get(f'/api/customers/{foreign["id"]}/transactions', headers=headers).status_code == 404
        assert client.delete(f'/api/customers/{foreign["id"]}', headers=headers).status_code == 404
        assert db.session.get(Customer, uuid.UUID(foreign["id"])).is_active is True

    def test_cannot_pay_into_foreign_customer(self, client, headers, tenant_b, create_customer):
        foreign = create_customer(request_headers=tenant_b["headers"])
        response = client.post('/api/payments', headers=headers, json={
            "customer_id": foreign["id"], "amount": 10, "method": "nakit",
        })
        assert response.status_code == 404
        assert str(db.session.get(Customer, uuid.UUID(foreign["id"])).balance) == "0.00"


class TestSaleIsolation:

    def test_cannot_sell_foreign_product(self, client, headers, tenant_b, create_product):
        foreign = create_product(request_headers=tenant_b["headers"])
        response = client.post('/api/sales', headers=headers, json={
            "payment_method": "nakit",
            "items": [{"product_id": foreign["id"], "quantity": 1, "unit_price": 1}],
        })
        assert response.status_code == 404
        assert db.session.get(Product, uuid.UUID(foreign["id"])).stock_quantity == 10

    def test_cannot_read_or_cancel_foreign_sale(self, client, headers, tenant_b, create_product, create_sale):
        product = create_product(request_headers=tenant_b["headers"])
        foreign = create_sale([{"product_id": product["id"], "quantity": 1, "unit_price": 5}],
                              request_headers=tenant_b["headers"])

        assert client.get(f'/api/sales/{foreign["id"]}', headers=headers).status_code == 404
        assert client.patch(f'/api/sales/{foreign["id"]}/cancel', headers=headers).status_code == 404
        assert client.get('/api/sales', headers=headers).get_json()["total"] == 0

    def test_cannot_return_against_foreign_sale(self, client, headers, tenant_b, create_product, create_sale):
        product = create_product(request_headers=tenant_b["headers"])
        foreign = create_sale([{"product_id": product["id"], "quantity": 1, "unit_price": 5}],
                              request_headers=tenant_b["headers"])
        response = client.post('/api/returns', headers=headers, json={
            "sale_id": foreign["id"],
            "items": [{"product_id": product["id"], "quantity": 1, "unit_price": 5}],
        })
        assert response.status_code == 404


class TestFinanceIsolation:

    def test_cannot_move_foreign_account(self, client, headers, tenant_b, create_account):
        foreign = create_account(request_headers=tenant_b["headers"])
        response = client.post(f'/api/accounts/{foreign["id"]}/movements', headers=headers,
                               json={"movement_type": "gider", "amount": 10})
        assert response.status_code == 404

    def test_cannot_transfer_to_foreign_account(self, client, headers, tenant_b, create_account):
        own = create_account(name="Bizim Kasa")
        foreign = create_account(request_headers=tenant_b["headers"], name="Onlarin Kasa")
        response = client.post('/api/accounts/transfers', headers=headers, json={
            "from_account_id": own["id"], "to_account_id": foreign["id"], "amount": 10,
        })
        assert response.status_code == 404

    def test_summary_is_scoped(self, client, headers, tenant_b, create_account):
        create_account(request_headers=tenant_b["headers"], opening_balance=5000)
        summary = client.get('/api/accounts/summary', headers=headers).get_json()["summary"]
        assert summary["total_balance"] == "0.00"
