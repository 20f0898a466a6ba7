# Overview: Pytest coverage for customer payments (tahsilat) and sales returns (iade).

import uuid

from stokpro.extensions import db
from stokpro.models import Account, Customer, Product


def _balance(customer_id):
    return str(db.session.get(Customer, uuid.UUID(customer_id)).balance)


class TestPayments:

    def test_payment_credits_customer(self, client, headers, create_product, create_customer, create_sale):
        product = create_product(vat_rate=0)
        customer = create_customer()
        create_sale([{"product_id": product["id"], "quantity": 1, "unit_price": 300}],
                    payment_method="veresiye", customer_id=customer["id"])

        response = client.post('/api/payments', headers=headers, json={
            "customer_id": customer["id"], "amount": 100, "method": "nakit",
        })
        assert response.status_code == 201
        assert response.get_json()["payment"]["amount"] == "100.00"
        assert _balance(customer["id"]) == "-200.00"

        transactions = client.get(f'/api/customers/{customer["id"]}/transactions', headers=headers).get_json()
        assert sorted(t["type"] for t in transactions["items"]) == ["alacak", "borc"]

    def test_payment_into_account(self, client, headers, create_customer, create_account):
        customer = create_customer()
        account = create_account(opening_balance=0)

        response = client.post('/api/payments', headers=headers, json={
            "customer_id": customer["id"], "amount": 75.5, "method": "havale", "account_id": account["id"],
        })
        assert response.status_code == 201
        assert str(db.session.get(Account, uuid.UUID(account["id"])).current_balance) == "75.50"

        movements = client.get(f'/api/accounts/{account["id"]}/movements', headers=headers).get_json()["items"]
        assert movements[0]["movement_type"] == "gelir"
        assert movements[0]["reference_type"] == "payment"

    def test_bad_method_rejected(self, client, headers, create_customer):
        customer = create_customer()
        response = client.post('/api/payments', headers=headers, json={
            "customer_id": customer["id"], "amount": 10, "method": "cheque",
        })
        assert response.status_code == 400
        assert _balance(customer["id"]) == "0.00"

    def test_sale_of_other_customer(self, client, headers, create_product, create_customer, create_sale):
        product = create_product()
        owner = create_customer(name="Sahibi")
        other = create_customer(name="Diger")
        sale = create_sale([{"product_id": product["id"], "quantity": 1, "unit_price": 10}],
                           payment_method="veresiye", customer_id=owner["id"])

        response = client.post('/api/payments', headers=headers, json={
            "customer_id": other["id"], "sale_id": sale["id"], "amount": 10, "method": "nakit",
        })
        assert response.status_code == 400

    def test_list_by_customer(self, client, headers, create_customer):
        first = create_customer(name="Bir")
        second = create_customer(name="Iki")
        for customer in (first, second):
            client.post('/api/payments', headers=headers, json={
                "customer_id": customer["id"], "amount": 10, "method": "nakit",
            })
        response = client.get(f'/api/payments?customer_id={first["id"]}', headers=headers)
        assert response.get_json()["total"] == 1


class TestReturns:

    def _sale(self, create_product, create_customer, create_sale, quantity=3):
        product = create_product(stock_quantity=10, vat_rate=20)
        customer = create_customer()
        sale = create_sale([{"product_id": product["id"], "quantity": quantity, "unit_price": 100}],
                           payment_method="veresiye", customer_id=customer["id"])
        return product, customer, sale

    def test_return_restocks_and_credits(self, client, headers, create_product, create_customer, create_sale):
        product, customer, sale = self._sale(create_product, create_customer, create_sale)
        assert _balance(customer["id"]) == "-360.00"

        response = client.post('/api/returns', headers=headers, json={
            "sale_id": sale["id"],
            "items": [{"product_id": product["id"], "quantity": 1, "unit_price": 100}],
        })
        assert response.status_code == 201
        body = response.get_json()["return"]
        assert body["return_number"].startswith("RET")
        assert body["total_amount"] == "120.00"
        assert body["vat_total"] == "20.00"
        assert body["customer_id"] == customer["id"]

        assert db.session.get(Product, uuid.UUID(product["id"])).stock_quantity == 8
        assert _balance(customer["id"]) == "-240.00"

    def test_cannot_return_more_than_sold(self, client, headers, create_product, create_customer, create_sale):
        product, customer, sale = self._sale(create_product, create_customer, create_sale, quantity=2)

        response = client.post('/api/returns', headers=headers, json={
            "sale_id": sale["id"],
            "items": [{"product_id": product["id"], "quantity": 1, "unit_price": 100}],
        })
        assert response.status_code == 201

        response = client.post('/api/returns', headers=headers, json={
            "sale_id": sale["id"],
            "items": [{"product_id": product["id"], "quantity": 2, "unit_price": 100}],
        })
        assert response.status_code == 400
        assert response.get_json()["error"].endswith("Kalan iade edilebilir miktar: 1")

    def test_product_not_in_sale(self, client, headers, create_product, create_customer, create_sale):
        _, _, sale = self._sale(create_product, create_customer, create_sale)
        stranger = create_product(name="Yabanci")

        response = client.post('/api/returns', headers=headers, json={
            "sale_id": sale["id"],
            "items": [{"product_id": stranger["id"], "quantity": 1, "unit_price": 100}],
        })
        assert response.status_code == 400

    def test_sale_line_of_other_product_refused(self, client, headers, create_product, create_customer, create_sale):
        cheap = create_product(name="Ucuz", stock_quantity=5, vat_rate=0)
        dear = create_product(name="Pahali", stock_quantity=5, vat_rate=0)
        customer = create_customer()
        sale = create_sale([{"product_id": cheap["id"], "quantity": 1, "unit_price": 1}],
                           payment_method="veresiye", customer_id=customer["id"])

        response = client.post('/api/returns', headers=headers, json={
            "sale_id": sale["id"],
            "items": [{"product_id": dear["id"], "sale_item_id": sale["items"][0]["id"],
                       "quantity": 1, "unit_price": 500}],
        })
        assert response.status_code == 400
        assert db.session.get(Product, uuid.UUID(dear["id"])).stock_quantity == 5
        assert _balance(customer["id"]) == "-1.00"

    def test_quantity_spread_over_lines_of_same_product(self, client, headers, create_product, create_customer,
                                                         create_sale):
        product = create_product(stock_quantity=10, vat_rate=0)
        customer = create_customer()
        sale = create_sale([
            {"product_id": product["id"], "quantity": 1, "unit_price": 100},
            {"product_id": product["id"], "quantity": 1, "unit_price": 100},
        ], payment_method="veresiye", customer_id=customer["id"])

        response = client.post('/api/returns', headers=headers, json={
            "sale_id": sale["id"],
            "items": [{"product_id": product["id"], "quantity": 2, "unit_price": 100}],
        })
        assert response.status_code == 201
        body = response.get_json()["return"]
        assert body["total_amount"] == "200.00"
        assert sorted(i["sale_item_id"] for i in body["items"]) == sorted(i["id"] for i in sale["items"])
        assert [i["quantity"] for i in body["items"]] == [1, 1]
        assert db.session.get(Product, uuid.UUID(product["id"])).stock_quantity == 10

        response = client.post('/api/returns', headers=headers, json={
            "sale_id": sale["id"],
            "items": [{"product_id": product["id"], "quantity": 1, "unit_price": 100}],
        })
        assert response.status_code == 400
        assert response.get_json()["error"].endswith("Kalan iade edilebilir miktar: 0")

    def test_cancelled_sale_not_returnable(self, client, headers, create_product, create_customer, create_sale):
        product, _, sale = self._sale(create_product, create_customer, create_sale)
        client.patch(f'/api/sales/{sale["id"]}/cancel', headers=headers)

        response = client.post('/api/returns', headers=headers, json={
            "sale_id": sale["id"],
            "items": [{"product_id": product["id"], "quantity": 1, "unit_price": 100}],
        })
        assert response.status_code == 400

    def test_free_return_without_sale(self, client, headers, create_product):
        product = create_product(stock_quantity=0, vat_rate=10)
        response = client.post('/api/returns', headers=headers, json={
            "items": [{"product_id": product["id"], "quantity": 2, "unit_price": 50}],
        })
        assert response.status_code == 201
        assert response.get_json()["return"]["total_amount"] == "110.00"
        assert db.session.get(Product, uuid.UUID(product["id"])).stock_quantity == 2
