# Overview: Pytest coverage for warehouses; per-warehouse stock, adjustments and the transfer lifecycle.

import uuid

from stokpro.extensions import db
from stokpro.models import Product, StockMovement


def _stocks(client, headers, warehouse_id):
    items = client.get(f'/api/warehouses/{warehouse_id}/stocks', headers=headers).get_json()["items"]
    return {item["product_id"]: item["quantity"] for item in items}


def _adjust(client, headers, warehouse_id, product_id, quantity, adjustment_type="set"):
    return client.post(f'/api/warehouses/{warehouse_id}/adjust-stock', headers=headers, json={
        "product_id": product_id, "quantity": quantity, "adjustment_type": adjustment_type,
    })


class TestWarehouses:

    def test_code_uppercased_and_unique(self, client, headers, create_warehouse):
        warehouse = create_warehouse(code="ist")
        assert warehouse["code"] == "IST"

        response = client.post('/api/warehouses', headers=headers, json={"name": "Ikinci", "code": "IST"})
        assert response.status_code == 409

    def test_single_default(self, client, headers, create_warehouse):
        first = create_warehouse(code="A", is_default=True)
        second = create_warehouse(code="B", is_default=True)

        first_now = client.get(f'/api/warehouses/{first["id"]}', headers=headers).get_json()["warehouse"]
        assert first_now["is_default"] is False
        assert second["is_default"] is True

    def test_default_cannot_be_deleted(self, client, headers, create_warehouse):
        warehouse = create_warehouse(is_default=True)
        response = client.delete(f'/api/warehouses/{warehouse["id"]}', headers=headers)
        assert response.status_code == 400

    def test_detail_stats(self, client, headers, create_warehouse, create_product):
        warehouse = create_warehouse()
        product = create_product(min_stock_level=5)
        _adjust(client, headers, warehouse["id"], product["id"], 3)

        detail = client.get(f'/api/warehouses/{warehouse["id"]}', headers=headers).get_json()["warehouse"]
        assert detail["stats"] == {
            "total_products": 1,
            "total_quantity": 3,
            "low_stock_count": 1,
            "pending_transfers": 0,
        }


class TestAdjustStock:

    def test_add_subtract_set(self, client, headers, create_warehouse, create_product):
        warehouse = create_warehouse()
        product = create_product(stock_quantity=10)

        assert _adjust(client, headers, warehouse["id"], product["id"], 5, "add").get_json()["new_quantity"] == 5
        assert _adjust(client, headers, warehouse["id"], product["id"], 2, "subtract").get_json()["new_quantity"] == 3
        assert _adjust(client, headers, warehouse["id"], product["id"], 9, "set").get_json()["new_quantity"] == 9

        # company-wide stock is untouched by warehouse corrections
        assert db.session.get(Product, uuid.UUID(product["id"])).stock_quantity == 10

        movements = StockMovement.query.order_by(StockMovement.movement_date.asc()).all()
        assert [m.quantity for m in movements] == [5, -2, 6]
        assert [m.stock_after for m in movements] == [5, 3, 9]

    def test_cannot_go_negative(self, client, headers, create_warehouse, create_product):
        warehouse = create_warehouse()
        product = create_product()
        response = _adjust(client, headers, warehouse["id"], product["id"], 1, "subtract")
        assert response.status_code == 400
        assert StockMovement.query.count() == 0

    def test_movement_list(self, client, headers, create_warehouse, create_product):
        warehouse = create_warehouse()
        product = create_product()
        _adjust(client, headers, warehouse["id"], product["id"], 4)

        response = client.get(f'/api/warehouses/movements?warehouse_id={warehouse["id"]}', headers=headers)
        items = response.get_json()["items"]
        assert len(items) == 1
        assert items[0]["movement_type"] == "adjustment"


class TestTransfers:

    def _setup(self, client, headers, create_warehouse, create_product, quantity=10):
        source = create_warehouse(name="Kaynak", code="SRC")
        target = create_warehouse(name="Hedef", code="DST")
        product = create_product()
        _adjust(client, headers, source["id"], product["id"], quantity)
        return source, target, product

    def _transfer(self, client, headers, source, target, product, quantity):
        return client.post('/api/warehouses/transfers', headers=headers, json={
            "from_warehouse_id": source["id"],
            "to_warehouse_id": target["id"],
            "items": [{"product_id": product["id"], "quantity": quantity}],
        })

    def test_lifecycle_complete(self, client, headers, create_warehouse, create_product):
        source, target, product = self._setup(client, headers, create_warehouse, create_product)

        response = self._transfer(client, headers, source, target, product, 4)
        assert response.status_code == 201
        transfer = response.get_json()["transfer"]
        assert transfer["status"] == "pending"
        assert transfer["transfer_number"].startswith("TRN")
        assert _stocks(client, headers, source["id"])[product["id"]] == 6
        assert product["id"] not in _stocks(client, headers, target["id"])

        response = client.post(f'/api/warehouses/transfers/{transfer["id"]}/complete', headers=headers)
        assert response.get_json()["transfer"]["status"] == "completed"
        assert _stocks(client, headers, target["id"])[product["id"]] == 4

        response = client.post(f'/api/warehouses/transfers/{transfer["id"]}/cancel', headers=headers)
        assert response.status_code == 400

    def test_lifecycle_cancel(self, client, headers, create_warehouse, create_product):
        source, target, product = self._setup(client, headers, create_warehouse, create_product)
        transfer = self._transfer(client, headers, source, target, product, 4).get_json()["transfer"]

        response = client.post(f'/api/warehouses/transfers/{transfer["id"]}/cancel', headers=headers)
        assert response.get_json()["transfer"]["status"] == "cancelled"
        assert _stocks(client, headers, source["id"])[product["id"]] == 10

        response = client.post(f'/api/warehouses/transfers/{transfer["id"]}/complete', headers=headers)
        assert response.status_code == 400

    def test_insufficient_source_stock(self, client, headers, create_warehouse, create_product):
        source, target, product = self._setup(client, headers, create_warehouse, create_product, quantity=2)
        response = self._transfer(client, headers, source, target, product, 3)
        assert response.status_code == 400
        assert _stocks(client, headers, source["id"])[product["id"]] == 2

    def test_same_warehouse(self, client, headers, create_warehouse, create_product):
        source, _, product = self._setup(client, headers, create_warehouse, create_product)
        response = self._transfer(client, headers, source, source, product, 1)
        assert response.status_code == 400

    def test_pending_counted_in_detail(self, client, headers, create_warehouse, create_product):
        source, target, product = self._setup(client, headers, create_warehouse, create_product)
        self._transfer(client, headers, source, target, product, 1)

        detail = client.get(f'/api/warehouses/{target["id"]}', headers=headers).get_json()["warehouse"]
        assert detail["stats"]["pending_transfers"] == 1
