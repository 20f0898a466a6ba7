# Overview: Pytest coverage for the dashboard widgets and the report endpoints.

from datetime import timedelta
import uuid

import pytest

from stokpro.services import report_service
from stokpro.time_utils import utcnow


@pytest.fixture
def trading_day(client, headers, create_product, create_customer, create_sale):
    """
    One product (cost 50, price 100, VAT 20) and one customer:
    a cash sale of 2, a veresiye sale of 1 due in ten days, a cancelled
    sale of 1, a return of 1 from the cash sale and a 40.00 rent expense.
    """
    today = utcnow().date()
    product = create_product()
    customer = create_customer()
    line = {"product_id": product["id"], "quantity": 1, "unit_price": 100}

    cash = create_sale([dict(line, quantity=2)])
    credit = create_sale([line], payment_method="veresiye", customer_id=customer["id"],
                         due_date=(today + timedelta(days=10)).isoformat())
    cancelled = create_sale([line])
    assert client.patch(f'/api/sales/{cancelled["id"]}/cancel', headers=headers).status_code == 200

    response = client.post('/api/returns', headers=headers, json={"sale_id": cash["id"], "items": [line]})
    assert response.status_code == 201

    response = client.post('/api/expenses', headers=headers, json={
        "category": "kira", "amount": 40, "expense_date": today.isoformat(),
    })
    assert response.status_code == 201

    return {"today": today, "product": product, "customer": customer, "cash": cash, "credit": credit}


class TestDashboard:

    def test_summary(self, client, headers, trading_day):
        response = client.get('/api/dashboard/summary', headers=headers)
        assert response.status_code == 200
        assert response.get_json() == {
            "today_sales": {"count": 2, "total": "360.00"},
            "total_customers": 1,
            "total_products": 1,
            "low_stock_count": 0,
            "total_debt": "120.00",
            "total_credit": "0.00",
            "monthly_expenses": "40.00",
        }

    def test_recent_sales_skip_cancelled(self, client, headers, trading_day):
        items = client.get('/api/dashboard/recent-sales', headers=headers).get_json()["items"]
        assert {s["id"] for s in items} == {trading_day["cash"]["id"], trading_day["credit"]["id"]}

    def test_low_stock_and_debtors(self, client, headers, trading_day, create_product):
        create_product(name="Az Kalan", stock_quantity=2, min_stock_level=5)

        low = client.get('/api/dashboard/low-stock', headers=headers).get_json()["items"]
        assert [p["name"] for p in low] == ["Az Kalan"]

        debtors = client.get('/api/dashboard/top-debtors', headers=headers).get_json()["items"]
        assert [c["id"] for c in debtors] == [trading_day["customer"]["id"]]

    def test_empty_tenant(self, client, headers):
        summary = client.get('/api/dashboard/summary', headers=headers).get_json()
        assert summary["today_sales"] == {"count": 0, "total": "0.00"}
        assert summary["total_debt"] == "0.00"


class TestSalesReports:

    def test_sales_summary(self, client, headers, trading_day):
        body = client.get('/api/reports/sales-summary', headers=headers).get_json()
        assert body["summary"] == {
            "sale_count": 2,
            "subtotal": "300.00",
            "discount_total": "0.00",
            "vat_total": "60.00",
            "grand_total": "360.00",
        }
        assert body["by_payment_method"] == [
            {"payment_method": "nakit", "count": 1, "total": "240.00"},
            {"payment_method": "veresiye", "count": 1, "total": "120.00"},
        ]
        assert body["daily_sales"] == [
            {"date": trading_day["today"].isoformat(), "count": 2, "total": "360.00"},
        ]

    def test_range_excludes_other_days(self, client, headers, trading_day):
        tomorrow = (trading_day["today"] + timedelta(days=1)).isoformat()
        body = client.get(f'/api/reports/sales-summary?start_date={tomorrow}', headers=headers).get_json()
        assert body["summary"]["sale_count"] == 0
        assert body["daily_sales"] == []

    def test_bad_range(self, client, headers):
        response = client.get('/api/reports/sales-summary?start_date=yesterday', headers=headers)
        assert response.status_code == 400

    def test_vat(self, client, headers, trading_day):
        body = client.get('/api/reports/vat', headers=headers).get_json()
        assert len(body["sales_vat"]) == 1
        assert body["sales_vat"][0]["vat_amount"] == "60.00"
        assert body["sales_vat"][0]["total"] == "360.00"
        assert body["returns_vat"] == {"vat_amount": "20.00", "total": "120.00"}
        assert body["net_vat"] == "40.00"

    def test_profit_loss(self, client, headers, trading_day):
        body = client.get('/api/reports/profit-loss', headers=headers).get_json()
        assert body == {
            "revenue": "360.00",
            "cost_of_goods": "150.00",
            "returns": "120.00",
            "gross_profit": "90.00",
            "expenses": "40.00",
            "net_profit": "50.00",
        }

    def test_top_products(self, client, headers, trading_day):
        items = client.get('/api/reports/top-products?limit=5', headers=headers).get_json()["items"]
        assert items == [{
            "product_id": trading_day["product"]["id"],
            "name": "Test Urun",
            "total_quantity": 3,
            "total_revenue": "360.00",
        }]

    def test_top_products_limit_bounds(self, client, headers):
        assert client.get('/api/reports/top-products?limit=0', headers=headers).status_code == 400
        assert client.get('/api/reports/top-products?limit=101', headers=headers).status_code == 400

    def test_top_customers(self, client, headers, trading_day):
        items = client.get('/api/reports/top-customers', headers=headers).get_json()["items"]
        assert len(items) == 1
        assert items[0]["customer_id"] == trading_day["customer"]["id"]
        assert items[0]["sale_count"] == 1
        assert items[0]["total"] == "120.00"
        assert items[0]["credit_total"] == "120.00"
        assert items[0]["last_sale_date"] == trading_day["today"].isoformat()

    def test_customer_sales_and_purchases(self, client, headers, trading_day):
        sales = client.get('/api/reports/customer-sales', headers=headers).get_json()["items"]
        assert [row["name"] for row in sales] == ["Test Musteri"]

        purchases = client.get('/api/reports/customer-product-purchases', headers=headers).get_json()["items"]
        assert purchases == [{
            "customer_id": trading_day["customer"]["id"],
            "customer_name": "Test Musteri",
            "product_id": trading_day["product"]["id"],
            "product_name": "Test Urun",
            "quantity": 1,
            "total": "120.00",
        }]


class TestReceivables:

    def test_debt_overview(self, client, headers, trading_day):
        body = client.get('/api/reports/debt-overview', headers=headers).get_json()
        assert [c["balance"] for c in body["customers"]] == ["-120.00"]
        assert body["total_debt"] == "120.00"
        assert body["total_credit"] == "0.00"

    def test_upcoming_payments(self, client, headers, trading_day):
        items = client.get('/api/reports/upcoming-payments', headers=headers).get_json()["items"]
        assert [s["id"] for s in items] == [trading_day["credit"]["id"]]
        assert items[0]["days_left"] == 10
        assert items[0]["customer_balance"] == "-120.00"

        items = client.get('/api/reports/upcoming-payments?days=5', headers=headers).get_json()["items"]
        assert items == []
        assert client.get('/api/reports/overdue-payments', headers=headers).get_json()["items"] == []

    def test_overdue_payments(self, tenant_a, trading_day):
        later = trading_day["today"] + timedelta(days=12)
        items = report_service.overdue_payments(uuid.UUID(tenant_a["tenant_id"]), today=later)
        assert [s["id"] for s in items] == [trading_day["credit"]["id"]]
        assert items[0]["days_left"] == -2

    def test_settled_customer_drops_out(self, client, headers, trading_day):
        response = client.post('/api/payments', headers=headers, json={
            "customer_id": trading_day["customer"]["id"], "amount": 120, "method": "nakit",
        })
        assert response.status_code == 201
        assert client.get('/api/reports/upcoming-payments', headers=headers).get_json()["items"] == []


class TestStockReturnsExpenses:

    def test_stock_report(self, client, headers, trading_day):
        body = client.get('/api/reports/stock-report', headers=headers).get_json()
        # 10 - 2 - 1 sold, 1 returned
        assert body["items"][0]["stock_quantity"] == 8
        assert body["items"][0]["is_low"] is False
        assert body["totals"] == {
            "product_count": 1,
            "total_quantity": 8,
            "stock_value": "400.00",
            "sale_value": "800.00",
        }

    def test_returns_report(self, client, headers, trading_day):
        body = client.get('/api/reports/returns-report', headers=headers).get_json()
        assert body["summary"] == {"return_count": 1, "total_amount": "120.00", "vat_total": "20.00"}
        assert body["by_product"] == [{
            "product_id": trading_day["product"]["id"], "name": "Test Urun", "quantity": 1, "total": "120.00",
        }]

    def test_expenses_by_category(self, client, headers, trading_day):
        client.post('/api/expenses', headers=headers, json={
            "category": "fatura", "amount": 15, "expense_date": "2024-01-05",
        })
        body = client.get('/api/reports/expenses-by-category', headers=headers).get_json()
        assert body["items"] == [
            {"category": "kira", "count": 1, "total": "40.00"},
            {"category": "fatura", "count": 1, "total": "15.00"},
        ]
        assert body["total"] == "55.00"

        body = client.get('/api/reports/expenses-by-category?start_date=2024-01-01&end_date=2024-01-31',
                          headers=headers).get_json()
        assert body["total"] == "15.00"


class TestReportAccess:

    def test_other_tenant_sees_nothing(self, client, trading_day, tenant_b):
        body = client.get('/api/reports/sales-summary', headers=tenant_b["headers"]).get_json()
        assert body["summary"]["sale_count"] == 0
        assert client.get('/api/reports/debt-overview', headers=tenant_b["headers"]).get_json()["customers"] == []

    def test_requires_login(self, client):
        assert client.get('/api/reports/vat').status_code == 401
        assert client.get('/api/dashboard/summary').status_code == 401
