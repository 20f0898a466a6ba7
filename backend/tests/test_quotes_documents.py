# Overview: Pytest coverage for quotes (teklif) and the e-document lifecycle.

from datetime import date
import uuid

from stokpro.extensions import db
from stokpro.models import Product, Quote, Sale
from stokpro.services import quote_service


class TestQuotes:

    def _create(self, client, headers, product, **overrides):
        payload = {
            "valid_until": "2030-01-31",
            "items": [{
                "product_id": product["id"], "product_name": product["name"],
                "quantity": 2, "unit_price": 100, "discount_rate": 10, "vat_rate": 20,
            }],
        }
        payload.update(overrides)
        response = client.post('/api/quotes', headers=headers, json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["quote"]

    def test_totals(self, client, headers, create_product):
        quote = self._create(client, headers, create_product())
        # 100 -10% = 90 x 2 = 180, VAT 36
        assert quote["status"] == "draft"
        assert quote["quote_number"].startswith("TKL")
        assert quote["subtotal"] == "180.00"
        assert quote["vat_total"] == "36.00"
        assert quote["grand_total"] == "216.00"
        assert quote["items"][0]["line_total"] == "216.00"

    def test_totals_without_vat_and_rate_discount(self, client, headers, create_product):
        quote = self._create(client, headers, create_product(), include_vat=False, discount_rate=50)
        assert quote["vat_total"] == "0.00"
        assert quote["discount_amount"] == "90.00"
        assert quote["grand_total"] == "90.00"

    def test_status_flow(self, client, headers, create_product):
        quote = self._create(client, headers, create_product())

        response = client.post(f'/api/quotes/{quote["id"]}/send', headers=headers)
        assert response.get_json()["quote"]["status"] == "sent"
        assert client.post(f'/api/quotes/{quote["id"]}/send', headers=headers).status_code == 400

        response = client.post(f'/api/quotes/{quote["id"]}/accept', headers=headers)
        assert response.get_json()["quote"]["status"] == "accepted"
        assert client.post(f'/api/quotes/{quote["id"]}/reject', headers=headers).status_code == 400

    def test_update_only_while_open(self, client, headers, create_product):
        quote = self._create(client, headers, create_product())

        response = client.put(f'/api/quotes/{quote["id"]}', headers=headers, json={"notes": "Guncel"})
        assert response.status_code == 200
        assert response.get_json()["quote"]["notes"] == "Guncel"
        assert response.get_json()["quote"]["grand_total"] == "216.00"

        client.post(f'/api/quotes/{quote["id"]}/reject', headers=headers)
        response = client.put(f'/api/quotes/{quote["id"]}', headers=headers, json={"notes": "Tekrar"})
        assert response.status_code == 400

    def test_convert_to_sale(self, client, headers, create_product):
        product = create_product(stock_quantity=10)
        quote = self._create(client, headers, product)

        response = client.post(f'/api/quotes/{quote["id"]}/convert', headers=headers,
                               json={"payment_method": "kredi_karti"})
        assert response.status_code == 201
        body = response.get_json()
        assert body["quote"]["status"] == "converted"
        assert body["quote"]["converted_sale_id"] == body["sale"]["id"]
        assert body["sale"]["grand_total"] == "216.00"
        assert body["sale"]["payment_method"] == "kredi_karti"
        assert db.session.get(Product, uuid.UUID(product["id"])).stock_quantity == 8

        assert client.post(f'/api/quotes/{quote["id"]}/convert', headers=headers,
                           json={"payment_method": "kredi_karti"}).status_code == 400
        assert client.delete(f'/api/quotes/{quote["id"]}', headers=headers).status_code == 400

    def test_rejected_quote_not_convertible(self, client, headers, create_product):
        quote = self._create(client, headers, create_product())
        client.post(f'/api/quotes/{quote["id"]}/reject', headers=headers)

        response = client.post(f'/api/quotes/{quote["id"]}/convert', headers=headers,
                               json={"payment_method": "nakit"})
        assert response.status_code == 400
        assert Sale.query.count() == 0

    def test_convert_checks_stock(self, client, headers, create_product):
        quote = self._create(client, headers, create_product(stock_quantity=1))
        response = client.post(f'/api/quotes/{quote["id"]}/convert', headers=headers,
                               json={"payment_method": "nakit"})
        assert response.status_code == 400
        assert db.session.get(Quote, uuid.UUID(quote["id"])).status == "draft"

    def test_delete_draft(self, client, headers, create_product):
        quote = self._create(client, headers, create_product())
        assert client.delete(f'/api/quotes/{quote["id"]}', headers=headers).status_code == 200
        assert client.get(f'/api/quotes/{quote["id"]}', headers=headers).status_code == 404

    def test_mark_expired(self, client, headers, create_product):
        product = create_product()
        open_quote = self._create(client, headers, product, valid_until="2026-01-10")
        accepted = self._create(client, headers, product, valid_until="2026-01-10")
        client.post(f'/api/quotes/{accepted["id"]}/accept', headers=headers)
        self._create(client, headers, product, valid_until="2026-12-31")

        assert quote_service.mark_expired(today=date(2026, 2, 1)) == 1
        assert db.session.get(Quote, uuid.UUID(open_quote["id"])).status == "expired"
        assert db.session.get(Quote, uuid.UUID(accepted["id"])).status == "accepted"


class TestEDocuments:

    def _document(self, client, headers, sale, document_type="e_fatura"):
        return client.post('/api/e-documents', headers=headers, json={
            "document_type": document_type, "reference_type": "sale", "reference_id": sale["id"],
        })

    def _sale(self, create_product, create_sale):
        product = create_product()
        return create_sale([{"product_id": product["id"], "quantity": 1, "unit_price": 100}])

    def test_create_from_sale(self, client, headers, create_product, create_sale):
        sale = self._sale(create_product, create_sale)

        response = self._document(client, headers, sale)
        assert response.status_code == 201
        document = response.get_json()["document"]
        assert document["status"] == "draft"
        assert document["document_number"].startswith("EFT")
        assert len(document["document_number"]) == len("EFT202601000001")
        assert document["total_amount"] == "120.00"
        assert document["vat_amount"] == "20.00"

        assert db.session.get(Sale, uuid.UUID(sale["id"])).invoice_issued is True

        detail = client.get(f'/api/e-documents/{document["id"]}', headers=headers).get_json()["document"]
        assert document["document_number"] in detail["xml_content"]
        assert [log["action"] for log in detail["logs"]] == ["created"]

    def test_one_open_document_per_reference(self, client, headers, create_product, create_sale):
        sale = self._sale(create_product, create_sale)
        first = self._document(client, headers, sale).get_json()["document"]
        assert self._document(client, headers, sale).status_code == 400

        client.post(f'/api/e-documents/{first["id"]}/cancel', headers=headers)
        assert self._document(client, headers, sale).status_code == 201

    def test_waybill_does_not_flag_invoice(self, client, headers, create_product, create_sale):
        sale = self._sale(create_product, create_sale)
        response = self._document(client, headers, sale, document_type="e_irsaliye")
        assert response.get_json()["document"]["document_number"].startswith("EIR")
        assert db.session.get(Sale, uuid.UUID(sale["id"])).invoice_issued is False

    def test_lifecycle(self, client, headers, create_product, create_sale):
        sale = self._sale(create_product, create_sale)
        document = self._document(client, headers, sale).get_json()["document"]

        response = client.post(f'/api/e-documents/{document["id"]}/check-status', headers=headers)
        assert response.status_code == 400

        response = client.post(f'/api/e-documents/{document["id"]}/send', headers=headers)
        sent = response.get_json()["document"]
        assert sent["status"] == "pending"
        assert sent["gib_uuid"]
        assert client.post(f'/api/e-documents/{document["id"]}/send', headers=headers).status_code == 400

        response = client.post(f'/api/e-documents/{document["id"]}/check-status', headers=headers)
        assert response.get_json()["document"]["status"] == "approved"

        response = client.post(f'/api/e-documents/{document["id"]}/cancel', headers=headers)
        assert response.status_code == 400

    def test_unknown_reference(self, client, headers):
        response = client.post('/api/e-documents', headers=headers, json={
            "document_type": "e_arsiv", "reference_type": "sale", "reference_id": str(uuid.uuid4()),
        })
        assert response.status_code == 404

    def test_summary(self, client, headers, create_product, create_sale):
        sale = self._sale(create_product, create_sale)
        self._document(client, headers, sale)
        self._document(client, headers, sale, document_type="e_irsaliye")

        summary = client.get('/api/e-documents/summary', headers=headers).get_json()["summary"]
        assert summary["total"] == 2
        assert summary["by_type"] == {"e_fatura": 1, "e_irsaliye": 1}
        assert summary["by_status"] == {"draft": 2}
