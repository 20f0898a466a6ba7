# Overview: Pytest coverage for request DTO validation (defaults, coercion, violation reporting).

from decimal import Decimal
import uuid

import pytest

from stokpro.dtos import (
    AdjustStockDto,
    CreatePaymentDto,
    CreateProductDto,
    CreateSaleDto,
    CreateTransferDto,
    CreateWarehouseDto,
    PaginationDto,
    RegisterDto,
    RenewalQueryDto,
    UpdateAccountDto,
    UpdateProductDto,
    UpdateTenantDto,
)
from stokpro import dtos
from stokpro.errors import ValidationError
from stokpro.validation import Dto


ACCOUNT_A = str(uuid.uuid4())
ACCOUNT_B = str(uuid.uuid4())


class TestTransferAmount:
    """Money transfers must move at least one kurus."""

    def test_zero_amount_rejected(self):
        with pytest.raises(ValidationError) as exc:
            CreateTransferDto.validate({
                "from_account_id": ACCOUNT_A,
                "to_account_id": ACCOUNT_B,
                "amount": 0,
            })
        assert exc.value.fields == ["amount"]

    def test_smallest_amount_accepted(self):
        data = CreateTransferDto.validate({
            "from_account_id": ACCOUNT_A,
            "to_account_id": ACCOUNT_B,
            "amount": 0.01,
        })
        assert data["amount"] == Decimal("0.01")
        assert data["from_account_id"] == uuid.UUID(ACCOUNT_A)


class TestPaymentMethod:

    def test_unknown_method_rejected(self):
        with pytest.raises(ValidationError) as exc:
            CreatePaymentDto.validate({
                "customer_id": str(uuid.uuid4()),
                "amount": 100,
                "method": "cheque",
            })
        assert exc.value.fields == ["method"]
        assert "nakit, kredi_karti, havale" in exc.value.violations[0].message

    @pytest.mark.parametrize("method", ["nakit", "kredi_karti", "havale"])
    def test_known_methods_accepted(self, method):
        data = CreatePaymentDto.validate({
            "customer_id": str(uuid.uuid4()),
            "amount": 100,
            "method": method,
        })
        assert data["method"] == method

    def test_veresiye_is_not_a_payment_method(self):
        with pytest.raises(ValidationError):
            CreatePaymentDto.validate({
                "customer_id": str(uuid.uuid4()),
                "amount": 100,
                "method": "veresiye",
            })


class TestProductDefaults:

    def test_defaults_applied(self):
        data = CreateProductDto.validate({"name": "Kalem", "purchase_price": 5, "sale_price": 10})
        assert data["unit"] == "adet"
        assert data["vat_rate"] == Decimal("20")
        assert data["wholesale_price"] == Decimal("0")
        assert data["stock_quantity"] == 0
        assert data["min_stock_level"] == 5
        assert data["is_active"] is True

    def test_prices_become_decimal(self):
        data = CreateProductDto.validate({"name": "Kalem", "purchase_price": 5.5, "sale_price": 10.25})
        assert data["purchase_price"] == Decimal("5.5")
        assert data["sale_price"] == Decimal("10.25")

    def test_every_violation_reported(self):
        with pytest.raises(ValidationError) as exc:
            CreateProductDto.validate({"name": "K", "sale_price": -1})
        assert set(exc.value.fields) == {"name", "purchase_price", "sale_price"}

    def test_missing_field_message(self):
        with pytest.raises(ValidationError) as exc:
            CreateProductDto.validate({"name": "Kalem", "sale_price": 10})
        assert exc.value.violations[0].message == "purchase_price should not be empty"

    def test_unknown_property_rejected(self):
        with pytest.raises(ValidationError) as exc:
            CreateProductDto.validate({
                "name": "Kalem", "purchase_price": 5, "sale_price": 10, "color": "red",
            })
        assert exc.value.fields == ["color"]
        assert exc.value.violations[0].message == "property color should not exist"

    def test_string_number_rejected(self):
        with pytest.raises(ValidationError) as exc:
            CreateProductDto.validate({"name": "Kalem", "purchase_price": "5", "sale_price": 10})
        assert exc.value.fields == ["purchase_price"]

    def test_update_applies_no_defaults(self):
        data = UpdateProductDto.validate({"sale_price": 12})
        assert data == {"sale_price": Decimal("12")}


class TestNestedItems:

    def test_item_paths_are_indexed(self):
        with pytest.raises(ValidationError) as exc:
            CreateSaleDto.validate({
                "payment_method": "nakit",
                "items": [
                    {"product_id": str(uuid.uuid4()), "quantity": 1, "unit_price": 10},
                    {"product_id": "not-a-uuid", "quantity": 0, "unit_price": 10},
                ],
            })
        assert set(exc.value.fields) == {"items.1.product_id", "items.1.quantity"}

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError) as exc:
            CreateSaleDto.validate({"payment_method": "nakit", "items": []})
        assert exc.value.fields == ["items"]

    def test_sale_accepts_veresiye(self):
        data = CreateSaleDto.validate({
            "payment_method": "veresiye",
            "customer_id": str(uuid.uuid4()),
            "items": [{"product_id": str(uuid.uuid4()), "quantity": 2, "unit_price": 10}],
        })
        assert data["items"][0]["quantity"] == 2
        assert data["items"][0]["discount_rate"] == Decimal("0")
        assert data["include_vat"] is True


class TestPayloadShape:

    def test_none_payload_is_empty_object(self):
        with pytest.raises(ValidationError) as exc:
            CreateTransferDto.validate(None)
        assert set(exc.value.fields) == {"from_account_id", "to_account_id", "amount"}

    def test_list_payload_rejected(self):
        with pytest.raises(ValidationError) as exc:
            CreateTransferDto.validate([])
        assert exc.value.fields == ["body"]

    def test_error_body(self):
        with pytest.raises(ValidationError) as exc:
            AdjustStockDto.validate({"product_id": str(uuid.uuid4()), "quantity": 1, "adjustment_type": "move"})
        body = exc.value.to_dict()
        assert body["error"] == "Validation failed"
        assert body["errors"][0]["field"] == "adjustment_type"


class TestOtherDtos:

    def test_warehouse_code_uppercased(self):
        data = CreateWarehouseDto.validate({"name": "Depo", "code": " ist1 "})
        assert data["code"] == "IST1"

    def test_password_rule(self):
        with pytest.raises(ValidationError) as exc:
            RegisterDto.validate({
                "company_name": "Acme", "name": "Ali", "email": "ali@acme.test", "password": "password123",
            })
        assert exc.value.fields == ["password"]

    def test_query_numbers_parsed(self):
        data = PaginationDto.validate({"page": "2", "limit": "50"})
        assert data["page"] == 2
        assert data["limit"] == 50
        assert data["sort_order"] == "desc"

    def test_limit_capped(self):
        with pytest.raises(ValidationError):
            PaginationDto.validate({"limit": "101"})

    def test_renewal_days(self):
        assert RenewalQueryDto.validate({})["days"] == 90
        with pytest.raises(ValidationError):
            RenewalQueryDto.validate({"days": "366"})


class TestNullValues:

    def test_required_field_cannot_be_nulled_on_update(self):
        with pytest.raises(ValidationError) as exc:
            UpdateProductDto.validate({"name": None, "sale_price": None})
        assert set(exc.value.fields) == {"name", "sale_price"}

    def test_defaulted_field_cannot_be_nulled_on_update(self):
        with pytest.raises(ValidationError) as exc:
            UpdateProductDto.validate({"is_active": None, "unit": None})
        assert set(exc.value.fields) == {"is_active", "unit"}
        assert exc.value.violations[0].message.endswith("should not be null")

    def test_optional_field_can_be_cleared(self):
        assert UpdateProductDto.validate({"barcode": None}) == {"barcode": None}

    def test_hand_written_update_dtos(self):
        with pytest.raises(ValidationError) as exc:
            UpdateAccountDto.validate({"name": None, "is_default": None})
        assert set(exc.value.fields) == {"name", "is_default"}

        with pytest.raises(ValidationError) as exc:
            UpdateTenantDto.validate({"name": None, "status": None})
        assert set(exc.value.fields) == {"name", "status"}

        assert UpdateTenantDto.validate({"domain": None}) == {"domain": None}


# =============================================================================
# REQUIRED FIELDS OF EVERY DTO
# =============================================================================

SAMPLES = {
    "product_id": str(uuid.uuid4()),
    "customer_id": str(uuid.uuid4()),
    "reference_id": str(uuid.uuid4()),
    "from_warehouse_id": str(uuid.uuid4()),
    "to_warehouse_id": str(uuid.uuid4()),
    "from_account_id": ACCOUNT_A,
    "to_account_id": ACCOUNT_B,
    "quantity": 1,
    "unit_price": 10,
    "purchase_price": 5,
    "sale_price": 10,
    "amount": 100,
    "price": 199,
    "name": "Ornek",
    "product_name": "Ornek",
    "company_name": "Ornek Ltd",
    "code": "AB",
    "payment_method": "nakit",
    "method": "nakit",
    "invoice_issued": True,
    "adjustment_type": "add",
    "account_type": "kasa",
    "movement_type": "gelir",
    "category": "kira",
    "expense_date": "2026-03-01",
    "valid_until": "2026-12-31",
    "document_type": "e_fatura",
    "reference_type": "sale",
    "email": "ornek@stokpro.test",
    "password": "Password123",
    "current_password": "Password123",
    "new_password": "NewPass123",
    "refresh_token": "refresh",
    "token": "token",
    "feature": "einvoice",
    "resource": "products",
}


def _all_dtos():
    found = {}
    pending = [obj for obj in vars(dtos).values() if isinstance(obj, Dto)]
    while pending:
        dto = pending.pop()
        if dto.name in found:
            continue
        found[dto.name] = dto
        pending.extend(f.items for f in dto.fields if f.items is not None)
    return sorted(found.values(), key=lambda d: d.name)


def _sample(dto):
    payload = {}
    for f in dto.fields:
        if not f.required:
            continue
        payload[f.name] = [_sample(f.items)] if f.items is not None else SAMPLES[f.name]
    return payload


WITH_REQUIRED = [dto for dto in _all_dtos() if any(f.required for f in dto.fields)]


class TestRequiredFields:

    @pytest.mark.parametrize("dto", WITH_REQUIRED, ids=lambda d: d.name)
    def test_minimal_payload_accepted(self, dto):
        dto.validate(_sample(dto))

    @pytest.mark.parametrize("dto", WITH_REQUIRED, ids=lambda d: d.name)
    def test_each_missing_field_named(self, dto):
        for f in dto.fields:
            if not f.required:
                continue
            payload = _sample(dto)
            del payload[f.name]
            with pytest.raises(ValidationError) as exc:
                dto.validate(payload)
            assert exc.value.fields == [f.name]
            assert exc.value.violations[0].message == f"{f.name} should not be empty"

    def test_nested_item_dtos_included(self):
        names = {dto.name for dto in WITH_REQUIRED}
        assert {"SaleItemDto", "ReturnItemDto", "QuoteItemDto", "StockTransferItemDto"} <= names
