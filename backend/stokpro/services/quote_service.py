# Overview: Service-layer operations for price quotes (teklif); totals, status workflow and conversion to a sale.

"""
Quotes service.

STATUS FLOW:
    draft -> sent -> accepted | rejected
    draft | sent -> expired            (mark_expired, valid_until passed)
    draft | sent | accepted -> converted (convert_to_sale)

Totals:
    line net    = unit_price x (1 - discount_rate / 100) x quantity
    subtotal    = sum of line nets
    grand_total = subtotal - order discount + VAT (VAT counted only when include_vat)
"""

from __future__ import annotations

from datetime import date

from ..extensions import db
from ..models import Quote, QuoteItem, Product
from ..errors import BusinessRuleError
from ..time_utils import utcnow
from . import customer_service, sale_service
from .numbering import next_document_number
from .pagination import like_pattern, paginate
from .pricing import ZERO, money, order_discount, quote_line
from .scope import get_scoped, scoped


NOT_FOUND = "Teklif bulunamadi"
QUOTE_PREFIX = "TKL"

EDITABLE_STATUSES = ("draft", "sent")
CONVERTIBLE_STATUSES = ("draft", "sent", "accepted")

QUOTE_SORTABLE = {
    "created_at": Quote.created_at,
    "quote_date": Quote.quote_date,
    "valid_until": Quote.valid_until,
    "grand_total": Quote.grand_total,
}


def get_quote(tenant_id, quote_id) -> Quote:
    return get_scoped(Quote, tenant_id, quote_id, NOT_FOUND)


def list_quotes(tenant_id, params: dict) -> dict:
    query = scoped(Quote, tenant_id)
    if params.get("status"):
        query = query.filter(Quote.status == params["status"])
    if params.get("customer_id"):
        query = query.filter(Quote.customer_id == params["customer_id"])
    if params.get("search"):
        query = query.filter(Quote.quote_number.ilike(like_pattern(params["search"]), escape="\\"))
    return paginate(query, params, QUOTE_SORTABLE)


def _build_items(tenant_id, items: list[dict]) -> list[QuoteItem]:
    built = []
    for item in items:
        get_scoped(Product, tenant_id, item["product_id"], "Urun bulunamadi")
        built.append(QuoteItem(
            tenant_id=tenant_id,
            product_id=item["product_id"],
            product_name=item["product_name"],
            quantity=item["quantity"],
            unit_price=item["unit_price"],
            discount_rate=item.get("discount_rate") or ZERO,
            vat_rate=item.get("vat_rate") if item.get("vat_rate") is not None else ZERO,
        ))
    return built


def _apply_totals(quote: Quote, items: list[QuoteItem]) -> None:
    include_vat = quote.include_vat if quote.include_vat is not None else True
    subtotal = money(ZERO)
    vat_total = money(ZERO)
    for item in items:
        amounts = quote_line(item.unit_price, item.quantity, item.discount_rate, item.vat_rate, include_vat)
        item.vat_amount = amounts.vat
        item.line_total = amounts.total
        subtotal += amounts.net
        vat_total += amounts.vat

    if not include_vat:
        vat_total = money(ZERO)
    discount = order_discount(subtotal, quote.discount_amount, quote.discount_rate)
    quote.subtotal = subtotal
    quote.discount_amount = discount
    quote.vat_total = vat_total
    quote.grand_total = subtotal - discount + vat_total


def create_quote(tenant_id, data: dict, user_id=None) -> Quote:
    if data.get("customer_id"):
        customer_service.get_customer(tenant_id, data["customer_id"])
    items = _build_items(tenant_id, data["items"])

    quote = Quote(
        tenant_id=tenant_id,
        quote_number=next_document_number(Quote.quote_number, QUOTE_PREFIX),
        customer_id=data.get("customer_id"),
        quote_date=utcnow(),
        valid_until=data["valid_until"],
        discount_amount=data.get("discount_amount") or ZERO,
        discount_rate=data.get("discount_rate") or ZERO,
        include_vat=data.get("include_vat", True),
        status="draft",
        notes=data.get("notes"),
        created_by=user_id,
    )
    _apply_totals(quote, items)
    quote.items = items
    db.session.add(quote)
    db.session.commit()
    return quote


def update_quote(tenant_id, quote_id, data: dict) -> Quote:
    """Draft and sent quotes only; given items replace the old ones."""
    quote = get_quote(tenant_id, quote_id)
    if quote.status not in EDITABLE_STATUSES:
        raise BusinessRuleError("Sadece taslak veya gonderilmis teklifler duzenlenebilir")
    if data.get("customer_id"):
        customer_service.get_customer(tenant_id, data["customer_id"])

    new_items = _build_items(tenant_id, data["items"]) if data.get("items") else None

    # a percentage discount is stored as its amount; recompute it unless a fixed amount is given
    if "discount_amount" not in data and (quote.discount_rate or ZERO) > 0:
        quote.discount_amount = ZERO

    for key in ("customer_id", "valid_until", "discount_amount", "discount_rate", "include_vat", "notes"):
        if key in data:
            setattr(quote, key, data[key])

    if new_items is not None:
        quote.items = new_items

    _apply_totals(quote, list(quote.items))
    db.session.commit()
    return quote


def _transition(tenant_id, quote_id, allowed: tuple, target: str, message: str) -> Quote:
    quote = get_quote(tenant_id, quote_id)
    if quote.status not in allowed:
        raise BusinessRuleError(message)
    quote.status = target
    db.session.commit()
    return quote


def send_quote(tenant_id, quote_id) -> Quote:
    return _transition(tenant_id, quote_id, ("draft",), "sent", "Sadece taslak teklifler gonderilebilir")


def accept_quote(tenant_id, quote_id) -> Quote:
    return _transition(tenant_id, quote_id, EDITABLE_STATUSES, "accepted", "Teklif kabul edilemez")


def reject_quote(tenant_id, quote_id) -> Quote:
    return _transition(tenant_id, quote_id, EDITABLE_STATUSES, "rejected", "Teklif reddedilemez")


def delete_quote(tenant_id, quote_id) -> None:
    quote = get_quote(tenant_id, quote_id)
    if quote.status == "converted":
        raise BusinessRuleError("Satisa donusturulmus teklif silinemez")
    db.session.delete(quote)
    db.session.commit()


def convert_to_sale(tenant_id, quote_id, data: dict, user_id=None):
    """
    Turn a quote into a completed sale carrying the quote's prices and totals.

    Stock is checked and decremented exactly as for a direct sale.
    Returns (quote, sale).
    """
    quote = get_quote(tenant_id, quote_id)
    if quote.status not in CONVERTIBLE_STATUSES:
        raise BusinessRuleError("Bu teklif satisa donusturulemez")

    customer = sale_service.sale_customer(tenant_id, quote.customer_id, data["payment_method"])
    warehouse = sale_service.sale_warehouse(tenant_id, data.get("warehouse_id"))
    products = sale_service.check_stock(
        tenant_id,
        [{"product_id": item.product_id, "quantity": item.quantity} for item in quote.items],
        warehouse,
    )

    lines = [
        sale_service.SaleLine(
            product=products.get(item.product_id) if item.product_id else None,
            quantity=item.quantity,
            unit_price=item.unit_price,
            discount_rate=item.discount_rate or ZERO,
            vat_rate=item.vat_rate or ZERO,
            vat_amount=(item.vat_amount or ZERO) if quote.include_vat else ZERO,
            line_total=item.line_total,
        )
        for item in quote.items
    ]

    sale = sale_service.record_sale(
        tenant_id,
        lines=lines,
        customer=customer,
        warehouse=warehouse,
        payment_method=data["payment_method"],
        subtotal=quote.subtotal,
        discount_amount=quote.discount_amount,
        discount_rate=quote.discount_rate,
        vat_total=quote.vat_total,
        grand_total=quote.grand_total,
        include_vat=quote.include_vat,
        user_id=user_id,
        due_date=data.get("due_date"),
        notes=data.get("notes") or quote.notes or f"Teklif: {quote.quote_number}",
    )

    quote.status = "converted"
    quote.converted_sale_id = sale.id
    db.session.commit()
    return quote, sale


def mark_expired(tenant_id=None, today: date | None = None) -> int:
    """
    Expire draft and sent quotes whose valid_until has passed.

    tenant_id=None sweeps every tenant (CLI). Returns the number changed.
    """
    today = today or utcnow().date()
    query = Quote.query if tenant_id is None else scoped(Quote, tenant_id)
    quotes = query.filter(Quote.valid_until < today, Quote.status.in_(EDITABLE_STATUSES)).all()
    for quote in quotes:
        quote.status = "expired"
    db.session.commit()
    return len(quotes)
