# Overview: Service-layer operations for sales; invoice creation, cancellation, invoice flag and renewal reminders.

"""
Sales (satis) service.

create_sale() runs in two passes: every customer, product and stock
check happens first, then rows are written. Nothing is flushed until the
whole request is known to be valid.

Side effects of a completed sale:
- products.stock_quantity decremented per line
- warehouse_stocks decremented when the sale names a warehouse ("sale" movement)
- veresiye: customer balance lowered by grand_total with a borc entry

cancel_sale() reverses all three.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from ..extensions import db
from ..models import Sale, SaleItem, Product, Customer, Warehouse
from ..constants import CREDIT_METHOD, LEDGER_CREDIT, LEDGER_DEBIT
from ..errors import BusinessRuleError, NotFoundError
from ..time_utils import utcnow
from . import customer_service, warehouse_service
from .concurrency import lock_for_update
from .numbering import next_document_number
from .pagination import like_pattern, paginate
from .pricing import ZERO, money, order_discount, sale_line
from .scope import get_scoped, scoped


NOT_FOUND = "Satis bulunamadi"
INVOICE_PREFIX = "INV"

SALE_SORTABLE = {
    "created_at": Sale.created_at,
    "sale_date": Sale.sale_date,
    "grand_total": Sale.grand_total,
    "invoice_number": Sale.invoice_number,
}


@dataclass
class SaleLine:
    """One line ready to be written; product is None for free-text quote lines."""
    product: Product | None
    quantity: int
    unit_price: Decimal
    discount_rate: Decimal
    vat_rate: Decimal
    vat_amount: Decimal
    line_total: Decimal


def get_sale(tenant_id, sale_id) -> Sale:
    return get_scoped(Sale, tenant_id, sale_id, NOT_FOUND)


def list_sales(tenant_id, params: dict) -> dict:
    query = scoped(Sale, tenant_id)
    for key in ("status", "customer_id", "payment_method", "sale_type"):
        if params.get(key):
            query = query.filter(getattr(Sale, key) == params[key])
    if params.get("invoice_issued") is not None:
        query = query.filter(Sale.invoice_issued.is_(params["invoice_issued"]))
    if params.get("start_date"):
        query = query.filter(db.func.date(Sale.sale_date) >= params["start_date"])
    if params.get("end_date"):
        query = query.filter(db.func.date(Sale.sale_date) <= params["end_date"])
    if params.get("search"):
        pattern = like_pattern(params["search"])
        query = query.outerjoin(Customer, Sale.customer_id == Customer.id).filter(db.or_(
            Sale.invoice_number.ilike(pattern, escape="\\"),
            Customer.name.ilike(pattern, escape="\\"),
        ))
    return paginate(query, params, SALE_SORTABLE)


def sale_detail(tenant_id, sale_id) -> dict:
    sale = get_sale(tenant_id, sale_id)
    data = sale.to_dict(include_items=True)
    data["customer"] = sale.customer.to_dict() if sale.customer else None
    data["returns"] = [r.to_dict() for r in sale.returns]
    return data


# =============================================================================
# VALIDATION PASS
# =============================================================================

def sale_customer(tenant_id, customer_id, payment_method: str) -> Customer | None:
    if payment_method == CREDIT_METHOD and not customer_id:
        raise BusinessRuleError("Veresiye satis icin musteri secilmelidir")
    if not customer_id:
        return None
    return customer_service.get_customer(tenant_id, customer_id)


def sale_warehouse(tenant_id, warehouse_id) -> Warehouse | None:
    if not warehouse_id:
        return None
    warehouse = warehouse_service.get_warehouse(tenant_id, warehouse_id)
    if not warehouse.is_active:
        raise BusinessRuleError("Pasif depodan satis yapilamaz")
    return warehouse


def check_stock(tenant_id, items: list[dict], warehouse: Warehouse | None) -> dict:
    """
    Load and lock every product of the request and verify stock.

    Lines of the same product are summed before comparing. Items without
    a product_id are skipped. Returns product_id -> Product.
    """
    requested: dict = {}
    for item in items:
        if item.get("product_id"):
            requested[item["product_id"]] = requested.get(item["product_id"], 0) + item["quantity"]

    products: dict = {}
    for product_id, quantity in requested.items():
        product = lock_for_update(scoped(Product, tenant_id).filter(Product.id == product_id)).first()
        if product is None:
            raise NotFoundError("Urun bulunamadi")
        if (product.stock_quantity or 0) < quantity:
            raise BusinessRuleError(f"Yetersiz stok: {product.name}")
        if warehouse is not None and warehouse_service.warehouse_quantity(tenant_id, warehouse.id, product.id) < quantity:
            raise BusinessRuleError(f"Yetersiz stok: {product.name}")
        products[product.id] = product
    return products


# =============================================================================
# WRITE PASS
# =============================================================================

def record_sale(tenant_id, *, lines: list[SaleLine], customer: Customer | None, warehouse: Warehouse | None,
                payment_method: str, subtotal: Decimal, discount_amount: Decimal, discount_rate,
                vat_total: Decimal, grand_total: Decimal, include_vat: bool, user_id=None, **extra) -> Sale:
    """
    Write a validated sale with its lines and side effects.

    Shared by direct sales and quote conversion. The caller commits.
    """
    sale = Sale(
        tenant_id=tenant_id,
        invoice_number=next_document_number(Sale.invoice_number, INVOICE_PREFIX),
        customer_id=customer.id if customer else None,
        warehouse_id=warehouse.id if warehouse else None,
        sale_date=extra.pop("sale_date", None) or utcnow(),
        subtotal=subtotal,
        discount_amount=discount_amount,
        discount_rate=discount_rate or ZERO,
        vat_total=vat_total,
        grand_total=grand_total,
        include_vat=include_vat,
        payment_method=payment_method,
        status="completed",
        invoice_issued=False,
        created_by=user_id,
        **extra,
    )
    db.session.add(sale)
    db.session.flush()

    for line in lines:
        db.session.add(SaleItem(
            tenant_id=tenant_id,
            sale_id=sale.id,
            product_id=line.product.id if line.product else None,
            quantity=line.quantity,
            unit_price=line.unit_price,
            discount_rate=line.discount_rate,
            vat_rate=line.vat_rate,
            vat_amount=line.vat_amount,
            line_total=line.line_total,
        ))
        if line.product is None:
            continue
        line.product.stock_quantity = (line.product.stock_quantity or 0) - line.quantity
        if warehouse is not None:
            warehouse_service.change_warehouse_stock(
                tenant_id, warehouse.id, line.product, -line.quantity, "sale",
                reference_type="sale", reference_id=sale.id,
            )

    if payment_method == CREDIT_METHOD and customer is not None:
        customer_service.post_transaction(
            customer, LEDGER_DEBIT, grand_total, f"Satis: {sale.invoice_number}",
            reference_type="sale", reference_id=sale.id,
        )
    return sale


def create_sale(tenant_id, data: dict, user_id=None) -> Sale:
    customer = sale_customer(tenant_id, data.get("customer_id"), data["payment_method"])
    warehouse = sale_warehouse(tenant_id, data.get("warehouse_id"))
    products = check_stock(tenant_id, data["items"], warehouse)

    include_vat = data.get("include_vat", True)
    lines = []
    for item in data["items"]:
        product = products[item["product_id"]]
        vat_rate = product.vat_rate or ZERO
        amounts = sale_line(item["unit_price"], item["quantity"], item.get("discount_rate"), vat_rate, include_vat)
        lines.append(SaleLine(
            product=product,
            quantity=item["quantity"],
            unit_price=item["unit_price"],
            discount_rate=item.get("discount_rate") or ZERO,
            vat_rate=vat_rate,
            vat_amount=amounts.vat,
            line_total=amounts.total,
        ))

    subtotal = money(sum((line.line_total - line.vat_amount for line in lines), ZERO))
    vat_total = money(sum((line.vat_amount for line in lines), ZERO))
    discount = order_discount(subtotal, data.get("discount_amount"), data.get("discount_rate"))

    sale = record_sale(
        tenant_id,
        lines=lines,
        customer=customer,
        warehouse=warehouse,
        payment_method=data["payment_method"],
        subtotal=subtotal,
        discount_amount=discount,
        discount_rate=data.get("discount_rate"),
        vat_total=vat_total,
        grand_total=subtotal - discount + vat_total,
        include_vat=include_vat,
        user_id=user_id,
        sale_date=data.get("sale_date"),
        due_date=data.get("due_date"),
        sale_type=data.get("sale_type") or "retail",
        notes=data.get("notes"),
        has_renewal=data.get("has_renewal", False),
        renewal_date=data.get("renewal_date"),
        reminder_days_before=data.get("reminder_days_before", 30),
        reminder_note=data.get("reminder_note"),
    )
    db.session.commit()
    return sale


def cancel_sale(tenant_id, sale_id) -> Sale:
    """Put the goods back and undo any veresiye debit."""
    sale = get_sale(tenant_id, sale_id)
    if sale.status == "cancelled":
        raise BusinessRuleError("Satis zaten iptal edilmis")

    for item in sale.items:
        if item.product is None:
            continue
        item.product.stock_quantity = (item.product.stock_quantity or 0) + item.quantity
        if sale.warehouse_id is not None:
            warehouse_service.change_warehouse_stock(
                tenant_id, sale.warehouse_id, item.product, item.quantity, "adjustment",
                reference_type="sale", reference_id=sale.id,
                notes=f"Satis iptali: {sale.invoice_number}",
            )

    if sale.payment_method == CREDIT_METHOD and sale.customer is not None:
        customer_service.post_transaction(
            sale.customer, LEDGER_CREDIT, sale.grand_total, f"Satis iptali: {sale.invoice_number}",
            reference_type="sale", reference_id=sale.id,
        )

    sale.status = "cancelled"
    db.session.commit()
    return sale


def set_invoice_issued(tenant_id, sale_id, issued: bool) -> Sale:
    sale = get_sale(tenant_id, sale_id)
    sale.invoice_issued = issued
    db.session.commit()
    return sale


# =============================================================================
# RENEWALS
# =============================================================================

def renewal_urgency(days_left: int, customer: Customer | None) -> str:
    """red inside the customer's red window, yellow inside the yellow one."""
    red_days = customer.renewal_red_days if customer and customer.renewal_red_days else 30
    yellow_days = customer.renewal_yellow_days if customer and customer.renewal_yellow_days else 60
    if days_left <= red_days:
        return "red"
    if days_left <= yellow_days:
        return "yellow"
    return "green"


def upcoming_renewals(tenant_id, days: int, today: date | None = None) -> list[dict]:
    """
    Completed sales whose renewal falls within `days` from today.

    Overdue renewals are included with a negative days_left.
    """
    today = today or utcnow().date()
    horizon = today + timedelta(days=days)
    sales = (
        scoped(Sale, tenant_id)
        .filter(
            Sale.status == "completed",
            Sale.has_renewal.is_(True),
            Sale.renewal_date.isnot(None),
            Sale.renewal_date <= horizon,
        )
        .order_by(Sale.renewal_date.asc())
        .all()
    )

    items = []
    for sale in sales:
        days_left = (sale.renewal_date - today).days
        data = sale.to_dict()
        data["days_left"] = days_left
        data["urgency"] = renewal_urgency(days_left, sale.customer)
        items.append(data)
    return items
