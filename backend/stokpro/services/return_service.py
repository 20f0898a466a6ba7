# Overview: Service-layer operations for sales returns (iade); quantity caps, restocking and customer credit.

"""
Returns service.

A return may reference a sale. When it does, each line is tied to a
sale line and may only give back what was sold minus what earlier
completed returns already took back.

VAT rate per line: explicit rate on the request line, else the sale
line's rate, else the product's rate.
"""

from __future__ import annotations

from ..extensions import db
from ..models import Return, ReturnItem, Product
from ..constants import LEDGER_CREDIT
from ..errors import BusinessRuleError, NotFoundError
from ..time_utils import utcnow
from . import customer_service, warehouse_service
from .concurrency import lock_for_update
from .numbering import next_document_number
from .pagination import like_pattern, paginate
from .pricing import ZERO, money, return_line
from .sale_service import get_sale
from .scope import get_scoped, scoped


NOT_FOUND = "Iade bulunamadi"
RETURN_PREFIX = "RET"

RETURN_SORTABLE = {
    "created_at": Return.created_at,
    "return_date": Return.return_date,
    "total_amount": Return.total_amount,
}


def get_return(tenant_id, return_id) -> Return:
    return get_scoped(Return, tenant_id, return_id, NOT_FOUND)


def list_returns(tenant_id, params: dict) -> dict:
    query = scoped(Return, tenant_id)
    if params.get("customer_id"):
        query = query.filter(Return.customer_id == params["customer_id"])
    if params.get("sale_id"):
        query = query.filter(Return.sale_id == params["sale_id"])
    if params.get("start_date"):
        query = query.filter(db.func.date(Return.return_date) >= params["start_date"])
    if params.get("end_date"):
        query = query.filter(db.func.date(Return.return_date) <= params["end_date"])
    if params.get("search"):
        query = query.filter(Return.return_number.ilike(like_pattern(params["search"]), escape="\\"))
    return paginate(query, params, RETURN_SORTABLE, default_sort="return_date")


def returned_quantity(tenant_id, sale_item_id) -> int:
    """Units of a sale line already taken back by completed returns."""
    total = (
        scoped(ReturnItem, tenant_id)
        .join(Return, ReturnItem.return_id == Return.id)
        .filter(ReturnItem.sale_item_id == sale_item_id, Return.status == "completed")
        .with_entities(db.func.coalesce(db.func.sum(ReturnItem.quantity), 0))
        .scalar()
    )
    return int(total or 0)


def _remaining(tenant_id, sale_item, claimed: dict) -> int:
    return sale_item.quantity - returned_quantity(tenant_id, sale_item.id) - claimed.get(sale_item.id, 0)


def _allocate(tenant_id, sale, item: dict, claimed: dict) -> list:
    """Split a requested return line over the sale lines it may draw from.

    An explicit ``sale_item_id`` must point at a line of the same product.
    Without one the quantity is spread over every line of that product in
    sale order, each line capped by what it still has left to return.
    """
    if item.get("sale_item_id"):
        lines = [s for s in sale.items if s.id == item["sale_item_id"]]
        if not lines:
            raise NotFoundError("Satis kalemi bulunamadi")
        if lines[0].product_id != item["product_id"]:
            raise BusinessRuleError("Satis kalemi bu urune ait degil")
    else:
        lines = [s for s in sale.items if s.product_id == item["product_id"]]
        if not lines:
            raise BusinessRuleError("Urun bu satista bulunamadi")

    available = sum(max(_remaining(tenant_id, s, claimed), 0) for s in lines)
    if item["quantity"] > available:
        raise BusinessRuleError(
            f"Iade miktari satistan fazla olamaz. Kalan iade edilebilir miktar: {available}"
        )

    allocations = []
    left = item["quantity"]
    for sale_item in lines:
        take = min(left, max(_remaining(tenant_id, sale_item, claimed), 0))
        if take <= 0:
            continue
        claimed[sale_item.id] = claimed.get(sale_item.id, 0) + take
        allocations.append((sale_item, take))
        left -= take
        if left == 0:
            break
    return allocations


def _vat_rate(item: dict, product, sale_item):
    if item.get("vat_rate") is not None:
        return item["vat_rate"]
    if sale_item is not None and sale_item.vat_rate is not None:
        return sale_item.vat_rate
    return product.vat_rate or ZERO


def create_return(tenant_id, data: dict, user_id=None) -> Return:
    sale = None
    if data.get("sale_id"):
        sale = get_sale(tenant_id, data["sale_id"])
        if sale.status == "cancelled":
            raise BusinessRuleError("Iptal edilmis satista iade yapilamaz")

    customer_id = data.get("customer_id") or (sale.customer_id if sale else None)
    customer = customer_service.get_customer(tenant_id, customer_id) if customer_id else None

    warehouse_id = data.get("warehouse_id") or (sale.warehouse_id if sale else None)
    if warehouse_id:
        warehouse_service.get_warehouse(tenant_id, warehouse_id)

    # Validation pass
    prepared = []
    claimed: dict = {}
    for item in data["items"]:
        product = lock_for_update(scoped(Product, tenant_id).filter(Product.id == item["product_id"])).first()
        if product is None:
            raise NotFoundError("Urun bulunamadi")

        if sale is None:
            allocations = [(None, item["quantity"])]
        else:
            allocations = _allocate(tenant_id, sale, item, claimed)

        for sale_item, quantity in allocations:
            amounts = return_line(item["unit_price"], quantity, _vat_rate(item, product, sale_item))
            prepared.append((item, quantity, product, sale_item, amounts))

    subtotal = money(sum((amounts.net for *_, amounts in prepared), ZERO))
    vat_total = money(sum((amounts.vat for *_, amounts in prepared), ZERO))

    # Write pass
    doc = Return(
        tenant_id=tenant_id,
        return_number=next_document_number(Return.return_number, RETURN_PREFIX),
        sale_id=sale.id if sale else None,
        customer_id=customer.id if customer else None,
        warehouse_id=warehouse_id,
        return_date=utcnow(),
        total_amount=subtotal + vat_total,
        vat_total=vat_total,
        reason=data.get("reason"),
        status="completed",
        created_by=user_id,
    )
    db.session.add(doc)
    db.session.flush()

    for item, quantity, product, sale_item, amounts in prepared:
        db.session.add(ReturnItem(
            tenant_id=tenant_id,
            return_id=doc.id,
            product_id=product.id,
            sale_item_id=sale_item.id if sale_item else None,
            quantity=quantity,
            unit_price=item["unit_price"],
            vat_amount=amounts.vat,
            line_total=amounts.total,
        ))
        product.stock_quantity = (product.stock_quantity or 0) + quantity
        if warehouse_id:
            warehouse_service.change_warehouse_stock(
                tenant_id, warehouse_id, product, quantity, "return",
                reference_type="return", reference_id=doc.id,
            )

    if customer is not None:
        customer_service.post_transaction(
            customer, LEDGER_CREDIT, doc.total_amount, f"Iade: {doc.return_number}",
            reference_type="return", reference_id=doc.id,
        )

    db.session.commit()
    return doc
