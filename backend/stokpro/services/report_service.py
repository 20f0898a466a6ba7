# Overview: Service-layer operations for reporting; sales, VAT, profit, debt, stock and expense aggregates.

"""
Reports.

Every report reads one tenant's rows only. Sales count when their
status is completed; cancelled sales drop out of every figure. Date
ranges are inclusive calendar days (start_date / end_date, both
optional) on the document's own date column.

Money leaves as fixed-point strings, counts and quantities as integers.
"""

from __future__ import annotations

from datetime import date, timedelta

from ..extensions import db
from ..models import Customer, Expense, Product, Return, ReturnItem, Sale, SaleItem
from ..models.common import decimal_str, uuid_str
from ..constants import CREDIT_METHOD
from ..time_utils import to_iso_date, utcnow
from .pricing import ZERO, money
from .scope import scoped


def _amount(value) -> str:
    return decimal_str(money(value))


def _day(value) -> str | None:
    # SQLite's date() yields text, PostgreSQL a date
    return value if isinstance(value, str) or value is None else to_iso_date(value)


def _in_range(query, column, params: dict, is_date: bool = False):
    day = column if is_date else db.func.date(column)
    if params.get("start_date"):
        query = query.filter(day >= params["start_date"])
    if params.get("end_date"):
        query = query.filter(day <= params["end_date"])
    return query


def _sales(tenant_id, params: dict):
    query = scoped(Sale, tenant_id).filter(Sale.status == "completed")
    return _in_range(query, Sale.sale_date, params)


def _sale_lines(tenant_id, params: dict):
    query = (
        scoped(SaleItem, tenant_id)
        .join(Sale, SaleItem.sale_id == Sale.id)
        .filter(Sale.status == "completed")
    )
    return _in_range(query, Sale.sale_date, params)


def _returns(tenant_id, params: dict):
    query = scoped(Return, tenant_id).filter(Return.status == "completed")
    return _in_range(query, Return.return_date, params)


def _sum(column):
    return db.func.coalesce(db.func.sum(column), 0)


# =============================================================================
# SALES
# =============================================================================

def sales_summary(tenant_id, params: dict) -> dict:
    base = _sales(tenant_id, params)

    row = base.with_entities(
        db.func.count(Sale.id),
        _sum(Sale.subtotal),
        _sum(Sale.discount_amount),
        _sum(Sale.vat_total),
        _sum(Sale.grand_total),
    ).one()

    by_method = (
        base.with_entities(Sale.payment_method, db.func.count(Sale.id), _sum(Sale.grand_total))
        .group_by(Sale.payment_method)
        .order_by(Sale.payment_method.asc())
        .all()
    )

    day = db.func.date(Sale.sale_date)
    daily = (
        base.with_entities(day.label("day"), db.func.count(Sale.id), _sum(Sale.grand_total))
        .group_by(day)
        .order_by(day.asc())
        .all()
    )

    return {
        "summary": {
            "sale_count": row[0],
            "subtotal": _amount(row[1]),
            "discount_total": _amount(row[2]),
            "vat_total": _amount(row[3]),
            "grand_total": _amount(row[4]),
        },
        "by_payment_method": [
            {"payment_method": method, "count": count, "total": _amount(total)}
            for method, count, total in by_method
        ],
        "daily_sales": [
            {"date": _day(d), "count": count, "total": _amount(total)}
            for d, count, total in daily
        ],
    }


def vat_report(tenant_id, params: dict) -> dict:
    """Output VAT per rate on sales, input VAT given back on returns, and the net."""
    rows = (
        _sale_lines(tenant_id, params)
        .with_entities(SaleItem.vat_rate, _sum(SaleItem.vat_amount), _sum(SaleItem.line_total))
        .group_by(SaleItem.vat_rate)
        .order_by(SaleItem.vat_rate.asc())
        .all()
    )
    sales_vat = sum((money(vat) for _, vat, _ in rows), ZERO)

    returns_vat, returns_total = (
        _returns(tenant_id, params)
        .join(ReturnItem, ReturnItem.return_id == Return.id)
        .with_entities(_sum(ReturnItem.vat_amount), _sum(ReturnItem.line_total))
        .one()
    )

    return {
        "sales_vat": [
            {"vat_rate": decimal_str(rate), "vat_amount": _amount(vat), "total": _amount(total)}
            for rate, vat, total in rows
        ],
        "returns_vat": {"vat_amount": _amount(returns_vat), "total": _amount(returns_total)},
        "net_vat": _amount(sales_vat - money(returns_vat)),
    }


def profit_loss(tenant_id, params: dict) -> dict:
    """
    gross_profit = revenue - cost_of_goods - returns
    net_profit   = gross_profit - expenses

    cost_of_goods prices each sold unit at the product's current
    purchase price.
    """
    revenue = money(_sales(tenant_id, params).with_entities(_sum(Sale.grand_total)).scalar())
    cost = money(
        _sale_lines(tenant_id, params)
        .join(Product, SaleItem.product_id == Product.id)
        .with_entities(_sum(SaleItem.quantity * Product.purchase_price))
        .scalar()
    )
    returns = money(_returns(tenant_id, params).with_entities(_sum(Return.total_amount)).scalar())
    expenses = money(
        _in_range(scoped(Expense, tenant_id), Expense.expense_date, params, is_date=True)
        .with_entities(_sum(Expense.amount))
        .scalar()
    )

    gross = revenue - cost - returns
    return {
        "revenue": decimal_str(revenue),
        "cost_of_goods": decimal_str(cost),
        "returns": decimal_str(returns),
        "gross_profit": decimal_str(gross),
        "expenses": decimal_str(expenses),
        "net_profit": decimal_str(gross - expenses),
    }


def top_products(tenant_id, params: dict) -> list[dict]:
    quantity = _sum(SaleItem.quantity).label("total_quantity")
    rows = (
        _sale_lines(tenant_id, params)
        .join(Product, SaleItem.product_id == Product.id)
        .with_entities(Product.id, Product.name, quantity, _sum(SaleItem.line_total))
        .group_by(Product.id, Product.name)
        .order_by(quantity.desc(), Product.name.asc())
        .limit(params.get("limit", 10))
        .all()
    )
    return [
        {"product_id": uuid_str(pid), "name": name, "total_quantity": int(qty), "total_revenue": _amount(total)}
        for pid, name, qty, total in rows
    ]


def _customer_totals(tenant_id, params: dict):
    total = _sum(Sale.grand_total).label("total")
    credit = _sum(db.case((Sale.payment_method == CREDIT_METHOD, Sale.grand_total), else_=0))
    query = (
        _sales(tenant_id, params)
        .join(Customer, Sale.customer_id == Customer.id)
        .with_entities(
            Customer.id, Customer.name, db.func.count(Sale.id), total, credit, db.func.max(Sale.sale_date),
        )
        .group_by(Customer.id, Customer.name)
        .order_by(total.desc(), Customer.name.asc())
    )
    return query


def _customer_row(row) -> dict:
    cid, name, count, total, credit, last_sale = row
    return {
        "customer_id": uuid_str(cid),
        "name": name,
        "sale_count": count,
        "total": _amount(total),
        "credit_total": _amount(credit),
        "last_sale_date": _day(last_sale),
    }


def top_customers(tenant_id, params: dict) -> list[dict]:
    rows = _customer_totals(tenant_id, params).limit(params.get("limit", 10)).all()
    return [_customer_row(row) for row in rows]


def customer_sales(tenant_id, params: dict) -> list[dict]:
    """Every customer with a sale in the range; veresiye share in credit_total."""
    return [_customer_row(row) for row in _customer_totals(tenant_id, params).all()]


def customer_product_purchases(tenant_id, params: dict) -> list[dict]:
    total = _sum(SaleItem.line_total).label("total")
    rows = (
        _sale_lines(tenant_id, params)
        .join(Customer, Sale.customer_id == Customer.id)
        .join(Product, SaleItem.product_id == Product.id)
        .with_entities(Customer.id, Customer.name, Product.id, Product.name, _sum(SaleItem.quantity), total)
        .group_by(Customer.id, Customer.name, Product.id, Product.name)
        .order_by(Customer.name.asc(), total.desc())
        .all()
    )
    return [
        {
            "customer_id": uuid_str(cid),
            "customer_name": cname,
            "product_id": uuid_str(pid),
            "product_name": pname,
            "quantity": int(qty),
            "total": _amount(line_total),
        }
        for cid, cname, pid, pname, qty, line_total in rows
    ]


# =============================================================================
# RECEIVABLES
# =============================================================================

def debt_overview(tenant_id) -> dict:
    customers = (
        scoped(Customer, tenant_id)
        .filter(Customer.is_active.is_(True), Customer.balance != 0)
        .order_by(Customer.balance.asc())
        .all()
    )
    debt = sum((money(c.balance) for c in customers if c.balance < 0), ZERO)
    credit = sum((money(c.balance) for c in customers if c.balance > 0), ZERO)
    return {
        "customers": [
            {"id": uuid_str(c.id), "name": c.name, "phone": c.phone, "balance": _amount(c.balance)}
            for c in customers
        ],
        "total_debt": decimal_str(abs(debt)),
        "total_credit": decimal_str(credit),
    }


def _open_credit_sales(tenant_id):
    """Completed veresiye sales with a due date whose customer still owes money."""
    return (
        scoped(Sale, tenant_id)
        .join(Customer, Sale.customer_id == Customer.id)
        .filter(
            Sale.status == "completed",
            Sale.payment_method == CREDIT_METHOD,
            Sale.due_date.isnot(None),
            Customer.balance < 0,
        )
    )


def _payment_row(sale: Sale, today: date) -> dict:
    data = sale.to_dict()
    data["customer_balance"] = _amount(sale.customer.balance)
    data["days_left"] = (sale.due_date - today).days
    return data


def upcoming_payments(tenant_id, days: int = 30, today: date | None = None) -> list[dict]:
    today = today or utcnow().date()
    sales = (
        _open_credit_sales(tenant_id)
        .filter(Sale.due_date >= today, Sale.due_date <= today + timedelta(days=days))
        .order_by(Sale.due_date.asc(), Sale.invoice_number.asc())
        .all()
    )
    return [_payment_row(sale, today) for sale in sales]


def overdue_payments(tenant_id, today: date | None = None) -> list[dict]:
    """days_left is negative: how many days past due."""
    today = today or utcnow().date()
    sales = (
        _open_credit_sales(tenant_id)
        .filter(Sale.due_date < today)
        .order_by(Sale.due_date.asc(), Sale.invoice_number.asc())
        .all()
    )
    return [_payment_row(sale, today) for sale in sales]


# =============================================================================
# STOCK, RETURNS, EXPENSES
# =============================================================================

def stock_report(tenant_id) -> dict:
    """Active products valued at purchase and sale price."""
    products = (
        scoped(Product, tenant_id)
        .filter(Product.is_active.is_(True))
        .order_by(Product.name.asc())
        .all()
    )
    items = []
    total_quantity, cost_value, sale_value = 0, ZERO, ZERO
    for product in products:
        quantity = product.stock_quantity or 0
        cost = money(quantity * product.purchase_price)
        worth = money(quantity * product.sale_price)
        total_quantity += quantity
        cost_value += cost
        sale_value += worth
        items.append({
            "product_id": uuid_str(product.id),
            "name": product.name,
            "category": product.category,
            "stock_quantity": quantity,
            "min_stock_level": product.min_stock_level,
            "is_low": quantity <= (product.min_stock_level or 0),
            "stock_value": decimal_str(cost),
            "sale_value": decimal_str(worth),
        })
    return {
        "items": items,
        "totals": {
            "product_count": len(items),
            "total_quantity": total_quantity,
            "stock_value": decimal_str(cost_value),
            "sale_value": decimal_str(sale_value),
        },
    }


def returns_report(tenant_id, params: dict) -> dict:
    base = _returns(tenant_id, params)
    count, total, vat = base.with_entities(
        db.func.count(Return.id), _sum(Return.total_amount), _sum(Return.vat_total),
    ).one()

    line_total = _sum(ReturnItem.line_total).label("total")
    rows = (
        base.join(ReturnItem, ReturnItem.return_id == Return.id)
        .join(Product, ReturnItem.product_id == Product.id)
        .with_entities(Product.id, Product.name, _sum(ReturnItem.quantity), line_total)
        .group_by(Product.id, Product.name)
        .order_by(line_total.desc(), Product.name.asc())
        .all()
    )
    return {
        "summary": {"return_count": count, "total_amount": _amount(total), "vat_total": _amount(vat)},
        "by_product": [
            {"product_id": uuid_str(pid), "name": name, "quantity": int(qty), "total": _amount(amount)}
            for pid, name, qty, amount in rows
        ],
    }


def expenses_by_category(tenant_id, params: dict) -> dict:
    total = _sum(Expense.amount).label("total")
    rows = (
        _in_range(scoped(Expense, tenant_id), Expense.expense_date, params, is_date=True)
        .with_entities(Expense.category, db.func.count(Expense.id), total)
        .group_by(Expense.category)
        .order_by(total.desc(), Expense.category.asc())
        .all()
    )
    grand_total = sum((money(amount) for _, _, amount in rows), ZERO)
    return {
        "items": [
            {"category": category, "count": count, "total": _amount(amount)}
            for category, count, amount in rows
        ],
        "total": decimal_str(grand_total),
    }
