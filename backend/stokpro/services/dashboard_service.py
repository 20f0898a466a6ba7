# Overview: Service-layer read models for the back-office home screen.

from __future__ import annotations

from datetime import date, datetime, time

from ..extensions import db
from ..models import Customer, Expense, Product, Sale
from ..models.common import decimal_str
from ..time_utils import utcnow
from .pricing import money
from .scope import scoped


WIDGET_SIZE = 5


def _completed_sales(tenant_id):
    return scoped(Sale, tenant_id).filter(Sale.status == "completed")


def summary(tenant_id, today: date | None = None) -> dict:
    """
    Headline figures.

    total_debt is what customers owe us (negative balances, reported
    positive); total_credit is what we owe them.
    """
    today = today or utcnow().date()
    day_start = datetime.combine(today, time.min)
    month_start = today.replace(day=1)

    sale_count, sale_total = (
        _completed_sales(tenant_id)
        .filter(Sale.sale_date >= day_start)
        .with_entities(db.func.count(Sale.id), db.func.coalesce(db.func.sum(Sale.grand_total), 0))
        .one()
    )

    debt, credit = (
        scoped(Customer, tenant_id)
        .with_entities(
            db.func.coalesce(db.func.sum(db.case((Customer.balance < 0, Customer.balance), else_=0)), 0),
            db.func.coalesce(db.func.sum(db.case((Customer.balance > 0, Customer.balance), else_=0)), 0),
        )
        .one()
    )

    monthly_expenses = (
        scoped(Expense, tenant_id)
        .filter(Expense.expense_date >= month_start)
        .with_entities(db.func.coalesce(db.func.sum(Expense.amount), 0))
        .scalar()
    )

    return {
        "today_sales": {"count": sale_count, "total": decimal_str(money(sale_total))},
        "total_customers": scoped(Customer, tenant_id).filter(Customer.is_active.is_(True)).count(),
        "total_products": scoped(Product, tenant_id).filter(Product.is_active.is_(True)).count(),
        "low_stock_count": (
            scoped(Product, tenant_id)
            .filter(Product.is_active.is_(True), Product.stock_quantity <= Product.min_stock_level)
            .count()
        ),
        "total_debt": decimal_str(abs(money(debt))),
        "total_credit": decimal_str(money(credit)),
        "monthly_expenses": decimal_str(money(monthly_expenses)),
    }


def recent_sales(tenant_id) -> list[dict]:
    sales = (
        _completed_sales(tenant_id)
        .order_by(Sale.sale_date.desc(), Sale.created_at.desc())
        .limit(WIDGET_SIZE)
        .all()
    )
    return [s.to_dict() for s in sales]


def low_stock(tenant_id) -> list[dict]:
    products = (
        scoped(Product, tenant_id)
        .filter(Product.is_active.is_(True), Product.stock_quantity <= Product.min_stock_level)
        .order_by(Product.stock_quantity.asc(), Product.name.asc())
        .limit(WIDGET_SIZE)
        .all()
    )
    return [p.to_dict() for p in products]


def top_debtors(tenant_id) -> list[dict]:
    customers = (
        scoped(Customer, tenant_id)
        .filter(Customer.is_active.is_(True), Customer.balance < 0)
        .order_by(Customer.balance.asc())
        .limit(WIDGET_SIZE)
        .all()
    )
    return [c.to_dict() for c in customers]
