# Overview: Service-layer operations for business expenses (gider) and their category summary.

from __future__ import annotations

from ..extensions import db
from ..models import Expense
from ..constants import EXPENSE_CATEGORIES
from ..time_utils import utcnow
from . import account_service
from .pagination import like_pattern, paginate
from .pricing import ZERO, money
from .scope import get_scoped, scoped


NOT_FOUND = "Gider bulunamadi"

EXPENSE_SORTABLE = {
    "created_at": Expense.created_at,
    "expense_date": Expense.expense_date,
    "amount": Expense.amount,
    "category": Expense.category,
}


def _filtered(tenant_id, params: dict):
    query = scoped(Expense, tenant_id)
    if params.get("category"):
        query = query.filter(Expense.category == params["category"])
    if params.get("is_recurring") is not None:
        query = query.filter(Expense.is_recurring.is_(params["is_recurring"]))
    if params.get("start_date"):
        query = query.filter(Expense.expense_date >= params["start_date"])
    if params.get("end_date"):
        query = query.filter(Expense.expense_date <= params["end_date"])
    return query


def list_expenses(tenant_id, params: dict) -> dict:
    query = _filtered(tenant_id, params)
    if params.get("search"):
        query = query.filter(Expense.description.ilike(like_pattern(params["search"]), escape="\\"))
    return paginate(query, params, EXPENSE_SORTABLE, default_sort="expense_date")


def get_expense(tenant_id, expense_id) -> Expense:
    return get_scoped(Expense, tenant_id, expense_id, NOT_FOUND)


def create_expense(tenant_id, data: dict, user_id=None) -> Expense:
    """
    Record an expense; with account_id the amount is also paid out of
    that account as a gider movement.
    """
    account = None
    if data.get("account_id"):
        account = account_service.get_account(tenant_id, data["account_id"], lock=True)

    expense = Expense(tenant_id=tenant_id, created_by=user_id, **data)
    db.session.add(expense)
    db.session.flush()

    if account is not None:
        account_service.post_movement(
            account, "gider", expense.amount,
            description=expense.description or expense.category,
            category=expense.category,
            reference_type="expense",
            reference_id=expense.id,
            movement_date=utcnow(),
        )

    db.session.commit()
    return expense


def update_expense(tenant_id, expense_id, data: dict) -> Expense:
    """Edits the record only; an account movement posted at creation stays."""
    expense = get_expense(tenant_id, expense_id)
    if data.get("account_id"):
        account_service.get_account(tenant_id, data["account_id"])
    for key, value in data.items():
        setattr(expense, key, value)
    db.session.commit()
    return expense


def delete_expense(tenant_id, expense_id) -> None:
    expense = get_expense(tenant_id, expense_id)
    db.session.delete(expense)
    db.session.commit()


def summary(tenant_id, params: dict) -> dict:
    """Totals per category (every category listed, zero when unused) and overall."""
    rows = (
        _filtered(tenant_id, params)
        .with_entities(Expense.category, db.func.coalesce(db.func.sum(Expense.amount), 0), db.func.count(Expense.id))
        .group_by(Expense.category)
        .all()
    )
    by_category = {category: {"total": str(money(ZERO)), "count": 0} for category in EXPENSE_CATEGORIES}
    overall = money(ZERO)
    count = 0
    for category, total, n in rows:
        by_category[category] = {"total": str(money(total)), "count": int(n)}
        overall += money(total)
        count += int(n)
    return {"by_category": by_category, "total": str(overall), "count": count}
