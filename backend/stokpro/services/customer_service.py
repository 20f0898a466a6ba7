# Overview: Service-layer operations for customers; master data, the running balance and its ledger.

"""
Customer (cari) service.

balance < 0: the customer owes us (veresiye sales).
balance > 0: we owe the customer (returns or over-payment).

Every balance change goes through post_transaction() so the ledger in
account_transactions always explains the current balance.
"""

from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from ..models import Customer, AccountTransaction, Sale, Return, Payment
from ..constants import LEDGER_CREDIT, LEDGER_DEBIT
from ..errors import ConflictError
from ..time_utils import utcnow
from . import settings_service
from .pagination import like_pattern, paginate
from .pricing import money
from .scope import get_scoped, scoped


NOT_FOUND = "Musteri bulunamadi"

CUSTOMER_SORTABLE = {
    "created_at": Customer.created_at,
    "name": Customer.name,
    "balance": Customer.balance,
    "updated_at": Customer.updated_at,
}


def get_customer(tenant_id, customer_id) -> Customer:
    return get_scoped(Customer, tenant_id, customer_id, NOT_FOUND)


def post_transaction(customer: Customer, entry_type: str, amount: Decimal, description: str,
                     reference_type: str | None = None, reference_id=None,
                     transaction_date=None) -> AccountTransaction:
    """
    Move the customer's balance and record why.

    borc lowers the balance (customer owes more), alacak raises it.
    The caller commits.
    """
    amount = Decimal(str(amount))
    current = customer.balance or Decimal("0")
    customer.balance = current - amount if entry_type == LEDGER_DEBIT else current + amount

    entry = AccountTransaction(
        tenant_id=customer.tenant_id,
        customer_id=customer.id,
        type=entry_type,
        amount=amount,
        description=description,
        reference_type=reference_type,
        reference_id=reference_id,
        transaction_date=transaction_date or utcnow(),
    )
    db.session.add(entry)
    return entry


def list_customers(tenant_id, params: dict) -> dict:
    query = scoped(Customer, tenant_id)
    if params.get("is_active") is not None:
        query = query.filter(Customer.is_active.is_(params["is_active"]))
    if params.get("search"):
        pattern = like_pattern(params["search"])
        query = query.filter(db.or_(
            Customer.name.ilike(pattern, escape="\\"),
            Customer.phone.ilike(pattern, escape="\\"),
            Customer.email.ilike(pattern, escape="\\"),
        ))
    return paginate(query, params, CUSTOMER_SORTABLE)


def customer_detail(tenant_id, customer_id) -> dict:
    """Customer with its documents and ledger, newest first."""
    customer = get_customer(tenant_id, customer_id)
    data = customer.to_dict()
    data["sales"] = [s.to_dict() for s in _sales_query(tenant_id, customer.id).all()]
    data["returns"] = [r.to_dict() for r in _returns_query(tenant_id, customer.id).all()]
    data["payments"] = [p.to_dict() for p in _payments_query(tenant_id, customer.id).all()]
    data["transactions"] = [t.to_dict() for t in _transactions_query(tenant_id, customer.id).all()]
    return data


def _check_email(tenant_id, email: str | None, exclude_id=None) -> None:
    if not email:
        return
    query = scoped(Customer, tenant_id).filter(db.func.lower(Customer.email) == email.lower())
    if exclude_id is not None:
        query = query.filter(Customer.id != exclude_id)
    if query.first() is not None:
        raise ConflictError("Bu e-posta adresi zaten kullaniliyor")


def create_customer(tenant_id, data: dict, user_id=None) -> Customer:
    settings_service.ensure_within_limit(tenant_id, "customers")
    _check_email(tenant_id, data.get("email"))
    customer = Customer(tenant_id=tenant_id, created_by=user_id, balance=Decimal("0"), **data)
    db.session.add(customer)
    db.session.commit()
    return customer


def update_customer(tenant_id, customer_id, data: dict) -> Customer:
    customer = get_customer(tenant_id, customer_id)
    if "email" in data:
        _check_email(tenant_id, data["email"], exclude_id=customer.id)
    for key, value in data.items():
        setattr(customer, key, value)
    db.session.commit()
    return customer


def delete_customer(tenant_id, customer_id) -> None:
    """Soft delete; refused while the account is not settled."""
    customer = get_customer(tenant_id, customer_id)
    if (customer.balance or 0) != 0:
        raise ConflictError("Bakiyesi olan musteri silinemez. Once bakiyeyi sifirlayin.")
    customer.is_active = False
    db.session.commit()


# =============================================================================
# BALANCE VIEWS
# =============================================================================

def customers_with_debt(tenant_id) -> list[Customer]:
    """Active customers who owe money, largest debt first."""
    return (
        scoped(Customer, tenant_id)
        .filter(Customer.is_active.is_(True), Customer.balance < 0)
        .order_by(Customer.balance.asc())
        .all()
    )


def customers_with_credit(tenant_id) -> list[Customer]:
    return (
        scoped(Customer, tenant_id)
        .filter(Customer.is_active.is_(True), Customer.balance > 0)
        .order_by(Customer.balance.desc())
        .all()
    )


# =============================================================================
# PER-CUSTOMER DOCUMENTS
# =============================================================================

def _sales_query(tenant_id, customer_id):
    return scoped(Sale, tenant_id).filter(Sale.customer_id == customer_id).order_by(Sale.sale_date.desc())


def _returns_query(tenant_id, customer_id):
    return scoped(Return, tenant_id).filter(Return.customer_id == customer_id).order_by(Return.return_date.desc())


def _payments_query(tenant_id, customer_id):
    return scoped(Payment, tenant_id).filter(Payment.customer_id == customer_id).order_by(Payment.payment_date.desc())


def _transactions_query(tenant_id, customer_id):
    return (
        scoped(AccountTransaction, tenant_id)
        .filter(AccountTransaction.customer_id == customer_id)
        .order_by(AccountTransaction.transaction_date.desc(), AccountTransaction.created_at.desc())
    )


def customer_sales(tenant_id, customer_id) -> list[Sale]:
    get_customer(tenant_id, customer_id)
    return _sales_query(tenant_id, customer_id).all()


def customer_returns(tenant_id, customer_id) -> list[Return]:
    get_customer(tenant_id, customer_id)
    return _returns_query(tenant_id, customer_id).all()


def customer_payments(tenant_id, customer_id) -> list[Payment]:
    get_customer(tenant_id, customer_id)
    return _payments_query(tenant_id, customer_id).all()


def list_transactions(tenant_id, customer_id, params: dict) -> dict:
    get_customer(tenant_id, customer_id)
    query = scoped(AccountTransaction, tenant_id).filter(AccountTransaction.customer_id == customer_id)
    return paginate(
        query,
        params,
        {"created_at": AccountTransaction.created_at, "transaction_date": AccountTransaction.transaction_date},
        default_sort="transaction_date",
    )


def _sum_and_count(query, column) -> tuple[Decimal, int]:
    total, count = query.with_entities(db.func.coalesce(db.func.sum(column), 0), db.func.count()).one()
    return money(total), int(count)


def customer_stats(tenant_id, customer_id) -> dict:
    """Completed sales, completed returns and payments of one customer."""
    customer = get_customer(tenant_id, customer_id)

    sales_total, sales_count = _sum_and_count(
        scoped(Sale, tenant_id).filter(Sale.customer_id == customer.id, Sale.status == "completed"),
        Sale.grand_total,
    )
    returns_total, returns_count = _sum_and_count(
        scoped(Return, tenant_id).filter(Return.customer_id == customer.id, Return.status == "completed"),
        Return.total_amount,
    )
    payments_total, payments_count = _sum_and_count(
        scoped(Payment, tenant_id).filter(Payment.customer_id == customer.id),
        Payment.amount,
    )

    return {
        "balance": str(customer.balance or Decimal("0")),
        "total_sales": str(sales_total),
        "sales_count": sales_count,
        "total_returns": str(returns_total),
        "returns_count": returns_count,
        "total_payments": str(payments_total),
        "payments_count": payments_count,
        "net_sales": str(sales_total - returns_total),
    }
