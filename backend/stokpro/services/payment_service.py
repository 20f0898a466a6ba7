# Overview: Service-layer operations for customer payments (tahsilat).

from __future__ import annotations

from ..extensions import db
from ..models import Payment
from ..constants import LEDGER_CREDIT
from ..errors import BusinessRuleError
from ..time_utils import utcnow
from . import account_service, customer_service
from .pagination import paginate
from .scope import get_scoped, scoped
from .sale_service import get_sale


PAYMENT_SORTABLE = {
    "created_at": Payment.created_at,
    "payment_date": Payment.payment_date,
    "amount": Payment.amount,
}


def list_payments(tenant_id, params: dict) -> dict:
    query = scoped(Payment, tenant_id)
    if params.get("customer_id"):
        query = query.filter(Payment.customer_id == params["customer_id"])
    if params.get("method"):
        query = query.filter(Payment.method == params["method"])
    if params.get("start_date"):
        query = query.filter(db.func.date(Payment.payment_date) >= params["start_date"])
    if params.get("end_date"):
        query = query.filter(db.func.date(Payment.payment_date) <= params["end_date"])
    return paginate(query, params, PAYMENT_SORTABLE, default_sort="payment_date")


def get_payment(tenant_id, payment_id) -> Payment:
    return get_scoped(Payment, tenant_id, payment_id, "Tahsilat bulunamadi")


def create_payment(tenant_id, data: dict) -> Payment:
    """
    Record a collection from a customer.

    The customer balance goes up by the amount (alacak). When account_id
    is given the money lands in that kasa/banka account as gelir.
    """
    customer = customer_service.get_customer(tenant_id, data["customer_id"])
    if data.get("sale_id"):
        sale = get_sale(tenant_id, data["sale_id"])
        if sale.customer_id != customer.id:
            raise BusinessRuleError("Satis bu musteriye ait degil")

    account = None
    if data.get("account_id"):
        account = account_service.get_account(tenant_id, data["account_id"], lock=True)
        if not account.is_active:
            raise BusinessRuleError("Pasif hesaba hareket eklenemez")

    payment = Payment(
        tenant_id=tenant_id,
        customer_id=customer.id,
        sale_id=data.get("sale_id"),
        account_id=account.id if account else None,
        payment_date=data.get("payment_date") or utcnow(),
        amount=data["amount"],
        method=data["method"],
        notes=data.get("notes"),
    )
    db.session.add(payment)
    db.session.flush()

    customer_service.post_transaction(
        customer, LEDGER_CREDIT, data["amount"], f"Tahsilat: {data['method']}",
        reference_type="payment", reference_id=payment.id, transaction_date=payment.payment_date,
    )
    if account is not None:
        account_service.post_movement(
            account, "gelir", data["amount"], description=f"Tahsilat: {customer.name}",
            category="tahsilat", reference_type="payment", reference_id=payment.id,
            movement_date=payment.payment_date,
        )

    db.session.commit()
    return payment
