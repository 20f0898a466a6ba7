# Overview: Service-layer operations for cash and bank accounts; movements, transfers and balance summary.

"""
Kasa / banka accounts.

current_balance starts at opening_balance and only changes through
post_movement(), so every change leaves an account_movements row with
the balance it produced (balance_after).
"""

from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from ..models import Account, AccountMovement, AccountTransfer
from ..errors import BusinessRuleError, NotFoundError
from ..time_utils import utcnow
from .concurrency import lock_for_update
from .pagination import like_pattern, paginate
from .pricing import ZERO, money
from .scope import scoped


NOT_FOUND = "Hesap bulunamadi"

INFLOW_TYPES = ("gelir", "transfer_in")

ACCOUNT_SORTABLE = {
    "created_at": Account.created_at,
    "name": Account.name,
    "current_balance": Account.current_balance,
}

MOVEMENT_SORTABLE = {
    "created_at": AccountMovement.created_at,
    "movement_date": AccountMovement.movement_date,
    "amount": AccountMovement.amount,
}

TRANSFER_SORTABLE = {
    "created_at": AccountTransfer.created_at,
    "transfer_date": AccountTransfer.transfer_date,
    "amount": AccountTransfer.amount,
}


def get_account(tenant_id, account_id, lock: bool = False) -> Account:
    query = scoped(Account, tenant_id).filter(Account.id == account_id)
    if lock:
        query = lock_for_update(query)
    account = query.first()
    if account is None:
        raise NotFoundError(NOT_FOUND)
    return account


def list_accounts(tenant_id, params: dict) -> dict:
    query = scoped(Account, tenant_id)
    if params.get("account_type"):
        query = query.filter(Account.account_type == params["account_type"])
    if params.get("is_active") is not None:
        query = query.filter(Account.is_active.is_(params["is_active"]))
    if params.get("search"):
        pattern = like_pattern(params["search"])
        query = query.filter(db.or_(
            Account.name.ilike(pattern, escape="\\"),
            Account.bank_name.ilike(pattern, escape="\\"),
        ))
    return paginate(query, params, ACCOUNT_SORTABLE)


def _clear_default(tenant_id, account_type: str, keep_id=None) -> None:
    query = scoped(Account, tenant_id).filter(
        Account.account_type == account_type,
        Account.is_default.is_(True),
    )
    if keep_id is not None:
        query = query.filter(Account.id != keep_id)
    for account in query.all():
        account.is_default = False


def create_account(tenant_id, data: dict) -> Account:
    if data.get("is_default"):
        _clear_default(tenant_id, data["account_type"])

    opening = money(data.get("opening_balance"))
    account = Account(
        tenant_id=tenant_id,
        is_active=True,
        current_balance=opening,
        **{**data, "opening_balance": opening},
    )
    db.session.add(account)
    db.session.commit()
    return account


def update_account(tenant_id, account_id, data: dict) -> Account:
    account = get_account(tenant_id, account_id)
    if data.get("is_default"):
        _clear_default(tenant_id, account.account_type, keep_id=account.id)
    for key, value in data.items():
        setattr(account, key, value)
    db.session.commit()
    return account


def delete_account(tenant_id, account_id) -> None:
    """Soft delete; movements stay for the history."""
    account = get_account(tenant_id, account_id)
    account.is_active = False
    account.is_default = False
    db.session.commit()


def summary(tenant_id) -> dict:
    """Balances of active accounts per type and overall."""
    rows = (
        scoped(Account, tenant_id)
        .filter(Account.is_active.is_(True))
        .with_entities(Account.account_type, db.func.coalesce(db.func.sum(Account.current_balance), 0))
        .group_by(Account.account_type)
        .all()
    )
    totals = {account_type: money(total) for account_type, total in rows}
    kasa = totals.get("kasa", money(ZERO))
    banka = totals.get("banka", money(ZERO))
    return {
        "total_kasa": str(kasa),
        "total_banka": str(banka),
        "total_balance": str(kasa + banka),
    }


# =============================================================================
# MOVEMENTS
# =============================================================================

def post_movement(account: Account, movement_type: str, amount: Decimal, description: str | None = None,
                  category: str | None = None, reference_type: str | None = None, reference_id=None,
                  movement_date=None) -> AccountMovement:
    """
    Move an account's balance and record the movement.

    gelir / transfer_in add, gider / transfer_out subtract. Inactive
    accounts are refused. The caller commits.
    """
    if not account.is_active:
        raise BusinessRuleError("Pasif hesaba hareket eklenemez")

    amount = money(amount)
    current = account.current_balance or ZERO
    account.current_balance = current + amount if movement_type in INFLOW_TYPES else current - amount

    movement = AccountMovement(
        tenant_id=account.tenant_id,
        account_id=account.id,
        movement_type=movement_type,
        amount=amount,
        balance_after=account.current_balance,
        category=category,
        description=description,
        reference_type=reference_type,
        reference_id=reference_id,
        movement_date=movement_date or utcnow(),
    )
    db.session.add(movement)
    return movement


def add_movement(tenant_id, account_id, data: dict) -> AccountMovement:
    account = get_account(tenant_id, account_id, lock=True)
    movement = post_movement(
        account,
        data["movement_type"],
        data["amount"],
        description=data.get("description"),
        category=data.get("category"),
        reference_type=data.get("reference_type"),
        reference_id=data.get("reference_id"),
        movement_date=data.get("movement_date"),
    )
    db.session.commit()
    return movement


def list_movements(tenant_id, account_id, params: dict) -> dict:
    account = get_account(tenant_id, account_id)
    query = scoped(AccountMovement, tenant_id).filter(AccountMovement.account_id == account.id)
    if params.get("movement_type"):
        query = query.filter(AccountMovement.movement_type == params["movement_type"])
    if params.get("start_date"):
        query = query.filter(db.func.date(AccountMovement.movement_date) >= params["start_date"])
    if params.get("end_date"):
        query = query.filter(db.func.date(AccountMovement.movement_date) <= params["end_date"])
    return paginate(query, params, MOVEMENT_SORTABLE, default_sort="movement_date")


# =============================================================================
# TRANSFERS
# =============================================================================

def create_transfer(tenant_id, data: dict) -> AccountTransfer:
    """Move money between two active accounts of the tenant."""
    if data["from_account_id"] == data["to_account_id"]:
        raise BusinessRuleError("Ayni hesaplar arasinda transfer yapilamaz")

    source = get_account(tenant_id, data["from_account_id"], lock=True)
    target = get_account(tenant_id, data["to_account_id"], lock=True)
    if not source.is_active or not target.is_active:
        raise BusinessRuleError("Pasif hesaplar arasinda transfer yapilamaz")

    amount = money(data["amount"])
    if (source.current_balance or ZERO) < amount:
        raise BusinessRuleError("Yetersiz bakiye")

    transfer_date = data.get("transfer_date") or utcnow()
    transfer = AccountTransfer(
        tenant_id=tenant_id,
        from_account_id=source.id,
        to_account_id=target.id,
        amount=amount,
        description=data.get("description"),
        transfer_date=transfer_date,
    )
    db.session.add(transfer)
    db.session.flush()

    post_movement(source, "transfer_out", amount, description=f"{target.name} hesabina transfer",
                  reference_type="transfer", reference_id=transfer.id, movement_date=transfer_date)
    post_movement(target, "transfer_in", amount, description=f"{source.name} hesabindan transfer",
                  reference_type="transfer", reference_id=transfer.id, movement_date=transfer_date)

    db.session.commit()
    return transfer


def list_transfers(tenant_id, params: dict) -> dict:
    query = scoped(AccountTransfer, tenant_id)
    if params.get("account_id"):
        query = query.filter(db.or_(
            AccountTransfer.from_account_id == params["account_id"],
            AccountTransfer.to_account_id == params["account_id"],
        ))
    if params.get("start_date"):
        query = query.filter(db.func.date(AccountTransfer.transfer_date) >= params["start_date"])
    if params.get("end_date"):
        query = query.filter(db.func.date(AccountTransfer.transfer_date) <= params["end_date"])
    return paginate(query, params, TRANSFER_SORTABLE, default_sort="transfer_date")
