# Overview: Flask API routes for accounts operations; parses input and returns JSON responses.

"""
Cash and Bank Account API Routes

- accounts (kasa / banka) with opening and current balance
- movements: manual gelir / gider entries, balance_after recorded
- transfers between two accounts of the tenant

Static paths (/summary, /transfers) are registered before /<uuid>.
"""

from flask import Blueprint, request, jsonify, g

from ..dtos import (
    AccountListDto,
    AccountMovementListDto,
    AccountTransferListDto,
    CreateAccountDto,
    CreateMovementDto,
    CreateTransferDto,
    UpdateAccountDto,
)
from ..services import account_service
from ..decorators import require_auth, require_permission
from .. import permissions


accounts_bp = Blueprint("accounts", __name__, url_prefix="/api/accounts")


@accounts_bp.get("")
@require_auth
@require_permission(permissions.ACCOUNTS_VIEW)
def list_accounts_route():
    params = AccountListDto.validate(request.args.to_dict())
    return jsonify(account_service.list_accounts(g.tenant_id, params)), 200


@accounts_bp.get("/summary")
@require_auth
@require_permission(permissions.ACCOUNTS_VIEW)
def summary_route():
    return jsonify({"summary": account_service.summary(g.tenant_id)}), 200


# =============================================================================
# TRANSFERS
# =============================================================================

@accounts_bp.get("/transfers")
@require_auth
@require_permission(permissions.ACCOUNTS_VIEW)
def list_transfers_route():
    params = AccountTransferListDto.validate(request.args.to_dict())
    return jsonify(account_service.list_transfers(g.tenant_id, params)), 200


@accounts_bp.post("/transfers")
@require_auth
@require_permission(permissions.ACCOUNTS_UPDATE)
def create_transfer_route():
    """
    Returns:
        201: {"transfer": {...}}
        400: same account, inactive account, insufficient balance
    """
    data = CreateTransferDto.validate(request.get_json(silent=True))
    transfer = account_service.create_transfer(g.tenant_id, data)
    return jsonify({"transfer": transfer.to_dict()}), 201


# =============================================================================
# ACCOUNTS
# =============================================================================

@accounts_bp.get("/<uuid:account_id>")
@require_auth
@require_permission(permissions.ACCOUNTS_VIEW)
def get_account_route(account_id):
    account = account_service.get_account(g.tenant_id, account_id)
    return jsonify({"account": account.to_dict()}), 200


@accounts_bp.post("")
@require_auth
@require_permission(permissions.ACCOUNTS_CREATE)
def create_account_route():
    data = CreateAccountDto.validate(request.get_json(silent=True))
    account = account_service.create_account(g.tenant_id, data)
    return jsonify({"account": account.to_dict()}), 201


@accounts_bp.put("/<uuid:account_id>")
@require_auth
@require_permission(permissions.ACCOUNTS_UPDATE)
def update_account_route(account_id):
    data = UpdateAccountDto.validate(request.get_json(silent=True))
    account = account_service.update_account(g.tenant_id, account_id, data)
    return jsonify({"account": account.to_dict()}), 200


@accounts_bp.delete("/<uuid:account_id>")
@require_auth
@require_permission(permissions.ACCOUNTS_DELETE)
def delete_account_route(account_id):
    account_service.delete_account(g.tenant_id, account_id)
    return jsonify({"message": "Hesap silindi"}), 200


# =============================================================================
# MOVEMENTS
# =============================================================================

@accounts_bp.get("/<uuid:account_id>/movements")
@require_auth
@require_permission(permissions.ACCOUNTS_VIEW)
def list_movements_route(account_id):
    params = AccountMovementListDto.validate(request.args.to_dict())
    return jsonify(account_service.list_movements(g.tenant_id, account_id, params)), 200


@accounts_bp.post("/<uuid:account_id>/movements")
@require_auth
@require_permission(permissions.ACCOUNTS_UPDATE)
def add_movement_route(account_id):
    """
    Returns:
        201: {"movement": {...}}
        400: inactive account
    """
    data = CreateMovementDto.validate(request.get_json(silent=True))
    movement = account_service.add_movement(g.tenant_id, account_id, data)
    return jsonify({"movement": movement.to_dict()}), 201
