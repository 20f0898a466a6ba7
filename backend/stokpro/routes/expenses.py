# Overview: Flask API routes for expenses operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, g

from ..dtos import CreateExpenseDto, ExpenseListDto, DateRangeDto, UpdateExpenseDto
from ..services import expense_service
from ..decorators import require_auth, require_permission
from .. import permissions


expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@expenses_bp.get("")
@require_auth
@require_permission(permissions.EXPENSES_VIEW)
def list_expenses_route():
    params = ExpenseListDto.validate(request.args.to_dict())
    return jsonify(expense_service.list_expenses(g.tenant_id, params)), 200


@expenses_bp.get("/summary")
@require_auth
@require_permission(permissions.EXPENSES_VIEW)
def expense_summary_route():
    """Totals per category and overall, optionally within start_date / end_date."""
    params = DateRangeDto.validate(request.args.to_dict())
    return jsonify({"summary": expense_service.summary(g.tenant_id, params)}), 200


@expenses_bp.get("/<uuid:expense_id>")
@require_auth
@require_permission(permissions.EXPENSES_VIEW)
def get_expense_route(expense_id):
    expense = expense_service.get_expense(g.tenant_id, expense_id)
    return jsonify({"expense": expense.to_dict()}), 200


@expenses_bp.post("")
@require_auth
@require_permission(permissions.EXPENSES_CREATE)
def create_expense_route():
    """With account_id the amount is paid out of that account (gider movement)."""
    data = CreateExpenseDto.validate(request.get_json(silent=True))
    expense = expense_service.create_expense(g.tenant_id, data, g.current_user.id)
    return jsonify({"expense": expense.to_dict()}), 201


@expenses_bp.put("/<uuid:expense_id>")
@require_auth
@require_permission(permissions.EXPENSES_UPDATE)
def update_expense_route(expense_id):
    data = UpdateExpenseDto.validate(request.get_json(silent=True))
    expense = expense_service.update_expense(g.tenant_id, expense_id, data)
    return jsonify({"expense": expense.to_dict()}), 200


@expenses_bp.delete("/<uuid:expense_id>")
@require_auth
@require_permission(permissions.EXPENSES_DELETE)
def delete_expense_route(expense_id):
    expense_service.delete_expense(g.tenant_id, expense_id)
    return jsonify({"message": "Gider silindi"}), 200
