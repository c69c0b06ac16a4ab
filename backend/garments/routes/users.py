# Overview: Flask API routes for the account directory.

"""
Account routes.

- GET   /api/users/me     own account (any authenticated account)
- GET   /api/users        list/search accounts (admin)
- PATCH /api/users/<id>   change role, status or name (admin)
"""

from flask import Blueprint, request, jsonify, g

from ..decorators import require_action
from ..permissions import Action, allowed_actions
from ..services import account_service

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("/me")
@require_action(Action.VIEW_OWN_ACCOUNT)
def me():
    account = g.current_account
    payload = account.to_dict()
    payload["allowed_actions"] = allowed_actions(account)
    return jsonify({"account": payload})


@users_bp.get("")
@require_action(Action.LIST_ACCOUNTS)
def list_users():
    """
    List all accounts, newest first.

    Query params:
    - search: case-insensitive match on name or email
    """
    accounts = account_service.list_accounts(request.args.get("search"))
    return jsonify({"accounts": [a.to_dict() for a in accounts], "count": len(accounts)})


@users_bp.patch("/<int:account_id>")
@require_action(Action.MANAGE_ACCOUNTS)
def update_user(account_id: int):
    account = account_service.update_account(
        account_id,
        request.get_json(silent=True),
        actor_email=g.current_email,
    )
    return jsonify({"account": account.to_dict()})
