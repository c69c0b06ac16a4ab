# Overview: Flask API routes for orders; hands every mutation to the inventory engine.

"""
Order routes.

- POST  /api/orders                 place an order (stock reserved atomically)
- GET   /api/orders                 list orders (buyers see only their own)
- GET   /api/orders/<id>            order detail
- PATCH /api/orders/<id>            {"status": ...} and/or {"tracking": {...}}
- PATCH /api/orders/<id>/tracking   append a tracking event (manager)

Buyers may read and cancel only their own orders; other status changes are
for managers and admins.
"""

from flask import Blueprint, request, jsonify, g

from ..decorators import require_action
from ..errors import ForbiddenError, NotFoundError, ValidationError
from ..extensions import db
from ..models import Order, ORDER_STATUSES
from ..permissions import Action
from ..services import permission_service
from ..services.inventory_service import ORDER_DETAIL_FIELDS, CANCELLED, get_engine
from ..validation import enforce_rules_tracking_event, in_int_range

orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")

ORDER_PATCH_FIELDS = {"status", "tracking"}


def _is_buyer() -> bool:
    return g.current_account.role == "buyer"


def _visible_order(order_id: int) -> Order:
    order = get_engine().get_order(order_id)
    if _is_buyer() and order.user_email != g.current_email:
        raise NotFoundError("Order not found")
    return order


@orders_bp.post("")
@require_action(Action.PLACE_ORDER)
def place_order_route():
    """
    Place an order for the caller.

    Request body:
    - product_id: int (required)
    - quantity: int > 0 (required)
    - delivery_address, contact_number, notes: str (optional)
    """
    data = request.get_json(silent=True) or {}
    product_id = data.get("product_id")
    if isinstance(product_id, bool) or not isinstance(product_id, int):
        raise ValidationError("product_id must be an integer")
    if not in_int_range(product_id):
        raise NotFoundError("Product not found")
    if "quantity" not in data:
        raise ValidationError("quantity is required")

    details = {k: data[k] for k in ORDER_DETAIL_FIELDS if data.get(k) is not None}
    for key, value in details.items():
        if not isinstance(value, str):
            raise ValidationError(f"{key} must be a string")

    order = get_engine().place(product_id, data["quantity"], g.current_email, details=details)
    return jsonify({"order": order.to_dict()}), 201


@orders_bp.get("")
@require_action(Action.VIEW_ORDERS)
def list_orders_route():
    """
    Query params:
    - status: str (optional)
    - user_email: str (optional; forced to the caller for buyers)
    - product_id: int (optional)
    """
    query = db.session.query(Order)

    status = request.args.get("status")
    if status:
        query = query.filter(Order.status == status)

    user_email = g.current_email if _is_buyer() else request.args.get("user_email")
    if user_email:
        query = query.filter(Order.user_email == user_email)

    product_id = request.args.get("product_id", type=int)
    if product_id is not None:
        if not in_int_range(product_id):
            raise ValidationError("product_id is out of range")
        query = query.filter(Order.product_id == product_id)

    orders = query.order_by(Order.created_at.desc(), Order.id.desc()).all()
    return jsonify({"orders": [o.to_dict() for o in orders], "count": len(orders)})


@orders_bp.get("/<int:order_id>")
@require_action(Action.VIEW_ORDERS)
def get_order_route(order_id: int):
    return jsonify({"order": _visible_order(order_id).to_dict()})


@orders_bp.patch("/<int:order_id>")
@require_action(Action.UPDATE_ORDER_STATUS)
def update_order_route(order_id: int):
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        raise ValidationError("Provide status and/or tracking")
    unknown = sorted(set(data) - ORDER_PATCH_FIELDS)
    if unknown:
        raise ValidationError(f"Field not allowed: {', '.join(unknown)}")

    _visible_order(order_id)

    new_status = data.get("status")
    if "status" in data:
        if new_status not in ORDER_STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(ORDER_STATUSES)}")
        if _is_buyer() and new_status != CANCELLED:
            raise ForbiddenError("Buyers may only cancel their own orders")

    event = None
    if "tracking" in data:
        permission_service.require_action(
            g.current_account,
            Action.TRACK_ORDER,
            identity=g.current_email,
            resource=request.path,
        )
        event = enforce_rules_tracking_event(data["tracking"])

    # Status and tracking commit together or not at all
    order = get_engine().update_order(order_id, status=new_status, event=event)
    return jsonify({"order": order.to_dict()})


@orders_bp.patch("/<int:order_id>/tracking")
@require_action(Action.TRACK_ORDER)
def track_order_route(order_id: int):
    order = get_engine().track(order_id, request.get_json(silent=True))
    return jsonify({"order": order.to_dict()})
