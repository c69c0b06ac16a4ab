# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/garments/routes/products.py
"""
Product catalog routes.

Listings, detail and home highlights are public. Creating and restocking
require a non-suspended manager; edits and deletes any authenticated account.
Stock never changes through an edit: it moves only through orders and
restock, both handled by the inventory engine.
"""
from flask import Blueprint, request, jsonify, g

from ..decorators import require_action
from ..permissions import Action
from ..services import catalog_service
from ..services.inventory_service import get_engine

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_action(Action.VIEW_CATALOG)
def list_products():
    """
    List products.

    Query params:
    - category: str (optional)
    - search: str (optional) - case-insensitive name match
    - created_by: str (optional) - creating manager's email
    - sort: name | price | created_at | quantity (default created_at)
    - order: asc | desc (default desc)
    - limit: int (optional) - cap when not paginating; 0 means no cap
    - page: int (optional) - page number (1-indexed)
    - per_page: int (optional) - items per page (default 20, max 100)
    """
    result = catalog_service.list_products(
        category=request.args.get("category"),
        search=request.args.get("search"),
        created_by=request.args.get("created_by"),
        sort=request.args.get("sort"),
        order=request.args.get("order"),
        limit=request.args.get("limit", type=int),
        page=request.args.get("page", type=int),
        per_page=request.args.get("per_page", type=int),
    )
    return jsonify(result)


@products_bp.get("/home")
@require_action(Action.VIEW_HOME_PRODUCTS)
def home_products():
    products = catalog_service.list_home_products()
    return jsonify({"items": [p.to_dict() for p in products], "count": len(products)})


@products_bp.get("/<int:product_id>")
@require_action(Action.VIEW_CATALOG)
def get_product(product_id: int):
    return jsonify({"product": catalog_service.get_product(product_id).to_dict()})


@products_bp.post("")
@require_action(Action.CREATE_PRODUCT)
def create_product_route():
    """Create a product owned by the calling manager."""
    product = catalog_service.create_product(
        payload=request.get_json(silent=True),
        created_by=g.current_email,
    )
    return jsonify({"product": product.to_dict()}), 201


@products_bp.patch("/<int:product_id>")
@require_action(Action.EDIT_PRODUCT)
def update_product_route(product_id: int):
    product = catalog_service.update_product(
        product_id=product_id,
        payload=request.get_json(silent=True),
    )
    return jsonify({"product": product.to_dict()})


@products_bp.delete("/<int:product_id>")
@require_action(Action.DELETE_PRODUCT)
def delete_product_route(product_id: int):
    """Delete a product. Refused with 409 while any non-cancelled order references it."""
    get_engine().delete_product(product_id)
    return jsonify({"ok": True})


@products_bp.post("/<int:product_id>/restock")
@require_action(Action.RESTOCK_PRODUCT)
def restock_product_route(product_id: int):
    data = request.get_json(silent=True) or {}
    product = get_engine().restock(product_id, data.get("quantity"))
    return jsonify({"product": product.to_dict()})
