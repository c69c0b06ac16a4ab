# backend/garments/services/catalog_service.py
"""
Catalog Service

Product reads and descriptive edits. Stock quantity is deliberately absent
from the edit policy: it only moves through the inventory engine, so the
conservation rule between products and orders cannot be broken from here.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy import asc, desc

from ..errors import NotFoundError, ValidationError
from ..extensions import db
from ..models import Product
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_product, in_int_range
from .concurrency import run_with_retry

PRODUCT_DESCRIPTIVE_FIELDS = {
    "name", "description", "category", "price", "minimum_order", "images",
    "payment_options", "show_on_home", "rating", "location",
}

PRODUCT_CREATE_POLICY = ModelValidationPolicy(
    writable_fields=PRODUCT_DESCRIPTIVE_FIELDS | {"quantity"},
    required_on_create={"name", "price", "quantity"},
)

PRODUCT_EDIT_POLICY = ModelValidationPolicy(
    writable_fields=PRODUCT_DESCRIPTIVE_FIELDS,
)

SORTABLE_FIELDS = {
    "name": Product.name,
    "price": Product.price,
    "created_at": Product.created_at,
    "quantity": Product.quantity,
}


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_DESCRIPTIVE_FIELDS:
            continue
        setattr(p, k, v)


def list_products(
    *,
    category: str | None = None,
    search: str | None = None,
    created_by: str | None = None,
    sort: str | None = None,
    order: str | None = None,
    limit: int | None = None,
    page: int | None = None,
    per_page: int | None = None,
) -> dict:
    """
    Public product listing with filtering, sorting and optional pagination.

    Args:
        category: exact category match
        search: case-insensitive substring match on name
        created_by: email of the creating manager
        sort: one of name, price, created_at, quantity (default created_at)
        order: asc or desc (default desc)
        limit: cap on items when not paginating
        page: Page number (1-indexed). If None, returns all items (up to limit).
        per_page: Items per page (default DEFAULT_PAGE_SIZE, max MAX_PAGE_SIZE)

    Returns:
        Dict with 'items', 'count', and pagination metadata if paginated.
    """
    sort_key = sort or "created_at"
    if sort_key not in SORTABLE_FIELDS:
        raise ValidationError(f"sort must be one of: {', '.join(sorted(SORTABLE_FIELDS))}")
    direction = (order or "desc").lower()
    if direction not in ("asc", "desc"):
        raise ValidationError("order must be asc or desc")

    base_query = db.session.query(Product)
    if category:
        base_query = base_query.filter(Product.category == category)
    if search:
        base_query = base_query.filter(Product.name.ilike(f"%{search.strip()}%"))
    if created_by:
        base_query = base_query.filter(Product.created_by == created_by)

    column = SORTABLE_FIELDS[sort_key]
    ordering = asc if direction == "asc" else desc
    base_query = base_query.order_by(ordering(column), ordering(Product.id))

    if page is None:
        if limit is not None:
            if limit < 0:
                raise ValidationError("limit must be >= 0")
            if not in_int_range(limit):
                raise ValidationError("limit is out of range")
            # limit=0 means no limit
            if limit > 0:
                base_query = base_query.limit(limit)
        products = base_query.all()
        return {
            "items": [p.to_dict() for p in products],
            "count": len(products),
        }

    max_page_size = current_app.config["MAX_PAGE_SIZE"]
    per_page = min(per_page or current_app.config["DEFAULT_PAGE_SIZE"], max_page_size)
    per_page = max(per_page, 1)
    page = max(page, 1)
    if not in_int_range(page):
        raise ValidationError("page is out of range")

    total = base_query.count()
    total_pages = (total + per_page - 1) // per_page if total > 0 else 1

    products = base_query.offset((page - 1) * per_page).limit(per_page).all()

    return {
        "items": [p.to_dict() for p in products],
        "count": len(products),
        "pagination": {
            "page": page,
            "per_page": per_page,
            "total": total,
            "total_pages": total_pages,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        },
    }


def list_home_products(limit: int | None = None) -> list[Product]:
    """Products flagged for the home page, newest first."""
    limit = limit or current_app.config["HOME_PRODUCT_LIMIT"]
    return (
        db.session.query(Product)
        .filter(Product.show_on_home.is_(True))
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(limit)
        .all()
    )


def get_product(product_id: int) -> Product:
    product = db.session.get(Product, product_id) if in_int_range(product_id) else None
    if product is None:
        raise NotFoundError("Product not found")
    return product


def create_product(*, payload: dict, created_by: str) -> Product:
    """
    Create product from a raw payload.

    Initial stock is the only quantity write outside the inventory engine.
    """
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_CREATE_POLICY, partial=False)
    enforce_rules_product(patch)

    p = Product(created_by=created_by, quantity=patch["quantity"], images=[])
    apply_product_patch(p, patch)

    db.session.add(p)
    db.session.commit()

    current_app.logger.info("Product %s created by %s with quantity %s", p.id, created_by, p.quantity)
    return p


def update_product(*, product_id: int, payload: dict) -> Product:
    """
    Edit descriptive fields. The ORM version check makes a concurrent stock
    movement abort this write with StaleDataError, which is retried against
    the fresh row.
    """
    if isinstance(payload, dict) and "quantity" in payload:
        raise ValidationError("quantity cannot be edited; use restock or orders")
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_EDIT_POLICY, partial=True)
    enforce_rules_product(patch)

    def _op():
        p = get_product(product_id)
        apply_product_patch(p, patch)
        db.session.commit()
        return p

    return run_with_retry(
        _op,
        attempts=current_app.config["ORDER_RETRY_ATTEMPTS"],
        backoff_base=current_app.config["ORDER_RETRY_BACKOFF"],
    )
