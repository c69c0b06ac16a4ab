# Overview: The order/inventory consistency engine.

# backend/garments/services/inventory_service.py

"""
Order & Inventory Invariants (authoritative)

- products.quantity >= 0 at all times.
- Conservation: for every product,
      quantity_now = quantity_initial + restocked - SUM(orders.quantity where status != 'cancelled')
  Quantity is never recomputed by summing orders; it only moves through the
  symmetric pair below (plus restock), each applied exactly once.

Concurrency discipline:
- place(): the stock check and the decrement are ONE conditional UPDATE
  (quantity = quantity - n WHERE quantity >= n). The order INSERT commits in
  the same transaction, so either both happen or neither does.
- cancellation: the "already cancelled?" check and the status write are ONE
  conditional UPDATE (WHERE status != 'cancelled'). Only the request whose
  update matched a row restores stock, in the same transaction.
- A status change and a tracking append requested together commit in one
  transaction; if either fails, neither is applied.
- Every conditional update bumps version_id, so ORM writes elsewhere that
  raced with it fail with StaleDataError and are retried by run_with_retry.
- No locks are held across requests; retries are bounded and exhaustion is
  surfaced as ConflictError / UnavailableError.
"""

from __future__ import annotations

import logging

from flask import current_app
from sqlalchemy import delete, func, update
from sqlalchemy.orm.exc import StaleDataError

from ..errors import (
    InsufficientStockError,
    InvalidQuantityError,
    InvalidTransitionError,
    NotFoundError,
    ProductInUseError,
    ValidationError,
)
from ..models import Order, Product, ORDER_STATUSES, OPEN_ORDER_STATUSES
from ..time_utils import to_utc_z, utcnow
from ..validation import enforce_rules_tracking_event, in_int_range, parse_int
from .concurrency import run_with_retry

CANCELLED = "cancelled"

ORDER_DETAIL_FIELDS = ("delivery_address", "contact_number", "notes")


def _require_quantity(value) -> int:
    qty = parse_int(value, "quantity", error=InvalidQuantityError)
    if qty <= 0:
        raise InvalidQuantityError("quantity must be greater than zero")
    return qty


class InventoryEngine:
    """
    Orchestrates order placement, status transitions, tracking and restocking
    against the catalog and the order ledger.

    The store handle (a SQLAlchemy session or scoped session) is injected at
    construction; the application factory builds one engine per app around
    Flask-SQLAlchemy's request-scoped session.
    """

    def __init__(self, session, *, retry_attempts: int = 3, backoff_base: float = 0.05, logger=None):
        self.session = session
        self.retry_attempts = retry_attempts
        self.backoff_base = backoff_base
        self.logger = logger or logging.getLogger(__name__)

    def _retry(self, op):
        return run_with_retry(
            op,
            session=self.session,
            attempts=self.retry_attempts,
            backoff_base=self.backoff_base,
        )

    def _get_product(self, product_id: int) -> Product:
        # Ids outside the column range cannot exist and would overflow the driver
        product = self.session.get(Product, product_id) if in_int_range(product_id) else None
        if product is None:
            raise NotFoundError("Product not found")
        return product

    # -- placement ---------------------------------------------------------

    def place(self, product_id: int, quantity, buyer_email: str, *, details: dict | None = None) -> Order:
        """
        Create a pending order and decrement stock atomically.

        Raises NotFoundError, InvalidQuantityError, InsufficientStockError.
        """
        extra = {k: v for k, v in (details or {}).items() if k in ORDER_DETAIL_FIELDS}

        def _op():
            product = self._get_product(product_id)
            qty = _require_quantity(quantity)
            unit_price = product.price

            result = self.session.execute(
                update(Product)
                .where(Product.id == product_id, Product.quantity >= qty)
                .values(
                    quantity=Product.quantity - qty,
                    version_id=Product.version_id + 1,
                    updated_at=utcnow(),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                self.session.rollback()
                current = self._get_product(product_id)
                raise InsufficientStockError(
                    "Insufficient stock for this order",
                    details={"product_id": product_id, "requested_quantity": qty, "available": current.quantity},
                )

            order = Order(
                product_id=product_id,
                quantity=qty,
                user_email=buyer_email,
                status="pending",
                unit_price=unit_price,
                total_price=round(unit_price * qty, 2),
                tracking=[],
                **extra,
            )
            self.session.add(order)
            self.session.commit()
            return order

        order = self._retry(_op)
        self.logger.info(
            "Order %s placed by %s: product %s x%s",
            order.id, buyer_email, order.product_id, order.quantity,
        )
        return order

    # -- status transitions and tracking -------------------------------------

    def get_order(self, order_id: int) -> Order:
        order = self.session.get(Order, order_id) if in_int_range(order_id) else None
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def _stage_event(self, order: Order, entry: dict) -> None:
        """Append a stamped event; the version-checked flush catches concurrent writers."""
        stamped = dict(entry)
        stamped["recorded_at"] = to_utc_z(utcnow())
        order.tracking = [*(order.tracking or []), stamped]
        self.session.flush()

    def _stage_status(self, order: Order, new_status: str) -> bool:
        """
        Stage a status change inside the current transaction.

        Returns True when the change is a first cancellation that restored
        stock. Nothing is committed here; any exception leaves the caller's
        transaction to be rolled back whole.
        """
        if order.status == CANCELLED:
            if new_status == CANCELLED:
                return False
            raise InvalidTransitionError("Cancelled orders cannot change status")
        if order.status == new_status:
            return False

        flipped = self.session.execute(
            update(Order)
            .where(Order.id == order.id, Order.status != CANCELLED)
            .values(status=new_status, version_id=Order.version_id + 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if flipped.rowcount != 1:
            # Cancelled by another request since it was read; the retry re-reads it
            raise StaleDataError(f"Order {order.id} changed concurrently")

        if new_status != CANCELLED:
            return False

        restored = self.session.execute(
            update(Product)
            .where(Product.id == order.product_id)
            .values(
                quantity=Product.quantity + order.quantity,
                version_id=Product.version_id + 1,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        if restored.rowcount != 1:
            self.logger.error(
                "Cancellation of order %s aborted: product %s no longer exists",
                order.id, order.product_id,
            )
            raise NotFoundError(
                f"Product {order.product_id} referenced by order {order.id} no longer exists; cancellation aborted"
            )
        return True

    def update_order(self, order_id: int, *, status: str | None = None, event: dict | None = None) -> Order:
        """
        Apply a status change and/or a tracking append as one transaction.

        The event is staged first, so its version-checked flush sees the row
        before the conditional status update bumps the version again.
        """
        if status is None and event is None:
            raise ValidationError("Provide status and/or tracking")
        if status is not None and status not in ORDER_STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(ORDER_STATUSES)}")
        entry = enforce_rules_tracking_event(event) if event is not None else None

        def _op():
            order = self.get_order(order_id)
            if entry is not None:
                self._stage_event(order, entry)
            restored = self._stage_status(order, status) if status is not None else False
            self.session.commit()
            return self.get_order(order_id), restored

        order, restored = self._retry(_op)
        if restored:
            self.logger.info(
                "Order %s cancelled; restored %s to product %s",
                order.id, order.quantity, order.product_id,
            )
        elif status is not None:
            self.logger.info("Order %s status is %s", order.id, order.status)
        if entry is not None:
            self.logger.info("Order %s tracking event #%d appended", order.id, len(order.tracking))
        return order

    def set_status(self, order_id: int, new_status: str) -> Order:
        """
        Move an order to ``new_status``.

        Cancellation restores stock exactly once; re-cancelling is a no-op.
        Any other transition is a plain status write, refused for orders that
        are already cancelled since reviving one would leave its stock
        restored while the order counts against it again.
        """
        return self.update_order(order_id, status=new_status)

    def cancel(self, order_id: int) -> Order:
        """
        Cancel an order, restoring its quantity to the product on the first
        cancellation only.

        If the referenced product no longer exists the whole cancellation is
        rolled back and NotFoundError is raised: the order stays open rather
        than leaving stock permanently understated.
        """
        return self.update_order(order_id, status=CANCELLED)

    def track(self, order_id: int, event: dict) -> Order:
        """
        Append a tracking event. Concurrent appends collide on the order's
        version column and are retried, so none is lost.
        """
        return self.update_order(order_id, event=enforce_rules_tracking_event(event))

    # -- catalog-side stock operations --------------------------------------

    def restock(self, product_id: int, quantity) -> Product:
        """Atomically add ``quantity`` units to a product."""
        qty = _require_quantity(quantity)
        if not in_int_range(product_id):
            raise NotFoundError("Product not found")

        def _op():
            result = self.session.execute(
                update(Product)
                .where(Product.id == product_id)
                .values(
                    quantity=Product.quantity + qty,
                    version_id=Product.version_id + 1,
                    updated_at=utcnow(),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                self.session.rollback()
                raise NotFoundError("Product not found")
            self.session.commit()
            return self.session.get(Product, product_id)

        product = self._retry(_op)
        self.logger.info("Product %s restocked by %s (now %s)", product_id, qty, product.quantity)
        return product

    def open_order_count(self, product_id: int) -> int:
        return int(
            self.session.query(func.count(Order.id))
            .filter(Order.product_id == product_id, Order.status.in_(OPEN_ORDER_STATUSES))
            .scalar()
            or 0
        )

    def delete_product(self, product_id: int) -> None:
        """
        Delete a product that has no open orders.

        The delete is conditional on the version read before the open-order
        check; a placement that lands in between bumps the version, the delete
        matches nothing, and the retry sees the new order.
        """
        def _op():
            product = self._get_product(product_id)
            version = product.version_id

            open_orders = self.open_order_count(product_id)
            if open_orders:
                raise ProductInUseError(
                    "Product has open orders; cancel them before deleting",
                    details={"product_id": product_id, "open_orders": open_orders},
                )

            result = self.session.execute(
                delete(Product)
                .where(Product.id == product_id, Product.version_id == version)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise StaleDataError("Product changed while deleting")
            self.session.commit()

        self._retry(_op)
        self.logger.info("Product %s deleted", product_id)


def get_engine() -> InventoryEngine:
    """The engine the application factory built for the current app."""
    return current_app.extensions["garments.inventory_engine"]
