from __future__ import annotations

from ..extensions import db
from garments.time_utils import utcnow, to_utc_z

ORDER_STATUSES = ("pending", "approved", "delivered", "cancelled")

# Orders in these statuses hold stock against their product.
OPEN_ORDER_STATUSES = ("pending", "approved", "delivered")


class Order(db.Model):
    """
    A buyer's request to consume a quantity of one product.

    product_id is a weak reference: it is resolved against the catalog at
    transition time and no stock figure is cached here. quantity never changes
    after creation. tracking is an append-only list of event objects owned by
    the order.
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_orders_quantity_positive"),
        db.Index("ix_orders_product_status", "product_id", "status"),
        db.Index("ix_orders_user_email", "user_email"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    product_id = db.Column(db.Integer, nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    user_email = db.Column(db.String(255), nullable=False)

    status = db.Column(db.String(16), nullable=False, default="pending", index=True)

    # Price snapshot at placement time
    unit_price = db.Column(db.Float, nullable=False, default=0.0)
    total_price = db.Column(db.Float, nullable=False, default=0.0)

    delivery_address = db.Column(db.Text, nullable=True)
    contact_number = db.Column(db.String(32), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    tracking = db.Column(db.JSON, nullable=False, default=list)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Order id={self.id} product_id={self.product_id} quantity={self.quantity} status={self.status}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "user_email": self.user_email,
            "status": self.status,
            "unit_price": self.unit_price,
            "total_price": self.total_price,
            "delivery_address": self.delivery_address,
            "contact_number": self.contact_number,
            "notes": self.notes,
            "tracking": list(self.tracking or []),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
