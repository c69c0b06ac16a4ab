from __future__ import annotations

from ..extensions import db
from garments.time_utils import utcnow, to_utc_z


class Product(db.Model):
    """
    Catalog item with a tracked available quantity.

    INVARIANT: quantity >= 0 at all times. The check constraint is the last
    line of defence; the inventory engine never issues a decrement that could
    cross zero (see services/inventory_service.py).

    Quantity is only moved by the inventory engine (place, first cancel,
    restock). Catalog edits touch descriptive fields only.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("quantity >= 0", name="ck_products_quantity_nonnegative"),
        db.CheckConstraint("price >= 0", name="ck_products_price_nonnegative"),
        db.Index("ix_products_category_name", "category", "name"),
        db.Index("ix_products_home", "show_on_home", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(64), nullable=True, index=True)

    price = db.Column(db.Float, nullable=False, default=0.0)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    minimum_order = db.Column(db.Integer, nullable=False, default=1)

    images = db.Column(db.JSON, nullable=False, default=list)
    payment_options = db.Column(db.String(64), nullable=True)
    show_on_home = db.Column(db.Boolean, nullable=False, default=False)
    rating = db.Column(db.Float, nullable=True)
    location = db.Column(db.String(255), nullable=True)

    created_by = db.Column(db.String(255), nullable=False, index=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} quantity={self.quantity}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price": self.price,
            "quantity": self.quantity,
            "minimum_order": self.minimum_order,
            "images": list(self.images or []),
            "payment_options": self.payment_options,
            "show_on_home": self.show_on_home,
            "rating": self.rating,
            "location": self.location,
            "created_by": self.created_by,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
