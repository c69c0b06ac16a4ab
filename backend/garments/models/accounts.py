from __future__ import annotations

from ..extensions import db
from garments.time_utils import utcnow, to_utc_z

ACCOUNT_ROLES = ("admin", "manager", "buyer")
ACCOUNT_STATUSES = ("pending", "approved", "suspended")


class Account(db.Model):
    """
    Marketplace identity with a role and an approval status.

    The email is the match key for bearer credentials and is compared
    case-sensitively. Accounts are never hard-deleted; suspension is the
    only way to take one out of service.
    """
    __tablename__ = "accounts"
    __table_args__ = (
        db.UniqueConstraint("email", name="uq_accounts_email"),
        db.CheckConstraint("role IN ('admin', 'manager', 'buyer')", name="ck_accounts_role"),
        db.CheckConstraint("status IN ('pending', 'approved', 'suspended')", name="ck_accounts_status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False, default="")
    photo_url = db.Column(db.String(1024), nullable=True)

    role = db.Column(db.String(16), nullable=False, default="buyer")
    status = db.Column(db.String(16), nullable=False, default="pending")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Account id={self.id} email={self.email!r} role={self.role} status={self.status}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "photo_url": self.photo_url,
            "role": self.role,
            "status": self.status,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
