# Overview: Service-layer operations for the account directory.

"""
Account Directory

Email is the unique, case-sensitive match key. Registration is an idempotent
upsert: a first registration creates the account (approved when the role is
admin, pending otherwise); a repeat registration for the same email keeps
role and status and only refreshes the non-identity profile fields.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from ..errors import NotFoundError, ValidationError
from ..extensions import db
from ..models import Account, ACCOUNT_ROLES, ACCOUNT_STATUSES
from ..validation import ModelValidationPolicy, validate_payload, in_int_range

REGISTER_POLICY = ModelValidationPolicy(
    writable_fields={"email", "name", "photo_url", "role"},
    required_on_create={"email"},
)

ADMIN_UPDATE_POLICY = ModelValidationPolicy(
    writable_fields={"name", "role", "status"},
)

# Refreshed on repeat registration; role/status are never touched there.
PROFILE_FIELDS = ("name", "photo_url")


def _check_enums(patch: dict) -> None:
    if "role" in patch and patch["role"] not in ACCOUNT_ROLES:
        raise ValidationError(f"role must be one of: {', '.join(ACCOUNT_ROLES)}")
    if "status" in patch and patch["status"] not in ACCOUNT_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(ACCOUNT_STATUSES)}")


def get_account_by_email(email: str) -> Account | None:
    return db.session.query(Account).filter(Account.email == email).first()


def get_account(account_id: int) -> Account:
    account = db.session.get(Account, account_id) if in_int_range(account_id) else None
    if account is None:
        raise NotFoundError("Account not found")
    return account


def register_account(payload: dict) -> tuple[Account, bool]:
    """
    Create or refresh the account for ``payload["email"]``.

    Returns (account, created). A concurrent first registration for the same
    email loses on the unique constraint and falls through to the refresh path.
    """
    patch = validate_payload(model=Account, payload=payload, policy=REGISTER_POLICY, partial=False)
    if "@" not in patch["email"]:
        raise ValidationError("email must be a valid address")
    _check_enums(patch)

    email = patch["email"]
    existing = get_account_by_email(email)
    if existing is None:
        role = patch.get("role") or "buyer"
        account = Account(
            email=email,
            name=patch.get("name") or "",
            photo_url=patch.get("photo_url"),
            role=role,
            status="approved" if role == "admin" else "pending",
        )
        db.session.add(account)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            existing = get_account_by_email(email)
            if existing is None:
                raise
        else:
            current_app.logger.info("Registered account %s as %s (%s)", email, account.role, account.status)
            return account, True

    changed = False
    for field in PROFILE_FIELDS:
        if field in patch and patch[field] is not None and getattr(existing, field) != patch[field]:
            setattr(existing, field, patch[field])
            changed = True
    if changed:
        db.session.commit()
    return existing, False


def list_accounts(search: str | None = None) -> list[Account]:
    query = db.session.query(Account)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(Account.name.ilike(pattern), Account.email.ilike(pattern)))
    return query.order_by(Account.created_at.desc(), Account.id.desc()).all()


def update_account(account_id: int, payload: dict, *, actor_email: str | None = None) -> Account:
    """Admin mutation of another account's role, status or display name."""
    patch = validate_payload(model=Account, payload=payload, policy=ADMIN_UPDATE_POLICY, partial=True)
    if not patch:
        raise ValidationError("Nothing to update")
    _check_enums(patch)

    account = get_account(account_id)
    before = (account.role, account.status)
    for field, value in patch.items():
        setattr(account, field, value)
    db.session.commit()

    current_app.logger.info(
        "Account %s changed role/status %s -> %s by %s",
        account.email, before, (account.role, account.status), actor_email,
    )
    return account
