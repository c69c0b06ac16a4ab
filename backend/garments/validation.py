from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy import JSON, Boolean, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

from .errors import ServiceError, ValidationError

MAX_PRICE = 9_999_999.99

# Portable INTEGER column range; larger values overflow the driver
MIN_INT = -(2**31)
MAX_INT = 2**31 - 1


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def in_int_range(value: int) -> bool:
    return MIN_INT <= value <= MAX_INT


def parse_int(value: Any, name: str, *, error: type[ServiceError] = ValidationError) -> int:
    """
    Strict integer parsing shared by payload validation and the inventory engine.

    Accepts ints and plain integer strings; rejects bools, floats, decimals,
    scientific notation and anything outside the INTEGER column range.
    """
    # Integers - strict validation to reject floats and scientific notation
    if isinstance(value, bool):
        raise error(f"{name} must be an integer")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise error(f"{name} must be an integer")
        if 'e' in stripped.lower():
            raise error(f"{name} must be a plain integer (scientific notation not allowed)")
        if '.' in stripped:
            raise error(f"{name} must be an integer (no decimals)")
        try:
            parsed = int(stripped)
        except ValueError:
            raise error(f"{name} must be an integer")
    elif isinstance(value, float):
        raise error(f"{name} must be an integer, not a decimal")
    else:
        raise error(f"{name} must be an integer")

    if not in_int_range(parsed):
        raise error(f"{name} is out of range (max {MAX_INT})")
    return parsed


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    if isinstance(coltype, Integer):
        return parse_int(value, col.key)

    # Floats (prices, ratings)
    if isinstance(coltype, Float):
        if isinstance(value, bool):
            raise ValidationError(f"{col.key} must be a number")
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                raise ValidationError(f"{col.key} must be a number")
        else:
            raise ValidationError(f"{col.key} must be a number")
        if math.isnan(number) or math.isinf(number):
            raise ValidationError(f"{col.key} must be a finite number")
        return number

    # Booleans
    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    # JSON columns keep their structure; shape rules live in enforce_rules_*
    if isinstance(coltype, JSON):
        return value

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if isinstance(value, (dict, list)):
            raise ValidationError(f"{col.key} must be a string")
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if f not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        col = cols[k]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    if patch.get("price") is not None:
        price = patch["price"]
        if price < 0:
            raise ValidationError("price must be >= 0")
        if price > MAX_PRICE:
            raise ValidationError(f"price cannot exceed {MAX_PRICE:,.2f}")

    if patch.get("quantity") is not None and patch["quantity"] < 0:
        raise ValidationError("quantity must be >= 0")

    if patch.get("minimum_order") is not None and patch["minimum_order"] < 1:
        raise ValidationError("minimum_order must be >= 1")

    if patch.get("rating") is not None and not 0 <= patch["rating"] <= 5:
        raise ValidationError("rating must be between 0 and 5")

    if "images" in patch:
        images = patch["images"]
        if not isinstance(images, list) or not all(isinstance(i, str) for i in images):
            raise ValidationError("images must be a list of strings")
        patch["images"] = [i.strip() for i in images if i.strip()]


def enforce_rules_tracking_event(event: Any) -> dict:
    """Tracking events are opaque objects; require at least one descriptive key."""
    if not isinstance(event, dict) or not event:
        raise ValidationError("Tracking event must be a non-empty JSON object")
    if not any(event.get(k) for k in ("status", "note", "location")):
        raise ValidationError("Tracking event needs a status, note or location")
    return dict(event)
