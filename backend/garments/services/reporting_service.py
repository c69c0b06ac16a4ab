# Overview: Read-only reporting view over accounts, products and orders.

"""
Reporting View

Counts, monthly account registrations, products per category, and revenue
from approved orders (total and per month). Nothing here writes.

Empty results resolve to a single placeholder bucket instead of an empty
list. Unlike the inventory core, the report degrades on store failure: it
logs the error and returns zeroed figures flagged ``degraded``.
"""

from __future__ import annotations

from collections import Counter

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from garments.extensions import db
from garments.models import Account, Order, Product
from garments.time_utils import month_key, to_utc_z, utcnow

NO_DATA_LABEL = "No data"
UNCATEGORIZED_LABEL = "Uncategorized"
REVENUE_STATUSES = ("approved",)


def _histogram(counter: Counter, value_key: str) -> list[dict]:
    if not counter:
        return [{"label": NO_DATA_LABEL, value_key: 0}]
    return [{"label": label, value_key: counter[label]} for label in sorted(counter)]


def _count(model) -> int:
    return int(db.session.query(func.count(model.id)).scalar() or 0)


def account_histogram() -> list[dict]:
    months = Counter(
        month_key(created_at)
        for (created_at,) in db.session.query(Account.created_at).all()
        if created_at is not None
    )
    return _histogram(months, "count")


def category_histogram() -> list[dict]:
    rows = (
        db.session.query(Product.category, func.count(Product.id))
        .group_by(Product.category)
        .all()
    )
    categories: Counter = Counter()
    for category, count in rows:
        categories[category or UNCATEGORIZED_LABEL] += int(count)
    return _histogram(categories, "count")


def revenue_summary() -> tuple[float, list[dict]]:
    monthly: Counter = Counter()
    total = 0.0
    rows = (
        db.session.query(Order.created_at, Order.total_price)
        .filter(Order.status.in_(REVENUE_STATUSES))
        .all()
    )
    for created_at, total_price in rows:
        amount = float(total_price or 0)
        total += amount
        monthly[month_key(created_at)] += amount

    histogram = _histogram(monthly, "revenue")
    for bucket in histogram:
        bucket["revenue"] = round(bucket["revenue"], 2)
    return round(total, 2), histogram


def orders_by_status() -> dict:
    rows = db.session.query(Order.status, func.count(Order.id)).group_by(Order.status).all()
    return {status: int(count) for status, count in rows}


def _empty_summary() -> dict:
    return {
        "generated_at": to_utc_z(utcnow()),
        "degraded": True,
        "counts": {"accounts": 0, "products": 0, "orders": 0},
        "orders_by_status": {},
        "accounts_by_month": _histogram(Counter(), "count"),
        "products_by_category": _histogram(Counter(), "count"),
        "revenue_by_month": _histogram(Counter(), "revenue"),
        "total_revenue": 0.0,
    }


def analytics_summary() -> dict:
    try:
        total_revenue, revenue_by_month = revenue_summary()
        return {
            "generated_at": to_utc_z(utcnow()),
            "degraded": False,
            "counts": {
                "accounts": _count(Account),
                "products": _count(Product),
                "orders": _count(Order),
            },
            "orders_by_status": orders_by_status(),
            "accounts_by_month": account_histogram(),
            "products_by_category": category_histogram(),
            "revenue_by_month": revenue_by_month,
            "total_revenue": total_revenue,
        }
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Analytics summary degraded after store error")
        return _empty_summary()
