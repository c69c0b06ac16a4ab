# Overview: Error taxonomy shared by services and routes.

"""
Service errors carry a stable ``kind`` and an HTTP status so every route
renders failures the same way: ``{"error": kind, "message": text}``.

None of these are ever converted into an empty success result inside the
order/inventory core. Only the reporting view degrades on store failures.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    kind = "Error"
    status_code = 400

    def __init__(self, message: str | None = None, details: dict | None = None):
        super().__init__(message or self.kind)
        self.message = message or self.kind
        self.details = details or {}

    def to_dict(self) -> dict:
        body = {"error": self.kind, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(ServiceError):
    """400-level input problem."""
    kind = "ValidationError"
    status_code = 400


class NotFoundError(ServiceError):
    kind = "NotFound"
    status_code = 404


class InvalidQuantityError(ServiceError):
    kind = "InvalidQuantity"
    status_code = 400


class InsufficientStockError(ServiceError):
    kind = "InsufficientStock"
    status_code = 400


class UnauthorizedError(ServiceError):
    """Missing or invalid credential."""
    kind = "Unauthorized"
    status_code = 401


class ForbiddenError(ServiceError):
    """Valid identity, insufficient role or status."""
    kind = "Forbidden"
    status_code = 403


class ConflictError(ServiceError):
    """Concurrent update race that exhausted its retries. Callers may retry."""
    kind = "Conflict"
    status_code = 409


class InvalidTransitionError(ServiceError):
    """Order status change that would revive a cancelled order."""
    kind = "InvalidTransition"
    status_code = 409


class ProductInUseError(ServiceError):
    """Product still referenced by non-cancelled orders."""
    kind = "ProductInUse"
    status_code = 409


class UnavailableError(ServiceError):
    """Backing store unreachable or timed out. Callers may retry."""
    kind = "Unavailable"
    status_code = 503
