# Overview: Service-layer enforcement of guard decisions.

"""
Thin enforcement layer over permissions.decide().

Every call evaluates the guard afresh against the account record loaded for
the current request; nothing is cached between requests. Denials are logged
and raised as UnauthorizedError (no verified identity) or ForbiddenError
(identity present, role/status insufficient or no account record).
"""

from flask import current_app

from ..errors import ForbiddenError, UnauthorizedError
from ..permissions import Action, decide


def require_action(
    account,
    action: Action,
    *,
    authenticated: bool | None = None,
    identity: str | None = None,
    resource: str | None = None,
) -> None:
    """Raise unless the guard allows ``action`` for ``account``."""
    decision = decide(account, action, authenticated=authenticated)
    if decision.allowed:
        return

    current_app.logger.warning(
        "Denied %s on %s for %s: %s",
        getattr(action, "value", action), resource, identity or "anonymous", decision.reason,
    )
    if decision.unauthenticated:
        raise UnauthorizedError(decision.reason)
    raise ForbiddenError(decision.reason)
