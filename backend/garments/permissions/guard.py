# Overview: The authorization guard; a pure decision over (account, action).

"""
decide() is total: every path returns an explicit Decision and anything it
does not recognise is denied. It never touches the database and never
caches, so callers must load the account fresh for each request and pass
it in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .actions import Action, Audience, ACTION_AUDIENCE


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None
    # Deny because there is no verified identity at all (401 rather than 403)
    unauthenticated: bool = False

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(allowed=True)


def deny(reason: str, *, unauthenticated: bool = False) -> Decision:
    return Decision(allowed=False, reason=reason, unauthenticated=unauthenticated)


def _audience_for(action: Any) -> Audience | None:
    try:
        return ACTION_AUDIENCE.get(Action(action))
    except ValueError:
        return None


def decide(account: Any, action: Action | str, *, authenticated: bool | None = None) -> Decision:
    """
    Decide whether ``account`` may perform ``action``.

    ``account`` is the directory record for the verified identity (anything
    with ``role`` and ``status``), or None. ``authenticated`` says whether a
    verified identity exists; it defaults to ``account is not None``. A
    verified identity without a record is denied every non-public action.
    """
    audience = _audience_for(action)
    if audience is None:
        return deny(f"Unknown action: {action}")

    if audience is Audience.PUBLIC:
        return ALLOW

    if authenticated is None:
        authenticated = account is not None
    if not authenticated:
        return deny("Authentication required", unauthenticated=True)

    if account is None:
        return deny("No account record for this identity")

    role = getattr(account, "role", None)
    status = getattr(account, "status", None)

    if audience is Audience.AUTHENTICATED:
        return ALLOW

    if audience is Audience.MANAGER:
        if role != "manager":
            return deny("Manager role required")
        if status == "suspended":
            return deny("Account is suspended")
        return ALLOW

    if audience is Audience.ADMIN:
        if role != "admin":
            return deny("Admin role required")
        return ALLOW

    return deny(f"Unhandled audience for action: {action}")
