# Overview: Authorization package.
# Re-exports the action catalog and the guard.

from .actions import Action, Audience, ACTION_DEFINITIONS, ACTION_AUDIENCE
from .guard import Decision, ALLOW, decide, deny
from .helpers import (
    get_action_definition,
    get_actions_for_audience,
    allowed_actions,
)

__all__ = [
    "Action",
    "Audience",
    "ACTION_DEFINITIONS",
    "ACTION_AUDIENCE",
    "Decision",
    "ALLOW",
    "decide",
    "deny",
    "get_action_definition",
    "get_actions_for_audience",
    "allowed_actions",
]
