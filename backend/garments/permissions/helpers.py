# Overview: Utility functions for action lookups.

from .actions import ACTION_DEFINITIONS, Action
from .guard import decide


def get_action_definition(code):
    """Get full definition for an action code."""
    for action in ACTION_DEFINITIONS:
        if action[0] == code:
            return {
                "code": action[0].value,
                "name": action[1],
                "description": action[2],
                "audience": action[3].value,
            }
    return None


def get_actions_for_audience(audience):
    """Get all actions open to an audience."""
    return [action for action in ACTION_DEFINITIONS if action[3] == audience]


def allowed_actions(account, *, authenticated=None):
    """Codes of every action the guard currently allows for this account."""
    return sorted(
        action.value
        for action in Action
        if decide(account, action, authenticated=authenticated).allowed
    )
