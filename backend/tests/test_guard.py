"""
Guard decision tests.

decide() is pure: accounts here are plain namespaces, no database involved.
"""

from types import SimpleNamespace

import pytest

from garments.permissions import (
    ACTION_AUDIENCE,
    Action,
    Audience,
    allowed_actions,
    decide,
    get_action_definition,
    get_actions_for_audience,
)


def account(role, status="approved"):
    return SimpleNamespace(role=role, status=status)


ADMIN = account("admin")
MANAGER = account("manager")
PENDING_MANAGER = account("manager", "pending")
SUSPENDED_MANAGER = account("manager", "suspended")
BUYER = account("buyer")
SUSPENDED_BUYER = account("buyer", "suspended")


# =============================================================================
# PUBLIC ACTIONS
# =============================================================================


class TestPublicActions:
    @pytest.mark.parametrize("action", [Action.VIEW_CATALOG, Action.VIEW_HOME_PRODUCTS])
    def test_anonymous_allowed(self, action):
        assert decide(None, action).allowed

    @pytest.mark.parametrize("acct", [ADMIN, SUSPENDED_MANAGER, BUYER])
    def test_any_account_allowed(self, acct):
        assert decide(acct, Action.VIEW_CATALOG).allowed


# =============================================================================
# AUTHENTICATED ACTIONS
# =============================================================================


class TestAuthenticatedActions:
    def test_anonymous_denied_as_unauthenticated(self):
        decision = decide(None, Action.PLACE_ORDER)
        assert not decision.allowed
        assert decision.unauthenticated
        assert decision.reason == "Authentication required"

    def test_verified_identity_without_record_denied(self):
        decision = decide(None, Action.PLACE_ORDER, authenticated=True)
        assert not decision.allowed
        assert not decision.unauthenticated

    @pytest.mark.parametrize("acct", [ADMIN, MANAGER, SUSPENDED_MANAGER, BUYER, SUSPENDED_BUYER])
    def test_any_account_allowed(self, acct):
        for action in (Action.PLACE_ORDER, Action.VIEW_ORDERS, Action.EDIT_PRODUCT, Action.DELETE_PRODUCT):
            assert decide(acct, action).allowed, action


# =============================================================================
# MANAGER ACTIONS
# =============================================================================


class TestManagerActions:
    @pytest.mark.parametrize("action", [Action.CREATE_PRODUCT, Action.TRACK_ORDER, Action.RESTOCK_PRODUCT])
    def test_approved_manager_allowed(self, action):
        assert decide(MANAGER, action).allowed

    def test_pending_manager_allowed(self):
        assert decide(PENDING_MANAGER, Action.CREATE_PRODUCT).allowed

    def test_suspended_manager_denied(self):
        decision = decide(SUSPENDED_MANAGER, Action.CREATE_PRODUCT)
        assert not decision.allowed
        assert decision.reason == "Account is suspended"

    @pytest.mark.parametrize("acct", [ADMIN, BUYER])
    def test_other_roles_denied(self, acct):
        decision = decide(acct, Action.CREATE_PRODUCT)
        assert not decision.allowed
        assert not decision.unauthenticated


# =============================================================================
# ADMIN ACTIONS
# =============================================================================


class TestAdminActions:
    @pytest.mark.parametrize("action", [Action.LIST_ACCOUNTS, Action.MANAGE_ACCOUNTS, Action.VIEW_ANALYTICS])
    def test_admin_allowed(self, action):
        assert decide(ADMIN, action).allowed

    @pytest.mark.parametrize("acct", [MANAGER, BUYER])
    def test_non_admin_denied(self, acct):
        assert not decide(acct, Action.VIEW_ANALYTICS).allowed

    def test_anonymous_denied(self):
        assert decide(None, Action.VIEW_ANALYTICS).unauthenticated


# =============================================================================
# TOTALITY
# =============================================================================


class TestTotality:
    def test_every_action_has_an_audience(self):
        assert set(ACTION_AUDIENCE) == set(Action)

    def test_unknown_action_denied(self):
        decision = decide(ADMIN, "LAUNCH_ROCKETS")
        assert not decision.allowed
        assert "Unknown action" in decision.reason

    def test_string_codes_accepted(self):
        assert decide(ADMIN, "VIEW_ANALYTICS").allowed

    def test_unknown_role_denied_privileged_actions(self):
        stranger = account("auditor")
        assert decide(stranger, Action.PLACE_ORDER).allowed
        assert not decide(stranger, Action.CREATE_PRODUCT).allowed
        assert not decide(stranger, Action.VIEW_ANALYTICS).allowed

    def test_decision_is_truthy_only_when_allowed(self):
        assert decide(ADMIN, Action.VIEW_ANALYTICS)
        assert not decide(BUYER, Action.VIEW_ANALYTICS)


class TestHelpers:
    def test_action_definition_lookup(self):
        definition = get_action_definition(Action.RESTOCK_PRODUCT)
        assert definition["audience"] == "MANAGER"
        assert get_action_definition("NOPE") is None

    def test_actions_for_audience(self):
        codes = {a[0] for a in get_actions_for_audience(Audience.ADMIN)}
        assert codes == {Action.LIST_ACCOUNTS, Action.MANAGE_ACCOUNTS, Action.VIEW_ANALYTICS}

    def test_allowed_actions_for_buyer(self):
        codes = allowed_actions(BUYER)
        assert "PLACE_ORDER" in codes
        assert "CREATE_PRODUCT" not in codes
        assert codes == sorted(codes)

    def test_allowed_actions_for_anonymous(self):
        assert allowed_actions(None) == ["VIEW_CATALOG", "VIEW_HOME_PRODUCTS"]
