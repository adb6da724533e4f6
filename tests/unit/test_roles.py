"""Unit tests for the role hierarchy and role checks."""

import pytest
from libs.auth.roles import (
    ROLE_HIERARCHY,
    UNKNOWN_ROLE_RANK,
    Role,
    has_any_role,
    has_permission,
    is_admin,
    normalize_roles,
    parse_role,
    role_rank,
)

pytestmark = pytest.mark.unit


class TestHasPermission:
    """Rank comparison: a role satisfies every role at or below its rank."""

    def test_matches_rank_order_for_every_pair(self):
        for user_role, user_rank in ROLE_HIERARCHY.items():
            for required, required_rank in ROLE_HIERARCHY.items():
                assert has_permission(user_role, required) is (
                    user_rank >= required_rank
                ), f"{user_role} vs {required}"

    def test_admin_outranks_trainer(self):
        assert has_permission("ADMIN", "TRAINER") is True

    def test_handler_does_not_reach_trainer(self):
        assert has_permission("HANDLER", "TRAINER") is False

    def test_aide_and_trainer_are_peers(self):
        assert has_permission("AIDE", "TRAINER") is True
        assert has_permission("TRAINER", "AIDE") is True

    def test_unknown_user_role_is_denied(self):
        assert has_permission("BOGUS", "HANDLER") is False
        assert has_permission(None, "HANDLER") is False

    def test_unknown_required_role_is_denied(self):
        assert has_permission("SUPER_ADMIN", "BOGUS") is False


class TestHasAnyRole:
    """Allow-list membership ignores rank."""

    def test_exact_member(self):
        assert has_any_role("AIDE", {"TRAINER", "AIDE"}) is True

    def test_non_member_is_rejected_regardless_of_rank(self):
        assert has_any_role("HANDLER", {"TRAINER", "AIDE"}) is False
        assert has_any_role("SUPER_ADMIN", {"TRAINER"}) is False

    def test_peer_rank_is_not_membership(self):
        assert has_any_role("AIDE", {"TRAINER"}) is False

    def test_unknown_role_is_rejected(self):
        assert has_any_role("BOGUS", {"HANDLER"}) is False
        assert has_any_role(None, {"HANDLER"}) is False

    def test_accepts_enum_members_and_strings(self):
        assert has_any_role(Role.TRAINER, ["TRAINER"]) is True
        assert has_any_role("TRAINER", [Role.TRAINER]) is True

    def test_empty_allow_list_admits_nobody(self):
        assert has_any_role("SUPER_ADMIN", []) is False


class TestRoleParsing:
    def test_parse_known_role(self):
        assert parse_role("ADMIN") is Role.ADMIN
        assert parse_role(Role.AIDE) is Role.AIDE

    def test_parse_is_case_sensitive(self):
        assert parse_role("admin") is None

    def test_parse_unknown_values(self):
        assert parse_role("BOGUS") is None
        assert parse_role(None) is None
        assert parse_role(3) is None

    def test_rank_of_unknown_role(self):
        assert role_rank("BOGUS") == UNKNOWN_ROLE_RANK
        assert role_rank("SUPER_ADMIN") == 3

    def test_normalize_drops_unknown_entries(self):
        assert normalize_roles(["ADMIN", "nope", Role.HANDLER]) == frozenset(
            {Role.ADMIN, Role.HANDLER}
        )

    def test_is_admin(self):
        assert is_admin("ADMIN") is True
        assert is_admin(Role.SUPER_ADMIN) is True
        assert is_admin("TRAINER") is False
        assert is_admin(None) is False
