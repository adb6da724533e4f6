"""Unit tests for the access gate and the named resource table."""

from types import SimpleNamespace

import pytest
from libs.auth.access import (
    AccessOutcome,
    SessionState,
    check_access,
    check_resource_access,
    is_public_resource,
    required_roles_for,
)
from libs.auth.models import AuthUser
from libs.auth.roles import Role

pytestmark = pytest.mark.unit


def _identity(role):
    return SimpleNamespace(role=role)


class TestCheckAccess:
    def test_loading_session_is_indeterminate(self):
        decision = check_access(SessionState.LOADING, {"ADMIN"})
        assert decision.outcome is AccessOutcome.INDETERMINATE
        assert decision.is_indeterminate
        assert decision.message is None

    def test_anonymous_is_denied_even_without_required_roles(self):
        decision = check_access(SessionState.ANONYMOUS, set())
        assert decision.denied
        assert decision.authenticated is False
        assert decision.message == "Authentication required"

    def test_missing_identity_is_denied(self):
        assert check_access(None, []).denied

    def test_any_known_role_passes_when_nothing_is_required(self):
        assert check_access(_identity("HANDLER"), set()).allowed

    def test_allow_list_is_exact(self):
        assert check_access(_identity("AIDE"), {"TRAINER", "AIDE"}).allowed
        assert check_access(_identity("SUPER_ADMIN"), {"TRAINER"}).denied

    def test_denial_names_required_and_actual_role(self):
        decision = check_access(_identity("HANDLER"), [Role.TRAINER, Role.AIDE])
        assert decision.required_roles == ("AIDE", "TRAINER")
        assert decision.actual_role == "HANDLER"
        assert decision.message == (
            "Insufficient role: requires AIDE or TRAINER, your role is HANDLER"
        )

    def test_unknown_role_is_denied_where_roles_are_listed(self):
        assert check_access(_identity("BOGUS"), {"HANDLER"}).denied
        assert check_access(_identity(None), {"HANDLER"}).denied

    def test_any_authenticated_identity_passes_when_nothing_is_required(self):
        assert check_access(_identity("authenticated"), set()).allowed
        assert check_access(_identity(None), []).allowed

    def test_unknown_role_is_reported_as_given(self):
        decision = check_access(_identity("member"), {"TRAINER"})
        assert decision.actual_role == "member"
        assert decision.message == (
            "Insufficient role: requires TRAINER, your role is member"
        )

    def test_missing_role_is_reported_as_none(self):
        decision = check_access(_identity(None), {"ADMIN"})
        assert decision.message == "Insufficient role: requires ADMIN, your role is none"

    def test_accepts_auth_user(self):
        user = AuthUser(user_id="abc", role="ADMIN")
        assert check_access(user, {Role.ADMIN, Role.SUPER_ADMIN}).allowed


class TestResourceTable:
    def test_public_resources(self):
        assert is_public_resource("/")
        assert is_public_resource("/trainers")
        assert is_public_resource("/trainers/123")
        assert not is_public_resource("/dashboard")
        assert not is_public_resource("/trainersx")

    def test_most_specific_prefix_wins(self):
        assert required_roles_for("/dashboard/admin/users") == (Role.SUPER_ADMIN,)
        assert required_roles_for("/dashboard/admin/users/42") == (Role.SUPER_ADMIN,)
        assert required_roles_for("/dashboard/admin") == (Role.ADMIN, Role.SUPER_ADMIN)
        assert required_roles_for("/dashboard/profile") == ()

    def test_unlisted_resource_requires_authentication_only(self):
        assert required_roles_for("/somewhere/else") == ()

    def test_public_resource_allows_anonymous(self):
        assert check_resource_access(None, "/about").allowed

    def test_clients_are_for_trainers_and_aides(self):
        assert check_resource_access(_identity("AIDE"), "/dashboard/clients").allowed
        assert check_resource_access(_identity("HANDLER"), "/dashboard/clients").denied
        assert check_resource_access(_identity("ADMIN"), "/dashboard/clients").denied

    def test_admin_area(self):
        assert check_resource_access(_identity("ADMIN"), "/dashboard/admin").allowed
        assert check_resource_access(_identity("ADMIN"), "/dashboard/admin/users").denied
        assert check_resource_access(
            _identity("SUPER_ADMIN"), "/dashboard/admin/users"
        ).allowed

    def test_loading_session_on_protected_resource(self):
        decision = check_resource_access(SessionState.LOADING, "/dashboard")
        assert decision.is_indeterminate

    def test_login_only_resource_admits_unrecognised_role(self):
        decision = check_resource_access(_identity("authenticated"), "/dashboard")
        assert decision.allowed
        assert check_resource_access(_identity(None), "/dashboard/dogs").allowed
