"""
Unit tests for ``core.domain.access``: the role × action grant table and
role-keyed queryset scoping.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from django.contrib.auth.models import AnonymousUser

from core.domain.access import apply_role_filter, can, get_user_role_name, require
from core.domain.exceptions import PermissionDenied
from core.permissions_constants import Actions, Roles


def _user(role="", *, pk=1, active=True, superuser=False):
    return SimpleNamespace(
        pk=pk,
        role=role,
        is_active=active,
        is_superuser=superuser,
        is_authenticated=True,
    )


def _complaint(assigned_to_id=None):
    return SimpleNamespace(assigned_to_id=assigned_to_id)


class TestRoleResolution:

    def test_anonymous_has_no_role(self):
        assert get_user_role_name(AnonymousUser()) is None

    def test_inactive_user_has_no_role(self):
        assert get_user_role_name(_user(Roles.ADMIN, active=False)) is None

    def test_superuser_defaults_to_developer(self):
        assert get_user_role_name(_user(superuser=True)) == Roles.DEVELOPER

    def test_explicit_role_wins_for_superuser(self):
        assert get_user_role_name(_user(Roles.COMMITTEE, superuser=True)) == Roles.COMMITTEE


class TestGrantTable:

    @pytest.mark.parametrize("role", [Roles.ADMIN, Roles.COMMITTEE, Roles.DEVELOPER])
    @pytest.mark.parametrize("action", Actions.ALL)
    def test_oversight_roles_may_do_everything(self, role, action):
        assert can(_user(role), action, _complaint(assigned_to_id=99))

    @pytest.mark.parametrize("action", [Actions.ASSIGN, Actions.EXPORT])
    def test_action_taker_never_assigns_or_exports(self, action):
        assert not can(_user(Roles.ACTION_TAKER, pk=7), action, _complaint(assigned_to_id=7))

    @pytest.mark.parametrize(
        "action",
        [Actions.READ, Actions.MUTATE_STATUS, Actions.PUBLISH_UPDATE, Actions.ANNOTATE],
    )
    def test_action_taker_bound_to_assignment(self, action):
        taker = _user(Roles.ACTION_TAKER, pk=7)
        assert can(taker, action, _complaint(assigned_to_id=7))
        assert not can(taker, action, _complaint(assigned_to_id=8))
        assert not can(taker, action, _complaint())

    def test_unknown_role_is_denied(self):
        assert not can(_user("janitor"), Actions.READ)

    def test_require_raises_permission_denied(self):
        with pytest.raises(PermissionDenied):
            require(AnonymousUser(), Actions.READ)


class _FakeQuerySet:

    def __init__(self, label="all"):
        self.label = label

    def filter(self, **kwargs):
        return _FakeQuerySet(f"filtered:{sorted(kwargs)}")

    def none(self):
        return _FakeQuerySet("none")


class TestRoleScoping:

    scope_config = {
        Roles.COMMITTEE: lambda qs, u: qs,
        Roles.ACTION_TAKER: lambda qs, u: qs.filter(assigned_to=u),
    }

    def test_configured_role_gets_its_filter(self):
        qs = apply_role_filter(
            _FakeQuerySet(), _user(Roles.ACTION_TAKER), scope_config=self.scope_config,
        )
        assert qs.label == "filtered:['assigned_to']"

    def test_unfiltered_role_sees_everything(self):
        qs = apply_role_filter(
            _FakeQuerySet(), _user(Roles.COMMITTEE), scope_config=self.scope_config,
        )
        assert qs.label == "all"

    @pytest.mark.parametrize("user", [_user(Roles.DEVELOPER), _user(""), AnonymousUser()])
    def test_role_missing_from_config_gets_nothing(self, user):
        qs = apply_role_filter(_FakeQuerySet(), user, scope_config=self.scope_config)
        assert qs.label == "none"
