"""
Tests for the ``create_staff`` management command, the only way staff
accounts are provisioned.
"""

from __future__ import annotations

from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import CommandError, call_command

from core.permissions_constants import Roles

User = get_user_model()

pytestmark = pytest.mark.django_db


def _create(**overrides):
    options = {
        "username": "new_taker",
        "email": "new_taker@school.example",
        "role": Roles.ACTION_TAKER,
        "password": "Str0ng!Pass99",
        "name": "Jordan Lee",
        "department": "Counselling",
    }
    options.update(overrides)
    out = StringIO()
    call_command("create_staff", stdout=out, **options)
    return out.getvalue()


class TestCreateStaffCommand:

    def test_creates_active_account_with_role(self):
        output = _create()

        user = User.objects.get(username="new_taker")
        assert user.role == Roles.ACTION_TAKER
        assert user.is_active
        assert not user.is_staff
        assert user.check_password("Str0ng!Pass99")
        assert str(user.uid) in output

    def test_developer_gets_admin_site_access(self):
        _create(username="dev", email="dev@school.example", role=Roles.DEVELOPER)
        assert User.objects.get(username="dev").is_staff

    def test_duplicate_email_is_rejected(self):
        _create()
        with pytest.raises(CommandError, match="email"):
            _create(username="someone_else", email="NEW_TAKER@school.example")

    def test_unknown_role_is_rejected(self):
        with pytest.raises(CommandError):
            _create(role="janitor")
        assert not User.objects.filter(username="new_taker").exists()
