"""
Accounts app serializers.

Contains the request and response serializers for the accounts API.
Serializers handle field definitions and read-only constraints.
**No business logic** lives here; roster access rules are in
``services.py``.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.models import update_last_login
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.settings import api_settings

from core.domain.access import get_user_role_name

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
#  Authentication Serializers
# ═══════════════════════════════════════════════════════════════════


class LoginRequestSerializer(serializers.Serializer):
    """
    Documents the login payload for the OpenAPI schema.

    ``identifier`` may be either a username or an email address.
    """

    identifier = serializers.CharField(
        help_text="Username or Email.",
    )
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="User account password.",
    )


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Custom SimpleJWT serializer that:

    1. Accepts ``identifier`` + ``password`` instead of
       ``username`` + ``password``.
    2. Resolves the user via the ``MultiFieldAuthBackend``.
    3. Injects ``role``, ``uid`` and ``name`` claims into the JWT
       payload.
    """

    username_field = "identifier"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Remove the default 'username' field added by SimpleJWT
        self.fields.pop(self.username_field, None)
        self.fields["identifier"] = serializers.CharField(
            help_text="Username or Email.",
        )

    @classmethod
    def get_token(cls, user) -> Any:
        """
        Add role claims to the JWT payload so the frontend can route
        to the right dashboard without a separate API call.
        """
        token = super().get_token(user)

        token["role"] = get_user_role_name(user)
        token["uid"] = str(user.uid)
        token["name"] = user.display_name

        return token

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        """
        Authenticate using the custom ``MultiFieldAuthBackend``.

        Returns a dict containing ``access`` and ``refresh``.
        """
        user = authenticate(
            request=self.context.get("request"),
            identifier=attrs.get("identifier"),
            password=attrs.get("password"),
        )

        # Inactive accounts are rejected by the backend and land here too
        if user is None:
            raise serializers.ValidationError(
                {"detail": "Invalid credentials."},
                code="authentication",
            )

        refresh = self.get_token(user)
        data = {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }

        if api_settings.UPDATE_LAST_LOGIN:
            update_last_login(None, user)

        # Attach user for the view to serialise in the response
        self.user = user

        return data


# ═══════════════════════════════════════════════════════════════════
#  User Serializers
# ═══════════════════════════════════════════════════════════════════


class UserDetailSerializer(serializers.ModelSerializer):
    """
    Full profile of a staff member, as returned by ``/me/`` and login.

    ``effective_role`` resolves superusers without an explicit role to
    ``developer`` so the frontend never has to special-case them.
    """

    effective_role = serializers.SerializerMethodField()
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "uid",
            "username",
            "email",
            "name",
            "display_name",
            "role",
            "effective_role",
            "department",
            "is_active",
            "date_joined",
            "last_login",
        ]
        read_only_fields = fields

    def get_effective_role(self, obj) -> str | None:
        return get_user_role_name(obj)


class StaffListSerializer(serializers.ModelSerializer):
    """Compact roster entry used by the assignee picker."""

    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "uid",
            "username",
            "email",
            "display_name",
            "role",
            "department",
            "is_active",
        ]
        read_only_fields = fields


class StaffFilterSerializer(serializers.Serializer):
    """Validates query parameters for the roster list."""

    role = serializers.ChoiceField(
        choices=[],
        required=False,
    )
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)
    search = serializers.CharField(required=False, allow_blank=True)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["role"].choices = User._meta.get_field("role").choices
