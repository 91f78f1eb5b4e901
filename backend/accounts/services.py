"""
Accounts Service Layer.

This module is the **single source of truth** for all business logic
within the ``accounts`` app.  Views must remain *thin*: they validate
input through serializers, call a service method, and return the result
wrapped in a DRF ``Response``.

Architecture
------------
- ``StaffDirectoryService``  - staff roster reads for assignment.
- ``StaffProvisioningService`` - out-of-band account creation used by
  the ``create_staff`` management command.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q, QuerySet

from core.domain.access import get_user_role_name
from core.domain.exceptions import Conflict, DomainError, NotFound, PermissionDenied
from core.permissions_constants import ROSTER_ROLES, Roles

User = get_user_model()

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Staff Directory Service
# ═══════════════════════════════════════════════════════════════════


class StaffDirectoryService:
    """
    Read access to the staff roster.

    Only roles in ``ROSTER_ROLES`` (admin, committee, developer) may list
    other staff; everyone else gets a ``PermissionDenied``.
    """

    @staticmethod
    def _require_roster_access(requesting_user: User) -> None:
        if get_user_role_name(requesting_user) not in ROSTER_ROLES:
            raise PermissionDenied("Only administrators may browse the staff roster.")

    @staticmethod
    def list_staff(
        requesting_user: User,
        *,
        role: str | None = None,
        is_active: bool | None = None,
        search: str | None = None,
    ) -> QuerySet[User]:
        """
        Return a filtered queryset of staff accounts.

        Parameters
        ----------
        requesting_user : User
            Must hold a roster role.
        role : str, optional
            Filter by ``role``.
        is_active : bool, optional
            Filter by ``is_active`` status.
        search : str, optional
            Case-insensitive search across ``username``, ``email``,
            ``name`` and ``department``.
        """
        StaffDirectoryService._require_roster_access(requesting_user)

        qs = User.objects.all()

        if role:
            qs = qs.filter(role=role)
        if is_active is not None:
            qs = qs.filter(is_active=is_active)
        if search:
            qs = qs.filter(
                Q(username__icontains=search)
                | Q(email__icontains=search)
                | Q(name__icontains=search)
                | Q(department__icontains=search)
            )

        return qs.order_by("name", "username")

    @staticmethod
    def get_staff(requesting_user: User, uid) -> User:
        """
        Retrieve a single staff account by its public ``uid``.

        Raises
        ------
        NotFound
            If no account carries that ``uid``.
        """
        StaffDirectoryService._require_roster_access(requesting_user)
        try:
            return User.objects.get(uid=uid)
        except (User.DoesNotExist, ValueError):
            raise NotFound(f"Staff member {uid} not found.")


# ═══════════════════════════════════════════════════════════════════
#  Provisioning Service
# ═══════════════════════════════════════════════════════════════════


class StaffProvisioningService:
    """
    Creates staff accounts.  There is no self-registration; this is
    invoked from the ``create_staff`` management command.
    """

    @staticmethod
    @transaction.atomic
    def create_staff(
        *,
        username: str,
        email: str,
        password: str,
        role: str,
        name: str = "",
        department: str = "",
    ) -> User:
        """
        Create and return an active staff account with a single role.

        Raises
        ------
        DomainError
            If ``role`` is not one of ``Roles.ALL``.
        Conflict
            If the username or email is already taken.
        """
        if role not in Roles.ALL:
            raise DomainError(
                f"Unknown role '{role}'. Choose one of: {', '.join(Roles.ALL)}."
            )

        conflicts = []
        if User.objects.filter(username=username).exists():
            conflicts.append("username")
        if User.objects.filter(email__iexact=email).exists():
            conflicts.append("email")
        if conflicts:
            raise Conflict(
                f"The following field(s) already exist: {', '.join(conflicts)}."
            )

        extra: dict[str, Any] = {
            "name": name,
            "role": role,
            "department": department,
        }
        if role == Roles.DEVELOPER:
            extra["is_staff"] = True

        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            **extra,
        )
        logger.info("Provisioned staff account %s with role %s", user.uid, role)
        return user
