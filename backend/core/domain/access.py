"""
core.domain.access - Role-based authorization and scoped querysets.

This module is the single authorization point for staff operations.
Views never compare role strings; services call ``can`` / ``require``
once per request and obtain querysets through ``apply_role_filter``.

╔══════════════════════════════════════════════════════════════════╗
║  Per-app scoping rules do NOT live here.                        ║
║  Each app's ``services.py`` owns its own role → filter map.     ║
║  This module provides:                                          ║
║    1) ``get_user_role_name`` - effective role of a user.        ║
║    2) ``can`` / ``require`` - role × action × resource check.   ║
║    3) ``apply_role_filter`` - role-keyed queryset dispatch.     ║
╚══════════════════════════════════════════════════════════════════╝

Architecture overview
---------------------
    ┌─────────┐      ┌────────────────┐      ┌──────────────────┐
    │  View   │─────▶│  App service   │─────▶│ core.domain      │
    │ (thin)  │      │ (owns logic)   │      │   .access        │
    └─────────┘      └────────────────┘      └──────────────────┘

Usage in an app's service layer::

    from core.domain.access import apply_role_filter, require
    from core.permissions_constants import Actions, Roles

    COMPLAINT_SCOPE_CONFIG = {
        Roles.ADMIN:        lambda qs, u: qs,
        Roles.ACTION_TAKER: lambda qs, u: qs.filter(assigned_to=u),
    }

    qs = apply_role_filter(Complaint.objects.all(), user,
                           scope_config=COMPLAINT_SCOPE_CONFIG)
    require(user, Actions.MUTATE_STATUS, complaint)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from django.db.models import QuerySet

from core.permissions_constants import (
    ASSIGNMENT_BOUND_ROLES,
    ROLE_GRANTS,
    Roles,
)

if TYPE_CHECKING:
    from accounts.models import User

# Type alias for a scope filter function.
# Takes (queryset, user) and returns a filtered queryset.
ScopeFilter = Callable[[QuerySet, "User"], QuerySet]

# Role name → filter function.
ScopeConfig = dict[str, ScopeFilter]


def get_user_role_name(user: Any) -> str | None:
    """
    Return the effective role of a user, or ``None``.

    Anonymous and inactive users have no role.  A Django superuser
    without an explicit role is treated as ``developer``.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    if not user.is_active:
        return None
    role = getattr(user, "role", "") or None
    if role is None and user.is_superuser:
        return Roles.DEVELOPER
    return role


def can(user: Any, action: str, resource: Any = None) -> bool:
    """
    Decide whether ``user`` may perform ``action`` on ``resource``.

    Args:
        user:     The requesting user (may be anonymous).
        action:   One of ``core.permissions_constants.Actions``.
        resource: Optional complaint instance.  For assignment-bound roles
                  (action takers) the grant only holds when
                  ``resource.assigned_to_id == user.pk``.  Without a
                  resource the check answers "may this role ever do it".

    Returns:
        ``True`` if the operation is allowed.
    """
    role = get_user_role_name(user)
    if role is None:
        return False

    if action not in ROLE_GRANTS.get(role, frozenset()):
        return False

    if resource is not None and role in ASSIGNMENT_BOUND_ROLES:
        return getattr(resource, "assigned_to_id", None) == user.pk

    return True


def require(user: Any, action: str, resource: Any = None, *, message: str = "") -> None:
    """
    Guard that raises ``PermissionDenied`` when ``can`` says no.

    Raises:
        core.domain.exceptions.PermissionDenied
    """
    from core.domain.exceptions import PermissionDenied as DomainPermissionDenied

    if not can(user, action, resource):
        raise DomainPermissionDenied(
            message or f"Your role is not permitted to perform '{action}' here."
        )


def apply_role_filter(
    queryset: QuerySet,
    user: Any,
    *,
    scope_config: ScopeConfig,
) -> QuerySet:
    """
    Apply the role-specific filter from ``scope_config``.

    Args:
        queryset:     Base (unfiltered) queryset.
        user:         The requesting user.
        scope_config: Role name → ``(qs, user) -> qs`` mapping.

    Returns:
        The filtered queryset, or an empty one for a role missing
        from the config.
    """
    role_name = get_user_role_name(user)

    if role_name and role_name in scope_config:
        return scope_config[role_name](queryset, user)

    return queryset.none()
