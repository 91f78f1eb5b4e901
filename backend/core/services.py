"""
Core app services - **Service Layer**.

Contains cross-app aggregation logic for the staff dashboard and the
public constants endpoint.  Views delegate all business logic to the
service classes defined here.

╔══════════════════════════════════════════════════════════════════════╗
║  CROSS-APP IMPORT RULEBOOK                                         ║
║                                                                    ║
║  The core app aggregates over models owned by other apps.  To      ║
║  prevent circular imports at module load time:                     ║
║                                                                    ║
║  1. NEVER import models from other apps at the **module level**.   ║
║     Always import inside the method/function that needs them.      ║
║                                                                    ║
║  2. Choice/enum classes (e.g. ComplaintStatus) live in the         ║
║     respective app's ``models.py``.  Import them lazily too.        ║
║                                                                    ║
║  3. Prefer ORM ``.aggregate()`` and ``.values().annotate()`` over  ║
║     Python-side loops.                                             ║
╚══════════════════════════════════════════════════════════════════════╝
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from django.db.models import Count, Q, QuerySet

from core.domain.access import get_user_role_name, require
from core.permissions_constants import ROSTER_ROLES, Actions

if TYPE_CHECKING:
    from accounts.models import User


# ════════════════════════════════════════════════════════════════════
#  Dashboard Aggregation Service
# ════════════════════════════════════════════════════════════════════

class DashboardAggregationService:
    """
    Produces an aggregated statistics dict consumed by
    ``DashboardStatsSerializer``.

    The statistics are **role-aware**: every number is computed over the
    same scoped queryset the caller gets from the complaint list, so an
    action taker only ever counts complaints assigned to them.  The
    unassigned counter is only reported to roster roles (admin,
    committee, developer); others get ``None``.
    """

    #: Number of most recently updated complaints to return.
    RECENT_LIMIT: int = 5

    def __init__(self, user: User) -> None:
        self.user = user

    # ── Public API ──────────────────────────────────────────────────

    def get_stats(self) -> dict[str, Any]:
        """Return the full dashboard statistics dictionary."""
        from complaints.models import ComplaintStatus

        require(self.user, Actions.READ)
        qs = self._get_complaint_queryset()

        open_statuses = [
            ComplaintStatus.SUBMITTED,
            ComplaintStatus.VIEWED,
            ComplaintStatus.UNDER_REVIEW,
            ComplaintStatus.WORKING,
            ComplaintStatus.INVESTIGATION,
        ]
        aggregates = qs.aggregate(
            total=Count("complaint_id"),
            open=Count("complaint_id", filter=Q(status__in=open_statuses)),
            unassigned=Count("complaint_id", filter=Q(assigned_to__isnull=True)),
        )

        show_unassigned = get_user_role_name(self.user) in ROSTER_ROLES

        return {
            "total_complaints": aggregates["total"],
            "open_complaints": aggregates["open"],
            "unassigned_count": aggregates["unassigned"] if show_unassigned else None,
            "complaints_by_status": self._get_by_status(qs),
            "complaints_by_severity": self._get_by_severity(qs),
            "recently_updated": self._get_recently_updated(qs),
        }

    # ── Private helpers ─────────────────────────────────────────────

    def _get_complaint_queryset(self) -> QuerySet:
        """Return a ``Complaint`` queryset scoped to the requesting user's role."""
        from complaints.services import ComplaintQueryService

        return ComplaintQueryService.scoped_queryset(self.user)

    def _get_by_status(self, qs: QuerySet) -> list[dict[str, Any]]:
        """Count per status, listing every status (zero included) in workflow order."""
        from complaints.models import ComplaintStatus

        counts = {
            row["status"]: row["count"]
            for row in qs.values("status").annotate(count=Count("complaint_id")).order_by()
        }
        return [
            {"value": value, "label": label, "count": counts.get(value, 0)}
            for value, label in ComplaintStatus.choices
        ]

    def _get_by_severity(self, qs: QuerySet) -> list[dict[str, Any]]:
        from complaints.models import ComplaintSeverity

        counts = {
            row["severity"]: row["count"]
            for row in qs.values("severity").annotate(count=Count("complaint_id")).order_by()
        }
        return [
            {"value": value, "label": label, "count": counts.get(value, 0)}
            for value, label in ComplaintSeverity.choices
        ]

    def _get_recently_updated(self, qs: QuerySet) -> list[dict[str, Any]]:
        rows = qs.order_by("-updated_at").values(
            "complaint_id", "status", "severity", "updated_at",
        )[: self.RECENT_LIMIT]
        return list(rows)


# ════════════════════════════════════════════════════════════════════
#  System Constants Service
# ════════════════════════════════════════════════════════════════════

class SystemConstantsService:
    """
    Gathers all system-wide choice enumerations into a single dict for
    the frontend.

    This service is **stateless**; all constants are public information
    needed to render the intake form, filters and labels.
    """

    @staticmethod
    def get_constants() -> dict[str, Any]:
        """Return all system constants as a dict."""
        from accounts.models import StaffRole
        from complaints.models import ComplaintCategory, ComplaintSeverity, ComplaintStatus
        from complaints.services import complaints_setting

        to_list = SystemConstantsService._choices_to_list

        return {
            "complaint_categories": to_list(ComplaintCategory),
            "complaint_severities": to_list(ComplaintSeverity),
            "complaint_statuses": to_list(ComplaintStatus),
            "staff_roles": to_list(StaffRole),
            "description_min_length": complaints_setting("DESCRIPTION_MIN_LENGTH"),
            "attachment_max_bytes": complaints_setting("ATTACHMENT_MAX_BYTES"),
            "attachment_extensions": list(complaints_setting("ATTACHMENT_ALLOWED_EXTENSIONS")),
            "strict_transitions": bool(complaints_setting("STRICT_TRANSITIONS")),
        }

    @staticmethod
    def _choices_to_list(
        choices_class: type,
    ) -> list[dict[str, str]]:
        """
        Convert a Django ``TextChoices`` class to a list of
        ``{"value": ..., "label": ...}`` dicts.
        """
        return [
            {"value": str(value), "label": str(label)}
            for value, label in choices_class.choices
        ]
