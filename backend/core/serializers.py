"""
Core app serializers.

**Response-only** serializers for the aggregated endpoints served by the
core app.  They work exclusively with plain Python dicts / lists
produced by the service layer, keeping the core app decoupled from the
concrete models in ``complaints`` and ``accounts``.
"""

from __future__ import annotations

from rest_framework import serializers


# ════════════════════════════════════════════════════════════════════
#  Dashboard Statistics
# ════════════════════════════════════════════════════════════════════

class CountByChoiceSerializer(serializers.Serializer):
    """
    One bucket of a grouped count.

    Example::

        {"value": "Under Review", "label": "Under Review", "count": 4}
    """

    value = serializers.CharField()
    label = serializers.CharField()
    count = serializers.IntegerField()


class RecentComplaintSerializer(serializers.Serializer):
    complaint_id = serializers.CharField()
    status = serializers.CharField()
    severity = serializers.CharField()
    updated_at = serializers.DateTimeField()


class DashboardStatsSerializer(serializers.Serializer):
    """
    Top-level response serializer for ``GET /api/core/dashboard/``.

    Response shape::

        {
            "total_complaints": 42,
            "open_complaints": 30,
            "unassigned_count": 7,
            "complaints_by_status": [...],
            "complaints_by_severity": [...],
            "recently_updated": [...]
        }
    """

    total_complaints = serializers.IntegerField(
        help_text="Complaints visible to the caller.",
    )
    open_complaints = serializers.IntegerField(
        help_text="Visible complaints not yet Resolved or Dismissed.",
    )
    unassigned_count = serializers.IntegerField(
        allow_null=True,
        help_text="Complaints without an action taker (null for action takers).",
    )
    complaints_by_status = CountByChoiceSerializer(many=True)
    complaints_by_severity = CountByChoiceSerializer(many=True)
    recently_updated = RecentComplaintSerializer(many=True)


# ════════════════════════════════════════════════════════════════════
#  System Constants / Enums
# ════════════════════════════════════════════════════════════════════

class ChoiceItemSerializer(serializers.Serializer):
    """
    A single key-label pair representing one choice/enum option.

    Example::

        {"value": "Bullying", "label": "Bullying"}
    """

    value = serializers.CharField(
        help_text="Machine-readable value to send in API requests.",
    )
    label = serializers.CharField(
        help_text="Human-readable display label for the UI.",
    )


class SystemConstantsSerializer(serializers.Serializer):
    """
    Top-level response serializer for ``GET /api/core/constants/``.

    Provides the intake-form and dashboard enumerations so the frontend
    can build dropdowns without hardcoding values.
    """

    complaint_categories = ChoiceItemSerializer(many=True)
    complaint_severities = ChoiceItemSerializer(many=True)
    complaint_statuses = ChoiceItemSerializer(many=True)
    staff_roles = ChoiceItemSerializer(many=True)
    description_min_length = serializers.IntegerField()
    attachment_max_bytes = serializers.IntegerField()
    attachment_extensions = serializers.ListField(child=serializers.CharField())
    strict_transitions = serializers.BooleanField()
