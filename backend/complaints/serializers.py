"""
Complaints app serializers.

Request serializers validate intake and staff input; response serializers
shape the two very different read models:

* the **tracking projection** shown to complainants (no notes, no
  assignee, no passcode hash, no storage path);
* the **staff detail** used by dashboards.
"""

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from .models import (
    AuditLog,
    Complaint,
    ComplaintCategory,
    ComplaintSeverity,
    ComplaintStatus,
    InternalNote,
    PublicUpdate,
)
from .services import (
    ComplaintExportService,
    ComplaintSubmissionService,
    complaints_setting,
    get_evidence_storage,
)
from core.domain.exceptions import DomainError


def _attachment_url(complaint: Complaint) -> str | None:
    if not complaint.storage_path:
        return None
    return get_evidence_storage().url(complaint.storage_path)


# ═══════════════════════════════════════════════════════════════════
#  Intake
# ═══════════════════════════════════════════════════════════════════


class ComplaintSubmitSerializer(serializers.Serializer):
    """
    Validates an anonymous complaint.

    Text fields are trimmed; whitespace-only input counts as blank.  The
    ``passcode`` is optional and an empty value means "no passcode".
    The attachment is checked before anything reaches storage.
    """

    category = serializers.ChoiceField(choices=ComplaintCategory.choices)
    other_category = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=200,
        help_text="Required when category is 'Other'.",
    )
    severity = serializers.ChoiceField(choices=ComplaintSeverity.choices)
    description = serializers.CharField()
    location = serializers.CharField(max_length=500)
    perpetrator = serializers.CharField(
        help_text="Type 'None' if unknown.",
    )
    witnesses = serializers.CharField(
        help_text="Type 'None' if there were no witnesses.",
    )
    incident_date = serializers.DateTimeField()
    passcode = serializers.CharField(
        required=False,
        allow_blank=True,
        write_only=True,
        trim_whitespace=False,
        max_length=128,
        style={"input_type": "password"},
    )
    attachment = serializers.FileField(
        required=False,
        allow_null=True,
        allow_empty_file=False,
        write_only=True,
    )

    def validate_description(self, value: str) -> str:
        min_length = complaints_setting("DESCRIPTION_MIN_LENGTH")
        if len(value) < min_length:
            raise serializers.ValidationError(
                f"Description must be at least {min_length} characters."
            )
        return value

    def validate_attachment(self, value):
        if value is None:
            return value
        try:
            ComplaintSubmissionService.validate_attachment(value.name, value.size)
        except DomainError as exc:
            raise serializers.ValidationError(str(exc))
        return value

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        other = attrs.pop("other_category", "")
        try:
            attrs["category"] = ComplaintSubmissionService.resolve_category(
                attrs["category"], other,
            )
        except DomainError as exc:
            raise serializers.ValidationError({"other_category": str(exc)})

        if not attrs.get("passcode"):
            attrs.pop("passcode", None)
        return attrs


class SubmissionResultSerializer(serializers.ModelSerializer):
    passcode_protected = serializers.BooleanField(read_only=True)

    class Meta:
        model = Complaint
        fields = ["complaint_id", "passcode_protected", "status", "created_at"]
        read_only_fields = fields


# ═══════════════════════════════════════════════════════════════════
#  Public tracking
# ═══════════════════════════════════════════════════════════════════


class TrackingRequestSerializer(serializers.Serializer):
    complaint_id = serializers.CharField(max_length=20)
    passcode = serializers.CharField(
        required=False,
        allow_blank=True,
        trim_whitespace=False,
        max_length=128,
        style={"input_type": "password"},
    )


class PublicUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = PublicUpdate
        fields = ["message", "created_at"]
        read_only_fields = fields


class TrackingSerializer(serializers.ModelSerializer):
    """Complainant-facing projection of a complaint."""

    attachment_url = serializers.SerializerMethodField()
    public_updates = serializers.SerializerMethodField()

    class Meta:
        model = Complaint
        fields = [
            "complaint_id",
            "category",
            "severity",
            "status",
            "created_at",
            "updated_at",
            "attachment_url",
            "public_updates",
        ]
        read_only_fields = fields

    def get_attachment_url(self, obj: Complaint) -> str | None:
        return _attachment_url(obj)

    def get_public_updates(self, obj: Complaint) -> list[dict[str, Any]]:
        updates = sorted(obj.public_updates.all(), key=lambda u: (u.created_at, u.pk))
        return PublicUpdateSerializer(updates, many=True).data


# ═══════════════════════════════════════════════════════════════════
#  Staff read models
# ═══════════════════════════════════════════════════════════════════


class StaffRefSerializer(serializers.Serializer):
    uid = serializers.UUIDField(read_only=True)
    display_name = serializers.CharField(read_only=True)
    role = serializers.CharField(read_only=True)


class ComplaintListSerializer(serializers.ModelSerializer):
    assigned_to = StaffRefSerializer(read_only=True, allow_null=True)
    passcode_protected = serializers.BooleanField(read_only=True)

    class Meta:
        model = Complaint
        fields = [
            "complaint_id",
            "category",
            "severity",
            "status",
            "assigned_to",
            "passcode_protected",
            "version",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class InternalNoteSerializer(serializers.ModelSerializer):
    author = StaffRefSerializer(read_only=True, allow_null=True)

    class Meta:
        model = InternalNote
        fields = ["id", "author", "note", "created_at"]
        read_only_fields = fields


class StaffPublicUpdateSerializer(serializers.ModelSerializer):
    author = StaffRefSerializer(read_only=True, allow_null=True)

    class Meta:
        model = PublicUpdate
        fields = ["id", "author", "message", "created_at"]
        read_only_fields = fields


class ComplaintDetailSerializer(ComplaintListSerializer):
    """Full staff view, including the timeline and internal notes."""

    attachment_url = serializers.SerializerMethodField()
    public_updates = StaffPublicUpdateSerializer(many=True, read_only=True)
    internal_notes = InternalNoteSerializer(many=True, read_only=True)

    class Meta(ComplaintListSerializer.Meta):
        fields = ComplaintListSerializer.Meta.fields + [
            "description",
            "location",
            "perpetrator",
            "witnesses",
            "incident_date",
            "attachment_url",
            "public_updates",
            "internal_notes",
        ]
        read_only_fields = fields

    def get_attachment_url(self, obj: Complaint) -> str | None:
        return _attachment_url(obj)


class AuditLogSerializer(serializers.ModelSerializer):
    performed_by = StaffRefSerializer(read_only=True, allow_null=True)

    class Meta:
        model = AuditLog
        fields = ["id", "action", "performed_by", "details", "timestamp"]
        read_only_fields = fields


# ═══════════════════════════════════════════════════════════════════
#  Staff write requests
# ═══════════════════════════════════════════════════════════════════


class VersionedRequestSerializer(serializers.Serializer):
    expected_version = serializers.IntegerField(
        required=False,
        allow_null=True,
        min_value=1,
        help_text="Reject the change with 409 if the complaint has moved on.",
    )


class StatusChangeSerializer(VersionedRequestSerializer):
    status = serializers.ChoiceField(choices=ComplaintStatus.choices)


class AssignSerializer(VersionedRequestSerializer):
    assignee = serializers.UUIDField(help_text="uid of an active action taker.")


class PublicUpdateCreateSerializer(VersionedRequestSerializer):
    message = serializers.CharField(max_length=5000)


class InternalNoteCreateSerializer(serializers.Serializer):
    note = serializers.CharField(max_length=5000)


# ═══════════════════════════════════════════════════════════════════
#  Query parameters
# ═══════════════════════════════════════════════════════════════════


class ComplaintFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ComplaintStatus.choices, required=False)
    category = serializers.ChoiceField(choices=ComplaintCategory.choices, required=False)
    severity = serializers.ChoiceField(choices=ComplaintSeverity.choices, required=False)
    assigned_to = serializers.UUIDField(required=False)
    unassigned = serializers.BooleanField(required=False, default=False)
    created_after = serializers.DateField(required=False)
    created_before = serializers.DateField(required=False)
    search = serializers.CharField(required=False, allow_blank=True, max_length=200)


class ExportQuerySerializer(ComplaintFilterSerializer):
    format = serializers.ChoiceField(
        choices=sorted(ComplaintExportService.FORMATS),
        default="csv",
    )
