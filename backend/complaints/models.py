"""
Complaints app models.

Covers the anonymous complaint lifecycle: intake by an unauthenticated
complainant, staff triage and assignment, status changes, the public
update timeline shown on the tracking page, staff-only notes, and the
append-only audit trail.
"""

from django.conf import settings
from django.db import models

from core.domain.exceptions import DomainError
from core.models import TimeStampedModel


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class ComplaintCategory(models.TextChoices):
    """
    Closed set of categories offered on the intake form.

    ``OTHER`` requires a free-text detail; the stored value then becomes
    ``"Other: <detail>"``, so ``Complaint.category`` carries no ``choices``.
    """

    BULLYING = "Bullying", "Bullying"
    HARASSMENT = "Harassment", "Harassment"
    DISCRIMINATION = "Discrimination", "Discrimination"
    ACADEMIC_DISHONESTY = "Academic Dishonesty", "Academic Dishonesty"
    SUBSTANCE_ABUSE = "Substance Abuse", "Substance Abuse"
    OTHER = "Other", "Other"


class ComplaintSeverity(models.TextChoices):
    LOW = "Low", "Low"
    MEDIUM = "Medium", "Medium"
    HIGH = "High", "High"
    CRITICAL = "Critical", "Critical"


class ComplaintStatus(models.TextChoices):
    """
    Workflow statuses.  ``RESOLVED`` and ``DISMISSED`` are terminal in the
    strict transition table.
    """

    SUBMITTED = "Submitted", "Submitted"
    VIEWED = "Viewed", "Viewed"
    UNDER_REVIEW = "Under Review", "Under Review"
    WORKING = "Working", "Working"
    INVESTIGATION = "Investigation", "Investigation"
    RESOLVED = "Resolved", "Resolved"
    DISMISSED = "Dismissed", "Dismissed"


class AuditAction(models.TextChoices):
    CREATED = "created", "Created"
    STATUS_CHANGED = "status_changed", "Status Changed"
    ASSIGNED = "assigned", "Assigned"
    UNASSIGNED = "unassigned", "Unassigned"
    PUBLIC_UPDATE_ADDED = "public_update_added", "Public Update Added"
    INTERNAL_NOTE_ADDED = "internal_note_added", "Internal Note Added"


class AppendOnlyModel(models.Model):
    """Abstract base that rejects updates to rows that already exist."""

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise DomainError(
                f"{self.__class__.__name__} entries are append-only."
            )
        super().save(*args, **kwargs)


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class Complaint(TimeStampedModel):
    """
    An anonymous complaint.

    * ``complaint_id`` is the only handle a complainant ever gets; it is
      generated server-side, used as the primary key, and never reused.
    * ``passcode_hash`` is set only when the complainant opted in.  Without
      it, anyone holding the ID may read the tracking view.
    * ``version`` is bumped on every staff mutation and lets clients send
      ``expected_version`` to detect concurrent edits.
    """

    complaint_id = models.CharField(
        max_length=20,
        primary_key=True,
        editable=False,
        verbose_name="Complaint ID",
    )
    passcode_hash = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        editable=False,
        verbose_name="Passcode Hash",
        help_text="SHA-256 hex digest of the complainant's passcode.",
    )
    category = models.CharField(
        max_length=255,
        verbose_name="Category",
        db_index=True,
    )
    severity = models.CharField(
        max_length=10,
        choices=ComplaintSeverity.choices,
        verbose_name="Severity",
        db_index=True,
    )
    status = models.CharField(
        max_length=20,
        choices=ComplaintStatus.choices,
        default=ComplaintStatus.SUBMITTED,
        verbose_name="Current Status",
        db_index=True,
    )

    # ── Complainant narrative (immutable after intake) ──────────────
    description = models.TextField(
        verbose_name="Description",
    )
    location = models.CharField(
        max_length=500,
        verbose_name="Incident Location",
    )
    perpetrator = models.TextField(
        verbose_name="Perpetrator",
    )
    witnesses = models.TextField(
        verbose_name="Witnesses",
    )
    incident_date = models.DateTimeField(
        verbose_name="Incident Date/Time",
    )

    # ── Staff handling ──────────────────────────────────────────────
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_complaints",
        verbose_name="Assigned Action Taker",
    )
    storage_path = models.CharField(
        max_length=500,
        null=True,
        blank=True,
        editable=False,
        verbose_name="Evidence Storage Path",
    )
    version = models.PositiveIntegerField(
        default=1,
        verbose_name="Version",
    )

    class Meta:
        verbose_name = "Complaint"
        verbose_name_plural = "Complaints"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "severity"], name="complaint_status_severity_idx"),
            models.Index(fields=["assigned_to", "status"], name="complaint_assignee_status_idx"),
        ]

    def __str__(self):
        return f"{self.complaint_id} - {self.category} ({self.status})"

    @property
    def passcode_protected(self) -> bool:
        return bool(self.passcode_hash)


class PublicUpdate(AppendOnlyModel):
    """
    Complainant-visible progress message.  Rendered oldest first on the
    tracking page.
    """

    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name="public_updates",
        verbose_name="Complaint",
    )
    message = models.TextField(
        verbose_name="Message",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="public_updates",
        verbose_name="Author",
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )

    class Meta:
        verbose_name = "Public Update"
        verbose_name_plural = "Public Updates"
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"Update on {self.complaint_id} at {self.created_at:%Y-%m-%d %H:%M}"


class InternalNote(AppendOnlyModel):
    """Staff-only annotation.  Never part of a complainant-facing payload."""

    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name="internal_notes",
        verbose_name="Complaint",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="internal_notes",
        verbose_name="Author",
    )
    note = models.TextField(
        verbose_name="Note",
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )

    class Meta:
        verbose_name = "Internal Note"
        verbose_name_plural = "Internal Notes"
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"Note on {self.complaint_id} by {self.author_id}"


class AuditLog(AppendOnlyModel):
    """
    Immutable trail of every state-changing action on a complaint.

    ``details`` carries a short human-readable summary such as
    ``"Submitted → Resolved"``.
    """

    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name="audit_logs",
        verbose_name="Complaint",
    )
    action = models.CharField(
        max_length=30,
        choices=AuditAction.choices,
        verbose_name="Action",
        db_index=True,
    )
    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="complaint_audit_entries",
        verbose_name="Performed By",
    )
    details = models.TextField(
        blank=True,
        default="",
        verbose_name="Details",
    )
    timestamp = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Timestamp",
        db_index=True,
    )

    class Meta:
        verbose_name = "Audit Log Entry"
        verbose_name_plural = "Audit Log"
        ordering = ["timestamp", "id"]

    def __str__(self):
        return f"{self.complaint_id}: {self.action}"
