"""
Complaints app Service Layer.

This module is the **single source of truth** for all business logic
in the ``complaints`` app.  Views must remain thin: validate input via
serializers, call a service method, and return the result wrapped in
a DRF ``Response``.

Architecture
------------
- ``generate_complaint_id`` / ``hash_passcode`` / ``passcode_matches``
                                 - identifier and passcode primitives.
- ``ComplaintQueryService``      - role-scoped querysets and retrieval.
- ``ComplaintSubmissionService`` - anonymous intake with evidence upload.
- ``ComplaintTrackingService``   - passcode gate for the public tracking view.
- ``ComplaintWorkflowService``   - status changes, public updates, notes.
- ``ComplaintAssignmentService`` - assign / unassign action takers.
- ``ComplaintExportService``     - CSV / XLSX / PDF export of a scoped list.
- ``ComplaintReceiptService``    - PDF receipt for complainants.

Authorization
-------------
Every staff operation goes through ``core.domain.access.require`` with one
of ``core.permissions_constants.Actions``.  Complaints outside the caller's
scope are reported as ``NotFound`` rather than ``PermissionDenied``.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
import secrets
import time
from typing import Any

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.files.storage import Storage, storages
from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet
from django.utils import timezone
from django.utils.text import get_valid_filename

from core.constants import COMPLAINT_DEFAULTS, COMPLAINT_ID_ALPHABET, COMPLAINT_ID_LENGTH
from core.domain.access import ScopeConfig, apply_role_filter, require
from core.domain.exceptions import (
    Conflict,
    DomainError,
    InvalidTransition,
    NotFound,
    TrackingDenied,
)
from core.domain.transactions import locked_for_mutation
from core.permissions_constants import Actions, Roles

from . import reports
from .models import (
    AuditAction,
    AuditLog,
    Complaint,
    ComplaintCategory,
    ComplaintStatus,
    InternalNote,
    PublicUpdate,
)

User = get_user_model()

logger = logging.getLogger(__name__)


def complaints_setting(key: str) -> Any:
    """Read a ``settings.COMPLAINTS`` key, falling back to the defaults."""
    overrides = getattr(settings, "COMPLAINTS", {}) or {}
    return overrides.get(key, COMPLAINT_DEFAULTS[key])


def get_evidence_storage() -> Storage:
    return storages["evidence"]


# ── Role-scoped queryset configuration for complaint visibility ─────
COMPLAINT_SCOPE_CONFIG: ScopeConfig = {
    Roles.ADMIN: lambda qs, u: qs,
    Roles.DEVELOPER: lambda qs, u: qs,
    Roles.COMMITTEE: lambda qs, u: qs,
    # Action takers only ever see what is assigned to them
    Roles.ACTION_TAKER: lambda qs, u: qs.filter(assigned_to=u),
}


# ═══════════════════════════════════════════════════════════════════
#  Identifier & passcode primitives
# ═══════════════════════════════════════════════════════════════════


def generate_complaint_id() -> str:
    """
    Return a fresh ``CMP-XXXXXXXX`` identifier.

    Uniqueness is enforced by the primary key at insert time, not by a
    pre-check here.
    """
    suffix = "".join(
        secrets.choice(COMPLAINT_ID_ALPHABET) for _ in range(COMPLAINT_ID_LENGTH)
    )
    return f"{complaints_setting('ID_PREFIX')}-{suffix}"


def hash_passcode(raw: str) -> str:
    """
    Deterministic SHA-256 hex digest of a passcode.

    Raises:
        DomainError: if ``raw`` is empty.
    """
    if not raw:
        raise DomainError("Passcode must not be empty.")
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def passcode_matches(candidate_hash: str | None, stored_hash: str | None) -> bool:
    if not candidate_hash or not stored_hash:
        return False
    return hmac.compare_digest(candidate_hash, stored_hash)


def _audit(complaint: Complaint, action: str, actor: Any, details: str = "") -> AuditLog:
    return AuditLog.objects.create(
        complaint=complaint,
        action=action,
        performed_by=actor if getattr(actor, "is_authenticated", False) else None,
        details=details,
    )


# ═══════════════════════════════════════════════════════════════════
#  Complaint Query Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintQueryService:
    """
    Constructs role-scoped, filtered querysets for staff dashboards.
    """

    @staticmethod
    def scoped_queryset(requesting_user: Any) -> QuerySet[Complaint]:
        return apply_role_filter(
            Complaint.objects.all(),
            requesting_user,
            scope_config=COMPLAINT_SCOPE_CONFIG,
        )

    @staticmethod
    def get_filtered_queryset(
        requesting_user: Any,
        filters: dict[str, Any],
    ) -> QuerySet[Complaint]:
        """
        Build a role-scoped, filtered queryset of ``Complaint`` objects.

        Supported filter keys: ``status``, ``category``, ``severity``,
        ``assigned_to`` (staff uid), ``unassigned``, ``created_after``,
        ``created_before``, ``search``.
        """
        require(requesting_user, Actions.READ)

        # 1. Role-based scoping
        qs = ComplaintQueryService.scoped_queryset(requesting_user)

        # 2. Explicit filters
        status = filters.get("status")
        if status:
            qs = qs.filter(status=status)

        category = filters.get("category")
        if category == ComplaintCategory.OTHER:
            qs = qs.filter(category__startswith=f"{ComplaintCategory.OTHER}:")
        elif category:
            qs = qs.filter(category=category)

        severity = filters.get("severity")
        if severity:
            qs = qs.filter(severity=severity)

        assigned_to = filters.get("assigned_to")
        if assigned_to:
            qs = qs.filter(assigned_to__uid=assigned_to)

        if filters.get("unassigned"):
            qs = qs.filter(assigned_to__isnull=True)

        created_after = filters.get("created_after")
        if created_after is not None:
            qs = qs.filter(created_at__date__gte=created_after)

        created_before = filters.get("created_before")
        if created_before is not None:
            qs = qs.filter(created_at__date__lte=created_before)

        search = filters.get("search")
        if search:
            qs = qs.filter(
                Q(complaint_id__icontains=search)
                | Q(description__icontains=search)
                | Q(location__icontains=search)
                | Q(category__icontains=search)
            )

        # 3. Optimise
        return qs.select_related("assigned_to").order_by("-created_at")

    @staticmethod
    def get_complaint_detail(requesting_user: Any, complaint_id: str) -> Complaint:
        """
        Retrieve one complaint within the caller's scope.

        Raises ``NotFound`` for unknown IDs and for complaints the caller
        may not see.
        """
        require(requesting_user, Actions.READ)
        try:
            return (
                ComplaintQueryService.scoped_queryset(requesting_user)
                .select_related("assigned_to")
                .get(pk=(complaint_id or "").strip().upper())
            )
        except Complaint.DoesNotExist:
            raise NotFound(f"Complaint {complaint_id} not found.")


# ═══════════════════════════════════════════════════════════════════
#  Submission Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintSubmissionService:
    """
    Anonymous complaint intake.

    The evidence image is uploaded *before* the record is written.  If the
    upload fails nothing is persisted; if the insert fails afterwards the
    uploaded blob is removed again.
    """

    @staticmethod
    def resolve_category(category: str, other_detail: str | None = None) -> str:
        if category == ComplaintCategory.OTHER:
            detail = (other_detail or "").strip()
            if not detail:
                raise DomainError("Please specify the category when choosing 'Other'.")
            return f"{ComplaintCategory.OTHER}: {detail}"
        return category

    @staticmethod
    def validate_attachment(name: str, size: int) -> str:
        """
        Check an upload against the extension and size limits.

        Returns the normalised extension (``jpeg`` becomes ``jpg``).
        """
        ext = os.path.splitext(name or "")[1].lower().lstrip(".")
        if ext not in complaints_setting("ATTACHMENT_ALLOWED_EXTENSIONS"):
            raise DomainError("Only .jpg images are accepted as evidence.")
        if size > complaints_setting("ATTACHMENT_MAX_BYTES"):
            raise DomainError("Evidence image must be 5 MB or smaller.")
        return "jpg" if ext == "jpeg" else ext

    @staticmethod
    def build_storage_name(complaint_id: str, original_name: str) -> str:
        base, _ = os.path.splitext(os.path.basename(original_name))
        safe_base = get_valid_filename(base) or "evidence"
        millis = int(time.time() * 1000)
        prefix = complaints_setting("ATTACHMENT_PREFIX")
        return f"{prefix}/{complaint_id}/{millis}_{safe_base}.jpg"

    @staticmethod
    def submit(
        validated_data: dict[str, Any],
        *,
        attachment: Any = None,
        storage: Storage | None = None,
    ) -> Complaint:
        """
        Create a complaint from cleaned intake data.

        Parameters
        ----------
        validated_data : dict
            ``category`` (already resolved, e.g. ``"Other: Hazing"``),
            ``severity``, ``description``, ``location``, ``perpetrator``,
            ``witnesses``, ``incident_date`` and optional ``passcode``.
        attachment : UploadedFile, optional
            A single ``.jpg``/``.jpeg`` image.
        storage : Storage, optional
            Evidence storage backend; defaults to ``STORAGES["evidence"]``.

        Raises
        ------
        DomainError
            Invalid attachment or failed upload (nothing persisted).
        Conflict
            The generated ID collided with an existing complaint.
        """
        data = dict(validated_data)
        passcode = data.pop("passcode", None)
        passcode_hash = hash_passcode(passcode) if passcode else None

        complaint_id = generate_complaint_id()

        storage_path = None
        if attachment is not None:
            ComplaintSubmissionService.validate_attachment(attachment.name, attachment.size)
            storage = storage or get_evidence_storage()
            target = ComplaintSubmissionService.build_storage_name(complaint_id, attachment.name)
            try:
                storage_path = storage.save(target, attachment)
            except Exception as exc:
                logger.exception("Evidence upload failed for complaint %s", complaint_id)
                raise DomainError(
                    "Evidence upload failed; the complaint was not submitted. Please try again."
                ) from exc

        try:
            with transaction.atomic():
                complaint = Complaint(
                    complaint_id=complaint_id,
                    passcode_hash=passcode_hash,
                    storage_path=storage_path,
                    status=ComplaintStatus.SUBMITTED,
                    **data,
                )
                complaint.save(force_insert=True)
                _audit(complaint, AuditAction.CREATED, None, "Complaint submitted")
        except IntegrityError as exc:
            ComplaintSubmissionService._discard_upload(storage, storage_path)
            raise Conflict(f"Complaint ID {complaint_id} already exists; please resubmit.") from exc
        except Exception:
            ComplaintSubmissionService._discard_upload(storage, storage_path)
            raise

        logger.info(
            "Complaint %s submitted (severity=%s, passcode=%s, evidence=%s)",
            complaint.complaint_id,
            complaint.severity,
            "yes" if passcode_hash else "no",
            "yes" if storage_path else "no",
        )
        return complaint

    @staticmethod
    def _discard_upload(storage: Storage | None, storage_path: str | None) -> None:
        if storage is None or not storage_path:
            return
        try:
            storage.delete(storage_path)
        except OSError:
            logger.exception("Could not remove orphaned evidence %s", storage_path)


# ═══════════════════════════════════════════════════════════════════
#  Tracking Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintTrackingService:
    """
    Passcode gate for the public tracking page.

    Unknown IDs, wrong passcodes, blank passcodes and missing passcodes all
    raise the same ``TrackingDenied``.  A successful unlock stores the hash
    of the supplied passcode in the session; later reads compare it with
    the *current* stored hash.
    """

    @staticmethod
    def _fetch(complaint_id: str) -> Complaint:
        try:
            return Complaint.objects.prefetch_related("public_updates").get(
                pk=(complaint_id or "").strip().upper()
            )
        except Complaint.DoesNotExist:
            raise TrackingDenied()

    @staticmethod
    def _session_unlocks(session) -> dict[str, str]:
        if session is None:
            return {}
        return session.get(complaints_setting("TRACKING_SESSION_KEY"), {})

    @staticmethod
    def _candidate_hash(passcode: str | None) -> str | None:
        if not passcode:
            return None
        try:
            return hash_passcode(passcode)
        except DomainError:
            return None

    @staticmethod
    def verify(
        complaint_id: str,
        *,
        passcode: str | None = None,
        session=None,
    ) -> Complaint:
        """
        Return the complaint if the caller may see it.

        A supplied ``passcode`` takes precedence; otherwise the candidate
        hash recorded in ``session`` is used.
        """
        complaint = ComplaintTrackingService._fetch(complaint_id)
        if not complaint.passcode_protected:
            return complaint

        candidate = ComplaintTrackingService._candidate_hash(passcode)
        if candidate is None and passcode is None:
            candidate = ComplaintTrackingService._session_unlocks(session).get(complaint.pk)

        if not passcode_matches(candidate, complaint.passcode_hash):
            logger.info("Tracking access denied for a protected complaint")
            raise TrackingDenied()
        return complaint

    @staticmethod
    def unlock(complaint_id: str, passcode: str | None, session) -> Complaint:
        """
        Verify ``passcode`` and remember the unlock in ``session``.
        """
        complaint = ComplaintTrackingService.verify(complaint_id, passcode=passcode or "")
        if complaint.passcode_protected and session is not None:
            key = complaints_setting("TRACKING_SESSION_KEY")
            unlocks = dict(session.get(key, {}))
            unlocks[complaint.pk] = hash_passcode(passcode)
            session[key] = unlocks
            session.modified = True
        return complaint

    @staticmethod
    def get_unlocked(complaint_id: str, session) -> Complaint:
        """Re-verify a previously unlocked complaint on every read."""
        return ComplaintTrackingService.verify(complaint_id, session=session)


# ═══════════════════════════════════════════════════════════════════
#  Workflow Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintWorkflowService:
    """
    Staff mutations on a complaint: status, public updates and notes.

    Status changes are permissive unless ``COMPLAINTS["STRICT_TRANSITIONS"]``
    is enabled, in which case only ``ALLOWED_TRANSITIONS`` are accepted.
    """

    ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
        ComplaintStatus.SUBMITTED: frozenset({
            ComplaintStatus.VIEWED,
            ComplaintStatus.UNDER_REVIEW,
            ComplaintStatus.DISMISSED,
        }),
        ComplaintStatus.VIEWED: frozenset({
            ComplaintStatus.UNDER_REVIEW,
            ComplaintStatus.WORKING,
            ComplaintStatus.INVESTIGATION,
            ComplaintStatus.DISMISSED,
        }),
        ComplaintStatus.UNDER_REVIEW: frozenset({
            ComplaintStatus.WORKING,
            ComplaintStatus.INVESTIGATION,
            ComplaintStatus.RESOLVED,
            ComplaintStatus.DISMISSED,
        }),
        ComplaintStatus.WORKING: frozenset({
            ComplaintStatus.INVESTIGATION,
            ComplaintStatus.RESOLVED,
            ComplaintStatus.DISMISSED,
        }),
        ComplaintStatus.INVESTIGATION: frozenset({
            ComplaintStatus.WORKING,
            ComplaintStatus.RESOLVED,
            ComplaintStatus.DISMISSED,
        }),
        ComplaintStatus.RESOLVED: frozenset(),
        ComplaintStatus.DISMISSED: frozenset(),
    }

    @staticmethod
    def change_status(
        complaint_id: str,
        target: str,
        requesting_user: Any,
        *,
        expected_version: int | None = None,
    ) -> Complaint:
        """
        Move a complaint to ``target``.

        Raises
        ------
        NotFound
            Complaint outside the caller's scope.
        PermissionDenied
            Role may not change status on this complaint.
        DomainError
            Unknown status, or ``target`` equals the current status.
        InvalidTransition
            Strict mode is on and the move is not in the table.
        StaleWrite
            ``expected_version`` is stale.
        """
        complaint = ComplaintQueryService.get_complaint_detail(requesting_user, complaint_id)
        require(requesting_user, Actions.MUTATE_STATUS, complaint)

        if target not in ComplaintStatus.values:
            raise DomainError(f"Unknown status '{target}'.")

        with locked_for_mutation(
            Complaint, complaint.pk, expected_version=expected_version,
        ) as locked:
            current = locked.status
            if target == current:
                raise DomainError(f"Complaint is already '{current}'.")
            if complaints_setting("STRICT_TRANSITIONS"):
                allowed = ComplaintWorkflowService.ALLOWED_TRANSITIONS.get(current, frozenset())
                if target not in allowed:
                    raise InvalidTransition(current=current, target=target)

            locked.status = target
            locked.save(update_fields=["status", "version", "updated_at"])
            _audit(locked, AuditAction.STATUS_CHANGED, requesting_user, f"{current} → {target}")

        logger.info(
            "Complaint %s status %s -> %s by user %s",
            locked.pk, current, target, requesting_user.pk,
        )
        return locked

    @staticmethod
    def append_public_update(
        complaint_id: str,
        message: str,
        requesting_user: Any,
        *,
        expected_version: int | None = None,
    ) -> PublicUpdate:
        """Append a complainant-visible message to the timeline."""
        complaint = ComplaintQueryService.get_complaint_detail(requesting_user, complaint_id)
        require(requesting_user, Actions.PUBLISH_UPDATE, complaint)

        message = (message or "").strip()
        if not message:
            raise DomainError("Update message must not be blank.")

        with locked_for_mutation(
            Complaint, complaint.pk, expected_version=expected_version,
        ) as locked:
            locked.save(update_fields=["version", "updated_at"])
            update = PublicUpdate.objects.create(
                complaint=locked,
                message=message,
                author=requesting_user,
            )
            _audit(locked, AuditAction.PUBLIC_UPDATE_ADDED, requesting_user, "Public update posted")

        logger.info("Public update #%d added to %s by user %s", update.pk, complaint.pk, requesting_user.pk)
        return update

    @staticmethod
    def add_internal_note(
        complaint_id: str,
        note: str,
        requesting_user: Any,
    ) -> InternalNote:
        """
        Add a staff-only note.  The complaint row itself is not touched, so
        the public ``updated_at`` does not reveal note activity.
        """
        complaint = ComplaintQueryService.get_complaint_detail(requesting_user, complaint_id)
        require(requesting_user, Actions.ANNOTATE, complaint)

        note = (note or "").strip()
        if not note:
            raise DomainError("Note must not be blank.")

        with transaction.atomic():
            entry = InternalNote.objects.create(
                complaint=complaint,
                author=requesting_user,
                note=note,
            )
            _audit(complaint, AuditAction.INTERNAL_NOTE_ADDED, requesting_user)

        logger.info("Internal note #%d added to %s by user %s", entry.pk, complaint.pk, requesting_user.pk)
        return entry

    @staticmethod
    def list_internal_notes(complaint_id: str, requesting_user: Any) -> QuerySet[InternalNote]:
        complaint = ComplaintQueryService.get_complaint_detail(requesting_user, complaint_id)
        require(requesting_user, Actions.ANNOTATE, complaint)
        return complaint.internal_notes.select_related("author").order_by("created_at", "id")

    @staticmethod
    def get_audit_log(complaint_id: str, requesting_user: Any) -> QuerySet[AuditLog]:
        complaint = ComplaintQueryService.get_complaint_detail(requesting_user, complaint_id)
        require(requesting_user, Actions.READ, complaint)
        return complaint.audit_logs.select_related("performed_by").order_by("timestamp", "id")


# ═══════════════════════════════════════════════════════════════════
#  Assignment Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintAssignmentService:
    """Routes complaints to action takers."""

    @staticmethod
    def _resolve_assignee(assignee_uid: Any) -> User:
        try:
            return User.objects.get(
                uid=assignee_uid,
                role=Roles.ACTION_TAKER,
                is_active=True,
            )
        except (User.DoesNotExist, ValueError):
            raise DomainError("Assignee must be an active action taker.")

    @staticmethod
    def assign(
        complaint_id: str,
        assignee_uid: Any,
        requesting_user: Any,
        *,
        expected_version: int | None = None,
    ) -> Complaint:
        """
        Assign a complaint to an action taker.

        Raises ``DomainError`` if the assignee is not an active action
        taker or already holds the complaint.
        """
        complaint = ComplaintQueryService.get_complaint_detail(requesting_user, complaint_id)
        require(requesting_user, Actions.ASSIGN, complaint)
        assignee = ComplaintAssignmentService._resolve_assignee(assignee_uid)

        with locked_for_mutation(
            Complaint, complaint.pk, expected_version=expected_version,
        ) as locked:
            if locked.assigned_to_id == assignee.pk:
                raise DomainError(f"Complaint is already assigned to {assignee.display_name}.")
            locked.assigned_to = assignee
            locked.save(update_fields=["assigned_to", "version", "updated_at"])
            _audit(
                locked,
                AuditAction.ASSIGNED,
                requesting_user,
                f"Assigned to {assignee.display_name} ({assignee.uid})",
            )

        logger.info("Complaint %s assigned to %s by user %s", locked.pk, assignee.uid, requesting_user.pk)
        return locked

    @staticmethod
    def unassign(
        complaint_id: str,
        requesting_user: Any,
        *,
        expected_version: int | None = None,
    ) -> Complaint:
        complaint = ComplaintQueryService.get_complaint_detail(requesting_user, complaint_id)
        require(requesting_user, Actions.ASSIGN, complaint)

        with locked_for_mutation(
            Complaint, complaint.pk, expected_version=expected_version,
        ) as locked:
            if locked.assigned_to_id is None:
                raise DomainError("Complaint is not assigned.")
            previous = locked.assigned_to
            locked.assigned_to = None
            locked.save(update_fields=["assigned_to", "version", "updated_at"])
            _audit(
                locked,
                AuditAction.UNASSIGNED,
                requesting_user,
                f"Unassigned from {previous.display_name} ({previous.uid})",
            )

        logger.info("Complaint %s unassigned by user %s", locked.pk, requesting_user.pk)
        return locked


# ═══════════════════════════════════════════════════════════════════
#  Export Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintExportService:
    """
    Renders a complaint list as CSV, XLSX or PDF.

    Internal notes and passcode hashes are never part of an export.
    """

    HEADERS: tuple[str, ...] = (
        "Complaint ID",
        "Category",
        "Severity",
        "Status",
        "Assigned To",
        "Location",
        "Incident Date",
        "Created At",
        "Updated At",
        "Description",
    )

    FORMATS: dict[str, str] = {
        "csv": "text/csv",
        "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "pdf": "application/pdf",
    }

    @staticmethod
    def _rows(complaints, staff: dict[Any, str]) -> list[list[Any]]:
        tz = timezone.get_current_timezone()
        rows = []
        for c in complaints:
            rows.append([
                c.complaint_id,
                c.category,
                c.severity,
                c.status,
                staff.get(c.assigned_to_id, "Unassigned"),
                c.location,
                timezone.localtime(c.incident_date, tz).replace(tzinfo=None) if c.incident_date else None,
                timezone.localtime(c.created_at, tz).replace(tzinfo=None),
                timezone.localtime(c.updated_at, tz).replace(tzinfo=None),
                c.description,
            ])
        return rows

    @staticmethod
    def export(complaints, staff: dict[Any, str], fmt: str) -> tuple[bytes, str, str]:
        """
        Render ``complaints`` in ``fmt``.

        Parameters
        ----------
        complaints : iterable of Complaint
            The already-scoped list to export.
        staff : dict
            User PK → display name, used for the "Assigned To" column.
        fmt : str
            ``csv``, ``xlsx`` or ``pdf``.

        Returns
        -------
        tuple
            ``(payload, content_type, filename)``.
        """
        fmt = (fmt or "").lower()
        if fmt not in ComplaintExportService.FORMATS:
            raise DomainError(
                f"Unsupported export format '{fmt}'. Choose csv, xlsx or pdf."
            )

        headers = ComplaintExportService.HEADERS
        rows = ComplaintExportService._rows(complaints, staff)
        stamp = timezone.localtime().strftime("%Y%m%d_%H%M%S")
        title = "Complaints Export"

        if fmt == "csv":
            payload = reports.render_csv(headers, rows)
        elif fmt == "xlsx":
            payload = reports.render_xlsx(headers, rows, title="Complaints")
        else:
            payload = reports.render_pdf_table(
                headers,
                rows,
                title=title,
                subtitle=f"{len(rows)} complaint(s), generated {timezone.localtime():%Y-%m-%d %H:%M}",
            )

        return payload, ComplaintExportService.FORMATS[fmt], f"complaints_export_{stamp}.{fmt}"

    @staticmethod
    def export_for_user(
        requesting_user: Any,
        filters: dict[str, Any],
        fmt: str,
    ) -> tuple[bytes, str, str]:
        """Export the caller's filtered, scoped complaint list."""
        require(requesting_user, Actions.EXPORT)
        complaints = list(ComplaintQueryService.get_filtered_queryset(requesting_user, filters))
        assignee_ids = {c.assigned_to_id for c in complaints if c.assigned_to_id}
        staff = {u.pk: u.display_name for u in User.objects.filter(pk__in=assignee_ids)}

        payload, content_type, filename = ComplaintExportService.export(complaints, staff, fmt)
        logger.info(
            "User %s exported %d complaint(s) as %s",
            requesting_user.pk, len(complaints), fmt,
        )
        return payload, content_type, filename


# ═══════════════════════════════════════════════════════════════════
#  Receipt Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintReceiptService:
    """PDF receipt confirming a submission."""

    @staticmethod
    def render(complaint: Complaint) -> tuple[bytes, str]:
        payload = reports.render_receipt(
            complaint_id=complaint.complaint_id,
            submitted_at=timezone.localtime(complaint.created_at),
            passcode_protected=complaint.passcode_protected,
            organisation=getattr(settings, "COMPLAINTS_ORGANISATION_NAME", "Safe Voice Platform"),
        )
        return payload, f"Receipt-{complaint.complaint_id}.pdf"
