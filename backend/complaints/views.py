"""
Complaints app views.

Architecture: Views are intentionally thin.
Every view follows the strict three-step pattern:

    1. Parse / validate input via a serializer.
    2. Delegate all business logic to the appropriate service class.
    3. Serialize the result and return a DRF ``Response``.

Public views (no account, no JWT)
---------------------------------
- ``ComplaintSubmitView``   - anonymous intake.
- ``TrackingView``          - unlock a complaint with ID (+ passcode).
- ``TrackingDetailView``    - re-read an unlocked complaint.
- ``ReceiptView``           - PDF receipt behind the same gate.

Staff views
-----------
- ``ComplaintViewSet`` - list / retrieve plus workflow ``@action`` methods.
"""

from __future__ import annotations

from django.http import HttpResponse
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    OpenApiTypes,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Complaint
from .serializers import (
    AssignSerializer,
    AuditLogSerializer,
    ComplaintDetailSerializer,
    ComplaintFilterSerializer,
    ComplaintListSerializer,
    ComplaintSubmitSerializer,
    ExportQuerySerializer,
    InternalNoteCreateSerializer,
    InternalNoteSerializer,
    PublicUpdateCreateSerializer,
    StaffPublicUpdateSerializer,
    StatusChangeSerializer,
    SubmissionResultSerializer,
    TrackingRequestSerializer,
    TrackingSerializer,
    VersionedRequestSerializer,
)
from .services import (
    ComplaintAssignmentService,
    ComplaintExportService,
    ComplaintQueryService,
    ComplaintReceiptService,
    ComplaintSubmissionService,
    ComplaintTrackingService,
    ComplaintWorkflowService,
)


def _file_response(payload: bytes, content_type: str, filename: str) -> HttpResponse:
    response = HttpResponse(payload, content_type=content_type)
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


# ═══════════════════════════════════════════════════════════════════
#  Public intake & tracking
# ═══════════════════════════════════════════════════════════════════


class ComplaintSubmitView(APIView):
    """POST /api/complaints/submit/"""

    permission_classes = [AllowAny]
    authentication_classes = []
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @extend_schema(
        summary="Submit an anonymous complaint",
        description=(
            "Create a complaint without an account. Optionally set a passcode "
            "to protect the tracking page and attach one .jpg image (max 5 MB)."
        ),
        request=ComplaintSubmitSerializer,
        responses={
            201: OpenApiResponse(response=SubmissionResultSerializer, description="Complaint created."),
            400: OpenApiResponse(description="Validation error or failed upload."),
            409: OpenApiResponse(description="Identifier collision; resubmit."),
        },
        tags=["Public"],
    )
    def post(self, request: Request) -> Response:
        serializer = ComplaintSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        attachment = data.pop("attachment", None)
        complaint = ComplaintSubmissionService.submit(data, attachment=attachment)

        return Response(
            SubmissionResultSerializer(complaint).data,
            status=status.HTTP_201_CREATED,
        )


class TrackingView(APIView):
    """
    POST /api/track/

    Unlocks a complaint for this browser session.  Every failure returns
    the same 404 body.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Track a complaint",
        request=TrackingRequestSerializer,
        responses={
            200: OpenApiResponse(response=TrackingSerializer, description="Tracking view."),
            404: OpenApiResponse(description="Complaint not found or access denied."),
        },
        tags=["Public"],
    )
    def post(self, request: Request) -> Response:
        serializer = TrackingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        complaint = ComplaintTrackingService.unlock(
            serializer.validated_data["complaint_id"],
            serializer.validated_data.get("passcode"),
            request.session,
        )
        return Response(TrackingSerializer(complaint).data, status=status.HTTP_200_OK)


class TrackingDetailView(APIView):
    """GET /api/track/{complaint_id}/"""

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Re-read a tracked complaint",
        description=(
            "Open complaints are readable with the ID alone. Protected ones "
            "require a prior unlock in this session, re-checked on every read."
        ),
        responses={
            200: OpenApiResponse(response=TrackingSerializer, description="Tracking view."),
            404: OpenApiResponse(description="Complaint not found or access denied."),
        },
        tags=["Public"],
    )
    def get(self, request: Request, complaint_id: str) -> Response:
        complaint = ComplaintTrackingService.get_unlocked(complaint_id, request.session)
        return Response(TrackingSerializer(complaint).data, status=status.HTTP_200_OK)


class ReceiptView(APIView):
    """POST /api/track/receipt/"""

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Download submission receipt",
        request=TrackingRequestSerializer,
        responses={
            (200, "application/pdf"): OpenApiResponse(response=OpenApiTypes.BINARY, description="PDF receipt."),
            404: OpenApiResponse(description="Complaint not found or access denied."),
        },
        tags=["Public"],
    )
    def post(self, request: Request) -> HttpResponse:
        serializer = TrackingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        passcode = serializer.validated_data.get("passcode")
        complaint = ComplaintTrackingService.verify(
            serializer.validated_data["complaint_id"],
            passcode=passcode or None,
            session=request.session,
        )
        payload, filename = ComplaintReceiptService.render(complaint)
        return _file_response(payload, "application/pdf", filename)


# ═══════════════════════════════════════════════════════════════════
#  Staff ViewSet
# ═══════════════════════════════════════════════════════════════════


class ComplaintViewSet(viewsets.ViewSet):
    """
    Staff-facing complaint endpoints.

    Uses ``viewsets.ViewSet`` (not ``ModelViewSet``) so every action is
    explicitly defined.  Complaints are created only through the public
    intake and are never deleted.

    Permission Strategy
    -------------------
    The base permission is ``IsAuthenticated``.  Role and assignment
    checks happen inside the service layer.
    """

    permission_classes = [IsAuthenticated]
    queryset = Complaint.objects.none()
    lookup_value_regex = r"[A-Za-z0-9]+-[A-Za-z0-9]+"

    @extend_schema(
        summary="List complaints",
        description="Complaints visible to the caller's role, with optional filters.",
        parameters=[
            OpenApiParameter(name="status", type=str, required=False, description="Filter by status."),
            OpenApiParameter(name="category", type=str, required=False, description="Filter by category ('Other' matches all custom categories)."),
            OpenApiParameter(name="severity", type=str, required=False, description="Filter by severity."),
            OpenApiParameter(name="assigned_to", type=str, required=False, description="Assignee uid."),
            OpenApiParameter(name="unassigned", type=bool, required=False, description="Only complaints without an assignee."),
            OpenApiParameter(name="created_after", type=str, required=False, description="ISO date, inclusive."),
            OpenApiParameter(name="created_before", type=str, required=False, description="ISO date, inclusive."),
            OpenApiParameter(name="search", type=str, required=False, description="Search ID, description, location, category."),
        ],
        responses={200: OpenApiResponse(response=ComplaintListSerializer(many=True), description="Complaint list.")},
        tags=["Complaints"],
    )
    def list(self, request: Request) -> Response:
        """GET /api/complaints/"""
        filter_serializer = ComplaintFilterSerializer(data=request.query_params)
        if not filter_serializer.is_valid():
            return Response(filter_serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        queryset = ComplaintQueryService.get_filtered_queryset(
            request.user, filter_serializer.validated_data
        )
        serializer = ComplaintListSerializer(queryset, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Retrieve complaint",
        responses={
            200: OpenApiResponse(response=ComplaintDetailSerializer, description="Complaint detail."),
            404: OpenApiResponse(description="Unknown or out of scope."),
        },
        tags=["Complaints"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        """GET /api/complaints/{id}/"""
        complaint = ComplaintQueryService.get_complaint_detail(request.user, pk)
        return Response(ComplaintDetailSerializer(complaint).data, status=status.HTTP_200_OK)

    # ── Workflow @actions ─────────────────────────────────────────────

    @action(detail=True, methods=["post"], url_path="status", url_name="status")
    @extend_schema(
        summary="Change complaint status",
        request=StatusChangeSerializer,
        responses={
            200: OpenApiResponse(response=ComplaintDetailSerializer, description="Status changed."),
            400: OpenApiResponse(description="Validation error or same status."),
            403: OpenApiResponse(description="Role may not change this complaint."),
            409: OpenApiResponse(description="Stale version or disallowed transition."),
        },
        tags=["Complaints"],
    )
    def change_status(self, request: Request, pk: str = None) -> Response:
        """POST /api/complaints/{id}/status/"""
        serializer = StatusChangeSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        complaint = ComplaintWorkflowService.change_status(
            pk,
            serializer.validated_data["status"],
            request.user,
            expected_version=serializer.validated_data.get("expected_version"),
        )
        return Response(ComplaintDetailSerializer(complaint).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post", "delete"], url_path="assign")
    @extend_schema(
        summary="Assign or unassign an action taker",
        description=(
            "POST: assign to the action taker identified by `assignee`.\n"
            "DELETE: clear the assignment."
        ),
        request=AssignSerializer,
        responses={
            200: OpenApiResponse(response=ComplaintDetailSerializer, description="Assignment updated."),
            400: OpenApiResponse(description="Invalid assignee."),
            403: OpenApiResponse(description="Role may not assign."),
            409: OpenApiResponse(description="Stale version."),
        },
        tags=["Complaints"],
    )
    def assign(self, request: Request, pk: str = None) -> Response:
        """
        POST   /api/complaints/{id}/assign/
        DELETE /api/complaints/{id}/assign/
        """
        if request.method == "DELETE":
            serializer = VersionedRequestSerializer(data=request.data or request.query_params)
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
            complaint = ComplaintAssignmentService.unassign(
                pk,
                request.user,
                expected_version=serializer.validated_data.get("expected_version"),
            )
            return Response(ComplaintDetailSerializer(complaint).data, status=status.HTTP_200_OK)

        serializer = AssignSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        complaint = ComplaintAssignmentService.assign(
            pk,
            serializer.validated_data["assignee"],
            request.user,
            expected_version=serializer.validated_data.get("expected_version"),
        )
        return Response(ComplaintDetailSerializer(complaint).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="updates")
    @extend_schema(
        summary="Post a public update",
        description="Append a complainant-visible message to the tracking timeline.",
        request=PublicUpdateCreateSerializer,
        responses={
            201: OpenApiResponse(response=StaffPublicUpdateSerializer, description="Update appended."),
            403: OpenApiResponse(description="Role may not publish on this complaint."),
        },
        tags=["Complaints"],
    )
    def updates(self, request: Request, pk: str = None) -> Response:
        """POST /api/complaints/{id}/updates/"""
        serializer = PublicUpdateCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        update = ComplaintWorkflowService.append_public_update(
            pk,
            serializer.validated_data["message"],
            request.user,
            expected_version=serializer.validated_data.get("expected_version"),
        )
        return Response(StaffPublicUpdateSerializer(update).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get", "post"], url_path="notes")
    @extend_schema(
        summary="List or add internal notes",
        description=(
            "GET: staff-only notes, oldest first.\n"
            "POST: add a note. Notes never appear on the tracking page."
        ),
        request=InternalNoteCreateSerializer,
        responses={
            200: OpenApiResponse(response=InternalNoteSerializer(many=True), description="Note list."),
            201: OpenApiResponse(response=InternalNoteSerializer, description="Note added."),
        },
        tags=["Complaints"],
    )
    def notes(self, request: Request, pk: str = None) -> Response:
        """
        GET  /api/complaints/{id}/notes/
        POST /api/complaints/{id}/notes/
        """
        if request.method == "GET":
            notes_qs = ComplaintWorkflowService.list_internal_notes(pk, request.user)
            return Response(InternalNoteSerializer(notes_qs, many=True).data, status=status.HTTP_200_OK)

        serializer = InternalNoteCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        note = ComplaintWorkflowService.add_internal_note(
            pk, serializer.validated_data["note"], request.user,
        )
        return Response(InternalNoteSerializer(note).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], url_path="audit-log", url_name="audit-log")
    @extend_schema(
        summary="Complaint audit log",
        responses={200: OpenApiResponse(response=AuditLogSerializer(many=True), description="Audit trail, oldest first.")},
        tags=["Complaints"],
    )
    def audit_log(self, request: Request, pk: str = None) -> Response:
        """GET /api/complaints/{id}/audit-log/"""
        entries = ComplaintWorkflowService.get_audit_log(pk, request.user)
        return Response(AuditLogSerializer(entries, many=True).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"], url_path="export")
    @extend_schema(
        summary="Export complaints",
        description="Download the caller's filtered complaint list as CSV, XLSX or PDF.",
        parameters=[
            OpenApiParameter(name="format", type=str, required=False, enum=["csv", "xlsx", "pdf"], description="Output format (default csv)."),
        ],
        responses={
            200: OpenApiResponse(response=OpenApiTypes.BINARY, description="Export file."),
            400: OpenApiResponse(description="Unsupported format."),
            403: OpenApiResponse(description="Role may not export."),
        },
        tags=["Complaints"],
    )
    def export(self, request: Request) -> HttpResponse:
        """GET /api/complaints/export/?format=csv|xlsx|pdf"""
        serializer = ExportQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        filters = dict(serializer.validated_data)
        fmt = filters.pop("format")
        payload, content_type, filename = ComplaintExportService.export_for_user(
            request.user, filters, fmt,
        )
        return _file_response(payload, content_type, filename)
