"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in a DRF ``Response``.  **No business logic** resides here.

View Map
--------
- ``LoginView``          - POST /auth/login/
- ``MeView``             - GET /me/
- ``StaffViewSet``       - /staff/  (list, retrieve by uid)
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import User
from .serializers import (
    CustomTokenObtainPairSerializer,
    LoginRequestSerializer,
    StaffFilterSerializer,
    StaffListSerializer,
    UserDetailSerializer,
)
from .services import StaffDirectoryService


# ═══════════════════════════════════════════════════════════════════
#  Authentication Views
# ═══════════════════════════════════════════════════════════════════


class LoginView(APIView):
    """
    POST /api/accounts/auth/login/

    Public endpoint.  Authenticates a staff member by username or email
    plus password and returns a JWT pair with the profile attached.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Staff login",
        description=(
            "Authenticate with username or email plus password. Returns "
            "access/refresh tokens and the user's profile."
        ),
        request=LoginRequestSerializer,
        responses={
            200: OpenApiResponse(description="Token pair and user profile."),
            400: OpenApiResponse(description="Invalid credentials."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = CustomTokenObtainPairSerializer(
            data=request.data,
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)

        payload = serializer.validated_data  # contains 'access' and 'refresh'
        payload["user"] = UserDetailSerializer(serializer.user).data

        return Response(payload, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Current User ("Me") View
# ═══════════════════════════════════════════════════════════════════


class MeView(APIView):
    """
    GET /api/accounts/me/

    Returns the authenticated staff member's profile, including the
    effective role used for dashboard routing.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Current user profile",
        responses={200: UserDetailSerializer},
        tags=["Auth"],
    )
    def get(self, request: Request) -> Response:
        return Response(UserDetailSerializer(request.user).data)


# ═══════════════════════════════════════════════════════════════════
#  Staff Roster
# ═══════════════════════════════════════════════════════════════════


class StaffViewSet(viewsets.ViewSet):
    """
    Read-only staff roster for administrators.

    Access is checked in ``StaffDirectoryService``; action takers get a
    403 from the service layer.
    """

    permission_classes = [IsAuthenticated]
    queryset = User.objects.none()
    lookup_field = "uid"
    lookup_value_regex = "[0-9a-fA-F-]{36}"

    @extend_schema(
        summary="List staff",
        parameters=[
            OpenApiParameter(name="role", type=str, required=False, description="Filter by role."),
            OpenApiParameter(name="is_active", type=bool, required=False, description="Filter by active flag."),
            OpenApiParameter(name="search", type=str, required=False, description="Search username, email, name, department."),
        ],
        responses={
            200: StaffListSerializer(many=True),
            403: OpenApiResponse(description="Role may not browse the roster."),
        },
        tags=["Staff"],
    )
    def list(self, request: Request) -> Response:
        filters = StaffFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        qs = StaffDirectoryService.list_staff(request.user, **filters.validated_data)
        return Response(StaffListSerializer(qs, many=True).data)

    @extend_schema(
        summary="Retrieve staff member",
        responses={
            200: UserDetailSerializer,
            403: OpenApiResponse(description="Role may not browse the roster."),
            404: OpenApiResponse(description="Unknown uid."),
        },
        tags=["Staff"],
    )
    def retrieve(self, request: Request, uid: str = None) -> Response:
        user = StaffDirectoryService.get_staff(request.user, uid)
        return Response(UserDetailSerializer(user).data)
