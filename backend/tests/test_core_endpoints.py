"""
Integration tests for the core endpoints.

Scope in this file:
- GET /api/core/dashboard/
- GET /api/core/constants/
"""

from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from complaints.models import Complaint, ComplaintSeverity, ComplaintStatus
from complaints.services import generate_complaint_id
from core.permissions_constants import Roles


def _make_complaint(**overrides) -> Complaint:
    fields = {
        "complaint_id": generate_complaint_id(),
        "category": "Bullying",
        "severity": ComplaintSeverity.MEDIUM,
        "description": "Pushed on the stairs on the way to assembly.",
        "location": "Main stairwell",
        "perpetrator": "None",
        "witnesses": "None",
        "incident_date": timezone.now() - timedelta(days=1),
    }
    fields.update(overrides)
    return Complaint.objects.create(**fields)


class TestCoreEndpoints(TestCase):
    @classmethod
    def setUpTestData(cls):
        pw = "CoreEndpointsP@ss123"
        cls.committee = User.objects.create_user(
            username="dash_committee", email="dash_committee@example.com",
            password=pw, role=Roles.COMMITTEE,
        )
        cls.taker = User.objects.create_user(
            username="dash_taker", email="dash_taker@example.com",
            password=pw, role=Roles.ACTION_TAKER,
        )
        cls.no_role = User.objects.create_user(
            username="dash_visitor", email="dash_visitor@example.com", password=pw,
        )

        _make_complaint(assigned_to=cls.taker, severity=ComplaintSeverity.HIGH)
        _make_complaint(assigned_to=cls.taker, status=ComplaintStatus.RESOLVED)
        _make_complaint()
        _make_complaint(status=ComplaintStatus.DISMISSED, severity=ComplaintSeverity.LOW)

    def setUp(self):
        self.client = APIClient()
        self.dashboard_url = reverse("core:dashboard-stats")
        self.constants_url = reverse("core:system-constants")

    def _as(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")

    @staticmethod
    def _counts(buckets):
        return {b["value"]: b["count"] for b in buckets}

    # ── Constants ────────────────────────────────────────────────────

    def test_constants_are_public(self):
        resp = self.client.get(self.constants_url)

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        statuses = [c["value"] for c in resp.data["complaint_statuses"]]
        self.assertEqual(statuses, list(ComplaintStatus.values))
        self.assertIn({"value": "Other", "label": "Other"}, resp.data["complaint_categories"])
        self.assertEqual(
            {r["value"] for r in resp.data["staff_roles"]},
            set(Roles.ALL),
        )
        self.assertEqual(resp.data["description_min_length"], 20)
        self.assertFalse(resp.data["strict_transitions"])

    # ── Dashboard ────────────────────────────────────────────────────

    def test_dashboard_requires_authentication(self):
        resp = self.client.get(self.dashboard_url)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_dashboard_forbidden_without_role(self):
        self._as(self.no_role)
        resp = self.client.get(self.dashboard_url)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_committee_dashboard_counts_everything(self):
        self._as(self.committee)
        resp = self.client.get(self.dashboard_url)

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["total_complaints"], 4)
        self.assertEqual(resp.data["open_complaints"], 2)
        self.assertEqual(resp.data["unassigned_count"], 2)

        by_status = self._counts(resp.data["complaints_by_status"])
        self.assertEqual(len(by_status), len(ComplaintStatus.values))
        self.assertEqual(by_status[ComplaintStatus.SUBMITTED], 2)
        self.assertEqual(by_status[ComplaintStatus.WORKING], 0)

        by_severity = self._counts(resp.data["complaints_by_severity"])
        self.assertEqual(by_severity[ComplaintSeverity.MEDIUM], 2)
        self.assertEqual(len(resp.data["recently_updated"]), 4)

    def test_action_taker_dashboard_is_scoped(self):
        self._as(self.taker)
        resp = self.client.get(self.dashboard_url)

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["total_complaints"], 2)
        self.assertEqual(resp.data["open_complaints"], 1)
        self.assertIsNone(resp.data["unassigned_count"])
