"""
Integration tests - assignment and role-scoped visibility.

Committee, admin and developer accounts see every complaint; an action
taker sees only what is assigned to them.  Out-of-scope complaints are
reported as 404.
"""

from __future__ import annotations

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from complaints.models import AuditAction, Complaint, ComplaintStatus
from complaints.services import generate_complaint_id
from core.permissions_constants import Roles

User = get_user_model()


def _make_complaint(**overrides) -> Complaint:
    fields = {
        "complaint_id": generate_complaint_id(),
        "category": "Bullying",
        "severity": "Low",
        "description": "Lunch money taken twice this week near the gym.",
        "location": "Gym entrance",
        "perpetrator": "None",
        "witnesses": "None",
        "incident_date": timezone.now() - timedelta(days=1),
    }
    fields.update(overrides)
    return Complaint.objects.create(**fields)


class TestAssignmentAndScope(TestCase):

    @classmethod
    def setUpTestData(cls):
        pw = "Str0ng!Pass99"
        cls.committee = User.objects.create_user(
            username="committee", email="committee@school.example", password=pw,
            role=Roles.COMMITTEE,
        )
        cls.admin = User.objects.create_user(
            username="admin", email="admin@school.example", password=pw,
            role=Roles.ADMIN,
        )
        cls.taker = User.objects.create_user(
            username="taker", email="taker@school.example", password=pw,
            role=Roles.ACTION_TAKER, name="Taylor Taker",
        )
        cls.other_taker = User.objects.create_user(
            username="taker2", email="taker2@school.example", password=pw,
            role=Roles.ACTION_TAKER,
        )
        cls.inactive_taker = User.objects.create_user(
            username="taker3", email="taker3@school.example", password=pw,
            role=Roles.ACTION_TAKER, is_active=False,
        )
        cls.no_role = User.objects.create_user(
            username="visitor", email="visitor@school.example", password=pw,
        )

        cls.mine = _make_complaint(assigned_to=cls.taker)
        cls.theirs = _make_complaint(assigned_to=cls.other_taker)
        cls.unassigned = _make_complaint(category="Other: Hazing")

    def setUp(self):
        self.client = APIClient()

    def _as(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")

    def _ids(self, resp):
        return {row["complaint_id"] for row in resp.data}

    # ── Visibility ───────────────────────────────────────────────────

    def test_anonymous_callers_are_rejected(self):
        resp = self.client.get(reverse("complaint-list"))
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_account_without_role_is_forbidden(self):
        self._as(self.no_role)
        resp = self.client.get(reverse("complaint-list"))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_committee_sees_everything(self):
        self._as(self.committee)
        resp = self.client.get(reverse("complaint-list"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(self._ids(resp), {self.mine.pk, self.theirs.pk, self.unassigned.pk})

    def test_action_taker_sees_only_assigned(self):
        self._as(self.taker)
        resp = self.client.get(reverse("complaint-list"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(self._ids(resp), {self.mine.pk})

    def test_out_of_scope_detail_is_404(self):
        self._as(self.taker)
        resp = self.client.get(reverse("complaint-detail", kwargs={"pk": self.theirs.pk}))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_detail_includes_staff_fields(self):
        self._as(self.taker)
        resp = self.client.get(reverse("complaint-detail", kwargs={"pk": self.mine.pk}))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["description"], self.mine.description)
        self.assertEqual(resp.data["assigned_to"]["uid"], str(self.taker.uid))
        self.assertNotIn("passcode_hash", resp.data)

    def test_detail_accepts_lowercase_identifier(self):
        self._as(self.committee)
        resp = self.client.get(
            reverse("complaint-detail", kwargs={"pk": self.mine.pk.lower()})
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["complaint_id"], self.mine.pk)

    def test_filters(self):
        self._as(self.admin)
        other = self.client.get(reverse("complaint-list"), {"category": "Other"})
        unassigned = self.client.get(reverse("complaint-list"), {"unassigned": "true"})
        by_assignee = self.client.get(reverse("complaint-list"), {"assigned_to": str(self.taker.uid)})

        self.assertEqual(self._ids(other), {self.unassigned.pk})
        self.assertEqual(self._ids(unassigned), {self.unassigned.pk})
        self.assertEqual(self._ids(by_assignee), {self.mine.pk})

    def test_search_matches_id_fragment(self):
        self._as(self.admin)
        resp = self.client.get(reverse("complaint-list"), {"search": self.mine.pk[-4:]})
        self.assertIn(self.mine.pk, self._ids(resp))

    # ── Assignment ───────────────────────────────────────────────────

    def test_committee_assigns_action_taker(self):
        self._as(self.committee)
        resp = self.client.post(
            reverse("complaint-assign", kwargs={"pk": self.unassigned.pk}),
            {"assignee": str(self.taker.uid), "expected_version": 1},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["assigned_to"]["uid"], str(self.taker.uid))
        self.assertEqual(resp.data["version"], 2)
        self.assertTrue(
            self.unassigned.audit_logs.filter(action=AuditAction.ASSIGNED).exists()
        )

    def test_assigned_complaint_becomes_visible_to_assignee(self):
        self._as(self.committee)
        self.client.post(
            reverse("complaint-assign", kwargs={"pk": self.unassigned.pk}),
            {"assignee": str(self.taker.uid)},
            format="json",
        )

        self._as(self.taker)
        resp = self.client.get(reverse("complaint-list"))
        self.assertEqual(self._ids(resp), {self.mine.pk, self.unassigned.pk})

    def test_assignee_must_be_active_action_taker(self):
        self._as(self.committee)
        url = reverse("complaint-assign", kwargs={"pk": self.unassigned.pk})

        for candidate in (self.admin, self.inactive_taker):
            resp = self.client.post(url, {"assignee": str(candidate.uid)}, format="json")
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        self.unassigned.refresh_from_db()
        self.assertIsNone(self.unassigned.assigned_to)

    def test_action_taker_cannot_reassign(self):
        self._as(self.taker)
        resp = self.client.post(
            reverse("complaint-assign", kwargs={"pk": self.mine.pk}),
            {"assignee": str(self.other_taker.uid)},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_unassign(self):
        self._as(self.admin)
        url = reverse("complaint-assign", kwargs={"pk": self.theirs.pk})

        first = self.client.delete(url)
        second = self.client.delete(url)

        self.assertEqual(first.status_code, status.HTTP_200_OK, msg=first.data)
        self.assertIsNone(first.data["assigned_to"])
        self.assertEqual(second.status_code, status.HTTP_400_BAD_REQUEST)

    # ── Action taker workflow on own complaint ───────────────────────

    def test_action_taker_resolves_own_complaint_directly(self):
        earlier = timezone.now() - timedelta(hours=1)
        Complaint.objects.filter(pk=self.mine.pk).update(updated_at=earlier)

        self._as(self.taker)
        resp = self.client.post(
            reverse("complaint-status", kwargs={"pk": self.mine.pk}),
            {"status": ComplaintStatus.RESOLVED},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.mine.refresh_from_db()
        self.assertEqual(self.mine.status, ComplaintStatus.RESOLVED)
        self.assertGreater(self.mine.updated_at, earlier)

    def test_action_taker_cannot_touch_other_complaints(self):
        self._as(self.taker)
        resp = self.client.post(
            reverse("complaint-updates", kwargs={"pk": self.theirs.pk}),
            {"message": "Hello"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
