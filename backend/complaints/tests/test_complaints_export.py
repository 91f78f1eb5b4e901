"""
Integration tests - GET /api/complaints/export/?format=csv|xlsx|pdf
(named URL: complaint-export).
"""

from __future__ import annotations

import csv
import io
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from openpyxl import load_workbook
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from complaints.models import Complaint, ComplaintStatus, InternalNote
from complaints.services import ComplaintExportService, generate_complaint_id, hash_passcode
from core.permissions_constants import Roles

User = get_user_model()


def _make_complaint(**overrides) -> Complaint:
    fields = {
        "complaint_id": generate_complaint_id(),
        "category": "Substance Abuse",
        "severity": "Critical",
        "description": "Vaping in the second-floor bathroom during breaks.",
        "location": "Second floor bathroom",
        "perpetrator": "None",
        "witnesses": "None",
        "incident_date": timezone.now() - timedelta(days=3),
    }
    fields.update(overrides)
    return Complaint.objects.create(**fields)


class TestComplaintExport(TestCase):

    @classmethod
    def setUpTestData(cls):
        pw = "Str0ng!Pass99"
        cls.admin = User.objects.create_user(
            username="admin", email="admin@school.example", password=pw, role=Roles.ADMIN,
        )
        cls.taker = User.objects.create_user(
            username="taker", email="taker@school.example", password=pw,
            role=Roles.ACTION_TAKER, name="Taylor Taker",
        )
        cls.assigned = _make_complaint(assigned_to=cls.taker, passcode_hash=hash_passcode("secret"))
        cls.resolved = _make_complaint(status=ComplaintStatus.RESOLVED)
        InternalNote.objects.create(complaint=cls.assigned, note="CONFIDENTIAL-NOTE", author=cls.admin)

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("complaint-export")

    def _as(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")

    def test_csv_export(self):
        self._as(self.admin)
        resp = self.client.get(self.url, {"format": "csv"})

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp["Content-Type"], "text/csv")
        self.assertRegex(resp["Content-Disposition"], r'filename="complaints_export_\d{8}_\d{6}\.csv"')

        text = resp.content.decode("utf-8-sig")
        rows = list(csv.reader(io.StringIO(text)))
        self.assertEqual(tuple(rows[0]), ComplaintExportService.HEADERS)
        by_id = {row[0]: row for row in rows[1:]}
        self.assertEqual(set(by_id), {self.assigned.pk, self.resolved.pk})
        self.assertEqual(by_id[self.assigned.pk][4], "Taylor Taker")
        self.assertEqual(by_id[self.resolved.pk][4], "Unassigned")

    def test_csv_is_default_format(self):
        self._as(self.admin)
        resp = self.client.get(self.url)
        self.assertEqual(resp["Content-Type"], "text/csv")

    def test_export_never_contains_notes_or_hashes(self):
        self._as(self.admin)
        body = self.client.get(self.url, {"format": "csv"}).content.decode("utf-8-sig")

        self.assertNotIn("CONFIDENTIAL-NOTE", body)
        self.assertNotIn(self.assigned.passcode_hash, body)

    def test_xlsx_export(self):
        self._as(self.admin)
        resp = self.client.get(self.url, {"format": "xlsx"})

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        sheet = load_workbook(io.BytesIO(resp.content)).active
        self.assertEqual(sheet.title, "Complaints")
        header = [cell.value for cell in sheet[1]]
        self.assertEqual(tuple(header), ComplaintExportService.HEADERS)
        self.assertEqual(sheet.max_row, 3)

    def test_pdf_export(self):
        self._as(self.admin)
        resp = self.client.get(self.url, {"format": "pdf"})

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp["Content-Type"], "application/pdf")
        self.assertTrue(resp.content.startswith(b"%PDF"))

    def test_export_respects_filters(self):
        self._as(self.admin)
        resp = self.client.get(self.url, {"format": "csv", "status": ComplaintStatus.RESOLVED})

        rows = list(csv.reader(io.StringIO(resp.content.decode("utf-8-sig"))))
        self.assertEqual([row[0] for row in rows[1:]], [self.resolved.pk])

    def test_unsupported_format_is_400(self):
        self._as(self.admin)
        resp = self.client.get(self.url, {"format": "docx"})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_action_taker_cannot_export(self):
        self._as(self.taker)
        resp = self.client.get(self.url, {"format": "csv"})
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
