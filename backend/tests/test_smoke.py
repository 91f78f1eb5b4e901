"""
Smoke tests - verify that Django boots, URL routing resolves, and
the core domain modules are importable.
"""

from __future__ import annotations

import pytest
from django.urls import resolve, reverse


# ════════════════════════════════════════════════════════════════════
#  URL Routing Smoke Tests
# ════════════════════════════════════════════════════════════════════

class TestURLRouting:
    """Ensure all top-level app URL names reverse to the expected paths."""

    EXPECTED_URLS = [
        # (url_name, expected_path)
        ("accounts:login",         "/api/accounts/auth/login/"),
        ("accounts:me",            "/api/accounts/me/"),
        ("accounts:staff-list",    "/api/accounts/staff/"),
        ("core:dashboard-stats",   "/api/core/dashboard/"),
        ("core:system-constants",  "/api/core/constants/"),
        ("complaint-submit",       "/api/complaints/submit/"),
        ("complaint-list",         "/api/complaints/"),
        ("complaint-export",       "/api/complaints/export/"),
        ("tracking",               "/api/track/"),
        ("tracking-receipt",       "/api/track/receipt/"),
    ]

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_url_reverses(self, url_name: str, expected_path: str):
        assert reverse(url_name) == expected_path

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_path_resolves_back_to_name(self, url_name: str, expected_path: str):
        match = resolve(expected_path)
        assert match.view_name == url_name

    def test_complaint_ids_route_to_detail(self):
        match = resolve("/api/complaints/CMP-ABCD2345/")
        assert match.view_name == "complaint-detail"
        assert match.kwargs == {"pk": "CMP-ABCD2345"}

    def test_receipt_is_not_taken_for_a_complaint_id(self):
        assert resolve("/api/track/receipt/").view_name == "tracking-receipt"


# ════════════════════════════════════════════════════════════════════
#  Core Domain Module Import Tests
# ════════════════════════════════════════════════════════════════════

class TestCoreDomainImports:
    """Verify that shared domain utility modules are importable."""

    def test_import_exceptions(self):
        from core.domain.exceptions import (
            Conflict,
            DomainError,
            InvalidTransition,
            NotFound,
            PermissionDenied,
            StaleWrite,
            TrackingDenied,
        )
        assert issubclass(TrackingDenied, NotFound)
        assert issubclass(StaleWrite, Conflict)
        assert issubclass(InvalidTransition, Conflict)
        assert issubclass(PermissionDenied, DomainError)

    def test_import_transactions(self):
        from core.domain.transactions import lock_for_update, locked_for_mutation
        assert callable(lock_for_update)
        assert callable(locked_for_mutation)
