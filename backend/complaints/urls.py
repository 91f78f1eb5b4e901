"""
Complaints app URL configuration.

All routes are registered under the ``/api/`` prefix (included from
``backend.urls``).

Route Hierarchy
---------------
  ── Public (no account) ─────────────────────────────────────────
  POST /api/complaints/submit/                  → anonymous intake
  POST /api/track/                              → unlock with ID (+ passcode)
  POST /api/track/receipt/                      → PDF receipt
  GET  /api/track/{complaint_id}/               → re-read unlocked complaint

  ── Staff ───────────────────────────────────────────────────────
  GET  /api/complaints/                         → scoped list
  GET  /api/complaints/export/                  → CSV / XLSX / PDF export
  GET  /api/complaints/{id}/                    → staff detail
  POST /api/complaints/{id}/status/             → change status
  POST /api/complaints/{id}/assign/             → assign action taker
  DELETE /api/complaints/{id}/assign/           → unassign
  POST /api/complaints/{id}/updates/            → public update
  GET|POST /api/complaints/{id}/notes/          → internal notes
  GET  /api/complaints/{id}/audit-log/          → audit trail
"""

from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    ComplaintSubmitView,
    ComplaintViewSet,
    ReceiptView,
    TrackingDetailView,
    TrackingView,
)

router = DefaultRouter()
router.register(
    prefix=r"complaints",
    viewset=ComplaintViewSet,
    basename="complaint",
)

urlpatterns = [
    # Explicit paths first so "submit" is never taken for a complaint ID
    path("complaints/submit/", ComplaintSubmitView.as_view(), name="complaint-submit"),
    path("track/", TrackingView.as_view(), name="tracking"),
    path("track/receipt/", ReceiptView.as_view(), name="tracking-receipt"),
    path("track/<str:complaint_id>/", TrackingDetailView.as_view(), name="tracking-detail"),
] + router.urls
