# Generated manually for the complaints schema.

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Complaint",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                (
                    "complaint_id",
                    models.CharField(
                        editable=False,
                        max_length=20,
                        primary_key=True,
                        serialize=False,
                        verbose_name="Complaint ID",
                    ),
                ),
                (
                    "passcode_hash",
                    models.CharField(
                        blank=True,
                        editable=False,
                        help_text="SHA-256 hex digest of the complainant's passcode.",
                        max_length=64,
                        null=True,
                        verbose_name="Passcode Hash",
                    ),
                ),
                ("category", models.CharField(db_index=True, max_length=255, verbose_name="Category")),
                (
                    "severity",
                    models.CharField(
                        choices=[
                            ("Low", "Low"),
                            ("Medium", "Medium"),
                            ("High", "High"),
                            ("Critical", "Critical"),
                        ],
                        db_index=True,
                        max_length=10,
                        verbose_name="Severity",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Submitted", "Submitted"),
                            ("Viewed", "Viewed"),
                            ("Under Review", "Under Review"),
                            ("Working", "Working"),
                            ("Investigation", "Investigation"),
                            ("Resolved", "Resolved"),
                            ("Dismissed", "Dismissed"),
                        ],
                        db_index=True,
                        default="Submitted",
                        max_length=20,
                        verbose_name="Current Status",
                    ),
                ),
                ("description", models.TextField(verbose_name="Description")),
                ("location", models.CharField(max_length=500, verbose_name="Incident Location")),
                ("perpetrator", models.TextField(verbose_name="Perpetrator")),
                ("witnesses", models.TextField(verbose_name="Witnesses")),
                ("incident_date", models.DateTimeField(verbose_name="Incident Date/Time")),
                (
                    "storage_path",
                    models.CharField(
                        blank=True,
                        editable=False,
                        max_length=500,
                        null=True,
                        verbose_name="Evidence Storage Path",
                    ),
                ),
                ("version", models.PositiveIntegerField(default=1, verbose_name="Version")),
                (
                    "assigned_to",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_complaints",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Assigned Action Taker",
                    ),
                ),
            ],
            options={
                "verbose_name": "Complaint",
                "verbose_name_plural": "Complaints",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "severity"], name="complaint_status_severity_idx"),
                    models.Index(fields=["assigned_to", "status"], name="complaint_assignee_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PublicUpdate",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("message", models.TextField(verbose_name="Message")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                (
                    "author",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="public_updates",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Author",
                    ),
                ),
                (
                    "complaint",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="public_updates",
                        to="complaints.complaint",
                        verbose_name="Complaint",
                    ),
                ),
            ],
            options={
                "verbose_name": "Public Update",
                "verbose_name_plural": "Public Updates",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="InternalNote",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("note", models.TextField(verbose_name="Note")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                (
                    "author",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="internal_notes",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Author",
                    ),
                ),
                (
                    "complaint",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="internal_notes",
                        to="complaints.complaint",
                        verbose_name="Complaint",
                    ),
                ),
            ],
            options={
                "verbose_name": "Internal Note",
                "verbose_name_plural": "Internal Notes",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("created", "Created"),
                            ("status_changed", "Status Changed"),
                            ("assigned", "Assigned"),
                            ("unassigned", "Unassigned"),
                            ("public_update_added", "Public Update Added"),
                            ("internal_note_added", "Internal Note Added"),
                        ],
                        db_index=True,
                        max_length=30,
                        verbose_name="Action",
                    ),
                ),
                ("details", models.TextField(blank=True, default="", verbose_name="Details")),
                ("timestamp", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Timestamp")),
                (
                    "complaint",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="audit_logs",
                        to="complaints.complaint",
                        verbose_name="Complaint",
                    ),
                ),
                (
                    "performed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="complaint_audit_entries",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Performed By",
                    ),
                ),
            ],
            options={
                "verbose_name": "Audit Log Entry",
                "verbose_name_plural": "Audit Log",
                "ordering": ["timestamp", "id"],
            },
        ),
    ]
