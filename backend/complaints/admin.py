from django.contrib import admin

from .models import AuditLog, Complaint, InternalNote, PublicUpdate


class ReadOnlyInline(admin.TabularInline):
    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


class PublicUpdateInline(ReadOnlyInline):
    model = PublicUpdate
    fields = ("created_at", "author", "message")
    readonly_fields = fields


class InternalNoteInline(ReadOnlyInline):
    model = InternalNote
    fields = ("created_at", "author", "note")
    readonly_fields = fields


class AuditLogInline(ReadOnlyInline):
    model = AuditLog
    fields = ("timestamp", "action", "performed_by", "details")
    readonly_fields = fields


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ("complaint_id", "category", "severity", "status", "assigned_to", "created_at")
    list_filter = ("status", "severity")
    search_fields = ("complaint_id", "category", "location")
    ordering = ("-created_at",)
    readonly_fields = (
        "complaint_id", "category", "severity", "description", "location",
        "perpetrator", "witnesses", "incident_date", "storage_path",
        "status", "assigned_to", "version", "created_at", "updated_at",
    )
    exclude = ("passcode_hash",)
    inlines = [PublicUpdateInline, InternalNoteInline, AuditLogInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("complaint", "action", "performed_by", "timestamp")
    list_filter = ("action",)
    search_fields = ("complaint__complaint_id", "details")
    readonly_fields = ("complaint", "action", "performed_by", "details", "timestamp")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
