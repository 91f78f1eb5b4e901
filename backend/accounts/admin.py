from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "name", "role", "department", "is_active")
    search_fields = ("username", "email", "name", "department")
    list_filter = ("is_active", "is_staff", "role")
    readonly_fields = ("uid",)
    filter_horizontal = ("groups", "user_permissions")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Staff Info", {"fields": ("uid", "name", "role", "department")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Staff Info", {"fields": ("email", "name", "role", "department")}),
    )
