from django.contrib import admin
from .models import ChangeRequest, ChangeRequestEvent, ChangeWindow


@admin.register(ChangeWindow)
class ChangeWindowAdmin(admin.ModelAdmin):
    list_display = ("term", "window_type", "starts_at", "ends_at", "active")
    list_filter = ("window_type", "active", "term")


class ChangeRequestEventInline(admin.TabularInline):
    model = ChangeRequestEvent
    extra = 0
    readonly_fields = ("from_status", "to_status", "actor", "reason", "observations", "created_at")
    can_delete = False


@admin.register(ChangeRequest)
class ChangeRequestAdmin(admin.ModelAdmin):
    list_display = (
        "filing_number",
        "student",
        "source_group",
        "target_group",
        "assigned_program",
        "status",
        "priority",
        "created_at",
    )
    list_filter = ("status", "priority", "assigned_program", "term")
    search_fields = ("filing_number", "student__code", "student__last_name")
    # Status changes go through the lifecycle services, never through the form.
    readonly_fields = ("status", "resolved_at", "resolved_by", "routing_rule", "routing_reason")
    inlines = [ChangeRequestEventInline]
