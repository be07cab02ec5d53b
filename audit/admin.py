from django.contrib import admin
from .models import AuditEvent

@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ("id", "event_type", "change_request_id", "actor_id", "created_at")
    list_filter = ("event_type",)
    search_fields = ("change_request_id",)
