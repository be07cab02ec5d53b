from django_rq import job

from .models import AuditEvent


@job("default")
def record_audit_event(event_type: str, change_request_id: int, actor_id=None, details=None):
    return AuditEvent.objects.create(
        event_type=event_type,
        change_request_id=change_request_id,
        actor_id=actor_id,
        details=details or {},
    ).pk
