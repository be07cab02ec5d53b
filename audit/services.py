import logging

from django.conf import settings

from .tasks import record_audit_event

logger = logging.getLogger(__name__)


def notify(event_type, change_request_id, actor_id=None, details=None):
    """Fire-and-forget: a failing audit sink is logged and never reaches the caller."""
    try:
        if getattr(settings, "AUDIT_ASYNC", False):
            record_audit_event.delay(event_type, change_request_id, actor_id, details)
        else:
            record_audit_event(event_type, change_request_id, actor_id, details)
    except Exception:
        logger.exception(
            "Audit notification failed: event=%s change_request=%s",
            event_type,
            change_request_id,
        )
