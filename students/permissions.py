import logging

from .models import Student

logger = logging.getLogger(__name__)

REVIEW_PERMISSION = "change_requests.review_changerequest"


def current_student(user):
    """The Student record linked to ``user``, or None."""
    if not getattr(user, "is_authenticated", False):
        return None
    return Student.objects.filter(user=user).select_related("program").first()


def is_reviewer(user) -> bool:
    return bool(getattr(user, "is_authenticated", False)) and (
        user.is_staff or user.has_perm(REVIEW_PERMISSION)
    )


def can_view_student(user, student_id) -> bool:
    if not getattr(user, "is_authenticated", False):
        return False
    if is_reviewer(user):
        return True
    own = Student.objects.filter(user=user).values_list("id", flat=True).first()
    allowed = own is not None and str(own) == str(student_id)
    if not allowed:
        logger.warning("Permission denied: user %s cannot view student %s", user.pk, student_id)
    return allowed
