from datetime import date, timedelta

from django.conf import settings

from .models import ChangeRequest

PRIORITY_WEIGHTS = {
    ChangeRequest.LOW: 1,
    ChangeRequest.NORMAL: 2,
    ChangeRequest.HIGH: 3,
    ChangeRequest.URGENT: 4,
}


def is_add_drop_period(term, today: date) -> bool:
    days = getattr(settings, "CHANGE_REQUEST_ADD_DROP_DAYS", 14)
    return term.start_date <= today < term.start_date + timedelta(days=days)


def calculate_priority(student_semester, is_target_mandatory, add_drop) -> str:
    graduating = student_semester >= getattr(settings, "CHANGE_REQUEST_GRADUATING_SEMESTER", 10)
    if graduating and is_target_mandatory:
        return ChangeRequest.URGENT
    if add_drop:
        return ChangeRequest.LOW
    if graduating or is_target_mandatory:
        return ChangeRequest.HIGH
    return ChangeRequest.NORMAL
