from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from students.decorators import require_reviewer, require_student_access
from .exceptions import NotFound
from .models import Term
from .services import (
    academic_statistics,
    get_student_risk_status,
    student_course_history,
    student_weekly_schedule,
)


@login_required
@require_GET
@require_student_access()
def schedule(request, student_id=None):
    try:
        data = student_weekly_schedule(student_id, Term.active())
    except NotFound as exc:
        return JsonResponse({"errors": [str(exc)]}, status=404)
    return JsonResponse(data)


@login_required
@require_GET
@require_student_access()
def risk(request, student_id=None):
    try:
        report = get_student_risk_status(student_id)
        history = student_course_history(student_id)
    except NotFound as exc:
        return JsonResponse({"errors": [str(exc)]}, status=404)
    return JsonResponse({**report.as_dict(), "courses": history})


@login_required
@require_GET
@require_reviewer
def statistics(request):
    return JsonResponse(academic_statistics())
