import json

from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from academics.models import Term
from students.decorators import require_reviewer
from students.permissions import can_view_student, current_student, is_reviewer
from . import services
from .exceptions import InvalidStateTransition, NotFound, RoutingError, ValidationFailure
from .validation import validate_change_request


def _payload(request):
    if request.content_type == "application/json":
        try:
            body = json.loads(request.body or b"{}")
        except ValueError:
            raise ValidationFailure(["Request body is not valid JSON"])
        if not isinstance(body, dict):
            raise ValidationFailure(["Request body must be a JSON object"])
        return body
    return request.POST.dict()


def _int_param(data, name, required=True):
    value = data.get(name)
    if value in (None, ""):
        if required:
            raise ValidationFailure([f"{name} is required"])
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationFailure([f"{name} must be an integer"])


def _error_response(exc):
    if isinstance(exc, ValidationFailure):
        return JsonResponse({"errors": exc.errors, "warnings": exc.warnings}, status=400)
    if isinstance(exc, RoutingError):
        return JsonResponse({"errors": [str(exc)]}, status=422)
    if isinstance(exc, InvalidStateTransition):
        return JsonResponse(
            {"errors": [str(exc)], "status": exc.current, "requested": exc.target}, status=409
        )
    return JsonResponse({"errors": [str(exc)]}, status=404)


HANDLED = (ValidationFailure, RoutingError, InvalidStateTransition, NotFound)


def serialize(cr, detail=False):
    data = {
        "id": cr.id,
        "filing_number": cr.filing_number,
        "student_id": cr.student_id,
        "term": cr.term.code,
        "source_group_id": cr.source_group_id,
        "source_group": str(cr.source_group),
        "target_group_id": cr.target_group_id,
        "target_group": str(cr.target_group),
        "assigned_program_id": cr.assigned_program_id,
        "routing_rule": cr.routing_rule,
        "status": cr.status,
        "priority": cr.priority,
        "created_at": cr.created_at.isoformat(),
        "resolved_at": cr.resolved_at.isoformat() if cr.resolved_at else None,
    }
    if detail:
        data.update(
            {
                "reason": cr.reason,
                "observations": cr.observations,
                "routing_reason": cr.routing_reason,
                "review_observations": cr.review_observations,
                "resolution_reason": cr.resolution_reason,
                "available_transitions": services.available_transitions(cr),
                "events": [
                    {
                        "from_status": e.from_status,
                        "to_status": e.to_status,
                        "actor_id": e.actor_id,
                        "reason": e.reason,
                        "created_at": e.created_at.isoformat(),
                    }
                    for e in cr.events.all()
                ],
            }
        )
    return data


def _requesting_student(request):
    student = current_student(request.user)
    if not student:
        raise ValidationFailure(["No student profile linked to this account"])
    return student


@login_required
@require_POST
def validate(request):
    try:
        data = _payload(request)
        student = _requesting_student(request)
        result = validate_change_request(
            student.id,
            _int_param(data, "source_group_id"),
            _int_param(data, "target_group_id"),
            Term.active(),
        )
    except HANDLED as exc:
        return _error_response(exc)
    return JsonResponse(result.as_dict())


@login_required
@require_http_methods(["GET", "POST"])
def collection(request):
    if request.method == "POST":
        return _create(request)
    if is_reviewer(request.user):
        try:
            rows = services.list_change_requests(
                program_id=_int_param(request.GET, "program_id", required=False),
                status=request.GET.get("status") or None,
                student_id=_int_param(request.GET, "student_id", required=False),
                term_id=_int_param(request.GET, "term_id", required=False),
            )
        except HANDLED as exc:
            return _error_response(exc)
    else:
        student = current_student(request.user)
        if not student:
            return JsonResponse({"results": []})
        rows = services.list_change_requests(student_id=student.id, status=request.GET.get("status") or None)
    return JsonResponse({"results": [serialize(cr) for cr in rows]})


def _create(request):
    try:
        data = _payload(request)
        student = _requesting_student(request)
        cr = services.create_change_request(
            {
                "source_group_id": _int_param(data, "source_group_id"),
                "target_group_id": _int_param(data, "target_group_id"),
                "reason": data.get("reason"),
                "observations": data.get("observations"),
            },
            student.id,
            Term.active(),
            actor=request.user,
        )
    except HANDLED as exc:
        return _error_response(exc)
    return JsonResponse(serialize(cr, detail=True), status=201)


@login_required
@require_GET
def detail(request, request_id):
    try:
        cr = services.get_change_request(request_id)
    except NotFound as exc:
        return _error_response(exc)
    if not can_view_student(request.user, cr.student_id):
        return JsonResponse({"errors": ["Not authorized"]}, status=403)
    return JsonResponse(serialize(cr, detail=True))


@login_required
@require_POST
@require_reviewer
def approve(request, request_id):
    try:
        data = _payload(request)
        services.approve_change_request(
            request_id, data.get("observations"), term=Term.active(), actor=request.user
        )
        cr = services.get_change_request(request_id)
    except HANDLED as exc:
        return _error_response(exc)
    return JsonResponse(serialize(cr, detail=True))


@login_required
@require_POST
@require_reviewer
def reject(request, request_id):
    try:
        data = _payload(request)
        services.reject_change_request(
            request_id,
            data.get("resolution_reason"),
            data.get("observations"),
            actor=request.user,
        )
        cr = services.get_change_request(request_id)
    except HANDLED as exc:
        return _error_response(exc)
    return JsonResponse(serialize(cr, detail=True))
