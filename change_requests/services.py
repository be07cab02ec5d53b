import logging
from functools import partial

from django.db import transaction
from django.db.models import Case, F, IntegerField, Value, When
from django.utils import timezone

from academics.models import CourseGroup, Enrollment, ProgramCourse
from audit.models import AuditEvent
from audit.services import notify
from students.models import Student
from .exceptions import InvalidStateTransition, NotFound, ValidationFailure
from .models import ChangeRequest, ChangeRequestEvent, ChangeWindow, FilingCounter
from .priority import PRIORITY_WEIGHTS, calculate_priority, is_add_drop_period
from .routing import ProgramRouter
from .sanitize import sanitize_observations
from .validation import validate_change_request

logger = logging.getLogger(__name__)

TRANSITIONS = {
    (ChangeRequest.PENDING, ChangeRequest.APPROVED): {"requires_reason": False},
    (ChangeRequest.PENDING, ChangeRequest.REJECTED): {"requires_reason": True},
}


def available_transitions(change_request):
    return [
        {"to_status": target, **rules}
        for (source, target), rules in TRANSITIONS.items()
        if source == change_request.status
    ]


def _ensure_transition(change_request, target):
    if (change_request.status, target) not in TRANSITIONS:
        raise InvalidStateTransition(change_request.pk, change_request.status, target)


def _required_text(value, message):
    text = (value or "").strip()
    if not text:
        raise ValidationFailure([message])
    return text


def _actor_id(actor):
    return actor.pk if actor is not None else None


def next_filing_number(now=None):
    """Next ``YYYY-NNNNNN`` number from the per-year counter, incremented under a row lock."""
    year = (now or timezone.now()).year
    with transaction.atomic():
        FilingCounter.objects.get_or_create(year=year)
        counter = FilingCounter.objects.select_for_update().get(year=year)
        FilingCounter.objects.filter(pk=counter.pk).update(sequence=F("sequence") + 1)
        counter.refresh_from_db(fields=["sequence"])
    return f"{year}-{counter.sequence:06d}"


def create_change_request(data, requester_id, term, actor=None, router=None, now=None):
    now = now or timezone.now()
    source_group_id = data.get("source_group_id")
    target_group_id = data.get("target_group_id")
    if not source_group_id or not target_group_id:
        raise ValidationFailure(["source_group_id and target_group_id are required"])
    reason = _required_text(data.get("reason"), "A reason for the change is required")
    observations = sanitize_observations(data.get("observations"))

    result = validate_change_request(
        requester_id, source_group_id, target_group_id, term, ChangeWindow.CREATION, now
    )
    if not result.is_valid:
        logger.info(
            "Change request rejected by validation: student=%s source=%s target=%s errors=%s",
            requester_id,
            source_group_id,
            target_group_id,
            result.errors,
        )
        raise ValidationFailure(result.errors, result.warnings)

    student = Student.objects.get(pk=requester_id)
    source_group = CourseGroup.objects.get(pk=source_group_id)
    target_group = CourseGroup.objects.get(pk=target_group_id)
    decision = (router or ProgramRouter()).decide(
        source_group.course_id, target_group.course_id, student.id
    )
    mandatory = ProgramCourse.objects.filter(
        program_id=decision.program_id,
        course_id=target_group.course_id,
        is_mandatory=True,
    ).exists()
    priority = calculate_priority(
        student.current_semester,
        mandatory,
        is_add_drop_period(term, timezone.localdate(now)),
    )

    with transaction.atomic():
        change_request = ChangeRequest.objects.create(
            filing_number=next_filing_number(now),
            student=student,
            term=term,
            source_group=source_group,
            target_group=target_group,
            assigned_program_id=decision.program_id,
            routing_rule=decision.rule,
            routing_reason=decision.reason,
            priority=priority,
            reason=reason,
            observations=observations,
            created_at=now,
        )
        ChangeRequestEvent.objects.create(
            change_request=change_request,
            to_status=ChangeRequest.PENDING,
            actor=actor,
            reason=reason,
            observations=observations,
            created_at=now,
        )
        transaction.on_commit(
            partial(
                notify,
                AuditEvent.CREATE,
                change_request.pk,
                _actor_id(actor),
                {
                    "filing_number": change_request.filing_number,
                    "student_id": student.id,
                    "source_group_id": source_group.id,
                    "target_group_id": target_group.id,
                    "program_id": decision.program_id,
                    "routing_rule": decision.rule,
                    "warnings": result.warnings,
                },
            )
        )
    logger.info(
        "Change request %s filed for student %s: program=%s rule=%s priority=%s",
        change_request.filing_number,
        student.id,
        decision.program_id,
        decision.rule,
        priority,
    )
    return change_request


def _locked_request(request_id):
    change_request = ChangeRequest.objects.select_for_update().filter(pk=request_id).first()
    if not change_request:
        raise NotFound(f"Change request {request_id} not found")
    return change_request


def _swap_enrollment(change_request, groups):
    source = (
        Enrollment.objects.select_for_update()
        .filter(
            student_id=change_request.student_id,
            group_id=change_request.source_group_id,
            status=Enrollment.ENROLLED,
        )
        .first()
    )
    if source is None:
        raise ValidationFailure(["Student is no longer enrolled in the source group"])
    source.status = Enrollment.CANCELLED
    source.save(update_fields=["status", "updated_at"])
    target = groups[change_request.target_group_id]
    Enrollment.objects.create(
        student_id=change_request.student_id,
        group=target,
        term_id=target.term_id,
        status=Enrollment.ENROLLED,
    )
    for group in groups.values():
        group.refresh_enrollment_count()


def approve_change_request(request_id, observations=None, *, term, actor=None, now=None):
    now = now or timezone.now()
    with transaction.atomic():
        change_request = _locked_request(request_id)
        _ensure_transition(change_request, ChangeRequest.APPROVED)
        observations = sanitize_observations(observations)
        # Both groups stay locked until commit so approvals targeting the same seat serialize.
        groups = {
            group.pk: group
            for group in CourseGroup.objects.select_for_update()
            .filter(pk__in=[change_request.source_group_id, change_request.target_group_id])
            .order_by("pk")
        }
        result = validate_change_request(
            change_request.student_id,
            change_request.source_group_id,
            change_request.target_group_id,
            term,
            ChangeWindow.APPROVAL,
            now,
        )
        if not result.is_valid:
            raise ValidationFailure(result.errors, result.warnings)
        _swap_enrollment(change_request, groups)

        previous = change_request.status
        change_request.status = ChangeRequest.APPROVED
        change_request.resolved_at = now
        change_request.resolved_by = actor
        change_request.review_observations = observations
        change_request.save(
            update_fields=["status", "resolved_at", "resolved_by", "review_observations", "updated_at"]
        )
        ChangeRequestEvent.objects.create(
            change_request=change_request,
            from_status=previous,
            to_status=ChangeRequest.APPROVED,
            actor=actor,
            observations=observations,
            created_at=now,
        )
        transaction.on_commit(
            partial(
                notify,
                AuditEvent.APPROVE,
                change_request.pk,
                _actor_id(actor),
                {"filing_number": change_request.filing_number, "observations": observations},
            )
        )
    logger.info("Change request %s approved", change_request.filing_number)
    return change_request


def reject_change_request(request_id, resolution_reason, observations=None, *, actor=None, now=None):
    now = now or timezone.now()
    with transaction.atomic():
        change_request = _locked_request(request_id)
        _ensure_transition(change_request, ChangeRequest.REJECTED)
        resolution_reason = _required_text(
            resolution_reason, "A resolution reason is required to reject a change request"
        )
        observations = sanitize_observations(observations)

        previous = change_request.status
        change_request.status = ChangeRequest.REJECTED
        change_request.resolution_reason = resolution_reason
        change_request.resolved_at = now
        change_request.resolved_by = actor
        change_request.review_observations = observations
        change_request.save(
            update_fields=[
                "status",
                "resolution_reason",
                "resolved_at",
                "resolved_by",
                "review_observations",
                "updated_at",
            ]
        )
        ChangeRequestEvent.objects.create(
            change_request=change_request,
            from_status=previous,
            to_status=ChangeRequest.REJECTED,
            actor=actor,
            reason=resolution_reason,
            observations=observations,
            created_at=now,
        )
        transaction.on_commit(
            partial(
                notify,
                AuditEvent.REJECT,
                change_request.pk,
                _actor_id(actor),
                {"filing_number": change_request.filing_number, "resolution_reason": resolution_reason},
            )
        )
    logger.info("Change request %s rejected", change_request.filing_number)
    return change_request


def get_change_request(request_id):
    change_request = (
        ChangeRequest.objects.select_related(
            "student", "assigned_program", "source_group__course", "target_group__course", "term"
        )
        .filter(pk=request_id)
        .first()
    )
    if not change_request:
        raise NotFound(f"Change request {request_id} not found")
    return change_request


def list_change_requests(program_id=None, status=None, student_id=None, term_id=None):
    """Review queue: highest priority first, then oldest first."""
    weight = Case(
        *[When(priority=p, then=Value(w)) for p, w in PRIORITY_WEIGHTS.items()],
        default=Value(0),
        output_field=IntegerField(),
    )
    qs = ChangeRequest.objects.select_related(
        "student", "assigned_program", "source_group__course", "target_group__course", "term"
    ).annotate(priority_weight=weight)
    if program_id is not None:
        qs = qs.filter(assigned_program_id=program_id)
    if status:
        qs = qs.filter(status=status)
    if student_id is not None:
        qs = qs.filter(student_id=student_id)
    if term_id is not None:
        qs = qs.filter(term_id=term_id)
    return list(qs.order_by("-priority_weight", "created_at", "id"))
