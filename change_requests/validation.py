"""Structural checks a group change must pass before it can be filed or approved.

All data is fetched once by :func:`load_context`; each validator then works on
that snapshot only, so running the pipeline twice over unchanged data gives
the same result and writes nothing.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from django.conf import settings
from django.utils import timezone

from academics.exceptions import NotFound
from academics.models import CourseGroup, Enrollment, Term, WeeklySlot
from academics.scheduling import Meeting, detect_conflicts, meeting_from_slot
from students.models import Student
from .models import ChangeWindow

logger = logging.getLogger(__name__)

SAME_GROUP_ERROR = "Source and target groups must be different"


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def fail(cls, *errors: str) -> "ValidationResult":
        return cls(is_valid=False, errors=list(errors))

    def merge(self, other: "ValidationResult") -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.is_valid = self.is_valid and other.is_valid

    def as_dict(self) -> Dict[str, Any]:
        return {"is_valid": self.is_valid, "errors": self.errors, "warnings": self.warnings}


@dataclass
class ChangeContext:
    student: Student
    source_group: CourseGroup
    target_group: CourseGroup
    term: Optional[Term]
    window_type: str
    now: datetime
    windows: List[ChangeWindow]
    target_enrolled_count: int
    source_enrollment: Optional[Enrollment]
    target_enrollment: Optional[Enrollment]
    target_slots: List[Meeting]
    committed_slots: List[Meeting]


class Validator:
    name = ""

    def check(self, context: ChangeContext) -> ValidationResult:
        raise NotImplementedError


class ActiveWindowValidator(Validator):
    name = "active_window"

    def check(self, context):
        term = context.term
        if term is None or not term.is_active or not term.allows_change_requests:
            return ValidationResult.fail("No active term accepting change requests")
        errors = []
        if context.target_group.term_id != term.id:
            errors.append(f"Target group does not belong to the active term {term.code}")
        if context.windows and not any(w.is_open(context.now) for w in context.windows):
            errors.append(f"The {context.window_type.lower()} window for term {term.code} is closed")
        return ValidationResult(is_valid=not errors, errors=errors)


class TargetCapacityValidator(Validator):
    name = "target_capacity"

    def check(self, context):
        group = context.target_group
        enrolled = context.target_enrolled_count
        if enrolled >= group.capacity:
            return ValidationResult.fail(
                f"Target group has no available seats ({enrolled}/{group.capacity} enrolled)"
            )
        ratio = getattr(settings, "CHANGE_REQUEST_CAPACITY_WARNING_RATIO", 0.9)
        warnings = []
        if enrolled >= group.capacity * ratio:
            warnings.append(
                f"Target group is near its capacity limit ({enrolled}/{group.capacity} enrolled)"
            )
        return ValidationResult(warnings=warnings)


class ConflictFreeValidator(Validator):
    name = "conflict_free"

    def check(self, context):
        conflicts = detect_conflicts(context.target_slots, context.committed_slots)
        return ValidationResult(
            is_valid=not conflicts,
            errors=[pair.describe() for pair in conflicts],
        )


class SourceOwnershipValidator(Validator):
    name = "source_ownership"

    def check(self, context):
        errors = []
        if context.source_enrollment is None:
            errors.append("Student is not enrolled in the source group")
        if context.target_enrollment is not None:
            errors.append("Student already holds an enrollment in the target group")
        return ValidationResult(is_valid=not errors, errors=errors)


class SameCourseTermValidator(Validator):
    name = "same_course_term"

    def check(self, context):
        source, target = context.source_group, context.target_group
        errors = []
        if source.course_id != target.course_id:
            errors.append("Groups must belong to the same course")
        if source.term_id != target.term_id:
            errors.append("Groups must belong to the same term")
        return ValidationResult(is_valid=not errors, errors=errors)


VALIDATORS: Sequence[Validator] = (
    ActiveWindowValidator(),
    TargetCapacityValidator(),
    ConflictFreeValidator(),
    SourceOwnershipValidator(),
    SameCourseTermValidator(),
)


def run_validators(context: ChangeContext, validators: Sequence[Validator] = VALIDATORS) -> ValidationResult:
    """Run every validator and accumulate all of their errors and warnings."""
    result = ValidationResult()
    for validator in validators:
        outcome = validator.check(context)
        if not outcome.is_valid:
            logger.debug("Validator %s failed: %s", validator.name, outcome.errors)
        result.merge(outcome)
    return result


def _group_label(group: CourseGroup) -> str:
    return f"{group.course.code}-{group.group_label}"


def _load_group(group_id, role: str) -> CourseGroup:
    group = CourseGroup.objects.filter(pk=group_id).select_related("course", "term").first()
    if not group:
        raise NotFound(f"{role} group {group_id} not found")
    return group


def load_context(
    student_id,
    source_group_id,
    target_group_id,
    term: Optional[Term],
    window_type: str = ChangeWindow.CREATION,
    now: Optional[datetime] = None,
) -> ChangeContext:
    student = Student.objects.filter(pk=student_id).first()
    if not student:
        raise NotFound(f"Student {student_id} not found")
    source_group = _load_group(source_group_id, "Source")
    target_group = _load_group(target_group_id, "Target")

    windows = []
    if term is not None:
        windows = list(ChangeWindow.objects.filter(term=term, window_type=window_type))

    enrolled = Enrollment.objects.filter(student=student, status=Enrollment.ENROLLED)
    source_enrollment = enrolled.filter(group=source_group).first()
    target_enrollment = Enrollment.objects.filter(
        student=student,
        group=target_group,
        status__in=[Enrollment.ENROLLED, Enrollment.PASSED],
    ).first()

    target_label = _group_label(target_group)
    target_slots = [
        meeting_from_slot(slot, label=target_label)
        for slot in WeeklySlot.objects.filter(group=target_group)
    ]
    committed = (
        WeeklySlot.objects.filter(group__enrollments__in=enrolled)
        .exclude(group__in=[source_group, target_group])
        .select_related("group__course")
        .distinct()
    )
    committed_slots = [meeting_from_slot(slot, label=_group_label(slot.group)) for slot in committed]

    return ChangeContext(
        student=student,
        source_group=source_group,
        target_group=target_group,
        term=term,
        window_type=window_type,
        now=now or timezone.now(),
        windows=windows,
        target_enrolled_count=target_group.live_enrollment_count(),
        source_enrollment=source_enrollment,
        target_enrollment=target_enrollment,
        target_slots=target_slots,
        committed_slots=committed_slots,
    )


def validate_change_request(
    student_id,
    source_group_id,
    target_group_id,
    term: Optional[Term],
    window_type: str = ChangeWindow.CREATION,
    now: Optional[datetime] = None,
) -> ValidationResult:
    if str(source_group_id) == str(target_group_id):
        return ValidationResult.fail(SAME_GROUP_ERROR)
    context = load_context(student_id, source_group_id, target_group_id, term, window_type, now)
    return run_validators(context)
