"""Assigns a change request to exactly one program's review queue.

Decision table, first match wins:

1. SAME_PROGRAM    both courses mapped to the same program
2. TARGET_PROGRAM  both mapped, programs differ: the destination owns the approval
3. SOURCE_PROGRAM  only the source course is mapped
4. TARGET_PROGRAM  only the target course is mapped
5. STUDENT_PROGRAM neither is mapped: the student's declared program

Programs rejected by the liveness check are treated as unmapped before the
table runs. If nothing is left, :class:`RoutingError` is raised.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from academics.models import Program, ProgramCourse
from students.models import Student
from .exceptions import RoutingError

logger = logging.getLogger(__name__)

SAME_PROGRAM = "SAME_PROGRAM"
TARGET_PROGRAM = "TARGET_PROGRAM"
SOURCE_PROGRAM = "SOURCE_PROGRAM"
STUDENT_PROGRAM = "STUDENT_PROGRAM"

RULE_DESCRIPTIONS = {
    SAME_PROGRAM: "Both courses belong to the same program",
    TARGET_PROGRAM: "Program of the target course",
    SOURCE_PROGRAM: "Program of the source course",
    STUDENT_PROGRAM: "Program declared by the student (fallback)",
}


@dataclass(frozen=True)
class RoutingDecision:
    program_id: int
    rule: str
    reason: str


def route(source_program, target_program, student_program) -> RoutingDecision:
    """Pure decision table over already resolved program ids (``None`` = unmapped)."""
    if source_program is not None and target_program is not None:
        if source_program == target_program:
            return RoutingDecision(
                source_program, SAME_PROGRAM, f"Both courses belong to program {source_program}"
            )
        return RoutingDecision(
            target_program,
            TARGET_PROGRAM,
            f"Courses belong to different programs; assigned to target program {target_program}",
        )
    if source_program is not None:
        return RoutingDecision(
            source_program, SOURCE_PROGRAM, f"Only the source course is mapped, to program {source_program}"
        )
    if target_program is not None:
        return RoutingDecision(
            target_program, TARGET_PROGRAM, f"Only the target course is mapped, to program {target_program}"
        )
    if student_program is not None:
        return RoutingDecision(
            student_program, STUDENT_PROGRAM, f"No course mapping; fell back to student program {student_program}"
        )
    raise RoutingError("No program could be determined for this change request")


def course_program_id(course_id) -> Optional[int]:
    link = (
        ProgramCourse.objects.filter(course_id=course_id)
        .order_by("created_at", "id")
        .values_list("program_id", flat=True)
        .first()
    )
    return link


def student_program_id(student_id) -> Optional[int]:
    return Student.objects.filter(pk=student_id).values_list("program_id", flat=True).first()


def program_is_active(program_id) -> bool:
    return Program.objects.filter(pk=program_id, is_active=True).exists()


class ProgramRouter:
    def __init__(
        self,
        course_program: Callable[[int], Optional[int]] = course_program_id,
        student_program: Callable[[int], Optional[int]] = student_program_id,
        is_program_active: Callable[[int], bool] = program_is_active,
    ):
        self.course_program = course_program
        self.student_program = student_program
        self.is_program_active = is_program_active

    def _live(self, program_id):
        if program_id is None:
            return None
        if not self.is_program_active(program_id):
            logger.warning("Program %s is not active and will not receive change requests", program_id)
            return None
        return program_id

    def decide(self, source_course_id, target_course_id, student_id) -> RoutingDecision:
        source = self._live(self.course_program(source_course_id))
        target = self._live(self.course_program(target_course_id))
        fallback = None
        if source is None and target is None:
            fallback = self._live(self.student_program(student_id))
        try:
            decision = route(source, target, fallback)
        except RoutingError:
            logger.warning(
                "Routing failed: source_course=%s target_course=%s student=%s",
                source_course_id,
                target_course_id,
                student_id,
            )
            raise
        logger.debug("Routing decision %s -> program %s", decision.rule, decision.program_id)
        return decision
