from __future__ import annotations

import logging
from typing import Any, Dict, List

from django.conf import settings
from django.core.cache import cache

from students.models import Student
from .exceptions import NotFound
from .models import CourseGroup, Enrollment, Term, WeeklySlot
from .risk import GREEN, RED, YELLOW, CourseRecord, RiskReport, calculate_risk, course_color
from .scheduling import build_weekly_schedule, meeting_from_slot

logger = logging.getLogger(__name__)

STATISTICS_CACHE_KEY = "academics:risk-statistics:v1"


def _get_student(student_id) -> Student:
    student = Student.objects.filter(pk=student_id).select_related("program").first()
    if not student:
        raise NotFound(f"Student {student_id} not found")
    return student


def _group_label(group: CourseGroup) -> str:
    return f"{group.course.code}-{group.group_label}"


def student_weekly_schedule(student_id, term: Term | None) -> Dict[str, Any]:
    """ENROLLED meetings of the student in ``term`` grouped by day, with overlap warnings."""
    student = _get_student(student_id)
    result: Dict[str, Any] = {
        "student_id": student.id,
        "student_name": student.full_name,
        "term": term.code if term else None,
        "days": [],
        "conflicts": [],
        "has_conflicts": False,
    }
    if term is None:
        return result
    slots = (
        WeeklySlot.objects.filter(
            group__enrollments__student=student,
            group__enrollments__status=Enrollment.ENROLLED,
            group__term=term,
        )
        .select_related("group__course")
        .distinct()
    )
    meetings = [meeting_from_slot(s, label=_group_label(s.group)) for s in slots]
    result.update(build_weekly_schedule(meetings))
    return result


def course_records(student: Student) -> List[CourseRecord]:
    enrollments = (
        Enrollment.objects.filter(student=student)
        .select_related("group__course", "term")
        .order_by("term__start_date", "id")
    )
    return [
        CourseRecord(
            course_code=e.group.course.code,
            credits=e.group.course.credits,
            status=e.status,
            grade=float(e.grade) if e.grade is not None else None,
            term_code=e.term.code,
        )
        for e in enrollments
    ]


def get_student_risk_status(student_id) -> RiskReport:
    student = _get_student(student_id)
    report = calculate_risk(course_records(student), student_id=student.id)
    if report.warnings:
        logger.info(
            "Risk report for student %s has %d data warnings",
            student.id,
            len(report.warnings),
        )
    return report


def student_course_history(student_id) -> Dict[str, List[Dict[str, Any]]]:
    student = _get_student(student_id)
    history: Dict[str, List[Dict[str, Any]]] = {"passed": [], "current": [], "failed": []}
    bucket_for = {
        Enrollment.PASSED: "passed",
        Enrollment.ENROLLED: "current",
        Enrollment.FAILED: "failed",
    }
    for record in course_records(student):
        bucket = bucket_for.get(record.status)
        if bucket is None:
            continue
        history[bucket].append(
            {
                "course_code": record.course_code,
                "credits": record.credits,
                "grade": record.grade,
                "status": record.status,
                "term": record.term_code,
                "color": course_color(record.status),
            }
        )
    history["current"].sort(key=lambda row: row["course_code"])
    return history


def academic_statistics() -> Dict[str, Any]:
    cached = cache.get(STATISTICS_CACHE_KEY)
    if cached is not None:
        return cached
    counts = {GREEN: 0, YELLOW: 0, RED: 0}
    gpas: List[float] = []
    students = Student.objects.all().order_by("id")
    for student in students:
        report = calculate_risk(course_records(student), student_id=student.id)
        counts[report.band] += 1
        if report.gpa is not None:
            gpas.append(report.gpa)
    stats = {
        "total_students": sum(counts.values()),
        "green_students": counts[GREEN],
        "yellow_students": counts[YELLOW],
        "red_students": counts[RED],
        "average_gpa": round(sum(gpas) / len(gpas), 2) if gpas else None,
    }
    cache.set(STATISTICS_CACHE_KEY, stats, getattr(settings, "RISK_STATISTICS_CACHE_TTL", 900))
    return stats


def sync_enrollment_counts(term: Term | None = None) -> List[CourseGroup]:
    """Self-heal every group's cached counter; returns the groups that were stale."""
    groups = CourseGroup.objects.select_related("course", "term").order_by("id")
    if term is not None:
        groups = groups.filter(term=term)
    healed = []
    for group in groups:
        previous = group.current_enrollment_count
        if group.refresh_enrollment_count():
            logger.info(
                "Healed enrollment counter for group %s: %d -> %d",
                group.id,
                previous,
                group.current_enrollment_count,
            )
            healed.append(group)
    return healed
