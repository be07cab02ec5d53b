from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

GREEN = "GREEN"
YELLOW = "YELLOW"
RED = "RED"

RISK_LEVELS = {GREEN: "low", YELLOW: "medium", RED: "high"}

PASSING_GRADE = 3.0
MIN_GRADE = 0.0
MAX_GRADE = 5.0

TUTORING = "Schedule academic tutoring sessions"
ADVISOR = "Meet with academic advisor immediately"
STUDY_HABITS = "Focus on improving study habits"
REDUCE_LOAD = "Consider reducing course load"
MONITOR = "Monitor academic progress closely"
STUDY_RESOURCES = "Consider additional study resources"
EVALUATE_LOAD = "Evaluate current course load"
KEEP_GOING = "Continue excellent academic performance"
HONORS = "Consider advanced or honors courses"

HEAVY_LOAD = 6


@dataclass(frozen=True)
class CourseRecord:
    course_code: str
    credits: int
    status: str
    grade: Optional[float] = None
    term_code: str = ""


@dataclass
class RiskReport:
    student_id: Optional[int]
    band: str
    risk_level: str
    gpa: Optional[float]
    passed_credits: int
    total_credits: int
    completion_rate: Optional[float]
    failed_course_count: int
    current_course_count: int
    recommendations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _recommendations(band, gpa, failed, current) -> List[str]:
    if band == RED:
        out = [TUTORING, ADVISOR]
        if gpa is not None and gpa < 3.0:
            out.append(STUDY_HABITS)
        if failed > 2:
            out.append(REDUCE_LOAD)
        return out
    if band == YELLOW:
        out = [MONITOR, STUDY_RESOURCES]
        if current > HEAVY_LOAD:
            out.append(EVALUATE_LOAD)
        return out
    return [KEEP_GOING, HONORS]


def classify(gpa: Optional[float], completion_rate: Optional[float], failed: int) -> str:
    """RED/YELLOW/GREEN banding; a missing gpa or rate does not count against the student."""
    gpa = gpa if gpa is not None else MAX_GRADE
    rate = completion_rate if completion_rate is not None else 1.0
    if gpa < 3.0 or rate < 0.6 or failed > 2:
        return RED
    if gpa < 3.5 or rate < 0.8 or failed > 0:
        return YELLOW
    return GREEN


def find_anomalies(records: Iterable[CourseRecord]) -> List[str]:
    """Advisory data-quality findings; never used to change the band."""
    warnings: List[str] = []
    passed = Counter()
    for r in records:
        if r.status == "PASSED":
            passed[r.course_code] += 1
            if r.grade is None:
                warnings.append(f"Passed course {r.course_code} has no grade")
            elif r.grade < PASSING_GRADE:
                warnings.append(
                    f"Course {r.course_code} is PASSED but grade {r.grade} is below {PASSING_GRADE}"
                )
        elif r.status == "FAILED":
            if r.grade is None:
                warnings.append(f"Failed course {r.course_code} has no grade")
            elif r.grade >= PASSING_GRADE:
                warnings.append(
                    f"Course {r.course_code} is FAILED but grade {r.grade} is not below {PASSING_GRADE}"
                )
        elif r.status == "ENROLLED" and r.grade is not None:
            warnings.append(
                f"Enrolled course {r.course_code} already has grade {r.grade}"
            )
        if r.grade is not None and not (MIN_GRADE <= r.grade <= MAX_GRADE):
            warnings.append(
                f"Course {r.course_code} has grade {r.grade} outside [{MIN_GRADE:g}, {MAX_GRADE:g}]"
            )
    duplicates = sorted(code for code, count in passed.items() if count > 1)
    if duplicates:
        warnings.append(f"Duplicate passed courses: {', '.join(duplicates)}")
    return warnings


def calculate_risk(records: Iterable[CourseRecord], student_id: Optional[int] = None) -> RiskReport:
    records = list(records)
    passed_credits = 0
    total_credits = 0
    graded_credits = 0
    grade_points = 0.0
    failed = 0
    current = 0

    for r in records:
        if r.status == "ENROLLED":
            current += 1
            continue
        if r.status not in ("PASSED", "FAILED"):
            continue
        total_credits += r.credits
        if r.status == "PASSED":
            passed_credits += r.credits
        else:
            failed += 1
        if r.grade is not None:
            grade_points += r.grade * r.credits
            graded_credits += r.credits

    gpa = round(grade_points / graded_credits, 2) if graded_credits else None
    completion_rate = passed_credits / total_credits if total_credits else None
    band = classify(gpa, completion_rate, failed)

    return RiskReport(
        student_id=student_id,
        band=band,
        risk_level=RISK_LEVELS[band],
        gpa=gpa,
        passed_credits=passed_credits,
        total_credits=total_credits,
        completion_rate=round(completion_rate, 4) if completion_rate is not None else None,
        failed_course_count=failed,
        current_course_count=current,
        recommendations=_recommendations(band, gpa, failed, current),
        warnings=find_anomalies(records),
    )


def course_color(status: str) -> Optional[str]:
    return {"PASSED": "green", "ENROLLED": "yellow", "FAILED": "red"}.get(status)
