from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone

from academics.models import Course, CourseGroup, Enrollment, Program, ProgramCourse, Term, WeeklySlot
from students.models import Student


def make_term(code="2026-1", active=True, allows_change_requests=True, started_days_ago=60):
    start = timezone.localdate() - timedelta(days=started_days_ago)
    return Term.objects.create(
        code=code,
        name=f"Term {code}",
        start_date=start,
        end_date=start + timedelta(days=120),
        is_active=active,
        allows_change_requests=allows_change_requests,
    )


def make_program(code="SYS", active=True):
    return Program.objects.create(code=code, name=f"Program {code}", is_active=active)


def make_course(code, credits=3, program=None, mandatory=False):
    course = Course.objects.create(code=code, name=f"Course {code}", credits=credits)
    if program is not None:
        ProgramCourse.objects.create(program=program, course=course, is_mandatory=mandatory)
    return course


def make_group(course, term, label="A", capacity=30, slots=()):
    """``slots`` is a list of ``(day_of_week, "HH:MM", "HH:MM")`` tuples."""
    from academics.scheduling import parse_hhmm

    group = CourseGroup.objects.create(course=course, term=term, group_label=label, capacity=capacity)
    for day, start, end in slots:
        WeeklySlot.objects.create(
            group=group,
            day_of_week=day,
            start_minute=parse_hhmm(start),
            end_minute=parse_hhmm(end),
        )
    return group


def make_user(username, staff=False):
    return get_user_model().objects.create_user(username=username, password="x-test-pass-1", is_staff=staff)


def make_student(code="S001", program=None, semester=3, user=None):
    return Student.objects.create(
        code=code,
        first_name="Ana",
        last_name=code,
        program=program,
        current_semester=semester,
        user=user,
    )


def enroll(student, group, status=Enrollment.ENROLLED, grade=None):
    enrollment = Enrollment.objects.create(
        student=student,
        group=group,
        term=group.term,
        status=status,
        grade=Decimal(str(grade)) if grade is not None else None,
    )
    group.refresh_enrollment_count()
    return enrollment
