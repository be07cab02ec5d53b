"""Weekly recurring class meetings and the overlap detector.

A meeting is a half-open minute interval ``[start_minute, end_minute)`` on an
ISO weekday (Monday=1 ... Sunday=7). Two meetings conflict only when they share
a day and their intervals intersect, so back-to-back classes never conflict.

``overlaps`` is duck-typed: it accepts :class:`Meeting` values as well as
``academics.models.WeeklySlot`` rows, which carry the same attribute names.
"""
from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Any, Dict, Iterable, List, Optional

DAY_NAMES = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
    7: "Sunday",
}
MINUTES_PER_DAY = 24 * 60


def parse_hhmm(value: str) -> int:
    """Convert ``"HH:MM"`` to minutes after midnight."""
    try:
        hours, minutes = (int(part) for part in value.strip().split(":"))
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    if not (0 <= hours <= 24 and 0 <= minutes < 60) or hours * 60 + minutes > MINUTES_PER_DAY:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return hours * 60 + minutes


def format_minute(minute: int) -> str:
    return f"{minute // 60:02d}:{minute % 60:02d}"


@dataclass(frozen=True)
class Meeting:
    day_of_week: int
    start_minute: int
    end_minute: int
    group_id: Optional[int] = None
    room: str = ""
    label: str = ""

    def __post_init__(self):
        if self.day_of_week not in DAY_NAMES:
            raise ValueError(f"day_of_week must be 1..7, got {self.day_of_week}")
        if not (0 <= self.start_minute < self.end_minute <= MINUTES_PER_DAY):
            raise ValueError(
                f"Invalid meeting interval {self.start_minute}-{self.end_minute}"
            )

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    def describe(self) -> str:
        text = f"{self.day_name} {format_minute(self.start_minute)}-{format_minute(self.end_minute)}"
        if self.label:
            text = f"{self.label} {text}"
        return text


@dataclass(frozen=True)
class ConflictPair:
    candidate: Meeting
    committed: Meeting

    def describe(self) -> str:
        return f"Schedule conflict: {self.candidate.describe()} overlaps {self.committed.describe()}"


def meeting_from_slot(slot, label: str = "") -> Meeting:
    return Meeting(
        day_of_week=slot.day_of_week,
        start_minute=slot.start_minute,
        end_minute=slot.end_minute,
        group_id=slot.group_id,
        room=slot.room or "",
        label=label,
    )


def overlaps(a, b) -> bool:
    return (
        a.day_of_week == b.day_of_week
        and a.start_minute < b.end_minute
        and b.start_minute < a.end_minute
    )


def detect_conflicts(
    candidate_slots: Iterable[Meeting],
    committed_slots: Iterable[Meeting],
) -> List[ConflictPair]:
    """Every (candidate, committed) pair that overlaps, in input order.

    Pairs are not deduplicated: a candidate meeting that collides with two
    committed meetings yields two pairs.
    """
    committed = list(committed_slots)
    return [
        ConflictPair(candidate, existing)
        for candidate in candidate_slots
        for existing in committed
        if overlaps(candidate, existing)
    ]


def detect_schedule_conflicts(weekly_schedule: Iterable[Meeting]) -> List[ConflictPair]:
    """Overlapping pairs inside one weekly schedule, earlier meeting first."""
    ordered = sorted(
        weekly_schedule,
        key=lambda m: (m.day_of_week, m.start_minute, m.end_minute),
    )
    return [
        ConflictPair(first, second)
        for first, second in combinations(ordered, 2)
        if overlaps(first, second)
    ]


def merge_consecutive(meetings: List[Meeting]) -> List[Meeting]:
    """Join back-to-back meetings of the same group on the same day."""
    merged: List[Meeting] = []
    for meeting in sorted(meetings, key=lambda m: (m.day_of_week, m.start_minute)):
        previous = merged[-1] if merged else None
        if (
            previous is not None
            and previous.group_id is not None
            and previous.group_id == meeting.group_id
            and previous.day_of_week == meeting.day_of_week
            and previous.end_minute == meeting.start_minute
        ):
            merged[-1] = Meeting(
                day_of_week=previous.day_of_week,
                start_minute=previous.start_minute,
                end_minute=meeting.end_minute,
                group_id=previous.group_id,
                room=previous.room,
                label=previous.label,
            )
        else:
            merged.append(meeting)
    return merged


def build_weekly_schedule(meetings: Iterable[Meeting]) -> Dict[str, Any]:
    meetings = list(meetings)
    conflicts = detect_schedule_conflicts(meetings)
    days: List[Dict[str, Any]] = []
    for day in sorted(DAY_NAMES):
        classes = merge_consecutive([m for m in meetings if m.day_of_week == day])
        if not classes:
            continue
        days.append(
            {
                "day_of_week": day,
                "day_name": DAY_NAMES[day],
                "classes": [
                    {
                        "label": m.label,
                        "group_id": m.group_id,
                        "start": format_minute(m.start_minute),
                        "end": format_minute(m.end_minute),
                        "room": m.room or "TBA",
                    }
                    for m in classes
                ],
            }
        )
    return {
        "days": days,
        "conflicts": [pair.describe() for pair in conflicts],
        "has_conflicts": bool(conflicts),
    }
