# blueprints/constraints/services.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .index import MeetingEntry, TermScheduleIndex
from .intervals import duration_minutes, format_hours, format_time_for_display, ranges_overlap


@dataclass(frozen=True)
class Proposal:
    """Предлагаемое (или редактируемое) занятие. schedule_id исключается из сравнений."""
    schedule_id: int | None
    program_id: int | None = None
    year_level: int | None = None
    section_id: int | None = None
    day: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    faculty_id: int | None = None
    room_id: int | None = None

    @property
    def has_time(self) -> bool:
        return bool(self.day and self.start_time and self.end_time)


@dataclass
class Conflict:
    code: str
    message: str
    meeting: Optional[MeetingEntry] = None
    program_code: str | None = None
    year_level: int | None = None
    section_name: str | None = None
    faculty_name: str | None = None
    room_code: str | None = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        m = self.meeting
        return {
            "code": self.code,
            "message": self.message,
            "schedule_id": m.schedule_id if m else None,
            "course_code": m.course_code if m else None,
            "program_code": self.program_code,
            "year_level": self.year_level,
            "section_name": self.section_name,
            "faculty_name": self.faculty_name,
            "room_code": self.room_code,
            "details": self.details,
        }


@dataclass
class ValidationResult:
    conflicts: List[Conflict] = field(default_factory=list)

    @property
    def messages(self) -> List[str]:
        return [c.message for c in self.conflicts]

    @property
    def has_conflicts(self) -> bool:
        return len(self.conflicts) > 0

    @property
    def codes(self) -> List[str]:
        return [c.code for c in self.conflicts]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasConflicts": self.has_conflicts,
            "messages": self.messages,
            "conflicts": [c.to_dict() for c in self.conflicts],
        }


def _span(m: MeetingEntry) -> str:
    return f"on {m.day} from {format_time_for_display(m.start_time)} to {format_time_for_display(m.end_time)}"


def _collides(m: MeetingEntry, p: Proposal) -> bool:
    return (m.day == p.day
            and m.schedule_id != p.schedule_id
            and ranges_overlap(p.start_time, p.end_time, m.start_time, m.end_time))


def _first_collision(candidates: Iterable[MeetingEntry], p: Proposal) -> MeetingEntry | None:
    for m in candidates:
        if _collides(m, p):
            return m
    return None


def _room_catalog(rooms) -> Dict[Any, Dict[str, Any]]:
    if isinstance(rooms, dict):
        rooms = rooms.get("rooms") or []
    return {r.get("room_id"): r for r in (rooms or [])}


# ---------- detectors ----------
def _section_key(index: TermScheduleIndex, p: Proposal):
    # секцию определяет само занятие, а не присланный контекст
    owner = index.get(p.schedule_id)
    if owner is not None:
        return owner.program_id, owner.year_level, owner.section_id
    return p.program_id, p.year_level, p.section_id


def check_section_overlap(index: TermScheduleIndex, p: Proposal) -> Conflict | None:
    if not p.has_time:
        return None
    program_id, year_level, section_id = _section_key(index, p)
    if not section_id or not program_id or year_level is None:
        return None
    hit = _first_collision(index.meetings_in_section(program_id, year_level, section_id), p)
    if hit is None:
        return None
    return Conflict(
        code="SECTION_BUSY",
        message=(f"{hit.program_code} {hit.year_level}-{hit.section_name} is already scheduled for "
                 f"{hit.course_code} ({hit.course_title}) {_span(hit)}."),
        meeting=hit,
        program_code=hit.program_code,
        year_level=hit.year_level,
        section_name=hit.section_name,
        details={"section_id": section_id},
    )


def check_faculty_availability(index: TermScheduleIndex, p: Proposal) -> Conflict | None:
    if not p.faculty_id or not p.has_time:
        return None
    hit = _first_collision(index.meetings_for_faculty(p.faculty_id), p)
    if hit is None:
        return None
    return Conflict(
        code="FACULTY_BUSY",
        message=(f"{hit.professor} is already assigned to {hit.course_code} ({hit.course_title}) "
                 f"for {hit.program_code} {hit.year_level}-{hit.section_name} {_span(hit)}."),
        meeting=hit,
        program_code=hit.program_code,
        year_level=hit.year_level,
        section_name=hit.section_name,
        faculty_name=hit.professor,
        details={"faculty_id": p.faculty_id},
    )


def check_room_availability(index: TermScheduleIndex, rooms, p: Proposal) -> Conflict | None:
    if not p.room_id or not p.has_time:
        return None
    room = _room_catalog(rooms).get(p.room_id)
    if room is None:
        # отдельная ошибка, а не пересечение по аудитории
        return Conflict(code="INVALID_ROOM", message="Invalid room selected.",
                        details={"room_id": p.room_id})
    hit = _first_collision(index.meetings_for_room(p.room_id), p)
    if hit is None:
        return None
    room_code = room.get("room_code") or hit.room_code
    return Conflict(
        code="ROOM_BUSY",
        message=(f"Room {room_code} is already booked for {hit.course_code} ({hit.course_title}) "
                 f"in {hit.program_code} {hit.year_level}-{hit.section_name} {_span(hit)}."),
        meeting=hit,
        program_code=hit.program_code,
        year_level=hit.year_level,
        section_name=hit.section_name,
        room_code=room_code,
        details={"room_id": p.room_id, "capacity": room.get("capacity")},
    )


def check_course_hours(index: TermScheduleIndex, p: Proposal) -> Conflict | None:
    if not p.start_time or not p.end_time:
        return None
    found = index.offering_for(p.schedule_id)
    if found is None:
        return None
    target, siblings = found

    # считаем в минутах, чтобы 1.5 ч сравнивались точно
    budget = round(target.contact_hours * 60)
    used = sum(duration_minutes(m.start_time, m.end_time)
               for m in siblings if m.start_time and m.end_time)
    remaining = budget - used
    selected = duration_minutes(p.start_time, p.end_time)
    if selected <= remaining:
        return None
    return Conflict(
        code="COURSE_HOURS_EXCEEDED",
        message=(f"The selected time range ({format_hours(selected / 60)} hours) exceeds the remaining "
                 f"allowed hours ({format_hours(remaining / 60)} hours) for this course."),
        meeting=target,
        program_code=target.program_code,
        year_level=target.year_level,
        section_name=target.section_name,
        details={"course_id": target.course_id, "required_hours": target.contact_hours,
                 "scheduled_hours": used / 60, "selected_hours": selected / 60,
                 "remaining_hours": remaining / 60},
    )


def run_all_checks(index: TermScheduleIndex, rooms, proposal: Proposal) -> ValidationResult:
    result = ValidationResult()

    # порядок фиксирован: секция, преподаватель, аудитория, часы; без short-circuit
    for conflict in (
        check_section_overlap(index, proposal),
        check_faculty_availability(index, proposal),
        check_room_availability(index, rooms, proposal),
        check_course_hours(index, proposal),
    ):
        if conflict is not None:
            result.conflicts.append(conflict)
    return result
