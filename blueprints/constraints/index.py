# blueprints/constraints/index.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class MeetingEntry:
    schedule_id: int
    program_id: int | None
    program_code: str
    year_level: int | None
    semester: int | None
    section_id: int | None
    section_name: str
    course_id: int | None
    course_code: str
    course_title: str
    lec_hours: float
    lab_hours: float
    section_course_id: int | None = None
    is_copy: bool = False
    day: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    faculty_id: int | None = None
    professor: str | None = None
    room_id: int | None = None
    room_code: str | None = None

    @property
    def is_scheduled(self) -> bool:
        return bool(self.day and self.start_time and self.end_time)

    @property
    def contact_hours(self) -> float:
        return (self.lec_hours or 0) + (self.lab_hours or 0)


SectionKey = Tuple[Optional[int], Optional[int], Optional[int]]
OfferingKey = Tuple[Optional[int], Optional[int]]


class TermScheduleIndex:
    """
    Read-only view over a term snapshot
    (programs -> year_levels -> semesters -> sections -> courses).

    Дерево проходится один раз: плоский список занятий в порядке обхода
    плюс словари по секции, преподавателю, аудитории, schedule_id и
    course offering. Индекс ничего не знает о БД и выбрасывается при
    каждой инвалидации снимка.
    """

    def __init__(self, payload: Dict[str, Any], meetings: List[MeetingEntry]):
        self.payload = payload
        self.term = payload.get("term")
        self.meetings = meetings
        self._by_section: Dict[SectionKey, List[MeetingEntry]] = {}
        self._by_faculty: Dict[int, List[MeetingEntry]] = {}
        self._by_room: Dict[int, List[MeetingEntry]] = {}
        self._by_schedule: Dict[int, MeetingEntry] = {}
        self._by_offering: Dict[OfferingKey, List[MeetingEntry]] = {}
        for m in meetings:
            self._by_section.setdefault((m.program_id, m.year_level, m.section_id), []).append(m)
            self._by_offering.setdefault((m.section_id, m.course_id), []).append(m)
            self._by_schedule.setdefault(m.schedule_id, m)
            if not m.is_scheduled:
                continue
            if m.faculty_id is not None:
                self._by_faculty.setdefault(m.faculty_id, []).append(m)
            if m.room_id is not None:
                self._by_room.setdefault(m.room_id, []).append(m)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any] | None) -> "TermScheduleIndex":
        payload = payload or {}
        meetings: List[MeetingEntry] = []
        for program in payload.get("programs") or []:
            for yl in program.get("year_levels") or []:
                for sem in yl.get("semesters") or []:
                    for section in sem.get("sections") or []:
                        for course in section.get("courses") or []:
                            entry = _entry_from(program, yl, sem, section, course)
                            if entry is not None:
                                meetings.append(entry)
        return cls(payload, meetings)

    def __len__(self) -> int:
        return len(self.meetings)

    def __iter__(self) -> Iterator[MeetingEntry]:
        return iter(self.meetings)

    def get(self, schedule_id: int | None) -> MeetingEntry | None:
        if schedule_id is None:
            return None
        return self._by_schedule.get(schedule_id)

    def meetings_in_section(self, program_id, year_level, section_id) -> List[MeetingEntry]:
        return list(self._by_section.get((program_id, year_level, section_id), []))

    def meetings_for_faculty(self, faculty_id: int) -> List[MeetingEntry]:
        return list(self._by_faculty.get(faculty_id, []))

    def meetings_for_room(self, room_id: int) -> List[MeetingEntry]:
        return list(self._by_room.get(room_id, []))

    def find(self, predicate: Callable[[MeetingEntry], bool]) -> MeetingEntry | None:
        for m in self.meetings:
            if predicate(m):
                return m
        return None

    def offering_for(self, schedule_id: int | None) -> Tuple[MeetingEntry, List[MeetingEntry]] | None:
        """Занятие + все остальные занятия того же course offering (та же секция и курс)."""
        target = self.get(schedule_id)
        if target is None:
            return None
        siblings = [m for m in self._by_offering.get((target.section_id, target.course_id), [])
                    if m.schedule_id != schedule_id]
        return target, siblings


def _entry_from(program, yl, sem, section, course) -> MeetingEntry | None:
    schedule = course.get("schedule") or {}
    schedule_id = schedule.get("schedule_id")
    if schedule_id is None:
        return None
    room = course.get("room") or {}

    faculty_id = schedule.get("faculty_id")
    if faculty_id is None:
        faculty_id = course.get("faculty_id")
    room_id = schedule.get("room_id")
    if room_id is None:
        room_id = room.get("room_id")

    day = schedule.get("day")
    return MeetingEntry(
        schedule_id=schedule_id,
        program_id=program.get("program_id"),
        program_code=program.get("program_code") or course.get("program_code") or "Unknown Program",
        year_level=yl.get("year_level"),
        semester=sem.get("semester"),
        section_id=section.get("section_id"),
        section_name=section.get("section_name") or course.get("section_name") or "",
        course_id=course.get("course_id"),
        course_code=course.get("course_code") or "",
        course_title=course.get("course_title") or "",
        lec_hours=float(course.get("lec_hours") or 0),
        lab_hours=float(course.get("lab_hours") or 0),
        section_course_id=course.get("section_course_id"),
        is_copy=bool(course.get("is_copy")),
        # "Not set" в day оставляет занятие неназначенным
        day=day if day and day != "Not set" else None,
        start_time=schedule.get("start_time") or None,
        end_time=schedule.get("end_time") or None,
        faculty_id=faculty_id,
        professor=course.get("professor"),
        room_id=room_id,
        room_code=room.get("room_code") or course.get("room_code"),
    )
