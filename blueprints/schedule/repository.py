# blueprints/schedule/repository.py
from __future__ import annotations
import logging
from datetime import time
from typing import Any, Callable, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import (
    Term, Program, Course, CourseAssignment, Section, SectionCourse,
    Schedule, Faculty, Room, Preference,
)
from blueprints.constraints.intervals import normalize_hhmm, to_minutes
from .errors import (
    TermNotFound, ScheduleNotFound, SectionCourseNotFound,
    InvalidReference, DuplicateNotAllowed, PersistenceError,
)

log = logging.getLogger(__name__)

NOT_SET = "Not set"


def _parse_time(s: str | None) -> time | None:
    if not s:
        return None
    m = to_minutes(s)
    return time(m // 60, m % 60)


def _find_or_append(items: List[dict], key: str, value, factory: Callable[[], dict]) -> dict:
    for it in items:
        if it[key] == value:
            return it
    item = factory()
    items.append(item)
    return item


def _commit(what: str, **ctx) -> None:
    try:
        db.session.commit()
    except SQLAlchemyError as ex:
        db.session.rollback()
        log.exception("%s failed", what, extra={"event": "db_error"})
        raise PersistenceError(f"Failed to {what}", **ctx) from ex


class ScheduleRepository:
    """Доступ к БД для снимка семестра, справочников и назначения занятий."""

    # ---------- term snapshot ----------
    def active_term(self) -> Term:
        term = Term.query.filter_by(is_active=True).order_by(Term.id.desc()).first()
        if term is None:
            raise TermNotFound()
        return term

    def _ensure_offerings(self, term: Term) -> None:
        # у каждого курса учебного плана в секции есть оригинальный offering,
        # у каждого offering ровно одно занятие (пока без времени)
        created = 0
        for section in Section.query.filter_by(term_id=term.id).all():
            assignments = CourseAssignment.query.filter_by(
                program_id=section.program_id, year_level=section.year_level, semester=term.semester
            ).all()
            existing = {
                sc.course_assignment_id
                for sc in SectionCourse.query.filter_by(section_id=section.id, is_copy=False).all()
            }
            for ca in assignments:
                if ca.id in existing:
                    continue
                db.session.add(SectionCourse(section_id=section.id, course_assignment_id=ca.id,
                                             is_copy=False, schedule=Schedule()))
                created += 1

        orphans = (SectionCourse.query
                   .join(Section, Section.id == SectionCourse.section_id)
                   .outerjoin(Schedule, Schedule.section_course_id == SectionCourse.id)
                   .filter(Section.term_id == term.id, Schedule.id.is_(None))
                   .all())
        for sc in orphans:
            db.session.add(Schedule(section_course_id=sc.id))
            created += 1

        if created:
            _commit("prepare section courses", term_id=term.id)
            log.info("section courses prepared", extra={"event": "offerings_created", "count": created})

    def fetch_term_snapshot(self) -> Dict[str, Any]:
        term = self.active_term()
        self._ensure_offerings(term)

        rows = (
            db.session.query(SectionCourse, Section, Program, CourseAssignment, Course, Schedule, Faculty, Room)
            .join(Section, Section.id == SectionCourse.section_id)
            .join(Program, Program.id == Section.program_id)
            .join(CourseAssignment, CourseAssignment.id == SectionCourse.course_assignment_id)
            .join(Course, Course.id == CourseAssignment.course_id)
            .join(Schedule, Schedule.section_course_id == SectionCourse.id)
            .outerjoin(Faculty, Faculty.id == Schedule.faculty_id)
            .outerjoin(Room, Room.id == Schedule.room_id)
            .filter(Section.term_id == term.id,
                    CourseAssignment.semester == term.semester,
                    Program.is_active.is_(True))
            .order_by(Program.id.asc(), Section.year_level.asc(), CourseAssignment.semester.asc(),
                      Section.name.asc(), Course.code.asc(), SectionCourse.id.asc())
            .all()
        )

        programs: List[dict] = []
        for sc, sec, prog, ca, course, sch, fac, room in rows:
            p = _find_or_append(programs, "program_id", prog.id, lambda: {
                "program_id": prog.id, "program_code": prog.code, "program_title": prog.title,
                "year_levels": [],
            })
            yl = _find_or_append(p["year_levels"], "year_level", sec.year_level, lambda: {
                "year_level": sec.year_level, "semesters": [],
            })
            sem = _find_or_append(yl["semesters"], "semester", ca.semester, lambda: {
                "semester": ca.semester, "sections": [],
            })
            section = _find_or_append(sem["sections"], "section_id", sec.id, lambda: {
                "section_id": sec.id, "section_name": sec.name, "courses": [],
            })
            section["courses"].append({
                "section_course_id": sc.id,
                "course_assignment_id": ca.id,
                "course_id": course.id,
                "course_code": course.code,
                "course_title": course.title,
                "lec_hours": course.lec_hours,
                "lab_hours": course.lab_hours,
                "units": course.units,
                "is_copy": bool(sc.is_copy),
                "program_code": prog.code,
                "year_level": sec.year_level,
                "section_name": sec.name,
                "schedule": {
                    "schedule_id": sch.id,
                    "day": sch.day,
                    "start_time": normalize_hhmm(sch.start_time),
                    "end_time": normalize_hhmm(sch.end_time),
                    "faculty_id": sch.faculty_id,
                    "room_id": sch.room_id,
                },
                "professor": fac.full_name if fac else NOT_SET,
                "faculty_id": sch.faculty_id,
                "faculty_email": fac.email if fac else None,
                "room": {
                    "room_id": room.id if room else None,
                    "room_code": room.code if room else NOT_SET,
                },
            })

        return {
            "term": {"term_id": term.id, "academic_year": term.academic_year, "semester": term.semester},
            "programs": programs,
        }

    # ---------- catalogs ----------
    def fetch_rooms(self) -> List[Dict[str, Any]]:
        rooms = Room.query.filter_by(is_active=True).order_by(Room.code.asc()).all()
        return [{"room_id": r.id, "room_code": r.code, "capacity": r.capacity} for r in rooms]

    def fetch_active_faculty(self) -> List[Dict[str, Any]]:
        rows = Faculty.query.filter_by(is_active=True).order_by(Faculty.full_name.asc()).all()
        return [{"faculty_id": f.id, "name": f.full_name, "email": f.email} for f in rows]

    def fetch_submitted_preferences(self) -> Dict[str, Any]:
        term = self.active_term()
        rows = (
            db.session.query(Preference, Faculty, CourseAssignment, Course)
            .join(Faculty, Faculty.id == Preference.faculty_id)
            .join(CourseAssignment, CourseAssignment.id == Preference.course_assignment_id)
            .join(Course, Course.id == CourseAssignment.course_id)
            .filter(Preference.term_id == term.id)
            .order_by(Faculty.full_name.asc(), Course.code.asc())
            .all()
        )
        return {
            "term_id": term.id,
            "preferences": [{
                "preference_id": pref.id,
                "faculty_id": fac.id,
                "faculty_name": fac.full_name,
                "course_assignment_id": ca.id,
                "course_code": course.code,
                "course_title": course.title,
                "preferred_days": pref.preferred_days or [],
                "submitted_at": pref.submitted_at.isoformat(),
            } for pref, fac, ca, course in rows],
        }

    # ---------- mutations ----------
    def save_assignment(self, schedule_id: int, *, faculty_id: int | None, room_id: int | None,
                        day: str | None, start_time: str | None, end_time: str | None) -> Dict[str, Any]:
        sch = db.session.get(Schedule, schedule_id)
        if sch is None:
            raise ScheduleNotFound(schedule_id=schedule_id)
        if faculty_id is not None:
            fac = db.session.get(Faculty, faculty_id)
            if fac is None or not fac.is_active:
                raise InvalidReference("Invalid faculty selected.", faculty_id=faculty_id)
        if room_id is not None:
            room = db.session.get(Room, room_id)
            if room is None or not room.is_active:
                raise InvalidReference("Invalid room selected.", room_id=room_id)

        sch.faculty_id = faculty_id
        sch.room_id = room_id
        sch.day = day
        sch.start_time = _parse_time(start_time)
        sch.end_time = _parse_time(end_time)
        _commit("assign schedule", schedule_id=schedule_id)
        return self._schedule_dict(sch)

    def duplicate_course(self, section_course_id: int) -> Dict[str, Any]:
        original = db.session.get(SectionCourse, section_course_id)
        if original is None:
            raise SectionCourseNotFound(section_course_id=section_course_id)
        if original.is_copy:
            raise DuplicateNotAllowed("Cannot duplicate a copied course", section_course_id=section_course_id)

        copy = SectionCourse(section_id=original.section_id,
                             course_assignment_id=original.course_assignment_id,
                             is_copy=True, schedule=Schedule())
        db.session.add(copy)
        _commit("duplicate course", section_course_id=section_course_id)

        course = original.course_assignment.course
        return {
            "section_course_id": copy.id,
            "is_copy": True,
            "course_id": course.id,
            "course_code": course.code,
            "course_title": course.title,
            "lec_hours": course.lec_hours,
            "lab_hours": course.lab_hours,
            "units": course.units,
            "schedule": self._schedule_dict(copy.schedule),
            "professor": NOT_SET,
            "faculty_id": None,
            "room": {"room_id": None, "room_code": NOT_SET},
        }

    def remove_duplicate_course(self, section_course_id: int) -> None:
        sc = db.session.get(SectionCourse, section_course_id)
        if sc is None:
            raise SectionCourseNotFound(section_course_id=section_course_id)
        if not sc.is_copy:
            raise DuplicateNotAllowed("Cannot remove original course", section_course_id=section_course_id)
        db.session.delete(sc)
        _commit("remove duplicate course", section_course_id=section_course_id)

    @staticmethod
    def _schedule_dict(sch: Schedule) -> Dict[str, Any]:
        return {
            "schedule_id": sch.id,
            "section_course_id": sch.section_course_id,
            "day": sch.day,
            "start_time": normalize_hhmm(sch.start_time),
            "end_time": normalize_hhmm(sch.end_time),
            "faculty_id": sch.faculty_id,
            "professor": sch.faculty.full_name if sch.faculty else NOT_SET,
            "room_id": sch.room_id,
            "room_code": sch.room.code if sch.room else NOT_SET,
        }
