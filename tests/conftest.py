from __future__ import annotations
import itertools
import pytest


class TermPayload:
    """Собирает вложенный снимок семестра programs -> ... -> courses для тестов."""

    def __init__(self):
        self.programs: list[dict] = []
        self._ids = itertools.count(1)

    def section(self, program_id: int, program_code: str, year_level: int, section_id: int,
                section_name: str, semester: int = 1) -> dict:
        program = next((p for p in self.programs if p["program_id"] == program_id), None)
        if program is None:
            program = {"program_id": program_id, "program_code": program_code,
                       "program_title": program_code, "year_levels": []}
            self.programs.append(program)
        yl = next((y for y in program["year_levels"] if y["year_level"] == year_level), None)
        if yl is None:
            yl = {"year_level": year_level, "semesters": []}
            program["year_levels"].append(yl)
        sem = next((s for s in yl["semesters"] if s["semester"] == semester), None)
        if sem is None:
            sem = {"semester": semester, "sections": []}
            yl["semesters"].append(sem)
        sec = {"section_id": section_id, "section_name": section_name, "courses": []}
        sem["sections"].append(sec)
        return sec

    def meeting(self, section: dict, *, schedule_id: int, course_id: int, code: str, title: str = "",
                lec: float = 3, lab: float = 0, day: str | None = None, start: str | None = None,
                end: str | None = None, faculty_id: int | None = None, professor: str = "Not set",
                room_id: int | None = None, room_code: str = "Not set", is_copy: bool = False) -> dict:
        course = {
            "section_course_id": next(self._ids),
            "course_id": course_id,
            "course_code": code,
            "course_title": title or code,
            "lec_hours": lec,
            "lab_hours": lab,
            "is_copy": is_copy,
            "schedule": {"schedule_id": schedule_id, "day": day, "start_time": start, "end_time": end,
                         "faculty_id": faculty_id, "room_id": room_id},
            "professor": professor,
            "faculty_id": faculty_id,
            "room": {"room_id": room_id, "room_code": room_code},
        }
        section["courses"].append(course)
        return course

    def build(self) -> dict:
        return {"term": {"term_id": 1, "academic_year": "2024-2025", "semester": 1}, "programs": self.programs}


@pytest.fixture()
def term_payload():
    return TermPayload()


@pytest.fixture()
def rooms():
    return [
        {"room_id": 1, "room_code": "R1", "capacity": 40},
        {"room_id": 2, "room_code": "R2", "capacity": 30},
    ]
