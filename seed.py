"""
Idempotent seed-скрипт.
Запуск:
  python seed.py --reset    # дропнуть и пересоздать БД + демо-данные
  python seed.py            # мягкое наполнение недостающих данных (idempotent)
"""
import argparse

from app import create_app
from extensions import db
from models import (
    Term, Program, Course, CourseAssignment, Section, Faculty, Room, Preference,
)

# ---- вспомогательные утилиты ----
def get_or_create(model, defaults=None, **by):
    """Идемпотентное создание по уникальным ключам."""
    inst = db.session.query(model).filter_by(**by).first()
    if inst:
        return inst, False
    data = dict(by)
    if defaults:
        data.update(defaults)
    inst = model(**data)
    db.session.add(inst)
    db.session.flush()
    return inst, True

# ---- демо-данные ----
PROGRAMS = [
    ("BSIT", "Bachelor of Science in Information Technology"),
    ("BSCS", "Bachelor of Science in Computer Science"),
]

COURSES = [
    # code, title, lec, lab, units
    ("IT101", "Introduction to Computing", 2, 3, 3),
    ("IT102", "Computer Programming 1", 2, 3, 3),
    ("GE101", "Understanding the Self", 3, 0, 3),
    ("CS201", "Data Structures and Algorithms", 2, 3, 3),
    ("GE102", "Purposive Communication", 3, 0, 3),
]

CURRICULUM = {
    # program -> [(year_level, semester, course_code)]
    "BSIT": [(1, 1, "IT101"), (1, 1, "IT102"), (1, 1, "GE101"), (2, 1, "GE102")],
    "BSCS": [(1, 1, "IT101"), (1, 1, "GE101"), (2, 1, "CS201")],
}

SECTIONS = {
    "BSIT": [(1, "1"), (1, "2"), (2, "1")],
    "BSCS": [(1, "1"), (2, "1")],
}

FACULTY = [
    ("Dela Cruz, Juan P.", "jdelacruz@example.edu"),
    ("Santos, Maria L.", "msantos@example.edu"),
    ("Reyes, Jose A.", "jreyes@example.edu"),
]

ROOMS = [("A101", 40), ("A102", 40), ("LAB1", 30), ("LAB2", 30)]


def seed_catalog():
    for code, cap in ROOMS:
        get_or_create(Room, code=code, defaults={"capacity": cap})
    for name, email in FACULTY:
        get_or_create(Faculty, email=email, defaults={"full_name": name})
    for code, title, lec, lab, units in COURSES:
        get_or_create(Course, code=code, defaults={"title": title, "lec_hours": lec, "lab_hours": lab, "units": units})


def seed_term(academic_year: str = "2024-2025", semester: int = 1) -> Term:
    # активен ровно один семестр
    Term.query.update({Term.is_active: False})
    term, _ = get_or_create(Term, academic_year=academic_year, semester=semester)
    term.is_active = True

    courses = {c.code: c for c in Course.query.all()}
    for code, title in PROGRAMS:
        program, _ = get_or_create(Program, code=code, defaults={"title": title})
        for year_level, sem, course_code in CURRICULUM.get(code, []):
            get_or_create(CourseAssignment, program_id=program.id, year_level=year_level,
                          semester=sem, course_id=courses[course_code].id)
        for year_level, name in SECTIONS.get(code, []):
            get_or_create(Section, term_id=term.id, program_id=program.id, year_level=year_level, name=name)
    return term


def seed_preferences(term: Term):
    fac = Faculty.query.filter_by(email="jdelacruz@example.edu").first()
    ca = (CourseAssignment.query.join(Course, Course.id == CourseAssignment.course_id)
          .filter(Course.code == "IT101").first())
    if fac and ca:
        get_or_create(Preference, term_id=term.id, faculty_id=fac.id, course_assignment_id=ca.id,
                      defaults={"preferred_days": [{"day": "Monday", "start_time": "08:00", "end_time": "11:00"}]})


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--reset", action="store_true", help="drop & create all tables before seeding")
    ap.add_argument("--config", default="dev")
    args = ap.parse_args()

    app = create_app(args.config)
    with app.app_context():
        if args.reset:
            db.drop_all()
        db.create_all()
        seed_catalog()
        term = seed_term()
        seed_preferences(term)
        db.session.commit()
        print(f"Seed complete: term {term.academic_year}/{term.semester}")


if __name__ == "__main__":
    main()
