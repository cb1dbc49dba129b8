from datetime import datetime, time

from sqlalchemy import (
    ForeignKey, UniqueConstraint, Index, Boolean, DateTime, Time,
    Integer, Float, String, JSON
)
from sqlalchemy.orm import relationship, Mapped, mapped_column

from extensions import db


# ---------- Term ----------
class Term(db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)  # "2024-2025"
    semester: Mapped[int] = mapped_column(Integer, nullable=False)          # 1, 2, 3 (summer)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        UniqueConstraint("academic_year", "semester", name="uq_term_year_semester"),
    )

    def __repr__(self):
        return f"<Term {self.academic_year}/{self.semester}>"


# ---------- Catalog ----------
class Program(db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Program {self.code}>"


class Course(db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    lec_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    lab_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    units: Mapped[int | None] = mapped_column(Integer)

    def __repr__(self):
        return f"<Course {self.code}>"


class Faculty(db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Faculty {self.full_name}>"


class Room(db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Room {self.code}>"


# ---------- Curriculum / sections ----------
class CourseAssignment(db.Model):
    """Курс учебного плана программы для курса обучения (year level) и семестра."""
    id: Mapped[int] = mapped_column(primary_key=True)
    program_id: Mapped[int] = mapped_column(ForeignKey("program.id", ondelete="CASCADE"), nullable=False)
    year_level: Mapped[int] = mapped_column(Integer, nullable=False)
    semester: Mapped[int] = mapped_column(Integer, nullable=False)
    course_id: Mapped[int] = mapped_column(ForeignKey("course.id", ondelete="CASCADE"), nullable=False)

    program = relationship("Program")
    course = relationship("Course")

    __table_args__ = (
        UniqueConstraint("program_id", "year_level", "semester", "course_id", name="uq_course_assignment"),
        Index("ix_course_assignment_program_year", "program_id", "year_level", "semester"),
    )


class Section(db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    term_id: Mapped[int] = mapped_column(ForeignKey("term.id", ondelete="CASCADE"), nullable=False, index=True)
    program_id: Mapped[int] = mapped_column(ForeignKey("program.id", ondelete="CASCADE"), nullable=False)
    year_level: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)

    term = relationship("Term")
    program = relationship("Program")

    __table_args__ = (
        UniqueConstraint("term_id", "program_id", "year_level", "name", name="uq_section_term_program_year_name"),
    )


class SectionCourse(db.Model):
    """Course offering: курс, назначенный секции. Копии (is_copy) делят часы оригинала."""
    id: Mapped[int] = mapped_column(primary_key=True)
    section_id: Mapped[int] = mapped_column(ForeignKey("section.id", ondelete="CASCADE"), nullable=False, index=True)
    course_assignment_id: Mapped[int] = mapped_column(ForeignKey("course_assignment.id", ondelete="CASCADE"),
                                                      nullable=False)
    is_copy: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    section = relationship("Section")
    course_assignment = relationship("CourseAssignment")
    schedule = relationship("Schedule", back_populates="section_course", uselist=False,
                            cascade="all, delete-orphan")


class Schedule(db.Model):
    """Одно занятие (meeting) course offering'а. Пустые day/time: не назначено."""
    id: Mapped[int] = mapped_column(primary_key=True)
    section_course_id: Mapped[int] = mapped_column(ForeignKey("section_course.id", ondelete="CASCADE"),
                                                   nullable=False, unique=True)
    day: Mapped[str | None] = mapped_column(String(10))
    start_time: Mapped[time | None] = mapped_column(Time)
    end_time: Mapped[time | None] = mapped_column(Time)
    faculty_id: Mapped[int | None] = mapped_column(ForeignKey("faculty.id", ondelete="SET NULL"), index=True)
    room_id: Mapped[int | None] = mapped_column(ForeignKey("room.id", ondelete="SET NULL"), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow,
                                                 nullable=False)

    section_course = relationship("SectionCourse", back_populates="schedule")
    faculty = relationship("Faculty")
    room = relationship("Room")


class Preference(db.Model):
    """Пожелания преподавателя по курсу (дни/время), поданные на активный семестр."""
    id: Mapped[int] = mapped_column(primary_key=True)
    term_id: Mapped[int] = mapped_column(ForeignKey("term.id", ondelete="CASCADE"), nullable=False, index=True)
    faculty_id: Mapped[int] = mapped_column(ForeignKey("faculty.id", ondelete="CASCADE"), nullable=False)
    course_assignment_id: Mapped[int] = mapped_column(ForeignKey("course_assignment.id", ondelete="CASCADE"),
                                                      nullable=False)
    preferred_days: Mapped[list | None] = mapped_column(JSON)  # [{"day": "Monday", "start_time": "08:00", ...}]
    submitted_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    term = relationship("Term")
    faculty = relationship("Faculty")
    course_assignment = relationship("CourseAssignment")

    __table_args__ = (
        UniqueConstraint("term_id", "faculty_id", "course_assignment_id", name="uq_preference_term_faculty_course"),
    )
