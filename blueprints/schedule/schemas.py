from __future__ import annotations
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from blueprints.constraints.intervals import to_minutes
from blueprints.constraints.services import Proposal

Weekday = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

HHMM = r"^([01]\d|2[0-3]):[0-5]\d$"


class _TimeRange(BaseModel):
    day: Optional[Weekday] = None
    start_time: Optional[str] = Field(None, pattern=HHMM)
    end_time: Optional[str] = Field(None, pattern=HHMM)

    @field_validator("day", "start_time", "end_time", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return None if v == "" else v

    @model_validator(mode="after")
    def check_range(self):
        if self.start_time and self.end_time and to_minutes(self.end_time) <= to_minutes(self.start_time):
            raise ValueError("end_time must be > start_time")
        return self


# ---------- validate ----------
class ConflictCheckIn(_TimeRange):
    schedule_id: int
    program_id: int
    year_level: int = Field(ge=1)
    section_id: int
    faculty_id: Optional[int] = None
    room_id: Optional[int] = None

    def to_proposal(self) -> Proposal:
        return Proposal(
            schedule_id=self.schedule_id, program_id=self.program_id, year_level=self.year_level,
            section_id=self.section_id, day=self.day, start_time=self.start_time, end_time=self.end_time,
            faculty_id=self.faculty_id, room_id=self.room_id,
        )


# ---------- apply ----------
class AssignIn(ConflictCheckIn):
    @model_validator(mode="after")
    def all_or_nothing(self):
        # день и время задаются вместе; все null: снять занятие с расписания
        filled = [v is not None for v in (self.day, self.start_time, self.end_time)]
        if any(filled) and not all(filled):
            raise ValueError("day, start_time and end_time must be set together")
        return self


# ---------- offerings ----------
class SectionCourseIn(BaseModel):
    section_course_id: int
