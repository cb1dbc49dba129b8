# blueprints/schedule/errors.py
from __future__ import annotations


class SchedulingError(Exception):
    """Инфраструктурная ошибка (не конфликт расписания)."""
    code = "SCHEDULING_ERROR"
    status = 500

    def __init__(self, message: str | None = None, **details):
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.message = message or (self.__class__.__doc__ or self.code).strip()
        self.details = details

    def to_dict(self) -> dict:
        out = {"code": self.code, "message": self.message}
        if self.details:
            out["details"] = self.details
        return out


class TermNotFound(SchedulingError):
    """No active term found."""
    code = "NO_ACTIVE_TERM"
    status = 404


class ScheduleNotFound(SchedulingError):
    """Schedule not found."""
    code = "SCHEDULE_NOT_FOUND"
    status = 404


class SectionCourseNotFound(SchedulingError):
    """Section course not found."""
    code = "SECTION_COURSE_NOT_FOUND"
    status = 404


class InvalidReference(SchedulingError):
    """Invalid faculty or room selected."""
    code = "INVALID_REFERENCE"
    status = 400


class DuplicateNotAllowed(SchedulingError):
    """Operation not allowed for this course."""
    code = "DUPLICATE_NOT_ALLOWED"
    status = 400


class PersistenceError(SchedulingError):
    """Failed to assign schedule."""
    code = "ASSIGN_FAILED"
    status = 500


class ConflictDetectionError(SchedulingError):
    """An error occurred during conflict detection."""
    code = "CONFLICT_DETECTION_FAILED"
    status = 503
