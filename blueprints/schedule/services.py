# blueprints/schedule/services.py
from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from flask import current_app

from blueprints.constraints.index import TermScheduleIndex
from blueprints.constraints.services import Proposal, ValidationResult, run_all_checks
from .cache import CacheType, SnapshotCache
from .errors import ConflictDetectionError
from .repository import ScheduleRepository

log = logging.getLogger(__name__)


@dataclass
class AssignmentOutcome:
    ok: bool
    validation: ValidationResult
    schedule: Optional[Dict[str, Any]] = None


def default_loaders(repo: ScheduleRepository) -> Dict[CacheType, Any]:
    return {
        CacheType.SCHEDULES: lambda: TermScheduleIndex.from_payload(repo.fetch_term_snapshot()),
        CacheType.ROOMS: repo.fetch_rooms,
        CacheType.FACULTY: repo.fetch_active_faculty,
        CacheType.PREFERENCES: repo.fetch_submitted_preferences,
    }


class SchedulingService:
    """
    Проверка и применение назначений занятий.

    Постусловие assign_schedule(): после успешной записи снимок семестра
    (CacheType.SCHEDULES, и только он) инвалидирован. Неудачная запись кэш
    не трогает, состояние БД не изменилось.

    Проверка и запись идут под одним lock'ом, а снимок перед проверкой
    перечитывается (revalidate_on_apply). Это закрывает гонку
    "проверили по старому снимку, потом записали" только внутри процесса;
    между процессами окончательная защита остаётся за БД.
    """

    def __init__(self, repository: ScheduleRepository | None = None,
                 cache: SnapshotCache | None = None, revalidate_on_apply: bool = True):
        self.repository = repository or ScheduleRepository()
        self.cache = cache or SnapshotCache(default_loaders(self.repository))
        self.revalidate_on_apply = revalidate_on_apply
        self._apply_lock = threading.Lock()

    # ---------- reads ----------
    def schedule_index(self, force_refresh: bool = False) -> TermScheduleIndex:
        return self.cache.get(CacheType.SCHEDULES, force_refresh=force_refresh)

    def populate_schedules(self) -> Dict[str, Any]:
        return self.schedule_index().payload

    def get_rooms(self) -> List[Dict[str, Any]]:
        return self.cache.get(CacheType.ROOMS)

    def get_faculty(self) -> List[Dict[str, Any]]:
        return self.cache.get(CacheType.FACULTY)

    def get_submitted_preferences(self, force_refresh: bool = False) -> Dict[str, Any]:
        return self.cache.get(CacheType.PREFERENCES, force_refresh=force_refresh)

    def reset_caches(self, *kinds: CacheType) -> None:
        self.cache.invalidate(*kinds)

    # ---------- validate ----------
    def check_for_conflicts(self, proposal: Proposal, force_refresh: bool = False) -> ValidationResult:
        try:
            index = self.schedule_index(force_refresh=force_refresh)
            rooms = self.get_rooms()
        except Exception as ex:
            # fail closed: без снимка предложение не пропускаем
            log.exception("conflict detection failed", extra={"event": "validation_failed",
                                                              "schedule_id": proposal.schedule_id})
            raise ConflictDetectionError() from ex

        result = run_all_checks(index, rooms, proposal)
        if result.has_conflicts:
            log.info("schedule conflicts found", extra={"event": "schedule_conflicts",
                                                        "schedule_id": proposal.schedule_id,
                                                        "codes": result.codes})
        return result

    # ---------- apply ----------
    def assign_schedule(self, proposal: Proposal) -> AssignmentOutcome:
        with self._apply_lock:
            validation = self.check_for_conflicts(proposal, force_refresh=self.revalidate_on_apply)
            if validation.has_conflicts:
                return AssignmentOutcome(ok=False, validation=validation)

            schedule = self.repository.save_assignment(
                proposal.schedule_id,
                faculty_id=proposal.faculty_id,
                room_id=proposal.room_id,
                day=proposal.day,
                start_time=proposal.start_time,
                end_time=proposal.end_time,
            )
            self.cache.invalidate(CacheType.SCHEDULES)

        log.info("schedule assigned", extra={"event": "schedule_assigned", "schedule_id": proposal.schedule_id})
        return AssignmentOutcome(ok=True, validation=validation, schedule=schedule)

    # ---------- offerings ----------
    def duplicate_course(self, section_course_id: int) -> Dict[str, Any]:
        course = self.repository.duplicate_course(section_course_id)
        self.cache.invalidate(CacheType.SCHEDULES)
        return course

    def remove_duplicate_course(self, section_course_id: int) -> None:
        self.repository.remove_duplicate_course(section_course_id)
        self.cache.invalidate(CacheType.SCHEDULES)


def get_service() -> SchedulingService:
    return current_app.extensions["scheduling"]
