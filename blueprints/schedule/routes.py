# blueprints/schedule/routes.py
from __future__ import annotations
import logging

from flask import Blueprint, jsonify, request

from .errors import SchedulingError
from .schemas import AssignIn, SectionCourseIn
from .services import get_service

log = logging.getLogger(__name__)

api_bp = Blueprint("schedule_api", __name__)


@api_bp.get("/populate-schedules")
def populate_schedules():
    return jsonify(get_service().populate_schedules())


@api_bp.get("/rooms")
def rooms():
    return jsonify({"rooms": get_service().get_rooms()})


@api_bp.get("/faculty")
def faculty():
    return jsonify({"faculty": get_service().get_faculty()})


@api_bp.get("/preferences")
def preferences():
    refresh = request.args.get("refresh", "").lower() in ("1", "true", "yes")
    return jsonify(get_service().get_submitted_preferences(force_refresh=refresh))


@api_bp.post("/assign-schedule")
def assign_schedule():
    payload = request.get_json(silent=True) or {}
    proposal = AssignIn.model_validate(payload).to_proposal()
    outcome = get_service().assign_schedule(proposal)
    if not outcome.ok:
        # запись заблокирована: отдаём все нарушения сразу
        body = outcome.validation.to_dict()
        body["ok"] = False
        return jsonify(body), 409
    return jsonify({"ok": True, "message": "Schedule assigned successfully", "schedule": outcome.schedule})


@api_bp.post("/duplicate-course")
def duplicate_course():
    parsed = SectionCourseIn.model_validate(request.get_json(silent=True) or {})
    course = get_service().duplicate_course(parsed.section_course_id)
    return jsonify({"message": "Course duplicated successfully", "course": course}), 201


@api_bp.delete("/remove-duplicate-course")
def remove_duplicate_course():
    parsed = SectionCourseIn.model_validate(request.get_json(silent=True) or {})
    get_service().remove_duplicate_course(parsed.section_course_id)
    return jsonify({"message": "Copied course removed successfully"})


@api_bp.app_errorhandler(SchedulingError)
def handle_scheduling_error(err: SchedulingError):
    if err.status >= 500:
        log.error("scheduling request failed", extra={"event": "scheduling_error", "status": err.status})
    return jsonify({"ok": False, "errors": [err.to_dict()]}), err.status
