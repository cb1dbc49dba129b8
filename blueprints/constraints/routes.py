# blueprints/constraints/routes.py
from flask import Blueprint, request, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import BadRequest

from blueprints.schedule.schemas import ConflictCheckIn
from blueprints.schedule.services import get_service

api_bp = Blueprint("constraints_api", __name__)


def _pydantic_errors_safe(ve: ValidationError):
    errs = ve.errors(include_url=False)
    for e in errs:
        if "ctx" in e and isinstance(e["ctx"], dict):
            e["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
    return errs


@api_bp.post("/schedule-conflicts/check")
def schedule_conflicts_check():
    payload = request.get_json(silent=True) or {}
    proposal = ConflictCheckIn.model_validate(payload).to_proposal()
    result = get_service().check_for_conflicts(proposal)
    # конфликт: обычный результат, а не ошибка запроса
    return jsonify(result.to_dict()), 200


@api_bp.app_errorhandler(ValidationError)
def handle_validation_error(err: ValidationError):
    return jsonify({"ok": False, "errors": [{"code": "BAD_REQUEST", "details": _pydantic_errors_safe(err)}]}), 400


@api_bp.app_errorhandler(BadRequest)
def handle_bad_request(err):
    return jsonify({"ok": False, "errors": [{"code": "BAD_REQUEST", "message": err.description}]}), 400
