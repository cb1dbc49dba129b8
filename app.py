from __future__ import annotations
import os
from importlib import import_module
from flask import Flask
from config import config_map
from extensions import db, migrate
from sqlalchemy import inspect

def _seed_from_config(app):
    if not app.config.get("SEED_TEST_DATA") or not app.config.get("DEFAULT_TERM"):
        return
    with app.app_context():
        # таблица term может ещё не быть создана (alembic upgrade и т.п.)
        if not inspect(db.engine).has_table("term"):
            return

        from models import Term  # локальный импорт, чтобы избежать циклов
        if Term.query.first():
            return
        t = app.config["DEFAULT_TERM"]
        db.session.add(Term(academic_year=t["academic_year"], semester=t["semester"], is_active=True))
        db.session.commit()

def register_blueprints(app: Flask) -> None:
    # Жёстко импортируем модуль с маршрутами core перед взятием bp
    import_module("blueprints.core.routes")
    from blueprints.core import bp as core_bp
    from blueprints.schedule.routes import api_bp as schedule_api_bp
    from blueprints.constraints.routes import api_bp as constraints_api_bp

    # core без префикса → '/health' в корне
    app.register_blueprint(core_bp)
    app.register_blueprint(schedule_api_bp, url_prefix="/api/v1")
    app.register_blueprint(constraints_api_bp, url_prefix="/api/v1")

def init_scheduling(app: Flask) -> None:
    from blueprints.schedule.services import SchedulingService
    # один сервис (и один кэш снимков) на приложение
    app.extensions["scheduling"] = SchedulingService(
        revalidate_on_apply=app.config.get("SCHEDULING_REVALIDATE_ON_APPLY", True),
    )

def create_app(config_name: str | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])
    # --- ВАЖНО: изоляция БД в тестах ---
    # pytest всегда выставляет переменную окружения PYTEST_CURRENT_TEST.
    # Делаем БД в памяти, чтобы никакие изменения из одного теста не протекали в другой.
    if os.environ.get("PYTEST_CURRENT_TEST"):
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
        app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {"connect_args": {"check_same_thread": False}})

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    db.init_app(app)
    migrate.init_app(app, db)
    register_blueprints(app)
    init_scheduling(app)
    _seed_from_config(app)
    return app
