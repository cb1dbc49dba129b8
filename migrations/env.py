"""Alembic env для схемы расписания секций (term, section_course, schedule, ...)."""
import logging
import os
import sys
from logging.config import fileConfig

from alembic import context
from flask import current_app, has_app_context

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)
log = logging.getLogger("alembic.env")


def _flask_app():
    # `flask db upgrade` уже даёт app context; голый `alembic upgrade` собирает приложение сам
    if has_app_context():
        return current_app._get_current_object()
    root = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
    if root not in sys.path:
        sys.path.insert(0, root)
    from app import create_app
    app = create_app(os.getenv("FLASK_CONFIG"))
    app.app_context().push()
    return app


app = _flask_app()
db = app.extensions["migrate"].db
import models  # noqa: E402,F401  таблицы попадают в db.metadata

target_metadata = db.metadata
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", db.engine.url.render_as_string(hide_password=False).replace("%", "%%"))


def _skip_empty_autogenerate(context, revision, directives):
    # пустая миграция без изменений схемы не нужна
    if getattr(config.cmd_opts, "autogenerate", False) and directives[0].upgrade_ops.is_empty():
        directives[:] = []
        log.info("no schema changes detected")


def _batch(url) -> bool:
    # SQLite не умеет ALTER COLUMN
    return str(url).startswith("sqlite")


def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(url=url, target_metadata=target_metadata, literal_binds=True,
                      dialect_opts={"paramstyle": "named"}, render_as_batch=_batch(url))
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    with db.engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=_batch(db.engine.url),
            compare_type=True,
            process_revision_directives=_skip_empty_autogenerate,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
