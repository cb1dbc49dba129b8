from __future__ import annotations
import os
from pathlib import Path

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'app.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # перед записью перечитать снимок семестра и проверить ещё раз
    SCHEDULING_REVALIDATE_ON_APPLY = True
    SEED_TEST_DATA = False
    DEFAULT_TERM = None

class DevConfig(BaseConfig):
    DEBUG = True
    SEED_TEST_DATA = True
    # активный семестр, если таблица term пуста
    DEFAULT_TERM = {"academic_year": "2024-2025", "semester": 1}

class TestConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_LEVEL = "WARNING"

class ProdConfig(BaseConfig):
    DEBUG = False

config_map = {
    "dev": DevConfig,
    "test": TestConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}
