# tests/test_config.py

from __future__ import annotations

import logging

import pytest

from taskapi.core.config import Settings
from taskapi.core.database import build_engine
from taskapi.core.logging import NOISY_LOGGERS, setup_logging


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("API_PREFIX", "/v2")
    monkeypatch.setenv("API_PORT", "9001")
    monkeypatch.setenv("CORS_ORIGINS", '["https://tasks.example.com"]')

    s = Settings(_env_file=None)

    assert s.API_PREFIX == "/v2"
    assert s.API_PORT == 9001
    assert s.CORS_ORIGINS == ["https://tasks.example.com"]


def test_settings_defaults(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)

    s = Settings(_env_file=None)

    assert s.DATABASE_URL.startswith("sqlite+aiosqlite://")
    assert s.API_PREFIX == "/api"
    assert "http://localhost:5173" in s.CORS_ORIGINS


def test_sqlite_engine_does_not_pool() -> None:
    from sqlalchemy.pool import NullPool

    eng = build_engine("sqlite+aiosqlite:///:memory:")
    assert isinstance(eng.pool, NullPool)


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)


def test_setup_logging_quiets_third_party(restore_root_logging) -> None:
    setup_logging("info")

    assert restore_root_logging.level == logging.INFO
    assert len(restore_root_logging.handlers) == 1
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_setup_logging_debug_opens_everything(restore_root_logging) -> None:
    setup_logging("DEBUG")

    assert restore_root_logging.level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.DEBUG


def test_setup_logging_unknown_level_falls_back_to_info(restore_root_logging) -> None:
    setup_logging("chatty")

    assert restore_root_logging.level == logging.INFO
