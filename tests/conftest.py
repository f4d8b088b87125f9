# tests/conftest.py

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

# Point the app at a throwaway SQLite file before taskapi reads its settings.
_DB_DIR = Path(tempfile.mkdtemp(prefix="taskapi-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR / 'tasks.sqlite3'}"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from taskapi.core.database import AsyncSessionLocal, Base, engine
from taskapi.main import app


async def _reset_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture()
def client():
    """
    TestClient over a freshly emptied database.

    The engine uses NullPool for SQLite, so no connection outlives the event
    loop that opened it.
    """
    asyncio.run(_reset_tables())
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def session():
    await _reset_tables()
    async with AsyncSessionLocal() as s:
        yield s
