# tests/conftest.py

import sqlite3
from contextlib import closing
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskboard.app import create_app
from taskboard.config import Settings


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "tasks.db"


@pytest.fixture()
def settings(tmp_path: Path, db_path: Path) -> Settings:
    """
    Settings isolated per test: temporary SQLite file, schema created at
    startup, a throwaway frontend directory and no log files.
    """
    static_dir = tmp_path / "public"
    static_dir.mkdir()
    (static_dir / "index.html").write_text(
        "<!DOCTYPE html><html><body><h1>Task Board</h1></body></html>",
        encoding="utf-8",
    )

    return Settings(
        _env_file=None,
        ENVIRONMENT="testing",
        DATABASE_URL=f"sqlite+aiosqlite:///{db_path}",
        AUTO_CREATE_SCHEMA=True,
        STATIC_DIR=static_dir,
        LOG_TO_FILE=False,
    )


@pytest.fixture()
def client(settings: Settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def db(db_path: Path):
    """Run a statement directly against the test database file"""

    def run(sql: str, params: tuple = ()) -> list:
        with closing(sqlite3.connect(db_path)) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(sql, params).fetchall()
            conn.commit()
            return [dict(row) for row in rows]

    return run
