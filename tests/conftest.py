import os

# Settings are read at import time, so these must be set before carepulse is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "100000")
os.environ.setdefault("CLINIC_TIMEZONE", "Asia/Singapore")
os.environ.setdefault("ENFORCE_STATUS_TRANSITIONS", "false")

import pytest
from sqlalchemy import event
from sqlmodel import Session

from carepulse.database import build_engine, create_db_and_tables, get_session


@pytest.fixture
def engine():
    eng = build_engine("sqlite://")
    create_db_and_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def client(engine):
    from fastapi.testclient import TestClient
    from carepulse.main import app

    def override_get_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = override_get_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def fk_session():
    """SQLite session with foreign key enforcement, closer to how PostgreSQL behaves."""
    eng = build_engine("sqlite://")
    event.listen(eng, "connect", lambda dbapi_conn, _record: dbapi_conn.execute("PRAGMA foreign_keys=ON"))
    create_db_and_tables(eng)
    with Session(eng) as s:
        yield s
    eng.dispose()
