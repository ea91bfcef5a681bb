from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from taskapi.database import build_engine, init_database
from taskapi.main import create_app
from taskapi.services.task_store import TaskStore


class StepClock:
    """Deterministic clock: every call returns a time ``step`` later than the last."""

    def __init__(self, start=datetime(2024, 1, 1, 12, 0, 0), step=timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self):
        current = self.now
        self.now += self.step
        return current


# Fresh file-backed database for each test
@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'tasks.db'}"


@pytest.fixture
def db(database_url):
    engine = build_engine(database_url)
    SessionLocal = init_database(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store(db, clock):
    return TaskStore(db, clock=clock)


@pytest.fixture
def client(database_url):
    app = create_app(database_url)
    with TestClient(app) as c:
        yield c
    app.state.engine.dispose()
