from sqlalchemy import inspect

from taskapi.database import build_engine, init_database
from taskapi.schemas.task import TaskIn
from taskapi.services.task_store import TaskStore


def test_creates_directory_and_table(tmp_path):
    path = tmp_path / "nested" / "dir" / "tasks.db"
    engine = build_engine(f"sqlite:///{path}")
    try:
        init_database(engine)
        assert path.parent.is_dir()
        cols = {c["name"] for c in inspect(engine).get_columns("tasks")}
        assert cols == {"id", "title", "description", "status", "created_at", "updated_at"}
    finally:
        engine.dispose()


def test_existing_rows_survive_restart(tmp_path):
    url = f"sqlite:///{tmp_path / 'tasks.db'}"

    engine = build_engine(url)
    with init_database(engine)() as session:
        task_id = TaskStore(session).insert(TaskIn(title="persisted"))
    engine.dispose()

    engine = build_engine(url)
    try:
        with init_database(engine)() as session:
            assert TaskStore(session).fetch_by_id(task_id).title == "persisted"
    finally:
        engine.dispose()
