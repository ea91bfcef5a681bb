import logging
from datetime import datetime, UTC
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskapi.models.task import Task
from taskapi.schemas.task import TaskIn, TaskOut

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    # naive UTC: SQLite DateTime columns do not round-trip tzinfo
    return datetime.now(UTC).replace(tzinfo=None)


class TaskStore:
    """CRUD access to the ``tasks`` table over a caller-owned session.

    Absence is reported as ``None``/``False``, never as an exception; storage
    errors roll the session back and propagate unchanged.
    """

    def __init__(self, db: Session, clock=utcnow):
        self.db = db
        self._clock = clock

    def fetch_all(self) -> List[TaskOut]:
        rows = self.db.query(Task).order_by(Task.created_at.desc(), Task.id.desc()).all()
        return [TaskOut.model_validate(r) for r in rows]

    def fetch_by_id(self, task_id: int) -> Optional[TaskOut]:
        row = self.db.get(Task, task_id)
        return TaskOut.model_validate(row) if row is not None else None

    def insert(self, fields: TaskIn) -> int:
        now = self._clock()
        new = Task(
            title=fields.title,
            description=fields.description,
            status=fields.status.value,
            created_at=now,
            updated_at=now,
        )
        self._write(lambda: self.db.add(new))
        logger.info("Inserted task id=%s status=%s", new.id, new.status)
        return new.id

    def update(self, task_id: int, fields: TaskIn) -> bool:
        task = self.db.get(Task, task_id)
        if task is None:
            return False

        def apply():
            task.title = fields.title
            task.description = fields.description
            task.status = fields.status.value
            # never move backwards, even if the clock does
            task.updated_at = max(self._clock(), task.updated_at)

        self._write(apply)
        logger.info("Updated task id=%s status=%s", task_id, task.status)
        return True

    def delete(self, task_id: int) -> bool:
        task = self.db.get(Task, task_id)
        if task is None:
            return False
        self._write(lambda: self.db.delete(task))
        logger.info("Deleted task id=%s", task_id)
        return True

    def _write(self, change) -> None:
        try:
            change()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Task write failed")
            raise
