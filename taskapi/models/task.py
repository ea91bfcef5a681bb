import enum

from sqlalchemy import Column, Integer, String, Text, DateTime
from taskapi.database import Base


class TaskStatus(str, enum.Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"

    @classmethod
    def values(cls):
        return [s.value for s in cls]


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String, nullable=False, default=TaskStatus.pending.value)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
