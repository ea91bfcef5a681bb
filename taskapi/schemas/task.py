from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from taskapi.models.task import TaskStatus


class TaskIn(BaseModel):
    """Payload accepted by create and update.

    Every mutable field is overwritten on update, so omitted fields fall back
    to these defaults rather than keeping the stored value. Unknown keys
    (the web client echoes ``id``/``created_at`` back) are ignored.
    """

    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.pending

    @field_validator("title", mode="before")
    @classmethod
    def title_not_empty(cls, v):
        if v is None or not isinstance(v, str) or not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip()

    @field_validator("status", mode="before")
    @classmethod
    def status_default(cls, v):
        # null or "" from a form means "not chosen"
        if v is None or v == "":
            return TaskStatus.pending
        return v


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    created_at: datetime
    updated_at: datetime


class TaskCreated(BaseModel):
    id: int


class PaginationInfo(BaseModel):
    current_page: int
    per_page: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class TaskPage(BaseModel):
    tasks: List[TaskOut]
    pagination: PaginationInfo
