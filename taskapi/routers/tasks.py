from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from taskapi.config import DEFAULT_ORDER_BY, DEFAULT_PER_PAGE, MAX_PER_PAGE
from taskapi.errors import TASK_NOT_FOUND
from taskapi.schemas.task import TaskCreated, TaskIn, TaskOut, TaskPage
from taskapi.services.paginator import TaskPaginator, clamp_paging, parse_int
from taskapi.services.task_store import TaskStore

# largest value SQLite can bind as an INTEGER
MAX_TASK_ID = 2 ** 63 - 1


def create_router(session_factory: sessionmaker, max_per_page: int = MAX_PER_PAGE) -> APIRouter:
    """Build the /tasks routes around ``session_factory``.

    Each request gets its own session; the store and paginator built for a
    request share it.
    """
    router = APIRouter(prefix="/tasks", tags=["tasks"])

    def get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    def get_store(db: Session = Depends(get_db)) -> TaskStore:
        return TaskStore(db)

    def get_paginator(db: Session = Depends(get_db)) -> TaskPaginator:
        return TaskPaginator(db)

    def require_task(task_id: int, store: TaskStore) -> TaskOut:
        task = store.fetch_by_id(task_id)
        if task is None:
            raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)
        return task

    @router.get("", response_model=TaskPage)
    def list_tasks(
        page: Optional[str] = None,
        per_page: Optional[str] = None,
        status: Optional[str] = Query(
            None, description="pending, in_progress or completed; other values are ignored"
        ),
        search: Optional[str] = Query(None, description="Substring of title or description"),
        paginator: TaskPaginator = Depends(get_paginator),
    ):
        # unparseable paging values fall back to the defaults, then get clamped
        page, per_page = clamp_paging(
            parse_int(page, 1), parse_int(per_page, DEFAULT_PER_PAGE), max_per_page
        )
        filters = {"status": status, "search": search}
        tasks = paginator.paginate(page, per_page, DEFAULT_ORDER_BY, filters)
        pagination = paginator.get_pagination_info(page, per_page, filters)
        return TaskPage(tasks=tasks, pagination=pagination)

    @router.get("/{task_id}", response_model=TaskOut)
    def read_task(
        task_id: int = Path(..., ge=1, le=MAX_TASK_ID),
        store: TaskStore = Depends(get_store),
    ):
        return require_task(task_id, store)

    @router.post("", response_model=TaskCreated, status_code=201)
    def create_task(task: TaskIn, store: TaskStore = Depends(get_store)):
        return TaskCreated(id=store.insert(task))

    @router.put("/{task_id}", status_code=204, response_class=Response)
    def update_task(
        task: TaskIn,
        task_id: int = Path(..., ge=1, le=MAX_TASK_ID),
        store: TaskStore = Depends(get_store),
    ):
        require_task(task_id, store)
        try:
            updated = store.update(task_id, task)
        except SQLAlchemyError:
            # already rolled back and logged by the store
            updated = False
        if not updated:
            raise HTTPException(status_code=500, detail="Failed to update task")
        return Response(status_code=204)

    @router.delete("/{task_id}", status_code=204, response_class=Response)
    def delete_task(
        task_id: int = Path(..., ge=1, le=MAX_TASK_ID),
        store: TaskStore = Depends(get_store),
    ):
        require_task(task_id, store)
        try:
            deleted = store.delete(task_id)
        except SQLAlchemyError:
            deleted = False
        if not deleted:
            raise HTTPException(status_code=500, detail="Failed to delete task")
        return Response(status_code=204)

    return router
