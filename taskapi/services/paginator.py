"""Filtered, ordered and paged listing of tasks.

``paginate`` and ``get_total_count`` build their WHERE clause through the same
``build_conditions`` so a page and its total always agree on which rows match.
"""
import logging
from math import ceil
from typing import Any, List, Mapping, Optional, Tuple

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from taskapi.config import DEFAULT_ORDER_BY, DEFAULT_PER_PAGE, MAX_PER_PAGE
from taskapi.models.task import Task, TaskStatus
from taskapi.schemas.task import PaginationInfo, TaskOut

logger = logging.getLogger(__name__)

_ORDER_COLUMNS = {c.name: c for c in Task.__table__.columns}
_DIRECTIONS = ("ASC", "DESC")

# largest OFFSET SQLite can bind as an INTEGER
MAX_OFFSET = 2 ** 63 - 1


def parse_int(raw: Optional[str], default: int) -> int:
    """Read an integer query value; anything unparseable falls back to ``default``."""
    if raw is None:
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


def clamp_paging(page: int, per_page: int, max_per_page: int = MAX_PER_PAGE) -> Tuple[int, int]:
    """Bound raw request values: page >= 1 and 1 <= per_page <= max_per_page."""
    return max(1, page), max(1, min(max_per_page, per_page))


def _check_paging(page: int, per_page: int) -> None:
    if page < 1:
        raise ValueError("page must be >= 1")
    if per_page < 1:
        raise ValueError("per_page must be >= 1")


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_conditions(filters: Optional[Mapping[str, Any]]) -> list:
    """Map a filter mapping to SQL conditions.

    Empty values, unknown keys and statuses outside the enumeration are
    dropped silently rather than rejected.
    """
    conditions = []
    for key, value in (filters or {}).items():
        if value is None or value == "":
            continue
        if key == "status":
            if isinstance(value, TaskStatus):
                value = value.value
            if value in TaskStatus.values():
                conditions.append(Task.status == value)
        elif key == "search":
            pattern = f"%{_escape_like(str(value))}%"
            conditions.append(or_(
                Task.title.ilike(pattern, escape="\\"),
                Task.description.ilike(pattern, escape="\\"),
            ))
    return conditions


def parse_order_by(order_by: str) -> list:
    """Turn ``"created_at DESC, title"`` into column ordering expressions.

    Only real ``tasks`` columns and ASC/DESC are accepted. ``id DESC`` is
    appended as a tie-break unless ``id`` is already named.
    """
    clauses = []
    named = set()
    for part in (order_by or "").split(","):
        tokens = part.split()
        if not tokens:
            continue
        if len(tokens) > 2:
            raise ValueError(f"invalid order clause: {part.strip()!r}")
        name = tokens[0].lower()
        direction = tokens[1].upper() if len(tokens) == 2 else "ASC"
        if name not in _ORDER_COLUMNS:
            raise ValueError(f"unknown order column: {tokens[0]!r}")
        if direction not in _DIRECTIONS:
            raise ValueError(f"unknown order direction: {tokens[1]!r}")
        col = _ORDER_COLUMNS[name]
        clauses.append(col.desc() if direction == "DESC" else col.asc())
        named.add(name)
    if "id" not in named:
        clauses.append(Task.id.desc())
    return clauses


class TaskPaginator:
    def __init__(self, db: Session):
        self.db = db

    def _filtered(self, query, filters):
        conditions = build_conditions(filters)
        if conditions:
            query = query.filter(and_(*conditions))
        return query

    def paginate(
        self,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
        order_by: str = DEFAULT_ORDER_BY,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> List[TaskOut]:
        _check_paging(page, per_page)
        order = parse_order_by(order_by)

        offset = (page - 1) * per_page
        if offset > MAX_OFFSET:
            # no table holds that many rows
            return []

        query = self._filtered(self.db.query(Task), filters)
        rows = query.order_by(*order).limit(per_page).offset(offset).all()
        logger.debug(
            "paginate page=%s per_page=%s filters=%s rows=%s", page, per_page, filters, len(rows)
        )
        return [TaskOut.model_validate(r) for r in rows]

    def get_total_count(self, filters: Optional[Mapping[str, Any]] = None) -> int:
        query = self._filtered(self.db.query(func.count(Task.id)), filters)
        return int(query.scalar() or 0)

    def get_pagination_info(
        self,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> PaginationInfo:
        _check_paging(page, per_page)
        total = self.get_total_count(filters)
        total_pages = ceil(total / per_page)
        return PaginationInfo(
            current_page=page,
            per_page=per_page,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )
