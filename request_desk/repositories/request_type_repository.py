# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for request types."""
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.engine import Engine

from request_desk.models.domain import RequestType
from request_desk.models.tables import request_type_assignees, request_types, requests


def _row_to_type(row, assignee_ids: List[str]) -> RequestType:
    return RequestType(
        id=row.id, name=row.name, slug=row.slug,
        visibility_policy=row.visibility_policy,
        requires_recipient=bool(row.requires_recipient),
        requires_assignment=bool(row.requires_assignment),
        assignee_ids=assignee_ids,
    )


def _assignee_ids_by_type(conn, type_ids: List[str]) -> Dict[str, List[str]]:
    result: Dict[str, List[str]] = {tid: [] for tid in type_ids}
    if not type_ids:
        return result
    rows = conn.execute(
        select(request_type_assignees.c.type_id, request_type_assignees.c.user_id)
        .where(request_type_assignees.c.type_id.in_(type_ids))
        .order_by(request_type_assignees.c.id)
    ).fetchall()
    for type_id, user_id in rows:
        result[type_id].append(user_id)
    return result


class RequestTypeRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Read ───────────────────────────────────────────────────────────

    def get(self, type_id: str) -> Optional[RequestType]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(request_types).where(request_types.c.id == type_id)
            ).fetchone()
            if not row:
                return None
            assignees = _assignee_ids_by_type(conn, [type_id])
        return _row_to_type(row, assignees[type_id])

    def list_all(self) -> List[RequestType]:
        with self._engine.connect() as conn:
            rows = conn.execute(select(request_types).order_by(request_types.c.name)).fetchall()
            assignees = _assignee_ids_by_type(conn, [r.id for r in rows])
        return [_row_to_type(r, assignees[r.id]) for r in rows]

    def slug_in_use(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        stmt = select(request_types.c.id).where(request_types.c.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(request_types.c.id != exclude_id)
        with self._engine.connect() as conn:
            return conn.execute(stmt).fetchone() is not None

    # ── Write ──────────────────────────────────────────────────────────

    def create(self, name: str, slug: str, visibility_policy: str,
               requires_recipient: bool, requires_assignment: bool) -> RequestType:
        type_id = uuid.uuid4().hex
        values: Dict[str, Any] = {
            "id": type_id, "name": name, "slug": slug,
            "visibility_policy": visibility_policy,
            "requires_recipient": requires_recipient,
            "requires_assignment": requires_assignment,
        }
        with self._engine.begin() as conn:
            conn.execute(insert(request_types).values(**values))
        return RequestType(**values)

    def update(self, type_id: str, name: str, slug: str, visibility_policy: str,
               requires_recipient: bool, requires_assignment: bool) -> RequestType:
        with self._engine.begin() as conn:
            result = conn.execute(
                update(request_types).where(request_types.c.id == type_id).values(
                    name=name, slug=slug, visibility_policy=visibility_policy,
                    requires_recipient=requires_recipient,
                    requires_assignment=requires_assignment,
                )
            )
            if result.rowcount == 0:
                raise KeyError(f"Request type {type_id} not found")
            row = conn.execute(
                select(request_types).where(request_types.c.id == type_id)
            ).fetchone()
            assignees = _assignee_ids_by_type(conn, [type_id])
        return _row_to_type(row, assignees[type_id])

    def delete_if_unused(self, type_id: str) -> bool:
        """Delete the type and its assignments unless a request still uses it.

        The type row is locked before the request count, so a request cannot be
        filed against the type between the check and the delete.
        """
        with self._engine.begin() as conn:
            conn.execute(
                select(request_types.c.id).where(request_types.c.id == type_id).with_for_update()
            )
            in_use = conn.execute(
                select(func.count()).select_from(requests).where(requests.c.type_id == type_id)
            ).scalar()
            if in_use:
                return False
            conn.execute(
                delete(request_type_assignees).where(request_type_assignees.c.type_id == type_id)
            )
            conn.execute(delete(request_types).where(request_types.c.id == type_id))
        return True
