# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for requests, comments and status history."""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Engine

from request_desk.models.domain import RequestItem, RequestStatus
from request_desk.models.tables import (
    request_comments,
    request_history,
    request_types,
    requests,
    users,
)
from request_desk.repositories.request_type_repository import (
    _assignee_ids_by_type,
    _row_to_type,
)
from request_desk.repositories.user_repository import brief_columns, brief_from_row

REQUEST_COLS = [c for c in requests.c]
TYPE_COLS = [c.label(f"rt_{c.name}") for c in request_types.c]

_creator = users.alias("creator")
_assignee = users.alias("assignee")
_recipient = users.alias("recipient")


def _joined_select():
    return select(
        *REQUEST_COLS, *TYPE_COLS,
        *brief_columns(_creator, "cb"),
        *brief_columns(_assignee, "at"),
        *brief_columns(_recipient, "rc"),
    ).select_from(
        requests
        .join(request_types, requests.c.type_id == request_types.c.id)
        .outerjoin(_creator, _creator.c.id == requests.c.created_by_id)
        .outerjoin(_assignee, _assignee.c.id == requests.c.assigned_to_id)
        .outerjoin(_recipient, _recipient.c.id == requests.c.recipient_id)
    )


class _TypeRow:
    """Adapts the ``rt_*`` labelled columns of a joined row."""

    def __init__(self, row):
        self._row = row

    def __getattr__(self, name):
        return getattr(self._row, f"rt_{name}")


def _row_to_request(row, assignee_ids: List[str]) -> RequestItem:
    return RequestItem(
        id=row.id, type_id=row.type_id,
        type=_row_to_type(_TypeRow(row), assignee_ids),
        title=row.title, description=row.description,
        status=row.status, priority=row.priority,
        created_by_id=row.created_by_id, assigned_to_id=row.assigned_to_id,
        recipient_id=row.recipient_id, team_id=row.team_id,
        created_at=row.created_at, updated_at=row.updated_at,
        created_by=brief_from_row(row, "cb"),
        assigned_to=brief_from_row(row, "at"),
        recipient=brief_from_row(row, "rc"),
    )


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _brief_dict(row, prefix: str) -> Optional[Dict[str, Any]]:
    brief = brief_from_row(row, prefix) if row is not None else None
    return brief.model_dump() if brief else None


class RequestRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Write ──────────────────────────────────────────────────────────

    def create(self, type_id: str, title: str, description: str, priority: str,
               created_by_id: str, assigned_to_id: Optional[str],
               recipient_id: Optional[str], team_id: Optional[str]) -> RequestItem:
        request_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        with self._engine.begin() as conn:
            type_row = conn.execute(
                select(request_types.c.id).where(request_types.c.id == type_id)
            ).fetchone()
            if not type_row:
                raise KeyError(f"Request type {type_id} not found")
            conn.execute(insert(requests).values(
                id=request_id, type_id=type_id, title=title, description=description,
                status=RequestStatus.NEW.value, priority=priority,
                created_by_id=created_by_id, assigned_to_id=assigned_to_id,
                recipient_id=recipient_id, team_id=team_id,
                created_at=now, updated_at=now,
            ))
            return self._fetch(conn, request_id)

    def change_status(self, request_id: str, actor_id: str, to_status: str,
                      note: Optional[str]) -> RequestItem:
        """Set the status and append the transition; ``from_status`` is read under the lock."""
        with self._engine.begin() as conn:
            from_status = conn.execute(
                select(requests.c.status).where(requests.c.id == request_id).with_for_update()
            ).scalar()
            if from_status is None:
                raise KeyError(f"Request {request_id} not found")
            now = datetime.now(timezone.utc)
            conn.execute(
                update(requests).where(requests.c.id == request_id)
                .values(status=to_status, updated_at=now)
            )
            conn.execute(insert(request_history).values(
                id=uuid.uuid4().hex, request_id=request_id, actor_id=actor_id,
                from_status=from_status, to_status=to_status, note=note, created_at=now,
            ))
            return self._fetch(conn, request_id)

    def add_comment(self, request_id: str, author_id: str, body: str) -> Dict[str, Any]:
        comment_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        with self._engine.begin() as conn:
            conn.execute(insert(request_comments).values(
                id=comment_id, request_id=request_id, author_id=author_id,
                body=body, created_at=now,
            ))
            author = conn.execute(
                select(*brief_columns(users, "au")).where(users.c.id == author_id)
            ).fetchone()
        return {"id": comment_id, "request_id": request_id, "author_id": author_id,
                "author": _brief_dict(author, "au"),
                "body": body, "created_at": now.isoformat()}

    # ── Read ───────────────────────────────────────────────────────────

    def get(self, request_id: str) -> Optional[RequestItem]:
        """Request with its type and the type's full assignee set."""
        with self._engine.connect() as conn:
            return self._fetch(conn, request_id)

    def list_matching(self, predicate) -> List[RequestItem]:
        """Requests selected by ``predicate``, a clause over requests/request_types."""
        with self._engine.connect() as conn:
            rows = conn.execute(
                _joined_select().where(predicate)
                .order_by(requests.c.created_at.desc(), requests.c.id)
            ).fetchall()
            assignees = _assignee_ids_by_type(conn, list({r.type_id for r in rows}))
        return [_row_to_request(r, assignees[r.type_id]) for r in rows]

    def get_comments(self, request_id: str) -> List[Dict[str, Any]]:
        c = request_comments
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(c, *brief_columns(users, "au"))
                .select_from(c.outerjoin(users, users.c.id == c.c.author_id))
                .where(c.c.request_id == request_id)
                .order_by(c.c.created_at.desc())
            ).fetchall()
        return [
            {"id": r.id, "author_id": r.author_id, "author": _brief_dict(r, "au"),
             "body": r.body, "created_at": _iso(r.created_at)}
            for r in rows
        ]

    def get_history(self, request_id: str) -> List[Dict[str, Any]]:
        h = request_history
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(h, *brief_columns(users, "ac"))
                .select_from(h.outerjoin(users, users.c.id == h.c.actor_id))
                .where(h.c.request_id == request_id)
                .order_by(h.c.created_at.desc())
            ).fetchall()
        return [
            {"id": r.id, "actor_id": r.actor_id, "actor": _brief_dict(r, "ac"),
             "from_status": r.from_status, "to_status": r.to_status,
             "note": r.note, "created_at": _iso(r.created_at)}
            for r in rows
        ]

    # ── Private ────────────────────────────────────────────────────────

    def _fetch(self, conn, request_id: str) -> Optional[RequestItem]:
        row = conn.execute(_joined_select().where(requests.c.id == request_id)).fetchone()
        if not row:
            return None
        assignees = _assignee_ids_by_type(conn, [row.type_id])
        return _row_to_request(row, assignees[row.type_id])
