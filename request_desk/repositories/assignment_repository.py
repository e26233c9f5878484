# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Data-access layer for request-type assignments.

``upsert`` is the only multi-statement write that has to be atomic: clearing
the type's current primary and setting the new one happen in one transaction
that first locks the request-type row, so concurrent upserts on the same type
run one after the other.
"""
from typing import List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine

from request_desk.models.domain import Assignment
from request_desk.models.tables import request_type_assignees, request_types, users
from request_desk.repositories.user_repository import brief_columns, brief_from_row

_a = request_type_assignees


def _with_user():
    return select(_a, *brief_columns(users, "u")).select_from(
        _a.join(users, users.c.id == _a.c.user_id)
    )


def _row_to_assignment(row) -> Assignment:
    return Assignment(
        type_id=row.type_id, user_id=row.user_id,
        is_primary=bool(row.is_primary), seq=row.id,
        user=brief_from_row(row, "u"),
    )


class AssignmentRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Read ───────────────────────────────────────────────────────────

    def list_for_type(self, type_id: str) -> List[Assignment]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                _with_user().where(_a.c.type_id == type_id).order_by(_a.c.id)
            ).fetchall()
        return [_row_to_assignment(r) for r in rows]

    def first_candidate(self, type_id: str) -> Optional[Assignment]:
        """Active primary assignee if any, else the earliest inserted active one."""
        with self._engine.connect() as conn:
            row = conn.execute(
                _with_user()
                .where(_a.c.type_id == type_id, users.c.is_active.is_(True))
                .order_by(_a.c.is_primary.desc(), _a.c.id)
                .limit(1)
            ).fetchone()
        return _row_to_assignment(row) if row else None

    # ── Write ──────────────────────────────────────────────────────────

    def upsert(self, type_id: str, user_id: str, is_primary: bool) -> Assignment:
        with self._engine.begin() as conn:
            locked = conn.execute(
                select(request_types.c.id)
                .where(request_types.c.id == type_id)
                .with_for_update()
            ).fetchone()
            if not locked:
                raise KeyError(f"Request type {type_id} not found")

            if is_primary:
                conn.execute(
                    update(_a).where(_a.c.type_id == type_id).values(is_primary=False)
                )

            existing = conn.execute(
                select(_a.c.id).where(_a.c.type_id == type_id, _a.c.user_id == user_id)
            ).fetchone()
            if existing:
                conn.execute(
                    update(_a).where(_a.c.id == existing.id).values(is_primary=is_primary)
                )
            else:
                conn.execute(
                    insert(_a).values(type_id=type_id, user_id=user_id, is_primary=is_primary)
                )

            row = conn.execute(
                _with_user().where(_a.c.type_id == type_id, _a.c.user_id == user_id)
            ).fetchone()
        return _row_to_assignment(row)

    def delete(self, type_id: str, user_id: str) -> bool:
        with self._engine.begin() as conn:
            result = conn.execute(
                delete(_a).where(_a.c.type_id == type_id, _a.c.user_id == user_id)
            )
        return result.rowcount > 0
