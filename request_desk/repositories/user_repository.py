# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for users, teams and team membership."""
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import insert, select, text
from sqlalchemy.engine import Engine

from request_desk.models.domain import Role, User, UserBrief
from request_desk.models.tables import team_members, teams, users


def _row_to_user(row) -> User:
    return User(
        id=row.id, email=row.email, full_name=row.full_name,
        role=Role(row.role), is_active=bool(row.is_active),
    )


def brief_columns(alias, prefix: str):
    """``id``, ``full_name`` and ``email`` of a users alias, labelled ``<prefix>_*``."""
    return [
        alias.c.id.label(f"{prefix}_id"),
        alias.c.full_name.label(f"{prefix}_full_name"),
        alias.c.email.label(f"{prefix}_email"),
    ]


def brief_from_row(row, prefix: str) -> Optional[UserBrief]:
    user_id = getattr(row, f"{prefix}_id")
    if user_id is None:
        return None
    return UserBrief(id=user_id, full_name=getattr(row, f"{prefix}_full_name"),
                     email=getattr(row, f"{prefix}_email"))


class UserRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Read ───────────────────────────────────────────────────────────

    def get(self, user_id: str) -> Optional[User]:
        with self._engine.connect() as conn:
            row = conn.execute(select(users).where(users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row else None

    def get_team_id(self, user_id: str) -> Optional[str]:
        with self._engine.connect() as conn:
            return conn.execute(
                select(team_members.c.team_id).where(team_members.c.user_id == user_id)
            ).scalar()

    def list_active(self) -> List[User]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(users).where(users.c.is_active.is_(True)).order_by(users.c.full_name)
            ).fetchall()
        return [_row_to_user(r) for r in rows]

    # ── Write ──────────────────────────────────────────────────────────

    def create_user(self, email: str, full_name: str, role: Role,
                    is_active: bool = True, user_id: Optional[str] = None) -> User:
        user_id = user_id or uuid.uuid4().hex
        with self._engine.begin() as conn:
            conn.execute(insert(users).values(
                id=user_id, email=email, full_name=full_name, role=Role(role).value,
                is_active=is_active, created_at=datetime.now(timezone.utc),
            ))
        return User(id=user_id, email=email, full_name=full_name,
                    role=Role(role), is_active=is_active)

    def create_team(self, name: str, team_id: Optional[str] = None) -> str:
        team_id = team_id or uuid.uuid4().hex
        with self._engine.begin() as conn:
            conn.execute(insert(teams).values(id=team_id, name=name))
        return team_id

    def add_team_member(self, user_id: str, team_id: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(insert(team_members).values(user_id=user_id, team_id=team_id))

    def verify_connection(self):
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))
