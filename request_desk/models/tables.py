# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Table definitions (SQLAlchemy Core).

Shared by the repositories and by the access filter, which compiles its
predicate against these columns.
"""
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("full_name", String(255), nullable=False),
    Column("role", String(32), nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

teams = Table(
    "teams",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("name", String(255), nullable=False),
)

team_members = Table(
    "team_members",
    metadata,
    Column("user_id", String(64), ForeignKey("users.id"), primary_key=True),
    Column("team_id", String(64), ForeignKey("teams.id"), nullable=False),
)

request_types = Table(
    "request_types",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("slug", String(255), nullable=False, unique=True),
    Column("visibility_policy", String(32), nullable=False),
    Column("requires_recipient", Boolean, nullable=False, default=False),
    Column("requires_assignment", Boolean, nullable=False, default=False),
)

request_type_assignees = Table(
    "request_type_assignees",
    metadata,
    # Insertion sequence; the auto-assignment tie-break relies on it.
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("type_id", String(64), ForeignKey("request_types.id"), nullable=False, index=True),
    Column("user_id", String(64), ForeignKey("users.id"), nullable=False),
    Column("is_primary", Boolean, nullable=False, default=False),
    UniqueConstraint("type_id", "user_id", name="uq_request_type_assignee"),
)

requests = Table(
    "requests",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("type_id", String(64), ForeignKey("request_types.id"), nullable=False, index=True),
    Column("title", String(500), nullable=False),
    Column("description", Text, nullable=False),
    Column("status", String(32), nullable=False),
    Column("priority", String(16), nullable=False),
    Column("created_by_id", String(64), ForeignKey("users.id"), nullable=False),
    Column("assigned_to_id", String(64), ForeignKey("users.id"), nullable=True),
    Column("recipient_id", String(64), ForeignKey("users.id"), nullable=True),
    Column("team_id", String(64), ForeignKey("teams.id"), nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

request_comments = Table(
    "request_comments",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("request_id", String(64), ForeignKey("requests.id"), nullable=False, index=True),
    Column("author_id", String(64), ForeignKey("users.id"), nullable=False),
    Column("body", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

request_history = Table(
    "request_history",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("request_id", String(64), ForeignKey("requests.id"), nullable=False, index=True),
    Column("actor_id", String(64), ForeignKey("users.id"), nullable=False),
    Column("from_status", String(32), nullable=False),
    Column("to_status", String(32), nullable=False),
    Column("note", Text, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
)
