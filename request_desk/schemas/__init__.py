# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pydantic request/response schemas."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from request_desk.models.domain import (
    Assignment,
    Priority,
    RequestItem,
    RequestStatus,
    RequestType,
    UserBrief,
    VisibilityPolicy,
)

VALID_POLICIES = tuple(p.value for p in VisibilityPolicy)
VALID_STATUSES = tuple(s.value for s in RequestStatus)
VALID_PRIORITIES = tuple(p.value for p in Priority)


def _choice(value: str, allowed: tuple, field: str) -> str:
    value = value.strip().upper()
    if value not in allowed:
        raise ValueError(f"{field} must be one of {allowed}")
    return value


# ── Shared ──

class UserBriefOut(BaseModel):
    id: str
    full_name: str
    email: Optional[str] = None

    @classmethod
    def from_brief(cls, brief: Optional[UserBrief]) -> Optional["UserBriefOut"]:
        if brief is None:
            return None
        return cls(id=brief.id, full_name=brief.full_name, email=brief.email)


# ── Requests ──

class RequestCreate(BaseModel):
    type_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1)
    priority: str = Priority.NORMAL.value
    recipient_id: Optional[str] = Field(None, min_length=1)

    @field_validator("priority")
    @classmethod
    def normalise_priority(cls, v: str) -> str:
        return _choice(v, VALID_PRIORITIES, "priority")


class StatusChange(BaseModel):
    status: str
    note: Optional[str] = Field(None, max_length=5000)

    @field_validator("status")
    @classmethod
    def normalise_status(cls, v: str) -> str:
        return _choice(v, VALID_STATUSES, "status")


class CommentCreate(BaseModel):
    body: str = Field(..., min_length=1)

    @field_validator("body")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment body cannot be empty")
        return v.strip()


class RequestTypeBrief(BaseModel):
    id: str
    name: str
    slug: str
    visibility_policy: str


class RequestOut(BaseModel):
    id: str
    type: RequestTypeBrief
    title: str
    description: str
    status: str
    priority: str
    created_by_id: str
    assigned_to_id: Optional[str]
    recipient_id: Optional[str]
    team_id: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]
    created_by: Optional[UserBriefOut] = None
    assigned_to: Optional[UserBriefOut] = None
    recipient: Optional[UserBriefOut] = None

    @classmethod
    def from_item(cls, item: RequestItem) -> "RequestOut":
        return cls(
            id=item.id,
            type=RequestTypeBrief(id=item.type.id, name=item.type.name, slug=item.type.slug,
                                  visibility_policy=item.type.visibility_policy),
            title=item.title, description=item.description,
            status=item.status, priority=item.priority,
            created_by_id=item.created_by_id, assigned_to_id=item.assigned_to_id,
            recipient_id=item.recipient_id, team_id=item.team_id,
            created_at=item.created_at.isoformat() if item.created_at else None,
            updated_at=item.updated_at.isoformat() if item.updated_at else None,
            created_by=UserBriefOut.from_brief(item.created_by),
            assigned_to=UserBriefOut.from_brief(item.assigned_to),
            recipient=UserBriefOut.from_brief(item.recipient),
        )


class RequestDetail(RequestOut):
    comments: List[Dict[str, Any]] = []
    history: List[Dict[str, Any]] = []


# ── Request types ──

class RequestTypeIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    visibility_policy: str
    requires_recipient: bool = False
    requires_assignment: bool = False

    @field_validator("visibility_policy")
    @classmethod
    def normalise_policy(cls, v: str) -> str:
        return _choice(v, VALID_POLICIES, "visibility_policy")


class RequestTypeOut(BaseModel):
    id: str
    name: str
    slug: str
    visibility_policy: str
    requires_recipient: bool
    requires_assignment: bool

    @classmethod
    def from_type(cls, t: RequestType) -> "RequestTypeOut":
        return cls(id=t.id, name=t.name, slug=t.slug, visibility_policy=t.visibility_policy,
                   requires_recipient=t.requires_recipient,
                   requires_assignment=t.requires_assignment)


# ── Assignments ──

class AssignmentIn(BaseModel):
    type_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    is_primary: bool


class AssignmentKey(BaseModel):
    type_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)


class AssignmentOut(BaseModel):
    type_id: str
    user_id: str
    is_primary: bool
    user: Optional[UserBriefOut] = None

    @classmethod
    def from_assignment(cls, a: Assignment) -> "AssignmentOut":
        return cls(type_id=a.type_id, user_id=a.user_id, is_primary=a.is_primary,
                   user=UserBriefOut.from_brief(a.user))


class RequestTypeWithAssignees(RequestTypeOut):
    assignees: List[AssignmentOut] = []

    @classmethod
    def build(cls, t: RequestType, assignments: List[Assignment]) -> "RequestTypeWithAssignees":
        return cls(
            **RequestTypeOut.from_type(t).model_dump(),
            assignees=[AssignmentOut.from_assignment(a) for a in assignments],
        )


# ── Users ──

class UserOut(BaseModel):
    id: str
    email: str
    full_name: str
    role: str

