# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models. Pure data, no FastAPI or SQLAlchemy imports.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    ADMIN = "ADMIN"
    TEAM_LEAD = "TEAM_LEAD"
    WORKER = "WORKER"


class VisibilityPolicy(str, Enum):
    ADMIN_ONLY = "ADMIN_ONLY"
    DIRECT_PARTICIPANTS = "DIRECT_PARTICIPANTS"
    ADMIN_AND_HANDLERS = "ADMIN_AND_HANDLERS"
    TEAM_PUBLIC = "TEAM_PUBLIC"


class RequestStatus(str, Enum):
    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    WAITING_APPROVAL = "WAITING_APPROVAL"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    DONE = "DONE"


class Priority(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"


class Principal(BaseModel):
    """The authenticated actor, as resolved by the identity context."""
    id: str
    role: Role
    team_id: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class User(BaseModel):
    id: str
    email: str
    full_name: str
    role: Role
    is_active: bool = True


class UserBrief(BaseModel):
    """Display data for a user referenced by another record."""
    id: str
    full_name: str = ""
    email: Optional[str] = None


class Assignment(BaseModel):
    """One handler of a request type. ``seq`` is the insertion order."""
    type_id: str
    user_id: str
    is_primary: bool = False
    seq: int = 0
    user: Optional[UserBrief] = None


class RequestType(BaseModel):
    id: str
    name: str = ""
    slug: str = ""
    # Kept as a plain string: a value outside VisibilityPolicy must still
    # reach the policy engine so it can fail closed.
    visibility_policy: str
    requires_recipient: bool = False
    requires_assignment: bool = False
    assignee_ids: List[str] = Field(default_factory=list)


class RequestItem(BaseModel):
    id: str
    type_id: str
    type: RequestType
    title: str = ""
    description: str = ""
    status: str = RequestStatus.NEW.value
    priority: str = Priority.NORMAL.value
    created_by_id: str
    assigned_to_id: Optional[str] = None
    recipient_id: Optional[str] = None
    team_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[UserBrief] = None
    assigned_to: Optional[UserBrief] = None
    recipient: Optional[UserBrief] = None
