# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Access filter builder.

Turns the visibility rules of ``visibility.can_access`` into a declarative
predicate for listing. The predicate is a small clause tree that can be
evaluated in memory (``matches``) or compiled to a SQLAlchemy boolean clause
over ``requests`` joined to ``request_types`` (``to_sql``). For every
principal P, team T and request R::

    build_filter(P, T).matches(R) == can_access(P, T, R)
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from sqlalchemy import and_, exists, false, or_, true

from request_desk.models import tables
from request_desk.models.domain import Principal, RequestItem, VisibilityPolicy

_REQUEST_FIELDS = ("created_by_id", "recipient_id", "assigned_to_id", "team_id")


@dataclass(frozen=True)
class FieldEquals:
    field: str
    value: str

    def __post_init__(self):
        if self.field not in _REQUEST_FIELDS:
            raise ValueError(f"Unsupported request field: {self.field}")

    def matches(self, request: RequestItem) -> bool:
        return getattr(request, self.field) == self.value

    def to_sql(self):
        return tables.requests.c[self.field] == self.value


@dataclass(frozen=True)
class IsTypeAssignee:
    """The user is a handler of the request's type, primary or not."""
    user_id: str

    def matches(self, request: RequestItem) -> bool:
        return self.user_id in request.type.assignee_ids

    def to_sql(self):
        a = tables.request_type_assignees
        return exists().where(
            and_(a.c.type_id == tables.requests.c.type_id, a.c.user_id == self.user_id)
        )


@dataclass(frozen=True)
class PolicyScope:
    """Requests whose type has ``policy`` and that satisfy any of ``any_of``."""
    policy: VisibilityPolicy
    any_of: Tuple

    def matches(self, request: RequestItem) -> bool:
        if request.type.visibility_policy != self.policy:
            return False
        return any(c.matches(request) for c in self.any_of)

    def to_sql(self):
        return and_(
            tables.request_types.c.visibility_policy == self.policy.value,
            or_(*[c.to_sql() for c in self.any_of]),
        )


@dataclass(frozen=True)
class AccessFilter:
    clauses: Tuple = ()
    match_all: bool = False

    def matches(self, request: RequestItem) -> bool:
        if self.match_all:
            return True
        return any(c.matches(request) for c in self.clauses)

    def to_sql(self):
        """Boolean clause; the query must join ``requests`` to ``request_types``."""
        if self.match_all:
            return true()
        if not self.clauses:
            return false()
        return or_(*[c.to_sql() for c in self.clauses])


def build_filter(principal: Principal, team_id: Optional[str]) -> AccessFilter:
    if principal.is_admin:
        return AccessFilter(match_all=True)

    uid = principal.id
    clauses = [
        FieldEquals("created_by_id", uid),
        PolicyScope(
            VisibilityPolicy.ADMIN_ONLY,
            (FieldEquals("recipient_id", uid), FieldEquals("assigned_to_id", uid)),
        ),
        PolicyScope(
            VisibilityPolicy.DIRECT_PARTICIPANTS,
            (FieldEquals("recipient_id", uid),),
        ),
        PolicyScope(
            VisibilityPolicy.ADMIN_AND_HANDLERS,
            (FieldEquals("assigned_to_id", uid), IsTypeAssignee(uid)),
        ),
    ]
    if team_id is not None:
        clauses.append(
            PolicyScope(VisibilityPolicy.TEAM_PUBLIC, (FieldEquals("team_id", team_id),))
        )
    return AccessFilter(clauses=tuple(clauses))
