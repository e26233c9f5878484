# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Visibility policy engine.

Decides whether a principal may see or act on a single request. Evaluation
order:

1. ADMIN role          -> allowed
2. creator             -> allowed
3. the request type's visibility policy:

   ===================  ==============================================
   ADMIN_ONLY           recipient or assignee of the request
   DIRECT_PARTICIPANTS  recipient of the request
   ADMIN_AND_HANDLERS   assignee of the request, or a handler of the type
   TEAM_PUBLIC          same (non-null) team as the request
   anything else        denied
   ===================  ==============================================

The function is pure: the request's type and its full assignee set must be
loaded before the call. ``access_filter.build_filter`` encodes the same table
as a query predicate and the two must stay in lock-step.
"""
from typing import Optional

from request_desk.core.logging import get_logger
from request_desk.metrics import POLICY_MISMATCH
from request_desk.models.domain import Principal, RequestItem, VisibilityPolicy

logger = get_logger(__name__)


def can_access(principal: Principal, team_id: Optional[str], request: RequestItem) -> bool:
    if principal.is_admin:
        return True

    if request.created_by_id == principal.id:
        return True

    is_recipient = request.recipient_id == principal.id
    is_assigned = request.assigned_to_id == principal.id
    policy = request.type.visibility_policy

    if policy == VisibilityPolicy.ADMIN_ONLY:
        return is_recipient or is_assigned
    if policy == VisibilityPolicy.DIRECT_PARTICIPANTS:
        return is_recipient
    if policy == VisibilityPolicy.ADMIN_AND_HANDLERS:
        return is_assigned or principal.id in request.type.assignee_ids
    if policy == VisibilityPolicy.TEAM_PUBLIC:
        return team_id is not None and request.team_id == team_id

    POLICY_MISMATCH.inc()
    logger.error(
        "Unrecognised visibility policy %r on request type %s, denying access",
        policy, request.type.id,
    )
    return False
