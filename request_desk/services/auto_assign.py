# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Auto-assignment: the handler a new request of a given type goes to."""
from typing import Optional

from request_desk.metrics import AUTO_ASSIGNMENTS
from request_desk.repositories.assignment_repository import AssignmentRepository


def select_assignee(assignment_repo: AssignmentRepository, type_id: str) -> Optional[str]:
    """Primary handler, else the earliest-assigned handler, else ``None``."""
    candidate = assignment_repo.first_candidate(type_id)
    if candidate is None:
        AUTO_ASSIGNMENTS.labels(outcome="unassigned").inc()
        return None
    AUTO_ASSIGNMENTS.labels(outcome="primary" if candidate.is_primary else "fallback").inc()
    return candidate.user_id
