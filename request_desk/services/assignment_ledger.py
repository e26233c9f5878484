# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Assignment ledger: which users handle which request type, and which one of
them is primary. At most one assignment per type carries ``is_primary``.
"""
from typing import List

from request_desk.core.errors import InvalidUser, NotFound
from request_desk.core.logging import get_logger
from request_desk.metrics import ASSIGNMENT_CHANGES
from request_desk.models.domain import Assignment
from request_desk.repositories.assignment_repository import AssignmentRepository
from request_desk.repositories.user_repository import UserRepository

logger = get_logger(__name__)


class AssignmentLedger:
    def __init__(self, assignment_repo: AssignmentRepository, user_repo: UserRepository):
        self._assignments = assignment_repo
        self._users = user_repo

    def upsert_assignment(self, type_id: str, user_id: str, is_primary: bool) -> Assignment:
        user = self._users.get(user_id)
        if user is None or not user.is_active:
            raise InvalidUser("Invalid user.")
        try:
            assignment = self._assignments.upsert(type_id, user_id, is_primary)
        except KeyError:
            raise NotFound("Request type not found")
        ASSIGNMENT_CHANGES.labels(action="upsert").inc()
        logger.info("Assignment upserted type=%s user=%s primary=%s",
                    type_id, user_id, is_primary)
        return assignment

    def remove_assignment(self, type_id: str, user_id: str) -> bool:
        removed = self._assignments.delete(type_id, user_id)
        if removed:
            ASSIGNMENT_CHANGES.labels(action="remove").inc()
            logger.info("Assignment removed type=%s user=%s", type_id, user_id)
        return removed

    def list_assignees(self, type_id: str) -> List[Assignment]:
        return self._assignments.list_for_type(type_id)
