# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business logic for requests: creation, visibility-gated reads and updates."""
from typing import Any, Dict, List, Optional

from request_desk.core.config import settings
from request_desk.core.errors import Forbidden, InvalidInput, InvalidUser, NotFound
from request_desk.core.logging import get_logger
from request_desk.metrics import ACCESS_DENIED, REQUESTS_CREATED
from request_desk.models.domain import Principal, RequestItem, Role
from request_desk.repositories.assignment_repository import AssignmentRepository
from request_desk.repositories.request_repository import RequestRepository
from request_desk.repositories.request_type_repository import RequestTypeRepository
from request_desk.repositories.user_repository import UserRepository
from request_desk.services.access_filter import build_filter
from request_desk.services.auto_assign import select_assignee
from request_desk.services.visibility import can_access

logger = get_logger(__name__)


class RequestService:
    def __init__(self, request_repo: RequestRepository, type_repo: RequestTypeRepository,
                 assignment_repo: AssignmentRepository, user_repo: UserRepository,
                 notification_client):
        self._requests = request_repo
        self._types = type_repo
        self._assignments = assignment_repo
        self._users = user_repo
        self._notification = notification_client

    def create_request(self, principal: Principal, type_id: str, title: str,
                       description: str, priority: str,
                       recipient_id: Optional[str] = None) -> RequestItem:
        request_type = self._types.get(type_id)
        if request_type is None:
            raise InvalidInput("Invalid request type.")
        if request_type.requires_recipient and not recipient_id:
            raise InvalidInput("Recipient required.")
        if recipient_id:
            recipient = self._users.get(recipient_id)
            if recipient is None or not recipient.is_active:
                raise InvalidUser("Invalid recipient.")

        assigned_to = None
        if request_type.requires_assignment:
            assigned_to = select_assignee(self._assignments, request_type.id)
            if assigned_to is None:
                if settings.REJECT_UNASSIGNABLE_REQUESTS:
                    raise InvalidInput("No handler is assigned to this request type.")
                logger.warning("No handler available for type=%s; request left unassigned",
                               request_type.slug)

        try:
            created = self._requests.create(
                type_id=request_type.id, title=title, description=description,
                priority=priority, created_by_id=principal.id,
                assigned_to_id=assigned_to, recipient_id=recipient_id,
                team_id=principal.team_id,
            )
        except KeyError:
            raise InvalidInput("Invalid request type.")
        REQUESTS_CREATED.labels(type_slug=request_type.slug).inc()
        logger.info("Request created id=%s type=%s by=%s assigned=%s",
                    created.id, request_type.slug, principal.id, assigned_to)
        if assigned_to:
            self._notification.notify_assigned(created.id, assigned_to, title, priority)
        return created

    def list_visible(self, principal: Principal) -> List[RequestItem]:
        access = build_filter(principal, principal.team_id)
        return self._requests.list_matching(access.to_sql())

    def get_accessible(self, principal: Principal, request_id: str) -> RequestItem:
        item = self._requests.get(request_id)
        if item is None:
            # Non-admins cannot tell a missing request from a hidden one.
            if principal.is_admin:
                raise NotFound("Request not found")
            raise Forbidden("Forbidden")
        if not can_access(principal, principal.team_id, item):
            ACCESS_DENIED.labels(policy=str(item.type.visibility_policy)).inc()
            logger.info("Access denied request=%s user=%s", request_id, principal.id)
            raise Forbidden("Forbidden")
        return item

    def get_detail(self, principal: Principal, request_id: str) -> Dict[str, Any]:
        item = self.get_accessible(principal, request_id)
        return {
            "request": item,
            "comments": self._requests.get_comments(item.id),
            "history": self._requests.get_history(item.id),
        }

    def change_status(self, principal: Principal, request_id: str, status: str,
                      note: Optional[str] = None) -> RequestItem:
        item = self.get_accessible(principal, request_id)
        if (principal.role == Role.WORKER
                and item.created_by_id != principal.id
                and item.assigned_to_id != principal.id):
            raise Forbidden("Forbidden")
        try:
            updated = self._requests.change_status(item.id, principal.id, status, note)
        except KeyError:
            raise NotFound("Request not found")
        logger.info("Request status changed id=%s to=%s by=%s", item.id, status, principal.id)
        return updated

    def add_comment(self, principal: Principal, request_id: str, body: str) -> Dict[str, Any]:
        item = self.get_accessible(principal, request_id)
        return self._requests.add_comment(item.id, principal.id, body)
