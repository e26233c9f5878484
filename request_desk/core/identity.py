# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Identity context.

Authentication happens upstream (the gateway); this service only receives the
authenticated user id and turns it into a ``Principal``: role plus team
membership. Unknown or deactivated users resolve to ``None``.
"""
from typing import Optional

from request_desk.core.logging import get_logger
from request_desk.models.domain import Principal
from request_desk.repositories.user_repository import UserRepository

logger = get_logger(__name__)


class IdentityResolver:
    def __init__(self, user_repo: UserRepository):
        self._users = user_repo

    def resolve(self, user_id: Optional[str]) -> Optional[Principal]:
        if not user_id:
            return None
        user = self._users.get(user_id.strip())
        if user is None or not user.is_active:
            logger.info("Identity rejected user=%s", user_id)
            return None
        return Principal(id=user.id, role=user.role, team_id=self._users.get_team_id(user.id))
