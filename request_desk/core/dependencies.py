# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection: wires repositories and services.

Everything hangs off one ``Container`` built around an engine, so tests can
swap the whole graph with ``app.dependency_overrides[get_container]``.
"""
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.engine import Engine

from request_desk.core.config import settings
from request_desk.core.errors import Forbidden, Unauthenticated
from request_desk.core.identity import IdentityResolver
from request_desk.models.domain import Principal
from request_desk.repositories.assignment_repository import AssignmentRepository
from request_desk.repositories.request_repository import RequestRepository
from request_desk.repositories.request_type_repository import RequestTypeRepository
from request_desk.repositories.user_repository import UserRepository
from request_desk.services.assignment_ledger import AssignmentLedger
from request_desk.services.notification_client import NotificationClient
from request_desk.services.request_service import RequestService
from request_desk.services.request_type_service import RequestTypeService


class Container:
    def __init__(self, engine: Engine, notification_client=None):
        self.engine = engine
        self.user_repo = UserRepository(engine)
        self.type_repo = RequestTypeRepository(engine)
        self.assignment_repo = AssignmentRepository(engine)
        self.request_repo = RequestRepository(engine)
        self.notification_client = notification_client or NotificationClient()

        self.identity = IdentityResolver(self.user_repo)
        self.ledger = AssignmentLedger(self.assignment_repo, self.user_repo)
        self.type_service = RequestTypeService(self.type_repo)
        self.request_service = RequestService(
            request_repo=self.request_repo,
            type_repo=self.type_repo,
            assignment_repo=self.assignment_repo,
            user_repo=self.user_repo,
            notification_client=self.notification_client,
        )


_container: Optional[Container] = None


def get_container() -> Container:
    global _container
    if _container is None:
        from request_desk.core.database import engine
        _container = Container(engine)
    return _container


# ── Services ──

def get_request_service(c: Container = Depends(get_container)) -> RequestService:
    return c.request_service


def get_type_service(c: Container = Depends(get_container)) -> RequestTypeService:
    return c.type_service


def get_ledger(c: Container = Depends(get_container)) -> AssignmentLedger:
    return c.ledger


def get_user_repo(c: Container = Depends(get_container)) -> UserRepository:
    return c.user_repo


# ── Identity ──

def get_current_principal(request: Request,
                          c: Container = Depends(get_container)) -> Principal:
    principal = c.identity.resolve(request.headers.get(settings.IDENTITY_HEADER))
    if principal is None:
        raise Unauthenticated("Unauthorized")
    return principal


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise Forbidden("Forbidden")
    return principal
