# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package; re-exports the SQLAlchemy-backed repositories."""
from request_desk.repositories.assignment_repository import AssignmentRepository
from request_desk.repositories.request_repository import RequestRepository
from request_desk.repositories.request_type_repository import RequestTypeRepository
from request_desk.repositories.user_repository import UserRepository

__all__ = [
    "AssignmentRepository",
    "RequestRepository",
    "RequestTypeRepository",
    "UserRepository",
]
