# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: active user directory (recipient / handler pickers)."""
from typing import List

from fastapi import APIRouter, Depends

from request_desk.core.dependencies import get_current_principal, get_user_repo
from request_desk.repositories.user_repository import UserRepository
from request_desk.schemas import UserOut

router = APIRouter(prefix="/api/v1", tags=["Users"])


@router.get("/users", response_model=List[UserOut], dependencies=[Depends(get_current_principal)])
def list_users(repo: UserRepository = Depends(get_user_repo)):
    return [
        UserOut(id=u.id, email=u.email, full_name=u.full_name, role=u.role.value)
        for u in repo.list_active()
    ]
