# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: request-type assignment ledger (admin only)."""
from typing import List

from fastapi import APIRouter, Body, Depends

from request_desk.core.dependencies import get_ledger, get_type_service, require_admin
from request_desk.schemas import (
    AssignmentIn,
    AssignmentKey,
    AssignmentOut,
    RequestTypeWithAssignees,
)
from request_desk.services.assignment_ledger import AssignmentLedger
from request_desk.services.request_type_service import RequestTypeService

router = APIRouter(prefix="/api/v1/admin", tags=["Assignments"],
                   dependencies=[Depends(require_admin)])


@router.get("/assignments", response_model=List[RequestTypeWithAssignees])
def list_assignments(service: RequestTypeService = Depends(get_type_service),
                     ledger: AssignmentLedger = Depends(get_ledger)):
    return [
        RequestTypeWithAssignees.build(t, ledger.list_assignees(t.id))
        for t in service.list_types()
    ]


@router.post("/assignments", status_code=201, response_model=AssignmentOut)
def upsert_assignment(body: AssignmentIn,
                      ledger: AssignmentLedger = Depends(get_ledger)):
    assignment = ledger.upsert_assignment(body.type_id, body.user_id, body.is_primary)
    return AssignmentOut.from_assignment(assignment)


@router.delete("/assignments")
def remove_assignment(body: AssignmentKey = Body(...),
                      ledger: AssignmentLedger = Depends(get_ledger)):
    removed = ledger.remove_assignment(body.type_id, body.user_id)
    return {"ok": True, "removed": removed}
