# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: request-type catalogue and its administration."""
from typing import List

from fastapi import APIRouter, Depends

from request_desk.core.dependencies import (
    get_current_principal,
    get_ledger,
    get_type_service,
    require_admin,
)
from request_desk.schemas import (
    RequestTypeIn,
    RequestTypeOut,
    RequestTypeWithAssignees,
)
from request_desk.services.assignment_ledger import AssignmentLedger
from request_desk.services.request_type_service import RequestTypeService

router = APIRouter(prefix="/api/v1", tags=["Request types"])


def _with_assignees(t, ledger: AssignmentLedger) -> RequestTypeWithAssignees:
    return RequestTypeWithAssignees.build(t, ledger.list_assignees(t.id))


@router.get("/request-types", response_model=List[RequestTypeOut],
            dependencies=[Depends(get_current_principal)])
def list_request_types(service: RequestTypeService = Depends(get_type_service)):
    return [RequestTypeOut.from_type(t) for t in service.list_types()]


@router.get("/admin/request-types", response_model=List[RequestTypeWithAssignees],
            dependencies=[Depends(require_admin)])
def admin_list_request_types(service: RequestTypeService = Depends(get_type_service),
                             ledger: AssignmentLedger = Depends(get_ledger)):
    return [_with_assignees(t, ledger) for t in service.list_types()]


@router.post("/admin/request-types", status_code=201, response_model=RequestTypeWithAssignees,
             dependencies=[Depends(require_admin)])
def create_request_type(body: RequestTypeIn,
                        service: RequestTypeService = Depends(get_type_service),
                        ledger: AssignmentLedger = Depends(get_ledger)):
    created = service.create_type(
        name=body.name, slug=body.slug, visibility_policy=body.visibility_policy,
        requires_recipient=body.requires_recipient,
        requires_assignment=body.requires_assignment,
    )
    return _with_assignees(created, ledger)


@router.patch("/admin/request-types/{type_id}", response_model=RequestTypeWithAssignees,
              dependencies=[Depends(require_admin)])
def update_request_type(type_id: str, body: RequestTypeIn,
                        service: RequestTypeService = Depends(get_type_service),
                        ledger: AssignmentLedger = Depends(get_ledger)):
    updated = service.update_type(
        type_id, name=body.name, slug=body.slug,
        visibility_policy=body.visibility_policy,
        requires_recipient=body.requires_recipient,
        requires_assignment=body.requires_assignment,
    )
    return _with_assignees(updated, ledger)


@router.delete("/admin/request-types/{type_id}", dependencies=[Depends(require_admin)])
def delete_request_type(type_id: str,
                        service: RequestTypeService = Depends(get_type_service)):
    service.delete_type(type_id)
    return {"ok": True}
