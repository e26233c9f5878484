# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: request creation, visibility-filtered listing, detail, status, comments."""
from typing import List

from fastapi import APIRouter, Depends

from request_desk.core.dependencies import get_current_principal, get_request_service
from request_desk.models.domain import Principal
from request_desk.schemas import (
    CommentCreate,
    RequestCreate,
    RequestDetail,
    RequestOut,
    StatusChange,
)
from request_desk.services.request_service import RequestService

router = APIRouter(prefix="/api/v1", tags=["Requests"])


@router.get("/requests", response_model=List[RequestOut])
def list_requests(principal: Principal = Depends(get_current_principal),
                  service: RequestService = Depends(get_request_service)):
    return [RequestOut.from_item(i) for i in service.list_visible(principal)]


@router.post("/requests", status_code=201, response_model=RequestOut)
def create_request(body: RequestCreate,
                   principal: Principal = Depends(get_current_principal),
                   service: RequestService = Depends(get_request_service)):
    created = service.create_request(
        principal, type_id=body.type_id, title=body.title,
        description=body.description, priority=body.priority,
        recipient_id=body.recipient_id,
    )
    return RequestOut.from_item(created)


@router.get("/requests/{request_id}", response_model=RequestDetail)
def get_request(request_id: str,
                principal: Principal = Depends(get_current_principal),
                service: RequestService = Depends(get_request_service)):
    detail = service.get_detail(principal, request_id)
    return RequestDetail(
        **RequestOut.from_item(detail["request"]).model_dump(),
        comments=detail["comments"], history=detail["history"],
    )


@router.post("/requests/{request_id}/status", response_model=RequestOut)
def change_status(request_id: str, body: StatusChange,
                  principal: Principal = Depends(get_current_principal),
                  service: RequestService = Depends(get_request_service)):
    updated = service.change_status(principal, request_id, body.status, body.note)
    return RequestOut.from_item(updated)


@router.post("/requests/{request_id}/comments", status_code=201)
def add_comment(request_id: str, body: CommentCreate,
                principal: Principal = Depends(get_current_principal),
                service: RequestService = Depends(get_request_service)):
    return service.add_comment(principal, request_id, body.body)
