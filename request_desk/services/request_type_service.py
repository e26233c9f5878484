# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Administration of request types."""
import re
from typing import List

from request_desk.core.errors import InvalidInput, NotFound
from request_desk.core.logging import get_logger
from request_desk.models.domain import RequestType
from request_desk.repositories.request_type_repository import RequestTypeRepository

logger = get_logger(__name__)


def to_slug(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.strip().lower())
    return slug.strip("-")


class RequestTypeService:
    def __init__(self, type_repo: RequestTypeRepository):
        self._types = type_repo

    def list_types(self) -> List[RequestType]:
        return self._types.list_all()

    def create_type(self, name: str, slug: str, visibility_policy: str,
                    requires_recipient: bool = False,
                    requires_assignment: bool = False) -> RequestType:
        slug = to_slug(slug) or to_slug(name)
        if self._types.slug_in_use(slug):
            raise InvalidInput("Slug already in use.")
        created = self._types.create(name, slug, visibility_policy,
                                     requires_recipient, requires_assignment)
        logger.info("Request type created id=%s slug=%s policy=%s",
                    created.id, slug, visibility_policy)
        return created

    def update_type(self, type_id: str, name: str, slug: str, visibility_policy: str,
                    requires_recipient: bool, requires_assignment: bool) -> RequestType:
        slug = to_slug(slug) or to_slug(name)
        if self._types.slug_in_use(slug, exclude_id=type_id):
            raise InvalidInput("Slug already in use.")
        try:
            updated = self._types.update(type_id, name, slug, visibility_policy,
                                         requires_recipient, requires_assignment)
        except KeyError:
            raise NotFound("Request type not found")
        logger.info("Request type updated id=%s slug=%s policy=%s",
                    type_id, slug, visibility_policy)
        return updated

    def delete_type(self, type_id: str) -> None:
        if self._types.get(type_id) is None:
            raise NotFound("Request type not found")
        if not self._types.delete_if_unused(type_id):
            raise InvalidInput("Request type has existing requests and cannot be deleted.")
        logger.info("Request type deleted id=%s", type_id)
