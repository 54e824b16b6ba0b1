"""
Generic create/update/delete/retrieve/search for any bound model.
"""
import logging
from typing import Any, Dict, Generic, Optional, TypeVar

from ..core.exceptions import InvariantViolationError
from ..core.models import SearchResult
from ..orm.model import OrmModel
from ..orm.query import OrmQuery

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Dict[str, Any])


class SimpleCrudsService(Generic[T]):
    """
    Stateless CRUD+search wrapper over one model.

    Every operation returns plain data (the materialized instance), never a
    live provider-backed instance. Missing entities are an absence, not an
    error: `retrieve` returns None and `delete` does nothing.
    """

    def __init__(self, model: OrmModel):
        self.model = model

    async def update(self, data: T) -> T:
        instance = await self.model.create(data).save()
        if not instance:
            raise InvariantViolationError(
                f"Saving {self.model.get_name()} returned no instance"
            )
        return instance.to_obj()

    async def create(self, data: T) -> T:
        return await self.update(data)

    async def delete(self, primary_key: Any) -> None:
        instance = await self.model.retrieve(primary_key)
        if not instance:
            logger.debug(f"{self.model.get_name()} {primary_key!r} not found, nothing to delete")
            return None
        await instance.delete()
        return None

    async def retrieve(self, primary_key: Any) -> Optional[T]:
        instance = await self.model.retrieve(primary_key)
        if not instance:
            return None
        return instance.to_obj()

    async def search(self, query: OrmQuery) -> SearchResult[T]:
        result = await self.model.search(query)
        return SearchResult(
            instances=tuple(instance.to_obj() for instance in result.instances),
            page=result.page,
        )


def simple_cruds_service(model: OrmModel) -> SimpleCrudsService:
    return SimpleCrudsService(model)
