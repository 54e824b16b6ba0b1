"""
Datastore provider interface shared by every backend.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.naming import NameResolver
from ..orm.query import OrmQuery


@dataclass
class DatastoreSearchResult:
    """Raw records in backend order plus the backend's continuation token"""
    instances: List[Dict[str, Any]] = field(default_factory=list)
    page: Any = None


def paginate_records(records: List[Dict[str, Any]], query: OrmQuery) -> DatastoreSearchResult:
    """
    Offset pagination over an already filtered and sorted list.

    The page token is the integer offset of the next page, or None when the
    list is exhausted.
    """
    offset = int(query.page or 0)
    if query.take is None:
        return DatastoreSearchResult(instances=records[offset:], page=None)
    end = offset + query.take
    next_page = end if end < len(records) else None
    return DatastoreSearchResult(instances=records[offset:end], page=next_page)


class DatastoreProvider(ABC):
    """
    Abstract base class for all datastore providers.

    A provider translates generic persistence operations into native calls
    for one backend. It works on plain records (dicts) and never sees ORM
    instances beyond their model, primary key and data.

    Providers hold a live client but never own its lifetime: releasing it is
    the job of the `cleanup` returned alongside the provider.
    """

    def __init__(self, name_resolver: Optional[NameResolver] = None):
        self.name_resolver = name_resolver
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def get_name_for_model(self, model) -> str:
        """Physical table/collection/index name for a model"""
        if self.name_resolver is None:
            return model.get_name()
        return self.name_resolver.resolve(model)

    @abstractmethod
    async def save(self, instance) -> Dict[str, Any]:
        """
        Insert or replace an instance.

        Args:
            instance: ModelInstance to persist

        Returns:
            The stored record as the backend now holds it
        """
        pass

    @abstractmethod
    async def delete(self, instance) -> None:
        """Remove an instance, doing nothing if it is already gone"""
        pass

    @abstractmethod
    async def retrieve(self, model, primary_key: Any) -> Optional[Dict[str, Any]]:
        """
        Fetch one record by primary key.

        Returns:
            The record, or None if nothing is stored under that key
        """
        pass

    @abstractmethod
    async def search(self, model, query: OrmQuery) -> DatastoreSearchResult:
        """
        Run a backend-agnostic query.

        Returns:
            Matching records in backend order and an opaque page token
            (None when there are no further results)
        """
        pass
