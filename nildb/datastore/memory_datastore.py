"""
In-memory datastore provider.
"""
import copy
from typing import Any, Dict, Optional

from .base_datastore import DatastoreProvider, DatastoreSearchResult, paginate_records
from ..orm.query import OrmQuery


class MemoryDatastore(DatastoreProvider):
    """
    Volatile, process-local provider.

    Records are deep-copied in and out so callers never share mutable state
    with the store. Search order is insertion order unless the query sorts.
    """

    def __init__(self, seed: Optional[Dict[str, Dict[Any, Dict[str, Any]]]] = None, name_resolver=None):
        super().__init__(name_resolver)
        self._tables: Dict[str, Dict[Any, Dict[str, Any]]] = copy.deepcopy(seed or {})

    def _table(self, model) -> Dict[Any, Dict[str, Any]]:
        return self._tables.setdefault(self.get_name_for_model(model), {})

    async def save(self, instance) -> Dict[str, Any]:
        record = instance.to_obj()
        self._table(instance.model)[instance.get_primary_key()] = copy.deepcopy(record)
        return record

    async def delete(self, instance) -> None:
        self._table(instance.model).pop(instance.get_primary_key(), None)

    async def retrieve(self, model, primary_key: Any) -> Optional[Dict[str, Any]]:
        record = self._table(model).get(primary_key)
        return copy.deepcopy(record) if record is not None else None

    async def search(self, model, query: OrmQuery) -> DatastoreSearchResult:
        records = [copy.deepcopy(r) for r in self._table(model).values() if query.matches(r)]
        records = query.apply_sort(records)
        self._logger.debug(f"Memory search on {self.get_name_for_model(model)}: {len(records)} matches")
        return paginate_records(records, query)
