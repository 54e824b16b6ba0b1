"""
OpenSearch datastore provider.
"""
import asyncio
from typing import Any, Dict, List, Optional

from opensearchpy import NotFoundError

from .base_datastore import DatastoreProvider, DatastoreSearchResult
from ..core.enums import PropertyMatch
from ..orm.query import OrmQuery, PropertyQuery

# index.max_result_window default
MAX_RESULT_WINDOW = 10000


def _escape_wildcard(value: str) -> str:
    return value.replace('\\', '\\\\').replace('*', '\\*').replace('?', '\\?')


def _clause_for(prop: PropertyQuery) -> Dict[str, Any]:
    if not isinstance(prop.value, str):
        return {'term': {prop.name: prop.value}}
    keyword = f"{prop.name}.keyword"
    if prop.match == PropertyMatch.EQ:
        return {'term': {keyword: {'value': prop.value, 'case_insensitive': not prop.case_sensitive}}}
    if prop.match == PropertyMatch.STARTSWITH:
        return {'prefix': {keyword: {'value': prop.value, 'case_insensitive': not prop.case_sensitive}}}
    escaped = _escape_wildcard(prop.value)
    pattern = f"*{escaped}" if prop.match == PropertyMatch.ENDSWITH else f"*{escaped}*"
    return {'wildcard': {keyword: {'value': pattern, 'case_insensitive': not prop.case_sensitive}}}


def build_search_body(query: OrmQuery) -> Dict[str, Any]:
    clauses: List[Dict[str, Any]] = [_clause_for(p) for p in query.properties]
    offset = int(query.page or 0)
    body: Dict[str, Any] = {
        'query': {'bool': {'filter': clauses}} if clauses else {'match_all': {}},
        'from': offset,
        # One extra hit tells whether another page exists; from + size stays inside the result window
        'size': query.take + 1 if query.take else max(MAX_RESULT_WINDOW - offset, 0),
    }
    if query.sort:
        body['sort'] = [{query.sort.key: {'order': 'asc' if query.sort.ascending else 'desc'}}]
    return body


class OpensearchDatastore(DatastoreProvider):
    """
    OpenSearch provider on top of the synchronous opensearch-py client.

    Each model maps to one index; the primary key is the document id. Page
    tokens are integer offsets. Client calls run in a worker thread.
    """

    def __init__(self, client, name_resolver=None):
        super().__init__(name_resolver)
        self.client = client

    async def save(self, instance) -> Dict[str, Any]:
        record = instance.to_obj()
        await asyncio.to_thread(
            self.client.index,
            index=self.get_name_for_model(instance.model),
            id=instance.get_primary_key(),
            body=record,
        )
        return record

    async def delete(self, instance) -> None:
        try:
            await asyncio.to_thread(
                self.client.delete,
                index=self.get_name_for_model(instance.model),
                id=instance.get_primary_key(),
            )
        except NotFoundError:
            self._logger.debug(f"Delete of missing document {instance.get_primary_key()}")

    async def retrieve(self, model, primary_key: Any) -> Optional[Dict[str, Any]]:
        try:
            response = await asyncio.to_thread(
                self.client.get, index=self.get_name_for_model(model), id=primary_key
            )
        except NotFoundError:
            return None
        return response.get('_source')

    async def search(self, model, query: OrmQuery) -> DatastoreSearchResult:
        offset = int(query.page or 0)
        response = await asyncio.to_thread(
            self.client.search,
            index=self.get_name_for_model(model),
            body=build_search_body(query),
        )
        hits = [hit['_source'] for hit in response['hits']['hits']]
        next_page = None
        if query.take and len(hits) > query.take:
            hits = hits[:query.take]
            next_page = offset + query.take
        return DatastoreSearchResult(instances=hits, page=next_page)
