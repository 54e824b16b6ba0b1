"""
MongoDB datastore provider.
"""
import re
from typing import Any, Dict, Optional

from .base_datastore import DatastoreProvider, DatastoreSearchResult
from ..core.enums import PropertyMatch
from ..orm.query import OrmQuery, PropertyQuery


def _regex_for(prop: PropertyQuery) -> Dict[str, str]:
    pattern = re.escape(str(prop.value))
    if prop.match == PropertyMatch.STARTSWITH:
        pattern = f"^{pattern}"
    elif prop.match == PropertyMatch.ENDSWITH:
        pattern = f"{pattern}$"
    elif prop.match == PropertyMatch.EQ:
        pattern = f"^{pattern}$"
    regex = {'$regex': pattern}
    if not prop.case_sensitive:
        regex['$options'] = 'i'
    return regex


def _condition_for(prop: PropertyQuery) -> Any:
    plain_equality = prop.match == PropertyMatch.EQ and (
        prop.case_sensitive or not isinstance(prop.value, str)
    )
    return prop.value if plain_equality else _regex_for(prop)


def build_mongo_filter(query: OrmQuery) -> Dict[str, Any]:
    conditions = [{prop.name: _condition_for(prop)} for prop in query.properties]
    names = [prop.name for prop in query.properties]
    # A repeated field would overwrite its earlier condition in a flat filter
    if len(set(names)) < len(names):
        return {'$and': conditions}
    mongo_filter: Dict[str, Any] = {}
    for condition in conditions:
        mongo_filter.update(condition)
    return mongo_filter


class MongoDatastore(DatastoreProvider):
    """
    MongoDB provider on top of a connected pymongo `AsyncMongoClient`.

    The primary key is stored as `_id`. Page tokens are integer offsets.
    """

    def __init__(self, mongo_client, database_name: str, name_resolver=None):
        super().__init__(name_resolver)
        self.mongo_client = mongo_client
        self.database_name = database_name

    def _collection(self, model):
        return self.mongo_client[self.database_name][self.get_name_for_model(model)]

    @staticmethod
    def _to_record(document: Dict[str, Any]) -> Dict[str, Any]:
        record = dict(document)
        record.pop('_id', None)
        return record

    async def save(self, instance) -> Dict[str, Any]:
        record = instance.to_obj()
        primary_key = instance.get_primary_key()
        await self._collection(instance.model).replace_one(
            {'_id': primary_key}, {**record, '_id': primary_key}, upsert=True
        )
        return record

    async def delete(self, instance) -> None:
        await self._collection(instance.model).delete_one({'_id': instance.get_primary_key()})

    async def retrieve(self, model, primary_key: Any) -> Optional[Dict[str, Any]]:
        document = await self._collection(model).find_one({'_id': primary_key})
        return self._to_record(document) if document is not None else None

    async def search(self, model, query: OrmQuery) -> DatastoreSearchResult:
        offset = int(query.page or 0)
        cursor = self._collection(model).find(build_mongo_filter(query))
        if query.sort:
            cursor = cursor.sort(query.sort.key, 1 if query.sort.ascending else -1)
        if offset:
            cursor = cursor.skip(offset)
        if query.take:
            # One extra document tells whether another page exists
            cursor = cursor.limit(query.take + 1)
        documents = await cursor.to_list(None)

        next_page = None
        if query.take and len(documents) > query.take:
            documents = documents[:query.take]
            next_page = offset + query.take
        return DatastoreSearchResult(
            instances=[self._to_record(d) for d in documents],
            page=next_page,
        )
