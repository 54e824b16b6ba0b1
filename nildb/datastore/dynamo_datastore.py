"""
DynamoDB datastore provider.
"""
import asyncio
from decimal import Decimal
from functools import reduce
from typing import Any, Dict, Optional

from boto3.dynamodb.conditions import Attr

from .base_datastore import DatastoreProvider, DatastoreSearchResult
from ..core.enums import PropertyMatch
from ..orm.query import OrmQuery


def to_dynamo(value: Any) -> Any:
    """DynamoDB rejects floats, numbers must travel as Decimal"""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamo(v) for v in value]
    return value


def from_dynamo(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamo(v) for v in value]
    return value


class DynamoDatastore(DatastoreProvider):
    """
    DynamoDB provider on top of a boto3 `dynamodb` service resource.

    Searches are table scans. Conditions DynamoDB can evaluate are pushed
    down as a FilterExpression; the rest (suffix and case-insensitive
    matches) are applied to each returned page. Sorting is also applied per
    page, so results are not ordered across pages. The page token is the
    scan's LastEvaluatedKey.

    boto3 is synchronous, so every call runs in a worker thread.
    """

    def __init__(self, dynamo_resource, name_resolver=None):
        super().__init__(name_resolver)
        self.dynamo_resource = dynamo_resource

    def _table(self, model):
        return self.dynamo_resource.Table(self.get_name_for_model(model))

    async def save(self, instance) -> Dict[str, Any]:
        record = instance.to_obj()
        table = self._table(instance.model)
        await asyncio.to_thread(table.put_item, Item=to_dynamo(record))
        return record

    async def delete(self, instance) -> None:
        key = {instance.model.get_primary_key_name(): instance.get_primary_key()}
        await asyncio.to_thread(self._table(instance.model).delete_item, Key=key)

    async def retrieve(self, model, primary_key: Any) -> Optional[Dict[str, Any]]:
        key = {model.get_primary_key_name(): primary_key}
        response = await asyncio.to_thread(self._table(model).get_item, Key=key)
        item = response.get('Item')
        return from_dynamo(item) if item is not None else None

    @staticmethod
    def build_filter_expression(query: OrmQuery):
        conditions = []
        for prop in query.properties:
            if not prop.case_sensitive:
                continue
            if prop.match == PropertyMatch.EQ:
                conditions.append(Attr(prop.name).eq(to_dynamo(prop.value)))
            elif prop.match == PropertyMatch.STARTSWITH:
                conditions.append(Attr(prop.name).begins_with(prop.value))
            elif prop.match == PropertyMatch.CONTAINS:
                conditions.append(Attr(prop.name).contains(prop.value))
        if not conditions:
            return None
        return reduce(lambda left, right: left & right, conditions)

    async def search(self, model, query: OrmQuery) -> DatastoreSearchResult:
        kwargs = {}
        if query.take:
            kwargs['Limit'] = query.take
        if query.page:
            kwargs['ExclusiveStartKey'] = query.page
        expression = self.build_filter_expression(query)
        if expression is not None:
            kwargs['FilterExpression'] = expression

        response = await asyncio.to_thread(self._table(model).scan, **kwargs)
        items = [from_dynamo(item) for item in response.get('Items', [])]
        items = query.apply_sort([item for item in items if query.matches(item)])
        return DatastoreSearchResult(instances=items, page=response.get('LastEvaluatedKey'))
