"""
Test cases for query translation and calls made by the network providers.
"""

import pytest
from decimal import Decimal
from unittest.mock import Mock, MagicMock, AsyncMock

from opensearchpy import NotFoundError

from nildb.datastore.dynamo_datastore import DynamoDatastore, from_dynamo, to_dynamo
from nildb.datastore.mongo_datastore import MongoDatastore, build_mongo_filter
from nildb.datastore.opensearch_datastore import (
    MAX_RESULT_WINDOW, OpensearchDatastore, build_search_body,
)
from nildb.core.naming import NameResolver
from nildb.orm import OrmQueryBuilder, orm


class TestDynamoDatastore:

    @pytest.fixture
    def table(self):
        return Mock()

    @pytest.fixture
    def provider(self, table):
        resource = Mock()
        resource.Table.return_value = table
        return DynamoDatastore(resource, name_resolver=NameResolver('dev', 'shop'))

    @pytest.fixture
    def model(self, provider):
        return orm(provider).Model('User', ['name', 'score'])

    def test_number_conversion(self):
        assert to_dynamo({'a': 1.5, 'b': [0.25], 'c': 2}) == {'a': Decimal('1.5'), 'b': [Decimal('0.25')], 'c': 2}
        assert from_dynamo({'a': Decimal('1.5'), 'b': Decimal('2')}) == {'a': 1.5, 'b': 2}

    @pytest.mark.asyncio
    async def test_save(self, provider, model, table):
        record = await provider.save(model.create({'id': '1', 'name': 'a', 'score': 0.5}))

        provider.dynamo_resource.Table.assert_called_with('shop-dev-user')
        table.put_item.assert_called_once_with(Item={'id': '1', 'name': 'a', 'score': Decimal('0.5')})
        assert record == {'id': '1', 'name': 'a', 'score': 0.5}

    @pytest.mark.asyncio
    async def test_retrieve(self, provider, model, table):
        table.get_item.return_value = {'Item': {'id': '1', 'score': Decimal('3')}}
        assert await provider.retrieve(model, '1') == {'id': '1', 'score': 3}
        table.get_item.assert_called_once_with(Key={'id': '1'})

    @pytest.mark.asyncio
    async def test_retrieve_missing(self, provider, model, table):
        table.get_item.return_value = {}
        assert await provider.retrieve(model, '1') is None

    @pytest.mark.asyncio
    async def test_delete(self, provider, model, table):
        await provider.delete(model.create({'id': '1'}))
        table.delete_item.assert_called_once_with(Key={'id': '1'})

    @pytest.mark.asyncio
    async def test_search_passes_page_through(self, provider, model, table):
        last_key = {'id': '2'}
        table.scan.return_value = {
            'Items': [{'id': '1', 'name': 'ab'}, {'id': '2', 'name': 'xb'}],
            'LastEvaluatedKey': last_key,
        }
        query = (OrmQueryBuilder()
                 .property('name', 'b', match='endswith')
                 .take(2)
                 .pagination({'id': '0'})
                 .compile())

        result = await provider.search(model, query)

        kwargs = table.scan.call_args.kwargs
        assert kwargs['Limit'] == 2
        assert kwargs['ExclusiveStartKey'] == {'id': '0'}
        assert 'FilterExpression' not in kwargs
        assert [r['id'] for r in result.instances] == ['1', '2']
        assert result.page is last_key

    def test_filter_expression_pushdown(self):
        query = (OrmQueryBuilder()
                 .property('name', 'a', match='startswith')
                 .property('tag', 'x', match='contains')
                 .property('city', 'Paris', case_sensitive=False)
                 .compile())
        expression = DynamoDatastore.build_filter_expression(query)
        assert expression.expression_operator == 'AND'

    def test_no_filter_expression(self):
        assert DynamoDatastore.build_filter_expression(OrmQueryBuilder().compile()) is None


class TestMongoDatastore:

    def test_filter_translation(self):
        query = (OrmQueryBuilder()
                 .property('age', 3)
                 .property('name', 'a.b', match='startswith', case_sensitive=False)
                 .property('city', 'paris', case_sensitive=False)
                 .compile())
        assert build_mongo_filter(query) == {
            'age': 3,
            'name': {'$regex': r'^a\.b', '$options': 'i'},
            'city': {'$regex': '^paris$', '$options': 'i'},
        }

    def test_repeated_property_keeps_every_condition(self):
        query = (OrmQueryBuilder()
                 .property('name', 'a', match='startswith')
                 .property('name', 'z', match='endswith')
                 .compile())
        assert build_mongo_filter(query) == {
            '$and': [
                {'name': {'$regex': '^a'}},
                {'name': {'$regex': 'z$'}},
            ],
        }

    @pytest.fixture
    def collection(self):
        collection = MagicMock()
        collection.replace_one = AsyncMock()
        collection.delete_one = AsyncMock()
        collection.find_one = AsyncMock()
        return collection

    @pytest.fixture
    def provider(self, collection):
        client = MagicMock()
        client.__getitem__.return_value.__getitem__.return_value = collection
        return MongoDatastore(client, 'shop-dev', name_resolver=NameResolver('dev', 'shop'))

    @pytest.mark.asyncio
    async def test_save_upserts_by_id(self, provider, collection):
        model = orm(provider).Model('User', ['name'])
        await provider.save(model.create({'id': '1', 'name': 'a'}))
        collection.replace_one.assert_awaited_once_with(
            {'_id': '1'}, {'id': '1', 'name': 'a', '_id': '1'}, upsert=True
        )

    @pytest.mark.asyncio
    async def test_retrieve_strips_mongo_id(self, provider, collection):
        collection.find_one.return_value = {'_id': '1', 'id': '1', 'name': 'a'}
        model = orm(provider).Model('User', ['name'])
        assert await provider.retrieve(model, '1') == {'id': '1', 'name': 'a'}

    @pytest.mark.asyncio
    async def test_search_pages(self, provider, collection):
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.skip.return_value = cursor
        cursor.limit.return_value = cursor
        cursor.to_list = AsyncMock(return_value=[
            {'_id': '1', 'id': '1'}, {'_id': '2', 'id': '2'}, {'_id': '3', 'id': '3'},
        ])
        collection.find.return_value = cursor
        model = orm(provider).Model('User')

        result = await provider.search(model, OrmQueryBuilder().sort('id').take(2).pagination(4).compile())

        cursor.sort.assert_called_once_with('id', 1)
        cursor.skip.assert_called_once_with(4)
        cursor.limit.assert_called_once_with(3)
        assert result.instances == [{'id': '1'}, {'id': '2'}]
        assert result.page == 6


class TestOpensearchDatastore:

    def test_search_body(self):
        query = (OrmQueryBuilder()
                 .property('name', 'ad', match='startswith')
                 .property('age', 3)
                 .sort('age', ascending=False)
                 .take(5)
                 .pagination(10)
                 .compile())
        body = build_search_body(query)
        assert body['query']['bool']['filter'] == [
            {'prefix': {'name.keyword': {'value': 'ad', 'case_insensitive': False}}},
            {'term': {'age': 3}},
        ]
        assert body['from'] == 10
        assert body['size'] == 6
        assert body['sort'] == [{'age': {'order': 'desc'}}]

    def test_match_all(self):
        body = build_search_body(OrmQueryBuilder().compile())
        assert body['query'] == {'match_all': {}}
        assert body['size'] == MAX_RESULT_WINDOW

    def test_size_stays_inside_result_window(self):
        body = build_search_body(OrmQueryBuilder().pagination(400).compile())
        assert body['from'] == 400
        assert body['from'] + body['size'] == MAX_RESULT_WINDOW

    def test_wildcard_is_escaped(self):
        body = build_search_body(OrmQueryBuilder().property('name', 'a*b', match='contains').compile())
        assert body['query']['bool']['filter'][0]['wildcard']['name.keyword']['value'] == '*a\\*b*'

    @pytest.fixture
    def client(self):
        return Mock()

    @pytest.fixture
    def provider(self, client):
        return OpensearchDatastore(client, name_resolver=NameResolver('dev', 'shop'))

    @pytest.mark.asyncio
    async def test_retrieve_missing_is_none(self, provider, client):
        client.get.side_effect = NotFoundError(404, 'not_found', {})
        model = orm(provider).Model('Product')
        assert await provider.retrieve(model, 'p1') is None
        client.get.assert_called_once_with(index='shop-dev-product', id='p1')

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, provider, client):
        client.delete.side_effect = NotFoundError(404, 'not_found', {})
        model = orm(provider).Model('Product')
        await provider.delete(model.create({'id': 'p1'}))

    @pytest.mark.asyncio
    async def test_save_indexes_document(self, provider, client):
        model = orm(provider).Model('Product', ['title'])
        await provider.save(model.create({'id': 'p1', 'title': 'lamp'}))
        client.index.assert_called_once_with(
            index='shop-dev-product', id='p1', body={'id': 'p1', 'title': 'lamp'}
        )

    @pytest.mark.asyncio
    async def test_search_next_page(self, provider, client):
        client.search.return_value = {'hits': {'hits': [
            {'_source': {'id': 'a'}}, {'_source': {'id': 'b'}}, {'_source': {'id': 'c'}},
        ]}}
        model = orm(provider).Model('Product')
        result = await provider.search(model, OrmQueryBuilder().take(2).compile())
        assert [r['id'] for r in result.instances] == ['a', 'b']
        assert result.page == 2
