"""Test cases for models, instances and query building."""

import pytest
from unittest.mock import Mock, AsyncMock

from nildb.core.enums import PropertyMatch
from nildb.core.exceptions import ModelValidationError
from nildb.datastore.memory_datastore import MemoryDatastore
from nildb.orm import Field, OrmQuery, OrmQueryBuilder, PropertyQuery, orm
from nildb.services import get_orm


@pytest.fixture
def datastore():
    return MemoryDatastore()


@pytest.fixture
def Model(datastore):
    return orm(datastore).Model


class TestOrmBinding:

    def test_get_orm_binds_provider(self, datastore):
        bound = get_orm(datastore)
        model = bound.Model('User')
        assert model.datastore_provider is datastore
        assert bound.datastore_provider is datastore

    def test_get_orm_requires_provider(self):
        with pytest.raises(ValueError):
            get_orm(None)

    @pytest.mark.asyncio
    async def test_fetcher_retrieves_by_primary_key(self, datastore):
        bound = get_orm(datastore)
        model = bound.Model('User', ['name'])
        await model.create({'id': 'u1', 'name': 'ada'}).save()

        fetched = await bound.fetcher(model, 'u1')
        assert fetched.to_obj() == {'id': 'u1', 'name': 'ada'}
        assert await bound.fetcher(model, 'nope') is None


class TestModel:

    def test_declared_fields_filter_data(self, Model):
        instance = Model('User', ['name']).create({'id': '1', 'name': 'a', 'extra': True})
        assert instance.to_obj() == {'id': '1', 'name': 'a'}

    def test_undeclared_model_keeps_data(self, Model):
        instance = Model('Event').create({'id': 'e1', 'anything': [1, 2]})
        assert instance.to_obj() == {'id': 'e1', 'anything': [1, 2]}

    def test_primary_key_generated(self, Model):
        instance = Model('User', ['name']).create({'name': 'a'})
        assert isinstance(instance.get_primary_key(), str)
        assert len(instance.get_primary_key()) == 36

    def test_custom_primary_key(self, Model):
        model = Model('Sku', {'code': Field(required=True), 'label': Field()}, primary_key='code')
        instance = model.create({'code': 'X-1', 'label': 'x'})
        assert model.get_primary_key_name() == 'code'
        assert instance.get_primary_key() == 'X-1'

    def test_defaults_applied(self, Model):
        model = Model('Task', {
            'status': Field(default='open'),
            'tags': Field(default_factory=list),
        })
        assert model.create({'id': 't1'}).to_obj() == {'id': 't1', 'status': 'open', 'tags': []}

    def test_to_obj_is_a_copy(self, Model):
        instance = Model('User', ['name']).create({'id': '1', 'name': 'a'})
        snapshot = instance.to_obj()
        snapshot['name'] = 'changed'
        assert instance.get('name') == 'a'

    @pytest.mark.asyncio
    async def test_required_field_blocks_save(self, Model, datastore):
        model = Model('User', {'name': Field(required=True)})
        with pytest.raises(ModelValidationError) as exc_info:
            await model.create({'id': '1'}).save()
        assert 'name' in exc_info.value.errors
        assert await datastore.retrieve(model, '1') is None

    @pytest.mark.asyncio
    async def test_save_returns_instance_from_stored_record(self, Model):
        provider = Mock()
        provider.save = AsyncMock(return_value={'id': '1', 'name': 'stored'})
        model = orm(provider).Model('User', ['name'])

        saved = await model.create({'id': '1', 'name': 'a'}).save()

        assert saved.to_obj() == {'id': '1', 'name': 'stored'}

    @pytest.mark.asyncio
    async def test_save_without_record_returns_none(self):
        provider = Mock()
        provider.save = AsyncMock(return_value=None)
        model = orm(provider).Model('User', ['name'])
        assert await model.create({'id': '1', 'name': 'a'}).save() is None

    @pytest.mark.asyncio
    async def test_delete(self, Model):
        model = Model('User', ['name'])
        instance = await model.create({'id': '1', 'name': 'a'}).save()
        await instance.delete()
        assert await model.retrieve('1') is None

    def test_model_needs_name(self, datastore):
        with pytest.raises(ValueError):
            orm(datastore).Model('')


class TestQueryBuilder:

    def test_compile(self):
        query = (OrmQueryBuilder()
                 .property('name', 'ad', match='startswith', case_sensitive=False)
                 .sort('age', ascending=False)
                 .take(5)
                 .pagination(10)
                 .compile())
        assert query.properties == (PropertyQuery('name', 'ad', PropertyMatch.STARTSWITH, False),)
        assert query.sort.key == 'age'
        assert query.sort.ascending is False
        assert query.take == 5
        assert query.page == 10

    def test_take_must_be_positive(self):
        with pytest.raises(ValueError):
            OrmQueryBuilder().take(0)

    def test_unknown_match(self):
        with pytest.raises(ValueError):
            OrmQueryBuilder().property('name', 'x', match='regex')

    @pytest.mark.parametrize('match,value,case_sensitive,expected', [
        ('eq', 'Ada', True, True),
        ('eq', 'ada', True, False),
        ('eq', 'ada', False, True),
        ('startswith', 'Ad', True, True),
        ('endswith', 'da', True, True),
        ('contains', 'D', False, True),
        ('contains', 'x', False, False),
    ])
    def test_property_matches(self, match, value, case_sensitive, expected):
        prop = PropertyQuery('name', value, PropertyMatch(match), case_sensitive)
        assert prop.matches({'name': 'Ada'}) is expected

    def test_property_matches_non_strings(self):
        assert PropertyQuery('age', 3).matches({'age': 3})
        assert not PropertyQuery('age', 3).matches({'age': 4})
        assert not PropertyQuery('age', 3).matches({})

    def test_apply_sort_puts_missing_last(self):
        query = OrmQueryBuilder().sort('age').compile()
        records = [{'id': 'a'}, {'id': 'b', 'age': 30}, {'id': 'c', 'age': 20}]
        assert [r['id'] for r in query.apply_sort(records)] == ['c', 'b', 'a']

    def test_apply_sort_mixed_types(self):
        query = OrmQueryBuilder().sort('x').compile()
        records = [{'x': 'a'}, {'x': 2}, {'x': 1.5}, {'x': [1]}]
        assert [r['x'] for r in query.apply_sort(records)] == [1.5, 2, 'a', [1]]

    def test_query_rejects_non_positive_take(self):
        with pytest.raises(ValueError):
            OrmQuery(take=0)
