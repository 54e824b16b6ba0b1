"""
Services layer entry points.

    database_objects = await get_database_objects(config)
    async with database_objects:
        orm = get_orm(database_objects.datastore_provider)
        users = simple_cruds_service(orm.Model('User', ['name']))
        await users.create({'id': '1', 'name': 'a'})

`get_database_objects` is the default way of getting a datastore provider;
the per-backend `create_*` functions are exposed for callers that already
know their backend.
"""

from ..database_objects import DATABASE_OBJECTS_BUILDERS, get_database_objects
from ..core.enums import SupportedDatabase
from ..orm import Orm, orm
from .cruds import SimpleCrudsService, simple_cruds_service

create_memory_database_objects = DATABASE_OBJECTS_BUILDERS[SupportedDatabase.MEMORY].build
create_dynamo_database_objects = DATABASE_OBJECTS_BUILDERS[SupportedDatabase.DYNAMO].build
create_mongo_database_objects = DATABASE_OBJECTS_BUILDERS[SupportedDatabase.MONGO].build
create_opensearch_database_objects = DATABASE_OBJECTS_BUILDERS[SupportedDatabase.OPENSEARCH].build
create_sql_database_objects = DATABASE_OBJECTS_BUILDERS[SupportedDatabase.SQLITE].build


def get_orm(datastore_provider) -> Orm:
    """Bind a datastore provider to the ORM; errors propagate unchanged"""
    return orm(datastore_provider)


__all__ = [
    'create_memory_database_objects',
    'create_dynamo_database_objects',
    'create_mongo_database_objects',
    'create_opensearch_database_objects',
    'create_sql_database_objects',
    'get_database_objects',
    'get_orm',
    'simple_cruds_service',
    'SimpleCrudsService',
]
