"""
Backend selection: a registry of connection builders and the factory that
dispatches a configuration to exactly one of them.
"""
import inspect
import logging
from typing import Dict, Union

from ..core.enums import SupportedDatabase
from ..core.exceptions import UnsupportedBackendError
from ..core.models import DatabaseObjects
from .base import DatabaseObjectsBuilder
from .memory import MemoryDatabaseObjectsBuilder
from .dynamo import DynamoDatabaseObjectsBuilder
from .mongo import MongoDatabaseObjectsBuilder
from .opensearch import OpensearchDatabaseObjectsBuilder
from .sql import SqlDatabaseObjectsBuilder

logger = logging.getLogger(__name__)

_sql_builder = SqlDatabaseObjectsBuilder()

DATABASE_OBJECTS_BUILDERS: Dict[SupportedDatabase, DatabaseObjectsBuilder] = {
    SupportedDatabase.MEMORY: MemoryDatabaseObjectsBuilder(),
    SupportedDatabase.DYNAMO: DynamoDatabaseObjectsBuilder(),
    SupportedDatabase.MONGO: MongoDatabaseObjectsBuilder(),
    SupportedDatabase.OPENSEARCH: OpensearchDatabaseObjectsBuilder(),
    SupportedDatabase.SQLITE: _sql_builder,
    SupportedDatabase.MYSQL: _sql_builder,
    SupportedDatabase.POSTGRES: _sql_builder,
}


def register_builder(datastore_type: Union[SupportedDatabase, str],
                     builder: DatabaseObjectsBuilder) -> None:
    """Register (or replace) the builder for a backend kind"""
    DATABASE_OBJECTS_BUILDERS[datastore_type] = builder


def get_builder(datastore_type) -> DatabaseObjectsBuilder:
    builder = DATABASE_OBJECTS_BUILDERS.get(datastore_type)
    if builder is None and isinstance(datastore_type, str):
        try:
            builder = DATABASE_OBJECTS_BUILDERS.get(SupportedDatabase(datastore_type))
        except ValueError:
            builder = None
    if builder is None:
        raise UnsupportedBackendError(getattr(datastore_type, 'value', datastore_type))
    return builder


async def get_database_objects(config) -> DatabaseObjects:
    """
    Build the database objects for a backend configuration.

    The configuration's `datastore_type` selects the builder. Connection
    oriented backends (MongoDB) open a real connection here, so call this
    once per logical connection and release it with `cleanup`.

    Raises:
        UnsupportedBackendError: No builder is registered for the kind; no
            builder is invoked.
    """
    datastore_type = getattr(config, 'datastore_type', None)
    builder = get_builder(datastore_type)
    logger.debug(f"Building database objects with {builder.__class__.__name__}")
    database_objects = builder.build(config)
    if inspect.isawaitable(database_objects):
        database_objects = await database_objects
    return database_objects


__all__ = [
    'DatabaseObjectsBuilder',
    'MemoryDatabaseObjectsBuilder',
    'DynamoDatabaseObjectsBuilder',
    'MongoDatabaseObjectsBuilder',
    'OpensearchDatabaseObjectsBuilder',
    'SqlDatabaseObjectsBuilder',
    'DATABASE_OBJECTS_BUILDERS',
    'register_builder',
    'get_builder',
    'get_database_objects',
]
