"""
nildb - storage-agnostic data access for domain models

Main modules:
- core: Backend configurations, database objects, naming and errors
- datastore: Datastore provider implementations per backend
- database_objects: Backend registry and connection builders
- orm: Models bound to a datastore provider and backend-agnostic queries
- services: Database-objects factory, ORM binder and CRUD+search service
- config: Configuration loading
"""

from .core import (
    SupportedDatabase, DatabaseObjects, SearchResult,
    MemoryDatabaseConfig, DynamoDatabaseConfig, HttpsAgentConfig, MongoDatabaseConfig,
    OpensearchDatabaseConfig, SqlDatabaseConfig,
    NilDbError, ConfigurationError, UnsupportedBackendError, InvariantViolationError,
    NameResolver,
)
from .config import ConfigLoader
from .orm import OrmQueryBuilder, OrmQuery, Field
from .services import get_database_objects, get_orm, simple_cruds_service, SimpleCrudsService

__version__ = "1.0.0"
__all__ = [
    'SupportedDatabase',
    'DatabaseObjects',
    'SearchResult',
    'MemoryDatabaseConfig',
    'DynamoDatabaseConfig',
    'HttpsAgentConfig',
    'MongoDatabaseConfig',
    'OpensearchDatabaseConfig',
    'SqlDatabaseConfig',
    'NilDbError',
    'ConfigurationError',
    'UnsupportedBackendError',
    'InvariantViolationError',
    'NameResolver',
    'ConfigLoader',
    'OrmQueryBuilder',
    'OrmQuery',
    'Field',
    'get_database_objects',
    'get_orm',
    'simple_cruds_service',
    'SimpleCrudsService',
]
