from .enums import SupportedDatabase, PropertyMatch, SQL_DATABASES, FILE_BASED_DATABASES
from .exceptions import (
    NilDbError, ConfigurationError, UnsupportedBackendError,
    InvariantViolationError, ModelValidationError,
)
from .models import (
    BaseDatabaseConfig, MemoryDatabaseConfig, DynamoDatabaseConfig, HttpsAgentConfig,
    MongoDatabaseConfig, OpensearchDatabaseConfig, SqlDatabaseConfig, DatabaseConfig,
    DatabaseObjects, SearchResult,
)
from .naming import (
    NameResolver, get_system_infrastructure_name, default_get_table_name_for_model,
    get_mongo_collection_name_for_model,
)

__all__ = [
    'SupportedDatabase', 'PropertyMatch', 'SQL_DATABASES', 'FILE_BASED_DATABASES',
    'NilDbError', 'ConfigurationError', 'UnsupportedBackendError',
    'InvariantViolationError', 'ModelValidationError',
    'BaseDatabaseConfig', 'MemoryDatabaseConfig', 'DynamoDatabaseConfig', 'HttpsAgentConfig',
    'MongoDatabaseConfig', 'OpensearchDatabaseConfig', 'SqlDatabaseConfig', 'DatabaseConfig',
    'DatabaseObjects', 'SearchResult',
    'NameResolver', 'get_system_infrastructure_name', 'default_get_table_name_for_model',
    'get_mongo_collection_name_for_model',
]
