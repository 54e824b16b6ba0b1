from typing import Any, Dict

from ..core.enums import SupportedDatabase
from ..core.exceptions import ConfigurationError
from ..core.models import DatabaseObjects, SqlDatabaseConfig
from ..core.naming import get_system_infrastructure_name
from .base import DatabaseObjectsBuilder

# SQLAlchemy async driver per dialect
SQL_DRIVERS = {
    SupportedDatabase.SQLITE: 'sqlite+aiosqlite',
    SupportedDatabase.MYSQL: 'mysql+aiomysql',
    SupportedDatabase.POSTGRES: 'postgresql+asyncpg',
}

# Connection option names that map onto URL components
_URL_KEYS = {'user': 'username', 'password': 'password', 'host': 'host', 'port': 'port'}


def build_sql_connection_config(config: SqlDatabaseConfig) -> Dict[str, Any]:
    """
    Dialect-aware connection configuration.

    Returns {'client': <dialect>, 'connection': <driver options>}. File-based
    dialects never carry a `database`; server dialects get the configured
    database or the system infrastructure name.
    """
    connection = config.driver_options()
    if config.is_file_based:
        if not connection.get('filename'):
            raise ConfigurationError(f"Missing required configuration for {config.dialect.value}: filename")
    else:
        config.require('host')
        if config.database:
            connection['database'] = config.database
        else:
            config.require('environment', 'system_name')
            connection['database'] = get_system_infrastructure_name(
                config.environment, config.system_name
            )
    return {'client': config.dialect.value, 'connection': connection}


def build_sql_engine_arguments(connection_config: Dict[str, Any]) -> Dict[str, Any]:
    """Split a connection config into a SQLAlchemy URL and driver connect_args"""
    from sqlalchemy.engine import URL

    dialect = SupportedDatabase(connection_config['client'])
    connection = dict(connection_config['connection'])
    url_parts = {
        url_key: connection.pop(key) for key, url_key in _URL_KEYS.items() if key in connection
    }
    if 'port' in url_parts:
        url_parts['port'] = int(url_parts['port'])
    database = connection.pop('filename' if dialect == SupportedDatabase.SQLITE else 'database', None)
    url = URL.create(SQL_DRIVERS[dialect], database=database, **url_parts)
    return {'url': url, 'connect_args': connection}


class SqlDatabaseObjectsBuilder(DatabaseObjectsBuilder):
    """
    One implementation for every relational dialect.

    The engine connects lazily and owns its pool, so cleanup is a no-op and
    pool lifetime is left to the driver.
    """

    def build(self, config: SqlDatabaseConfig) -> DatabaseObjects:
        try:
            from sqlalchemy.ext.asyncio import create_async_engine
        except ImportError:
            raise ImportError(
                "sqlalchemy is required for SQL backends. "
                "Install it with: pip install sqlalchemy"
            )
        from ..datastore.sql_datastore import SqlDatastore

        connection_config = build_sql_connection_config(config)
        engine_arguments = build_sql_engine_arguments(connection_config)
        self._logger.info(
            f"Creating {config.dialect.value} database objects "
            f"({engine_arguments['url'].render_as_string(hide_password=True)})"
        )
        sql_engine = create_async_engine(
            engine_arguments['url'], connect_args=engine_arguments['connect_args']
        )
        return DatabaseObjects(
            datastore_provider=SqlDatastore(sql_engine, name_resolver=self.name_resolver_for(config)),
            handles={'sql_engine': sql_engine, 'sql_connection_config': connection_config},
        )
