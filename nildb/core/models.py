import logging
from dataclasses import dataclass, field, fields
from typing import (
    TYPE_CHECKING, Any, Awaitable, Callable, ClassVar, Dict, Generic, Optional,
    Tuple, TypeVar, Union,
)

from .enums import SupportedDatabase, SQL_DATABASES, FILE_BASED_DATABASES
from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..datastore.base_datastore import DatastoreProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (environment, system_name, model) -> physical table/collection/index name
TableNameFunc = Callable[[str, str, Any], str]


@dataclass
class BaseDatabaseConfig:
    """Fields shared by every backend configuration"""
    environment: Optional[str] = None
    system_name: Optional[str] = None
    get_table_name_for_model: Optional[TableNameFunc] = None

    # Keys consumed by the factory itself and never forwarded to a driver
    FACTORY_KEYS: ClassVar[Tuple[str, ...]] = (
        'datastore_type', 'environment', 'system_name', 'database',
        'get_table_name_for_model',
    )

    @property
    def datastore_type(self) -> SupportedDatabase:
        raise NotImplementedError

    def require(self, *names: str) -> None:
        """Raise ConfigurationError naming every listed field that is empty"""
        missing = [name for name in names if getattr(self, name, None) in (None, '')]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration for {self.datastore_type.value}: "
                f"{', '.join(missing)}"
            )


@dataclass
class MemoryDatabaseConfig(BaseDatabaseConfig):
    """Volatile process-local storage, for tests and as a default"""

    @property
    def datastore_type(self) -> SupportedDatabase:
        return SupportedDatabase.MEMORY


@dataclass
class HttpsAgentConfig:
    """Transport tuning for the DynamoDB client"""
    keep_alive: bool = True
    max_sockets: int = 50


@dataclass
class DynamoDatabaseConfig(BaseDatabaseConfig):
    aws_region: Optional[str] = None
    https_agent_config: Optional[HttpsAgentConfig] = None

    def __post_init__(self):
        if isinstance(self.https_agent_config, dict):
            self.https_agent_config = HttpsAgentConfig(**self.https_agent_config)

    @property
    def datastore_type(self) -> SupportedDatabase:
        return SupportedDatabase.DYNAMO


@dataclass
class MongoDatabaseConfig(BaseDatabaseConfig):
    host: Optional[str] = None
    port: Optional[Union[int, str]] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def datastore_type(self) -> SupportedDatabase:
        return SupportedDatabase.MONGO


@dataclass
class OpensearchDatabaseConfig(BaseDatabaseConfig):
    host: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def datastore_type(self) -> SupportedDatabase:
        return SupportedDatabase.OPENSEARCH


@dataclass
class SqlDatabaseConfig(BaseDatabaseConfig):
    """
    Relational configuration shared by the sqlite, mysql and postgres dialects.

    Everything that is not a factory key is forwarded to the driver as a
    connection option; `options` carries driver settings that have no
    dedicated field.
    """
    dialect: Union[SupportedDatabase, str] = SupportedDatabase.SQLITE
    database: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = None
    filename: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        try:
            self.dialect = SupportedDatabase(self.dialect)
        except ValueError:
            raise ConfigurationError(f"Unknown SQL dialect: {self.dialect}")
        if self.dialect not in SQL_DATABASES:
            raise ConfigurationError(f"{self.dialect.value} is not a SQL dialect")

    @property
    def datastore_type(self) -> SupportedDatabase:
        return self.dialect

    @property
    def is_file_based(self) -> bool:
        return self.dialect in FILE_BASED_DATABASES

    def driver_options(self) -> Dict[str, Any]:
        """Connection fields with factory-only keys and unset values stripped"""
        connection = {}
        for f in fields(self):
            if f.name in self.FACTORY_KEYS or f.name in ('dialect', 'options'):
                continue
            value = getattr(self, f.name)
            if value is not None:
                connection[f.name] = value
        connection.update(self.options)
        return connection


DatabaseConfig = Union[
    MemoryDatabaseConfig,
    DynamoDatabaseConfig,
    MongoDatabaseConfig,
    OpensearchDatabaseConfig,
    SqlDatabaseConfig,
]


async def _no_release() -> None:
    return None


@dataclass
class DatabaseObjects:
    """
    Database related objects, both high level and low level.

    `datastore_provider` is what the ORM binds to. `handles` exposes the raw
    clients (e.g. `mongo_client`, `sql_engine`) for callers that need to go
    below the ORM. The caller owns the bundle and must call `cleanup` once
    when done, or use it as an async context manager.
    """
    datastore_provider: 'DatastoreProvider'
    release: Callable[[], Awaitable[None]] = _no_release
    handles: Dict[str, Any] = field(default_factory=dict)
    _released: bool = field(default=False, init=False, repr=False)

    async def cleanup(self) -> None:
        if self._released:
            logger.debug("Database objects already released, skipping cleanup")
            return
        self._released = True
        await self.release()

    def __getitem__(self, name: str) -> Any:
        return self.handles[name]

    async def __aenter__(self) -> 'DatabaseObjects':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.cleanup()


@dataclass(frozen=True)
class SearchResult(Generic[T]):
    """Materialized search results with the provider's opaque page token"""
    instances: Tuple[T, ...]
    page: Any = None
