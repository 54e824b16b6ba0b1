from typing import Optional, Union
from urllib.parse import quote_plus

from ..core.models import DatabaseObjects, MongoDatabaseConfig
from ..core.naming import get_mongo_collection_name_for_model, get_system_infrastructure_name
from .base import DatabaseObjectsBuilder

DEFAULT_MONGO_PORT = 27017


def create_mongo_connection_string(host: str, port: Optional[Union[int, str]] = None,
                                   username: Optional[str] = None,
                                   password: Optional[str] = None) -> str:
    credentials = ''
    if username:
        credentials = f"{quote_plus(username)}:{quote_plus(password or '')}@"
    return f"mongodb://{credentials}{host}:{port or DEFAULT_MONGO_PORT}"


class MongoDatabaseObjectsBuilder(DatabaseObjectsBuilder):
    """
    Connected MongoDB client. The only builder that talks to the network
    before returning; cleanup closes the client.
    """

    default_get_table_name = staticmethod(get_mongo_collection_name_for_model)

    async def build(self, config: MongoDatabaseConfig) -> DatabaseObjects:
        config.require('host', 'environment', 'system_name')
        try:
            from pymongo import AsyncMongoClient
        except ImportError:
            raise ImportError(
                "pymongo is required for the MongoDB backend. "
                "Install it with: pip install pymongo"
            )
        from ..datastore.mongo_datastore import MongoDatastore

        database_name = get_system_infrastructure_name(config.environment, config.system_name)
        mongo_client = AsyncMongoClient(create_mongo_connection_string(
            config.host, config.port, config.username, config.password,
        ))

        self._logger.info(f"Connecting to MongoDB at {config.host}, database {database_name}")
        try:
            await mongo_client.aconnect()
            await mongo_client.admin.command('ping')
        except Exception as e:
            self._logger.error(f"Failed to connect to MongoDB at {config.host}: {e}")
            await mongo_client.close()
            raise
        self._logger.info(f"Successfully connected to MongoDB at {config.host}")

        async def release() -> None:
            self._logger.info(f"Closing MongoDB connection to {config.host}")
            await mongo_client.close()

        return DatabaseObjects(
            datastore_provider=MongoDatastore(
                mongo_client, database_name, name_resolver=self.name_resolver_for(config)
            ),
            release=release,
            handles={'mongo_client': mongo_client},
        )
