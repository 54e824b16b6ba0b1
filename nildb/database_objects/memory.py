from ..core.models import DatabaseObjects, MemoryDatabaseConfig
from ..datastore.memory_datastore import MemoryDatastore
from .base import DatabaseObjectsBuilder


class MemoryDatabaseObjectsBuilder(DatabaseObjectsBuilder):
    """Volatile storage for tests; nothing to release"""

    def build(self, config: MemoryDatabaseConfig = None) -> DatabaseObjects:
        self._logger.debug("Creating memory database objects")
        return DatabaseObjects(datastore_provider=MemoryDatastore())
