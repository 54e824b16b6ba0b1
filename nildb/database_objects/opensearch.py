from urllib.parse import quote

from ..core.models import DatabaseObjects, OpensearchDatabaseConfig
from .base import DatabaseObjectsBuilder


def create_opensearch_node(host: str, username: str, password: str) -> str:
    return f"https://{quote(username, safe='')}:{quote(password, safe='')}@{host}"


class OpensearchDatabaseObjectsBuilder(DatabaseObjectsBuilder):
    """Stateless HTTPS client with credentials in the node URL; nothing to release"""

    def build(self, config: OpensearchDatabaseConfig) -> DatabaseObjects:
        config.require('host', 'username', 'password', 'environment', 'system_name')
        try:
            from opensearchpy import OpenSearch
        except ImportError:
            raise ImportError(
                "opensearch-py is required for the OpenSearch backend. "
                "Install it with: pip install opensearch-py"
            )
        from ..datastore.opensearch_datastore import OpensearchDatastore

        self._logger.info(f"Creating OpenSearch database objects for https://{config.host}")
        client = OpenSearch(
            hosts=[create_opensearch_node(config.host, config.username, config.password)]
        )
        return DatabaseObjects(
            datastore_provider=OpensearchDatastore(
                client, name_resolver=self.name_resolver_for(config)
            ),
            handles={'opensearch_client': client},
        )
