from ..core.models import DatabaseObjects, DynamoDatabaseConfig, HttpsAgentConfig
from .base import DatabaseObjectsBuilder


class DynamoDatabaseObjectsBuilder(DatabaseObjectsBuilder):
    """
    DynamoDB client and resource over a tuned HTTPS transport.

    The boto3 client keeps no resources that need an explicit release, so
    cleanup is a no-op.
    """

    @staticmethod
    def build_client_config(config: DynamoDatabaseConfig):
        from botocore.config import Config

        agent = config.https_agent_config or HttpsAgentConfig()
        return Config(
            region_name=config.aws_region,
            tcp_keepalive=agent.keep_alive,
            max_pool_connections=agent.max_sockets,
        )

    def build(self, config: DynamoDatabaseConfig) -> DatabaseObjects:
        config.require('aws_region', 'environment', 'system_name')
        try:
            import boto3
        except ImportError:
            raise ImportError(
                "boto3 is required for the DynamoDB backend. "
                "Install it with: pip install boto3"
            )
        from ..datastore.dynamo_datastore import DynamoDatastore

        self._logger.info(
            f"Creating DynamoDB database objects in {config.aws_region} "
            f"for {config.system_name}/{config.environment}"
        )
        client_config = self.build_client_config(config)
        session = boto3.session.Session(region_name=config.aws_region)
        dynamo_db_client = session.client('dynamodb', config=client_config)
        dynamo_resource = session.resource('dynamodb', config=client_config)

        return DatabaseObjects(
            datastore_provider=DynamoDatastore(
                dynamo_resource, name_resolver=self.name_resolver_for(config)
            ),
            handles={
                'dynamo_db_client': dynamo_db_client,
                'dynamo_resource': dynamo_resource,
            },
        )
