import os
import re
from dataclasses import fields
from typing import Any, Dict

import yaml

from ..core.enums import SupportedDatabase, SQL_DATABASES
from ..core.exceptions import ConfigurationError, UnsupportedBackendError
from ..core.models import (
    BaseDatabaseConfig, DatabaseConfig, DynamoDatabaseConfig, MemoryDatabaseConfig,
    MongoDatabaseConfig, OpensearchDatabaseConfig, SqlDatabaseConfig,
)

# ${NAME} or ${NAME:-default}
_ENV_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}')

_CONFIG_CLASSES = {
    SupportedDatabase.MEMORY: MemoryDatabaseConfig,
    SupportedDatabase.DYNAMO: DynamoDatabaseConfig,
    SupportedDatabase.MONGO: MongoDatabaseConfig,
    SupportedDatabase.OPENSEARCH: OpensearchDatabaseConfig,
}


class ConfigLoader:
    """Load backend configurations from YAML files or dictionaries"""

    @staticmethod
    def load_from_yaml(file_path: str) -> DatabaseConfig:
        """Load configuration from YAML file"""
        with open(file_path, 'r') as file:
            config_dict = yaml.safe_load(file)

        if config_dict is None:
            raise ConfigurationError(f"Empty or invalid YAML file: {file_path}")

        # Allow the backend section to be nested under a `database` key
        if 'datastore_type' not in config_dict and isinstance(config_dict.get('database'), dict):
            config_dict = config_dict['database']
        return ConfigLoader.load_from_dict(config_dict)

    @staticmethod
    def load_from_dict(config_dict: Dict[str, Any]) -> DatabaseConfig:
        """
        Build the configuration variant selected by `datastore_type`.

        String values may reference environment variables as ${NAME} or
        ${NAME:-default}.
        """
        processed_config = ConfigLoader._substitute_env(dict(config_dict))
        raw_type = processed_config.pop('datastore_type', None)
        if raw_type is None:
            raise ConfigurationError("Configuration is missing 'datastore_type'")
        try:
            datastore_type = SupportedDatabase(str(raw_type).lower())
        except ValueError:
            raise UnsupportedBackendError(raw_type)

        if datastore_type in SQL_DATABASES:
            return ConfigLoader._load_sql(datastore_type, processed_config)

        config_class = _CONFIG_CLASSES[datastore_type]
        ConfigLoader._check_unknown_keys(config_class, processed_config, datastore_type)
        return config_class(**processed_config)

    @staticmethod
    def _load_sql(datastore_type: SupportedDatabase, config_dict: Dict[str, Any]) -> SqlDatabaseConfig:
        known = {f.name for f in fields(SqlDatabaseConfig)}
        config_dict.pop('dialect', None)
        options = dict(config_dict.pop('options', None) or {})
        # Anything without a dedicated field is a driver option
        for key in [k for k in config_dict if k not in known]:
            options[key] = config_dict.pop(key)
        return SqlDatabaseConfig(dialect=datastore_type, options=options, **config_dict)

    @staticmethod
    def _check_unknown_keys(config_class, config_dict: Dict[str, Any], datastore_type) -> None:
        known = {f.name for f in fields(config_class)}
        unknown = sorted(set(config_dict) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration for {datastore_type.value}: {', '.join(unknown)}"
            )

    @staticmethod
    def _substitute_env(value: Any) -> Any:
        if isinstance(value, str):
            def replace(match):
                name, default = match.group(1), match.group(2)
                resolved = os.environ.get(name, default)
                if resolved is None:
                    raise ConfigurationError(f"Environment variable {name} is not set")
                return resolved
            return _ENV_PATTERN.sub(replace, value)
        if isinstance(value, dict):
            return {k: ConfigLoader._substitute_env(v) for k, v in value.items()}
        if isinstance(value, list):
            return [ConfigLoader._substitute_env(v) for v in value]
        return value

    @staticmethod
    def config_to_dict(config: BaseDatabaseConfig) -> Dict[str, Any]:
        """Serializable view of a configuration (naming functions are dropped)"""
        result: Dict[str, Any] = {'datastore_type': config.datastore_type.value}
        for f in fields(config):
            if f.name in ('dialect', 'get_table_name_for_model'):
                continue
            value = getattr(config, f.name)
            if value is None or value == {}:
                continue
            if f.name == 'https_agent_config':
                value = {'keep_alive': value.keep_alive, 'max_sockets': value.max_sockets}
            result[f.name] = value
        return result
