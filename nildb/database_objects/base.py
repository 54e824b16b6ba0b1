"""
Base builder interface for all connection builders.
"""
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Union

from ..core.models import BaseDatabaseConfig, DatabaseObjects, TableNameFunc
from ..core.naming import NameResolver, default_get_table_name_for_model


class DatabaseObjectsBuilder(ABC):
    """
    Turns one backend configuration into a DatabaseObjects bundle.

    Builders are stateless and independent of each other. `build` may be a
    plain method or a coroutine; the factory awaits whatever it returns.
    """

    default_get_table_name: TableNameFunc = staticmethod(default_get_table_name_for_model)

    def __init__(self):
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def build(self, config: BaseDatabaseConfig) -> Union[DatabaseObjects, Awaitable[DatabaseObjects]]:
        pass

    def name_resolver_for(self, config: BaseDatabaseConfig) -> NameResolver:
        """Resolver using the configured naming function, or this builder's default"""
        return NameResolver(
            config.environment,
            config.system_name,
            config.get_table_name_for_model or self.default_get_table_name,
        )
