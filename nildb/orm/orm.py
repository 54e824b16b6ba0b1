from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from .model import FieldsSpec, ModelInstance, OrmModel


@dataclass(frozen=True)
class Orm:
    """Model factory and reference fetcher bound to one datastore provider"""
    Model: Callable[..., OrmModel]
    fetcher: Callable[[OrmModel, Any], Awaitable[Optional[ModelInstance]]]
    datastore_provider: Any = None


def orm(datastore_provider) -> Orm:
    if datastore_provider is None:
        raise ValueError("A datastore provider is required to create an ORM")

    def Model(name: str, fields: FieldsSpec = None, primary_key: str = 'id') -> OrmModel:
        return OrmModel(name, datastore_provider, fields=fields, primary_key=primary_key)

    async def fetcher(model: OrmModel, primary_key: Any) -> Optional[ModelInstance]:
        return await model.retrieve(primary_key)

    return Orm(Model=Model, fetcher=fetcher, datastore_provider=datastore_provider)
