"""
Model definitions bound to a datastore provider.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from ..core.exceptions import ModelValidationError
from .query import OrmQuery

logger = logging.getLogger(__name__)

_MISSING = object()


def generate_primary_key() -> str:
    return str(uuid.uuid4())


@dataclass
class Field:
    """A declared model property"""
    required: bool = False
    default: Any = None
    default_factory: Optional[Callable[[], Any]] = None

    def get_default(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default


FieldsSpec = Union[Mapping[str, Field], Iterable[str], None]


class ModelInstance:
    """A live, provider-backed instance of a model"""

    def __init__(self, model: 'OrmModel', data: Dict[str, Any]):
        self.model = model
        self._data = data

    def get_primary_key(self) -> Any:
        return self._data.get(self.model.get_primary_key_name())

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def to_obj(self) -> Dict[str, Any]:
        """Plain-data snapshot of the instance"""
        return dict(self._data)

    def validate(self) -> Dict[str, str]:
        return self.model.validate(self._data)

    async def save(self) -> Optional['ModelInstance']:
        errors = self.validate()
        if errors:
            raise ModelValidationError(self.model.get_name(), errors)
        record = await self.model.datastore_provider.save(self)
        if record is None:
            return None
        return self.model.create(record)

    async def delete(self) -> None:
        await self.model.datastore_provider.delete(self)

    def __eq__(self, other):
        if not isinstance(other, ModelInstance):
            return NotImplemented
        return self.model is other.model and self._data == other._data

    def __repr__(self):
        return f"<{self.model.get_name()} {self.get_primary_key()!r}>"


@dataclass
class OrmSearchResult:
    instances: List[ModelInstance] = field(default_factory=list)
    page: Any = None


class OrmModel:
    """
    A domain model bound to one datastore provider.

    When fields are declared, instances only keep declared fields and the
    primary key; otherwise any data is accepted as-is.
    """

    def __init__(self, name: str, datastore_provider, fields: FieldsSpec = None,
                 primary_key: str = 'id'):
        if not name:
            raise ValueError("A model needs a name")
        self._name = name
        self._primary_key = primary_key
        self.datastore_provider = datastore_provider
        self.fields: Dict[str, Field] = self._normalize_fields(fields)

    def _normalize_fields(self, fields: FieldsSpec) -> Dict[str, Field]:
        if fields is None:
            return {}
        if isinstance(fields, Mapping):
            normalized = dict(fields)
        else:
            normalized = {name: Field() for name in fields}
        normalized.setdefault(
            self._primary_key, Field(default_factory=generate_primary_key)
        )
        return normalized

    def get_name(self) -> str:
        return self._name

    def get_primary_key_name(self) -> str:
        return self._primary_key

    def create(self, data: Mapping[str, Any]) -> ModelInstance:
        """Build an in-memory instance. Nothing is persisted until save()"""
        data = dict(data or {})
        if not self.fields:
            if data.get(self._primary_key) is None:
                data[self._primary_key] = generate_primary_key()
            return ModelInstance(self, data)

        values = {}
        for name, declared in self.fields.items():
            value = data.get(name, _MISSING)
            if value is _MISSING or value is None:
                value = declared.get_default()
            if value is not None:
                values[name] = value
        return ModelInstance(self, values)

    def validate(self, data: Mapping[str, Any]) -> Dict[str, str]:
        errors = {}
        if data.get(self._primary_key) is None:
            errors[self._primary_key] = "primary key is required"
        for name, declared in self.fields.items():
            if declared.required and data.get(name) is None:
                errors[name] = "field is required"
        return errors

    async def retrieve(self, primary_key: Any) -> Optional[ModelInstance]:
        record = await self.datastore_provider.retrieve(self, primary_key)
        if record is None:
            return None
        return self.create(record)

    async def search(self, query: OrmQuery) -> OrmSearchResult:
        result = await self.datastore_provider.search(self, query)
        logger.debug(f"Search on {self._name} matched {len(result.instances)} records")
        return OrmSearchResult(
            instances=[self.create(record) for record in result.instances],
            page=result.page,
        )

    def __repr__(self):
        return f"OrmModel({self._name!r})"
