"""
Naming conventions for physical storage names.

Every function here is pure: the same (environment, system_name, model)
always resolves to the same name.
"""
import re
from typing import Any, Optional

from .models import TableNameFunc

_NON_ALNUM = re.compile(r'[^a-zA-Z0-9]+')
_CAMEL_BOUNDARY = re.compile(r'([a-z0-9])([A-Z])')


def kebab_case(value: str) -> str:
    value = _CAMEL_BOUNDARY.sub(r'\1-\2', value)
    return _NON_ALNUM.sub('-', value).strip('-').lower()


def get_model_name(model: Any) -> str:
    """Accept an ORM model, anything with a `name`, or a plain string"""
    if isinstance(model, str):
        return model
    get_name = getattr(model, 'get_name', None)
    if callable(get_name):
        return get_name()
    name = getattr(model, 'name', None)
    if name:
        return name
    raise TypeError(f"Cannot determine a model name from {model!r}")


def get_system_infrastructure_name(environment: str, system_name: str) -> str:
    return kebab_case(f"{system_name}-{environment}")


def default_get_table_name_for_model(environment: str, system_name: str, model: Any) -> str:
    return kebab_case(f"{system_name}-{environment}-{get_model_name(model)}")


def get_mongo_collection_name_for_model(environment: str, system_name: str, model: Any) -> str:
    # The database is already scoped to system and environment
    return kebab_case(get_model_name(model))


class NameResolver:
    """Binds a naming function to one environment and system"""

    def __init__(self, environment: str, system_name: str,
                 func: Optional[TableNameFunc] = None):
        self.environment = environment
        self.system_name = system_name
        self.func = func or default_get_table_name_for_model

    def resolve(self, model: Any) -> str:
        return self.func(self.environment, self.system_name, model)

    def __call__(self, model: Any) -> str:
        return self.resolve(model)

    def __repr__(self):
        return f"NameResolver({self.environment!r}, {self.system_name!r}, {self.func.__name__})"
