"""
Minimal ORM: models bound to a datastore provider, and the query objects
providers understand.
"""

from .query import OrmQuery, OrmQueryBuilder, PropertyQuery, SortStatement
from .model import Field, ModelInstance, OrmModel, OrmSearchResult
from .orm import Orm, orm

__all__ = [
    'OrmQuery', 'OrmQueryBuilder', 'PropertyQuery', 'SortStatement',
    'Field', 'ModelInstance', 'OrmModel', 'OrmSearchResult',
    'Orm', 'orm',
]
