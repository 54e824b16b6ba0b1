"""
Datastore providers: one per backend family, all implementing DatastoreProvider.

Only the memory provider is imported here; the others pull in their driver
packages and are loaded by their builders on demand.
"""

from .base_datastore import DatastoreProvider, DatastoreSearchResult, paginate_records
from .memory_datastore import MemoryDatastore

__all__ = [
    'DatastoreProvider',
    'DatastoreSearchResult',
    'paginate_records',
    'MemoryDatastore',
]
