"""
Backend-agnostic query objects.

A query is a list of property conditions (all must match), an optional
sort, an optional `take` limit and an opaque `page` token handed back by a
previous search. Each datastore provider translates it to native calls.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from ..core.enums import PropertyMatch


@dataclass(frozen=True)
class PropertyQuery:
    name: str
    value: Any
    match: PropertyMatch = PropertyMatch.EQ
    case_sensitive: bool = True

    def matches(self, record: Dict[str, Any]) -> bool:
        if self.name not in record:
            return False
        stored = record[self.name]
        if self.match == PropertyMatch.EQ and not isinstance(self.value, str):
            return stored == self.value
        if stored is None:
            return False
        stored, wanted = str(stored), str(self.value)
        if not self.case_sensitive:
            stored, wanted = stored.lower(), wanted.lower()
        if self.match == PropertyMatch.STARTSWITH:
            return stored.startswith(wanted)
        if self.match == PropertyMatch.ENDSWITH:
            return stored.endswith(wanted)
        if self.match == PropertyMatch.CONTAINS:
            return wanted in stored
        return stored == wanted


@dataclass(frozen=True)
class SortStatement:
    key: str
    ascending: bool = True


@dataclass(frozen=True)
class OrmQuery:
    properties: tuple = ()
    sort: Optional[SortStatement] = None
    take: Optional[int] = None
    page: Any = None

    def __post_init__(self):
        if self.take is not None and int(self.take) < 1:
            raise ValueError(f"take must be a positive integer, got {self.take}")

    def matches(self, record: Dict[str, Any]) -> bool:
        return all(p.matches(record) for p in self.properties)

    def apply_sort(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Sort plain records in Python, keeping records without the key last"""
        if not self.sort:
            return records
        key = self.sort.key
        present = [r for r in records if r.get(key) is not None]
        missing = [r for r in records if r.get(key) is None]
        present.sort(key=lambda r: _sort_key(r[key]), reverse=not self.sort.ascending)
        return present + missing


def _sort_key(value: Any) -> tuple:
    # Schemaless records can mix types under one key: numbers, then strings, then the rest
    if isinstance(value, (int, float, Decimal)):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, str(value))


class OrmQueryBuilder:
    """
    Fluent builder for OrmQuery.

        query = (OrmQueryBuilder()
                 .property('name', 'ab', match='startswith')
                 .sort('name')
                 .take(10)
                 .compile())
    """

    def __init__(self):
        self._properties: List[PropertyQuery] = []
        self._sort: Optional[SortStatement] = None
        self._take: Optional[int] = None
        self._page: Any = None

    def property(self, name: str, value: Any,
                 match: Union[PropertyMatch, str] = PropertyMatch.EQ,
                 case_sensitive: bool = True) -> 'OrmQueryBuilder':
        self._properties.append(
            PropertyQuery(name, value, PropertyMatch(match), case_sensitive)
        )
        return self

    def sort(self, key: str, ascending: bool = True) -> 'OrmQueryBuilder':
        self._sort = SortStatement(key, ascending)
        return self

    def take(self, count: int) -> 'OrmQueryBuilder':
        if count is not None and int(count) < 1:
            raise ValueError(f"take must be a positive integer, got {count}")
        self._take = int(count) if count is not None else None
        return self

    def pagination(self, page: Any) -> 'OrmQueryBuilder':
        self._page = page
        return self

    def compile(self) -> OrmQuery:
        return OrmQuery(
            properties=tuple(self._properties),
            sort=self._sort,
            take=self._take,
            page=self._page,
        )
