"""
Relational datastore provider shared by the sqlite, mysql and postgres dialects.
"""
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import and_, column, delete, func, insert, literal_column, select, table, update

from .base_datastore import DatastoreProvider, DatastoreSearchResult
from ..core.enums import PropertyMatch
from ..orm.query import OrmQuery, PropertyQuery


def _condition_for(prop: PropertyQuery):
    col = column(prop.name)
    if not isinstance(prop.value, str):
        return col == prop.value
    if prop.match == PropertyMatch.EQ:
        if prop.case_sensitive:
            return col == prop.value
        return func.lower(col) == prop.value.lower()
    if prop.match == PropertyMatch.STARTSWITH:
        method = col.startswith if prop.case_sensitive else col.istartswith
    elif prop.match == PropertyMatch.ENDSWITH:
        method = col.endswith if prop.case_sensitive else col.iendswith
    else:
        method = col.contains if prop.case_sensitive else col.icontains
    return method(prop.value, autoescape=True)


def build_select(table_name: str, query: OrmQuery):
    """SELECT for a query; fetches one row past `take` to detect a next page"""
    stmt = select(literal_column('*')).select_from(table(table_name))
    if query.properties:
        stmt = stmt.where(and_(*[_condition_for(p) for p in query.properties]))
    if query.sort:
        sort_column = column(query.sort.key)
        stmt = stmt.order_by(sort_column.asc() if query.sort.ascending else sort_column.desc())
    offset = int(query.page or 0)
    if offset:
        stmt = stmt.offset(offset)
    if query.take:
        stmt = stmt.limit(query.take + 1)
    return stmt


class SqlDatastore(DatastoreProvider):
    """
    SQL provider on top of a SQLAlchemy `AsyncEngine`.

    Tables are expected to exist with one column per model field. Saves are
    an UPDATE by primary key followed by an INSERT when no row matched, in
    one transaction. Page tokens are integer offsets.
    """

    def __init__(self, engine, name_resolver=None):
        super().__init__(name_resolver)
        self.engine = engine

    def _table(self, model, column_names: Iterable[str] = ()):
        return table(self.get_name_for_model(model), *[column(name) for name in column_names])

    async def save(self, instance) -> Dict[str, Any]:
        record = instance.to_obj()
        primary_key_name = instance.model.get_primary_key_name()
        sql_table = self._table(instance.model, record.keys())
        async with self.engine.begin() as conn:
            result = await conn.execute(
                update(sql_table)
                .where(sql_table.c[primary_key_name] == instance.get_primary_key())
                .values(**record)
            )
            if result.rowcount == 0:
                await conn.execute(insert(sql_table).values(**record))
        return record

    async def delete(self, instance) -> None:
        sql_table = self._table(instance.model)
        async with self.engine.begin() as conn:
            await conn.execute(
                delete(sql_table).where(
                    column(instance.model.get_primary_key_name()) == instance.get_primary_key()
                )
            )

    async def retrieve(self, model, primary_key: Any) -> Optional[Dict[str, Any]]:
        stmt = (
            select(literal_column('*'))
            .select_from(self._table(model))
            .where(column(model.get_primary_key_name()) == primary_key)
        )
        async with self.engine.connect() as conn:
            row = (await conn.execute(stmt)).mappings().first()
        return dict(row) if row is not None else None

    async def search(self, model, query: OrmQuery) -> DatastoreSearchResult:
        stmt = build_select(self.get_name_for_model(model), query)
        async with self.engine.connect() as conn:
            rows = [dict(row) for row in (await conn.execute(stmt)).mappings().all()]

        next_page = None
        if query.take and len(rows) > query.take:
            rows = rows[:query.take]
            next_page = int(query.page or 0) + query.take
        return DatastoreSearchResult(instances=rows, page=next_page)
