"""
Example showing backend selection, ORM binding and the generic CRUD service.
"""
import asyncio
import logging
import sys

from nildb.config import ConfigLoader
from nildb.core.models import MemoryDatabaseConfig
from nildb.orm import Field, OrmQueryBuilder
from nildb.services import get_database_objects, get_orm, simple_cruds_service

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def memory_example():
    """Example using the memory backend"""
    print("\n=== Memory Backend Example ===")

    async with await get_database_objects(MemoryDatabaseConfig()) as database_objects:
        orm = get_orm(database_objects.datastore_provider)
        users = simple_cruds_service(orm.Model('User', {
            'name': Field(required=True),
            'role': Field(default='member'),
        }))

        await users.create({'id': '1', 'name': 'Ada'})
        await users.create({'id': '2', 'name': 'Alan', 'role': 'admin'})
        await users.create({'id': '3', 'name': 'Grace'})
        print(f"Retrieved: {await users.retrieve('1')}")

        query = OrmQueryBuilder().property('name', 'a', match='startswith', case_sensitive=False).sort('name').compile()
        result = await users.search(query)
        print(f"Search matched: {[u['name'] for u in result.instances]} (page={result.page})")

        await users.delete('missing')
        await users.delete('1')
        print(f"After delete: {await users.retrieve('1')}")


async def yaml_example(path: str):
    """Example loading any backend from a YAML file"""
    print(f"\n=== Backend from {path} ===")

    config = ConfigLoader.load_from_yaml(path)
    database_objects = await get_database_objects(config)
    try:
        print(f"Provider: {type(database_objects.datastore_provider).__name__}")
        print(f"Handles: {sorted(database_objects.handles)}")
    finally:
        await database_objects.cleanup()


async def main():
    await memory_example()
    if len(sys.argv) > 1:
        await yaml_example(sys.argv[1])


if __name__ == "__main__":
    asyncio.run(main())
