"""Pytest configuration and fixtures for nildb tests."""

import sys
import logging
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import text

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from nildb.core.models import MemoryDatabaseConfig, SqlDatabaseConfig
from nildb.services import get_database_objects, get_orm, simple_cruds_service

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@pytest_asyncio.fixture
async def memory_database_objects():
    """Memory backend database objects, released after the test."""
    database_objects = await get_database_objects(MemoryDatabaseConfig())
    try:
        yield database_objects
    finally:
        await database_objects.cleanup()


@pytest.fixture
def memory_orm(memory_database_objects):
    return get_orm(memory_database_objects.datastore_provider)


@pytest.fixture
def user_model(memory_orm):
    return memory_orm.Model('User', ['name', 'age'])


@pytest.fixture
def users_service(user_model):
    return simple_cruds_service(user_model)


@pytest.fixture
def sqlite_config(tmp_path):
    return SqlDatabaseConfig(
        dialect='sqlite',
        filename=str(tmp_path / 'nildb.sqlite'),
        environment='test',
        system_name='shop',
    )


@pytest_asyncio.fixture
async def sqlite_database_objects(sqlite_config):
    """SQLite backend with a `shop-test-user` table ready for use."""
    database_objects = await get_database_objects(sqlite_config)
    engine = database_objects['sql_engine']
    async with engine.begin() as conn:
        await conn.execute(text(
            'CREATE TABLE "shop-test-user" (id TEXT PRIMARY KEY, name TEXT, age INTEGER)'
        ))
    try:
        yield database_objects
    finally:
        await database_objects.cleanup()
        await engine.dispose()
