import uuid

import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from mdhd.core.config import AppConfig
from mdhd.docfs.services.directory_service import DirectoryService
from mdhd.docfs.services.file_service import FileService
from mdhd.docfs.storage import FileStorage
from mdhd.docfs.store import DocumentStore


@pytest.fixture
def mongo_client():
    """In-process MongoDB double. Each test gets its own server state."""
    return AsyncMongoMockClient()


@pytest.fixture
def app_config():
    config = AppConfig()
    config.mongo.database_name = f"mdhd_test_{uuid.uuid4().hex[:8]}"
    return config


@pytest_asyncio.fixture
async def store(mongo_client, app_config):
    store = DocumentStore.from_settings(
        mongo_client[app_config.mongo.database_name], app_config.mongo
    )
    await store.open()
    yield store
    store.close()


@pytest.fixture
def file_service(store):
    return FileService(store)


@pytest.fixture
def directory_service(store, file_service):
    return DirectoryService(store, file_service)


@pytest_asyncio.fixture
async def storage(mongo_client, app_config):
    async with FileStorage.from_config(app_config, client=mongo_client) as storage:
        yield storage
