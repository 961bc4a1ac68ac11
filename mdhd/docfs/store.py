"""
MDHD DocFS - Storage Engine

Durable storage for the Files and Directories collections on MongoDB.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Union

from bson import ObjectId
from loguru import logger
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from mdhd.core.config import MongoSettings
from mdhd.core.errors import DuplicatePathError, StorageError, StoreInitError


def parse_id(record_id: Union[str, ObjectId, None]) -> Optional[ObjectId]:
    """Convert an id to ObjectId, or None if it cannot name a record."""
    if isinstance(record_id, ObjectId):
        return record_id
    if isinstance(record_id, str) and ObjectId.is_valid(record_id):
        return ObjectId(record_id)
    return None


class DocumentStore:
    """
    Two collections, files and directories, each keyed by `_id` with a
    unique index on `path` and a non-unique index on `parent_path`.

    Every call is its own unit of work. There is no atomicity across
    calls: a caller doing "check path, then insert" can lose a race with
    another writer, which surfaces as DuplicatePathError.

    Usage:
        store = DocumentStore(db)
        await store.open()
        async with store.operation("add file", path):
            await store.files.insert_one(doc)
    """

    def __init__(
        self,
        database: AsyncDatabase,
        files_collection: str = "files",
        directories_collection: str = "directories",
    ):
        self.db = database
        self.files_collection = files_collection
        self.directories_collection = directories_collection
        self._opened = False
        self._open_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, database: AsyncDatabase, settings: MongoSettings) -> "DocumentStore":
        return cls(
            database,
            files_collection=settings.files_collection,
            directories_collection=settings.directories_collection,
        )

    @property
    def files(self) -> AsyncCollection:
        return self.db[self.files_collection]

    @property
    def directories(self) -> AsyncCollection:
        return self.db[self.directories_collection]

    @property
    def is_open(self) -> bool:
        return self._opened

    # ==================== Lifecycle ====================

    async def open(self) -> None:
        """
        Create collection indices on first use. Safe to call repeatedly
        and concurrently; only the first call touches the database.

        Raises:
            StoreInitError: If the indices cannot be created
        """
        if self._opened:
            return
        async with self._open_lock:
            if self._opened:
                return
            try:
                for collection in (self.files, self.directories):
                    await collection.create_index("path", unique=True, name="path")
                    await collection.create_index("parent_path", name="parent_path")
            except PyMongoError as e:
                logger.error(f"Failed to open document store: {e}")
                raise StoreInitError("open store", f"Failed to open document store: {e}") from e
            self._opened = True
            logger.debug(
                f"Document store open ({self.files_collection}, {self.directories_collection})"
            )

    def close(self) -> None:
        """Forget the open state. The DatabaseManager owns the client."""
        self._opened = False

    @asynccontextmanager
    async def operation(self, name: str, path: Optional[str] = None) -> AsyncIterator[None]:
        """
        Run one storage operation, wrapping driver errors with its name.

        Args:
            name: Human readable operation name ("add file", ...)
            path: Path the operation targets, reported on duplicates
        """
        await self.open()
        try:
            yield
        except DuplicateKeyError as e:
            raise DuplicatePathError(name, path or "") from e
        except PyMongoError as e:
            logger.error(f"Storage operation '{name}' failed: {e}")
            raise StorageError(name, f"Failed to {name}: {e}") from e

    # ==================== Collection Primitives ====================

    async def insert(self, collection: AsyncCollection, doc: Dict[str, Any], operation: str) -> None:
        """Insert a document; fails with DuplicatePathError if its path is taken."""
        async with self.operation(operation, doc.get("path")):
            await collection.insert_one(doc)

    async def find_by_id(
        self, collection: AsyncCollection, record_id: Union[str, ObjectId], operation: str
    ) -> Optional[Dict[str, Any]]:
        oid = parse_id(record_id)
        if oid is None:
            return None
        async with self.operation(operation):
            return await collection.find_one({"_id": oid})

    async def find_one(
        self, collection: AsyncCollection, query: Dict[str, Any], operation: str
    ) -> Optional[Dict[str, Any]]:
        async with self.operation(operation):
            return await collection.find_one(query)

    async def find_all(
        self, collection: AsyncCollection, query: Optional[Dict[str, Any]], operation: str
    ) -> List[Dict[str, Any]]:
        async with self.operation(operation):
            results = []
            async for doc in collection.find(query or {}):
                results.append(doc)
            return results

    async def update_by_id(
        self,
        collection: AsyncCollection,
        record_id: Union[str, ObjectId],
        fields: Dict[str, Any],
        operation: str,
    ) -> bool:
        """Set fields on one document. Returns False if it does not exist."""
        oid = parse_id(record_id)
        if oid is None:
            return False
        async with self.operation(operation):
            result = await collection.update_one({"_id": oid}, {"$set": fields})
            return result.matched_count > 0

    async def delete_by_id(
        self, collection: AsyncCollection, record_id: Union[str, ObjectId], operation: str
    ) -> bool:
        oid = parse_id(record_id)
        if oid is None:
            return False
        async with self.operation(operation):
            result = await collection.delete_one({"_id": oid})
            return result.deleted_count > 0

    async def delete_many(
        self, collection: AsyncCollection, query: Dict[str, Any], operation: str
    ) -> int:
        async with self.operation(operation):
            result = await collection.delete_many(query)
            return result.deleted_count

    # ==================== Bulk Operations ====================

    async def clear_all(self) -> None:
        """Remove every file and directory record. Indices are kept."""
        async with self.operation("clear all data"):
            await self.files.delete_many({})
            await self.directories.delete_many({})
        logger.warning("Document store cleared")
