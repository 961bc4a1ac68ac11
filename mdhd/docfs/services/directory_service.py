"""
MDHD DocFS - Directory Service

CRUD operations on directory records, including cascading delete.
"""
import re
from typing import Dict, List, Optional

from bson import ObjectId
from loguru import logger

from mdhd.docfs.models.base import now_ms
from mdhd.docfs.models.directory import StoredDirectory
from mdhd.docfs.paths import ROOT, get_name, get_parent_path, normalize_path
from mdhd.docfs.services.file_service import FileService
from mdhd.docfs.store import DocumentStore


def subtree_query(path: str) -> dict:
    """Mongo query matching `path` itself and everything below it."""
    if path == ROOT:
        return {}
    return {
        "$or": [
            {"path": path},
            {"path": {"$regex": "^" + re.escape(path + "/")}},
        ]
    }


class DirectoryService:
    """Directory record operations built on the DocumentStore."""

    def __init__(self, store: DocumentStore, file_service: Optional[FileService] = None):
        self.store = store
        self.file_service = file_service or FileService(store)

    async def add_directory(self, path: str, name: Optional[str] = None) -> StoredDirectory:
        """
        Create a new directory record.

        Raises:
            DuplicatePathError: If a directory already exists at the path
        """
        path = normalize_path(path)
        directory = StoredDirectory(
            id=str(ObjectId()),
            name=name if name is not None else get_name(path),
            path=path,
            parent_path=get_parent_path(path),
            created_at=now_ms(),
        )
        await self.store.insert(self.store.directories, directory.to_document(), "add directory")
        logger.debug(f"Added directory {directory.path}")
        return directory

    async def get_directory(self, directory_id: str) -> Optional[StoredDirectory]:
        doc = await self.store.find_by_id(self.store.directories, directory_id, "get directory")
        return StoredDirectory.from_document(doc) if doc else None

    async def get_directory_by_path(self, path: str) -> Optional[StoredDirectory]:
        doc = await self.store.find_one(
            self.store.directories, {"path": normalize_path(path)}, "get directory by path"
        )
        return StoredDirectory.from_document(doc) if doc else None

    async def get_directories_by_parent_path(self, parent_path: str) -> List[StoredDirectory]:
        docs = await self.store.find_all(
            self.store.directories,
            {"parent_path": normalize_path(parent_path)},
            "get directories by parent path",
        )
        return [StoredDirectory.from_document(doc) for doc in docs]

    async def get_all_directories(self) -> List[StoredDirectory]:
        docs = await self.store.find_all(self.store.directories, None, "get all directories")
        return [StoredDirectory.from_document(doc) for doc in docs]

    async def directory_exists(self, path: str) -> bool:
        return await self.get_directory_by_path(path) is not None

    async def delete_directory(self, directory_id: str) -> None:
        """Delete a single directory record by id. Contents are left alone."""
        await self.store.delete_by_id(self.store.directories, directory_id, "delete directory")

    async def delete_directory_recursive(self, path: str) -> Dict[str, int]:
        """
        Delete a directory and everything below it.

        Files go by plain path prefix, so "/docs" also takes "/docs.md" and
        "/docs2/a.md". Directories go only when equal to or nested under the
        path, so a "/docs2" directory record survives.

        Runs in two phases, files first and then directories. The phases
        are not atomic: if the second fails, empty directory records
        remain and calling this again finishes the job.

        Returns:
            dict: Statistics {files_deleted, directories_deleted}
        """
        path = normalize_path(path)

        files_deleted = await self.file_service.delete_files_by_path_prefix(path)
        directories_deleted = await self.store.delete_many(
            self.store.directories, subtree_query(path), "delete directory recursively"
        )

        logger.info(
            f"Cascade deleted {path}: {directories_deleted} directories, {files_deleted} files"
        )
        return {"files_deleted": files_deleted, "directories_deleted": directories_deleted}
