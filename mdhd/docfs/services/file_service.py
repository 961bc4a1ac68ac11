"""
MDHD DocFS - File Service

CRUD operations on file records.
"""
import re
from typing import List, Optional

from bson import ObjectId
from loguru import logger

from mdhd.docfs.models.base import now_ms
from mdhd.docfs.models.file_record import StoredFile, byte_length
from mdhd.docfs.paths import get_name, get_parent_path, normalize_path
from mdhd.docfs.store import DocumentStore


class FileService:
    """
    File record operations built on the DocumentStore.

    Point lookups return None for a missing record and never raise.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    async def add_file(self, path: str, content: str, name: Optional[str] = None) -> StoredFile:
        """
        Create a new file record.

        Args:
            path: Absolute file path (normalized before storing)
            content: Text body
            name: Display name, defaults to the last path segment

        Returns:
            Created StoredFile

        Raises:
            DuplicatePathError: If a file already exists at the path
        """
        path = normalize_path(path)
        now = now_ms()
        file = StoredFile(
            id=str(ObjectId()),
            name=name if name is not None else get_name(path),
            path=path,
            parent_path=get_parent_path(path),
            content=content,
            size=byte_length(content),
            created_at=now,
            updated_at=now,
        )
        await self.store.insert(self.store.files, file.to_document(), "add file")
        logger.debug(f"Added file {file.path} ({file.size} bytes)")
        return file

    async def get_file(self, file_id: str) -> Optional[StoredFile]:
        doc = await self.store.find_by_id(self.store.files, file_id, "get file")
        return StoredFile.from_document(doc) if doc else None

    async def get_file_by_path(self, path: str) -> Optional[StoredFile]:
        doc = await self.store.find_one(
            self.store.files, {"path": normalize_path(path)}, "get file by path"
        )
        return StoredFile.from_document(doc) if doc else None

    async def get_files_by_parent_path(self, parent_path: str) -> List[StoredFile]:
        docs = await self.store.find_all(
            self.store.files,
            {"parent_path": normalize_path(parent_path)},
            "get files by parent path",
        )
        return [StoredFile.from_document(doc) for doc in docs]

    async def get_all_files(self) -> List[StoredFile]:
        docs = await self.store.find_all(self.store.files, None, "get all files")
        return [StoredFile.from_document(doc) for doc in docs]

    async def file_exists(self, path: str) -> bool:
        return await self.get_file_by_path(path) is not None

    async def update_file(self, file_id: str, content: str) -> Optional[StoredFile]:
        """
        Replace a file's content.

        Recomputes size and moves updated_at forward (always strictly past
        its previous value). Never creates a record.

        Returns:
            Updated StoredFile, or None if no file has this id
        """
        file = await self.get_file(file_id)
        if file is None:
            return None

        file.content = content
        file.size = byte_length(content)
        file.updated_at = max(now_ms(), file.updated_at + 1)

        updated = await self.store.update_by_id(
            self.store.files,
            file.id,
            {"content": file.content, "size": file.size, "updated_at": file.updated_at},
            "update file",
        )
        if not updated:
            # Deleted between the read and the write
            return None
        logger.debug(f"Updated file {file.path} ({file.size} bytes)")
        return file

    async def delete_file(self, file_id: str) -> None:
        """Delete a file by id. Unknown ids are ignored."""
        await self.store.delete_by_id(self.store.files, file_id, "delete file")

    async def delete_files_by_path_prefix(self, path_prefix: str) -> int:
        """
        Delete every file whose path starts with the normalized prefix.

        This is a plain string prefix match: "/docs" also removes
        "/docs.md" and "/docs2/a.md".

        Returns:
            Number of files deleted
        """
        prefix = normalize_path(path_prefix)
        deleted = await self.store.delete_many(
            self.store.files,
            {"path": {"$regex": "^" + re.escape(prefix)}},
            "delete files by path prefix",
        )
        logger.debug(f"Deleted {deleted} files with prefix {prefix}")
        return deleted

