"""
MDHD DocFS - File Storage

Entry points API for the document store: record operations, the file
tree and ingest, all bound to one explicit DocumentStore.
"""
from typing import Dict, Iterable, List, Optional

from loguru import logger

from mdhd.core.config import AppConfig, IngestSettings
from mdhd.core.database.manager import DatabaseManager
from mdhd.core.errors import StoreInitError
from mdhd.docfs.ingest.sources import DropItem, UploadFile
from mdhd.docfs.ingest.upload import DropResult, UploadResult, UploadService
from mdhd.docfs.models.directory import StoredDirectory
from mdhd.docfs.models.file_record import StoredFile
from mdhd.docfs.models.progress import UploadProgressCallback
from mdhd.docfs.models.tree_node import FileTreeNode
from mdhd.docfs.services.directory_service import DirectoryService
from mdhd.docfs.services.file_service import FileService
from mdhd.docfs.store import DocumentStore
from mdhd.docfs.tree import TreeBuilder


class FileStorage:
    """
    Document store facade.

    Construct one per store and pass it to consumers. Several instances
    over different databases can coexist (tests rely on this).

    Usage:
        async with FileStorage.from_config(config) as storage:
            await storage.process_dropped_items(drop_paths(["notes"]))
            tree = await storage.build_file_tree()
    """

    def __init__(
        self,
        store: DocumentStore,
        ingest_settings: Optional[IngestSettings] = None,
        database_manager: Optional[DatabaseManager] = None,
    ):
        self.store = store
        self.database_manager = database_manager
        self.files = FileService(store)
        self.directories = DirectoryService(store, self.files)
        self.tree_builder = TreeBuilder(self.files, self.directories)
        self.uploader = UploadService(self.files, self.directories, ingest_settings)

    @classmethod
    def from_config(cls, config: AppConfig, client=None) -> "FileStorage":
        """
        Build storage from application config.

        Args:
            config: Application settings
            client: Optional pre-built Mongo client (defaults to a new
                AsyncMongoClient for config.mongo)
        """
        manager = DatabaseManager(config.mongo, client=client)
        database = manager.init()
        store = DocumentStore.from_settings(database, config.mongo)
        return cls(store, config.ingest, database_manager=manager)

    # ==================== Lifecycle ====================

    async def open(self) -> None:
        await self.store.open()
        logger.debug("FileStorage ready")

    async def close(self) -> None:
        self.store.close()
        if self.database_manager is not None:
            await self.database_manager.close()

    async def __aenter__(self) -> "FileStorage":
        try:
            await self.open()
        except StoreInitError:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ==================== Files ====================

    async def add_file(self, path: str, content: str, name: Optional[str] = None) -> StoredFile:
        return await self.files.add_file(path, content, name=name)

    async def get_file(self, file_id: str) -> Optional[StoredFile]:
        return await self.files.get_file(file_id)

    async def get_file_by_path(self, path: str) -> Optional[StoredFile]:
        return await self.files.get_file_by_path(path)

    async def get_files_by_parent_path(self, parent_path: str) -> List[StoredFile]:
        return await self.files.get_files_by_parent_path(parent_path)

    async def get_all_files(self) -> List[StoredFile]:
        return await self.files.get_all_files()

    async def update_file(self, file_id: str, content: str) -> Optional[StoredFile]:
        return await self.files.update_file(file_id, content)

    async def delete_file(self, file_id: str) -> None:
        await self.files.delete_file(file_id)

    async def delete_files_by_path_prefix(self, path_prefix: str) -> int:
        return await self.files.delete_files_by_path_prefix(path_prefix)

    async def file_exists(self, path: str) -> bool:
        return await self.files.file_exists(path)

    # ==================== Directories ====================

    async def add_directory(self, path: str, name: Optional[str] = None) -> StoredDirectory:
        return await self.directories.add_directory(path, name=name)

    async def get_directory(self, directory_id: str) -> Optional[StoredDirectory]:
        return await self.directories.get_directory(directory_id)

    async def get_directory_by_path(self, path: str) -> Optional[StoredDirectory]:
        return await self.directories.get_directory_by_path(path)

    async def get_directories_by_parent_path(self, parent_path: str) -> List[StoredDirectory]:
        return await self.directories.get_directories_by_parent_path(parent_path)

    async def get_all_directories(self) -> List[StoredDirectory]:
        return await self.directories.get_all_directories()

    async def delete_directory(self, directory_id: str) -> None:
        await self.directories.delete_directory(directory_id)

    async def delete_directory_recursive(self, path: str) -> Dict[str, int]:
        return await self.directories.delete_directory_recursive(path)

    async def directory_exists(self, path: str) -> bool:
        return await self.directories.directory_exists(path)

    # ==================== Tree / Bulk ====================

    async def build_file_tree(self) -> List[FileTreeNode]:
        return await self.tree_builder.build()

    async def clear_all(self) -> None:
        await self.store.clear_all()

    # ==================== Ingest ====================

    async def process_file_upload(
        self,
        files: Iterable[UploadFile],
        base_path: str = "",
        on_progress: Optional[UploadProgressCallback] = None,
    ) -> List[StoredFile]:
        return await self.uploader.process_file_upload(files, base_path, on_progress)

    async def process_directory_upload(
        self,
        files: Iterable[UploadFile],
        on_progress: Optional[UploadProgressCallback] = None,
    ) -> UploadResult:
        return await self.uploader.process_directory_upload(files, on_progress)

    async def process_dropped_items(
        self,
        items: Iterable[DropItem],
        on_progress: Optional[UploadProgressCallback] = None,
    ) -> DropResult:
        return await self.uploader.process_dropped_items(items, on_progress)
