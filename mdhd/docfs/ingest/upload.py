"""
MDHD DocFS - Upload Pipeline

Turns uploaded files, whole directories and drag-and-drop entry trees into
stored file and directory records.
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from loguru import logger

from mdhd.core.config import IngestSettings
from mdhd.core.errors import DuplicatePathError, StorageError
from mdhd.docfs.models.directory import StoredDirectory
from mdhd.docfs.models.file_record import StoredFile
from mdhd.docfs.models.progress import UploadProgress, UploadProgressCallback
from mdhd.docfs.paths import ROOT, get_name, get_parent_path, join_path, normalize_path
from mdhd.docfs.services.directory_service import DirectoryService
from mdhd.docfs.services.file_service import FileService
from mdhd.docfs.ingest.sources import DropItem, UploadFile, collect_entry_files

DEFAULT_EXTENSIONS = (".md", ".markdown")


@dataclass
class UploadResult:
    files: List[StoredFile] = field(default_factory=list)
    directories: List[StoredDirectory] = field(default_factory=list)


@dataclass
class DropResult(UploadResult):
    is_directory: bool = False


def is_accepted_file(file_name: str, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> bool:
    """Check the name against accepted extensions, ignoring case."""
    name = file_name.lower()
    return any(name.endswith(ext.lower()) for ext in extensions)


def filter_accepted_files(
    files: Iterable[UploadFile], extensions: Sequence[str] = DEFAULT_EXTENSIONS
) -> List[UploadFile]:
    return [file for file in files if is_accepted_file(file.name, extensions)]


def get_file_path(file: UploadFile, base_path: str = "") -> str:
    """Target path of an upload: base path plus its relative path or name."""
    return join_path(base_path, file.relative_path or file.name)


def extract_directory_paths(file_paths: Iterable[str]) -> List[str]:
    """
    Every ancestor directory implied by the file paths, deduplicated and
    sorted by length so parents come before their children.
    """
    dirs = set()
    for file_path in file_paths:
        current = get_parent_path(normalize_path(file_path))
        while current != ROOT:
            dirs.add(current)
            current = get_parent_path(current)
    return sorted(dirs, key=lambda p: (len(p), p))


class UploadService:
    """
    Ingest pipeline.

    Ingest is best effort per item: a file that cannot be read or stored
    is logged and skipped, and the batch carries on. Files and directories
    whose path is already taken are skipped without error, so running the
    same upload twice stores everything once.
    """

    def __init__(
        self,
        file_service: FileService,
        directory_service: DirectoryService,
        settings: Optional[IngestSettings] = None,
    ):
        self.file_service = file_service
        self.directory_service = directory_service
        self.settings = settings or IngestSettings()

    def is_accepted(self, file_name: str) -> bool:
        return is_accepted_file(file_name, self.settings.accepted_extensions)

    def filter_files(self, files: Iterable[UploadFile]) -> List[UploadFile]:
        return filter_accepted_files(files, self.settings.accepted_extensions)

    @staticmethod
    def _report(
        on_progress: Optional[UploadProgressCallback], total: int, processed: int, current_file: str
    ) -> None:
        if on_progress is not None:
            on_progress(UploadProgress(total=total, processed=processed, current_file=current_file))

    async def process_file_upload(
        self,
        files: Iterable[UploadFile],
        base_path: str = "",
        on_progress: Optional[UploadProgressCallback] = None,
    ) -> List[StoredFile]:
        """
        Store accepted files under base_path.

        Progress is reported before each file (with the count finished so
        far) and once more at the end with processed == total and an
        empty current_file.

        Returns:
            Newly created files (skipped and failed ones are left out)
        """
        accepted = self.filter_files(files)
        total = len(accepted)
        stored: List[StoredFile] = []

        for index, file in enumerate(accepted):
            self._report(on_progress, total, index, file.name)
            path = get_file_path(file, base_path)

            try:
                if await self.file_service.file_exists(path):
                    logger.debug(f"Skipping existing file {path}")
                    continue
                content = await file.read_text(self.settings.encoding)
                stored.append(await self.file_service.add_file(path, content, name=file.name))
            except DuplicatePathError:
                logger.debug(f"Skipping file stored concurrently at {path}")
            except (StorageError, OSError, UnicodeDecodeError, ValueError) as e:
                logger.error(f"Failed to process file {file.name}: {e}")

        self._report(on_progress, total, total, "")
        logger.info(f"Uploaded {len(stored)} of {total} files")
        return stored

    async def ensure_directories(self, dir_paths: Iterable[str]) -> List[StoredDirectory]:
        """Create missing directories in the given order. Returns the new ones."""
        created: List[StoredDirectory] = []
        for dir_path in dir_paths:
            try:
                if await self.directory_service.directory_exists(dir_path):
                    continue
                created.append(
                    await self.directory_service.add_directory(dir_path, name=get_name(dir_path))
                )
            except DuplicatePathError:
                logger.debug(f"Skipping directory stored concurrently at {dir_path}")
            except StorageError as e:
                logger.error(f"Failed to create directory {dir_path}: {e}")
        return created

    async def process_directory_upload(
        self,
        files: Iterable[UploadFile],
        on_progress: Optional[UploadProgressCallback] = None,
        base_path: str = "",
    ) -> UploadResult:
        """
        Store a selected directory: create its directory skeleton first,
        shallowest paths first, then the files.
        """
        accepted = self.filter_files(files)
        if not accepted:
            self._report(on_progress, 0, 0, "")
            return UploadResult()

        dir_paths = extract_directory_paths(get_file_path(file, base_path) for file in accepted)
        directories = await self.ensure_directories(dir_paths)
        stored = await self.process_file_upload(accepted, base_path, on_progress)

        return UploadResult(files=stored, directories=directories)

    async def process_dropped_items(
        self,
        items: Iterable[DropItem],
        on_progress: Optional[UploadProgressCallback] = None,
    ) -> DropResult:
        """
        Store drag-and-drop items.

        If any item is a directory the whole drop is ingested as a
        directory upload; otherwise the items are plain file uploads.
        """
        all_files: List[UploadFile] = []
        is_directory = False

        for item in items:
            if item.kind != "file":
                continue

            entry = item.get_as_entry()
            if entry is None:
                continue

            if entry.is_directory:
                is_directory = True
                all_files.extend(await collect_entry_files(entry, self.is_accepted))
            elif entry.is_file:
                file = item.get_as_file()
                if file is not None:
                    all_files.append(file)

        if is_directory:
            result = await self.process_directory_upload(all_files, on_progress)
            return DropResult(files=result.files, directories=result.directories, is_directory=True)

        files = await self.process_file_upload(all_files, "", on_progress)
        return DropResult(files=files, directories=[], is_directory=False)
