"""
MDHD DocFS - Ingest Sources

Inputs handed to the ingest pipeline by the host: named byte streams and,
for drag-and-drop, entry trees whose directories are read in bounded
batches. A local filesystem implementation of the entry API is included.
"""
import asyncio
import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Callable, Iterable, List, Optional, Protocol, runtime_checkable

from loguru import logger

DEFAULT_BATCH_SIZE = 100


@dataclass
class UploadFile:
    """
    A named byte stream offered for ingest.

    `relative_path` carries the host's directory hint (for example
    "docs/guide/readme.md" when a whole folder was selected); it is empty
    for loose files. Bytes come from `data` or are read lazily from
    `source`.
    """
    name: str
    data: Optional[bytes] = None
    relative_path: str = ""
    source: Optional[Path] = None

    @classmethod
    def from_path(cls, path, relative_path: str = "") -> "UploadFile":
        path = Path(path)
        return cls(name=path.name, relative_path=relative_path, source=path)

    def with_relative_path(self, relative_path: str) -> "UploadFile":
        return dataclasses.replace(self, relative_path=relative_path)

    async def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.source is None:
            raise ValueError(f"Upload file has no data: {self.name}")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.source.read_bytes)

    async def read_text(self, encoding: str = "utf-8") -> str:
        raw = await self.read_bytes()
        return raw.decode(encoding)


# ==================== Drag-and-drop API ====================

@runtime_checkable
class DirectoryReader(Protocol):
    """Reads a directory's children. Returns [] once all were returned."""

    async def read_entries(self) -> List["FileSystemEntry"]:
        ...


@runtime_checkable
class FileSystemEntry(Protocol):
    name: str
    full_path: str  # "/dropped-dir/sub/file.md"
    is_file: bool
    is_directory: bool

    async def file(self) -> UploadFile:
        ...

    def create_reader(self) -> DirectoryReader:
        ...


@runtime_checkable
class DropItem(Protocol):
    kind: str  # "file" for file system items, "string" for text drops

    def get_as_entry(self) -> Optional[FileSystemEntry]:
        ...

    def get_as_file(self) -> Optional[UploadFile]:
        ...


async def iter_directory_entries(entry: FileSystemEntry) -> AsyncIterator[FileSystemEntry]:
    """
    Yield every immediate child of a directory entry.

    Hosts return children in bounded batches; this drains the reader until
    it reports an empty batch.
    """
    reader = entry.create_reader()
    while True:
        batch = await reader.read_entries()
        if not batch:
            return
        for child in batch:
            yield child


async def collect_entry_files(
    entry: FileSystemEntry,
    accept: Optional[Callable[[str], bool]] = None,
) -> List[UploadFile]:
    """
    Recursively gather the files below a directory entry.

    Each file's relative path is rebuilt from the entry's full path so the
    result can be ingested as a directory upload. Subdirectories are read
    one after another. Files rejected by `accept` are never opened. A
    directory that cannot be listed is logged and skipped; files gathered
    before the failure are kept.
    """
    files: List[UploadFile] = []
    try:
        async for child in iter_directory_entries(entry):
            if child.is_directory:
                files.extend(await collect_entry_files(child, accept))
            elif child.is_file:
                if accept is not None and not accept(child.name):
                    continue
                try:
                    file = await child.file()
                except (OSError, ValueError) as e:
                    logger.error(f"Cannot read dropped entry {child.full_path}: {e}")
                    continue
                files.append(file.with_relative_path(child.full_path.lstrip("/")))
    except (OSError, ValueError) as e:
        logger.error(f"Cannot list dropped directory {entry.full_path}: {e}")
    return files


# ==================== Local filesystem ====================

class LocalDirectoryReader:
    """Reads a local directory with os.scandir, `batch_size` entries per call."""

    def __init__(self, entry: "LocalEntry", batch_size: int = DEFAULT_BATCH_SIZE):
        self.entry = entry
        self.batch_size = batch_size
        self._scanner = None
        self._done = False

    async def read_entries(self) -> List["LocalEntry"]:
        if self._done:
            return []
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._next_batch)

    def _next_batch(self) -> List["LocalEntry"]:
        try:
            if self._scanner is None:
                self._scanner = os.scandir(self.entry.path)

            batch = []
            for item in self._scanner:
                if item.is_symlink():
                    continue
                batch.append(LocalEntry(
                    Path(item.path),
                    f"{self.entry.full_path}/{item.name}",
                    batch_size=self.batch_size,
                ))
                if len(batch) >= self.batch_size:
                    break
        except OSError:
            self._finish()
            raise

        if not batch:
            self._finish()
        return batch

    def _finish(self) -> None:
        if self._scanner is not None:
            self._scanner.close()
        self._done = True


class LocalEntry:
    """A file or directory on the local disk, exposed through the entry API."""

    def __init__(self, path: Path, full_path: str, batch_size: int = DEFAULT_BATCH_SIZE):
        self.path = Path(path)
        self.name = self.path.name
        self.full_path = full_path
        self.is_directory = self.path.is_dir()
        self.is_file = self.path.is_file()
        self.batch_size = batch_size

    async def file(self) -> UploadFile:
        if not self.is_file:
            raise ValueError(f"Not a file: {self.path}")
        return UploadFile.from_path(self.path)

    def create_reader(self) -> LocalDirectoryReader:
        return LocalDirectoryReader(self, batch_size=self.batch_size)

    def __repr__(self) -> str:
        return f"LocalEntry({self.full_path!r})"


class LocalDropItem:
    """A local path presented as a dropped item."""

    kind = "file"

    def __init__(self, path, batch_size: int = DEFAULT_BATCH_SIZE):
        self.path = Path(path).resolve()
        self.batch_size = batch_size

    def get_as_entry(self) -> Optional[LocalEntry]:
        if not self.path.exists():
            return None
        return LocalEntry(self.path, f"/{self.path.name}", batch_size=self.batch_size)

    def get_as_file(self) -> Optional[UploadFile]:
        if not self.path.is_file():
            return None
        return UploadFile.from_path(self.path)


def drop_paths(paths: Iterable, batch_size: int = DEFAULT_BATCH_SIZE) -> List[LocalDropItem]:
    """Wrap local files and directories as drop items."""
    return [LocalDropItem(path, batch_size=batch_size) for path in paths]
