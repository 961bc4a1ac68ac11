"""
MDHD DocFS Ingest Package

Upload and drag-and-drop ingest of text documents.
"""
from mdhd.docfs.ingest.sources import (
    DirectoryReader,
    DropItem,
    FileSystemEntry,
    LocalDirectoryReader,
    LocalDropItem,
    LocalEntry,
    UploadFile,
    collect_entry_files,
    drop_paths,
    iter_directory_entries,
)
from mdhd.docfs.ingest.upload import (
    DropResult,
    UploadResult,
    UploadService,
    extract_directory_paths,
    filter_accepted_files,
    get_file_path,
    is_accepted_file,
)

__all__ = [
    "DirectoryReader",
    "DropItem",
    "FileSystemEntry",
    "LocalDirectoryReader",
    "LocalDropItem",
    "LocalEntry",
    "UploadFile",
    "collect_entry_files",
    "drop_paths",
    "iter_directory_entries",
    "DropResult",
    "UploadResult",
    "UploadService",
    "extract_directory_paths",
    "filter_accepted_files",
    "get_file_path",
    "is_accepted_file",
]
