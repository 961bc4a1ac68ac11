"""
MDHD DocFS - hierarchical document store.

Files and directories keyed by path, cascading deletes, tree
reconstruction and bulk ingest.
"""
from mdhd.docfs.paths import get_parent_path, normalize_path
from mdhd.docfs.models import (
    FileTreeNode,
    StoredDirectory,
    StoredFile,
    UploadProgress,
    UploadProgressCallback,
)
from mdhd.docfs.store import DocumentStore
from mdhd.docfs.services import DirectoryService, FileService
from mdhd.docfs.tree import TreeBuilder, build_file_tree
from mdhd.docfs.ingest import DropResult, UploadFile, UploadResult, UploadService, drop_paths
from mdhd.docfs.storage import FileStorage

__all__ = [
    "get_parent_path",
    "normalize_path",
    "FileTreeNode",
    "StoredDirectory",
    "StoredFile",
    "UploadProgress",
    "UploadProgressCallback",
    "DocumentStore",
    "DirectoryService",
    "FileService",
    "TreeBuilder",
    "build_file_tree",
    "DropResult",
    "UploadFile",
    "UploadResult",
    "UploadService",
    "drop_paths",
    "FileStorage",
]
