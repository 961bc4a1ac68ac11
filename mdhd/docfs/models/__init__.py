"""
MDHD DocFS Models Package

Exports all document store models.
"""
from mdhd.docfs.models.base import StoreRecord, now_ms
from mdhd.docfs.models.file_record import StoredFile
from mdhd.docfs.models.directory import StoredDirectory
from mdhd.docfs.models.tree_node import FileTreeNode, NodeType
from mdhd.docfs.models.progress import UploadProgress, UploadProgressCallback

__all__ = [
    "StoreRecord",
    "now_ms",
    "StoredFile",
    "StoredDirectory",
    "FileTreeNode",
    "NodeType",
    "UploadProgress",
    "UploadProgressCallback",
]
