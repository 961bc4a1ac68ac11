"""
MDHD DocFS Services Package

Record operations for files and directories.
"""
from mdhd.docfs.services.file_service import FileService
from mdhd.docfs.services.directory_service import DirectoryService

__all__ = [
    "FileService",
    "DirectoryService",
]
