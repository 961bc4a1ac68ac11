"""
MDHD DocFS - StoredDirectory Model
"""
from mdhd.docfs.models.base import StoreRecord


class StoredDirectory(StoreRecord):
    """A directory in the virtual file system. Holds no content of its own."""

    def __str__(self) -> str:
        return f"Directory: {self.name} ({self.path})"
