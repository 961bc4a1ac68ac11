"""
MDHD DocFS - StoredFile Model
"""
from mdhd.docfs.models.base import StoreRecord


def byte_length(content: str) -> int:
    """Size of content in bytes (UTF-8)."""
    return len(content.encode("utf-8"))


class StoredFile(StoreRecord):
    """A text document stored at a unique path."""
    content: str
    size: int
    updated_at: int

    def __str__(self) -> str:
        return f"File: {self.name} ({self.path}, {self.size} bytes)"
