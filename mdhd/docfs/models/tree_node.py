"""
MDHD DocFS - FileTreeNode Model

Transient view used by navigation UIs. Never persisted.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel

NodeType = Literal["file", "directory"]


class FileTreeNode(BaseModel):
    id: str
    name: str
    path: str
    type: NodeType
    children: Optional[List["FileTreeNode"]] = None  # Directories only
    content: Optional[str] = None  # Files only
    size: Optional[int] = None

    @property
    def is_directory(self) -> bool:
        return self.type == "directory"

    def to_dict(self) -> dict:
        """Plain dict with absent optional fields left out."""
        return self.model_dump(exclude_none=True)


FileTreeNode.model_rebuild()
