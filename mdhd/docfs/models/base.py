"""
MDHD DocFS - Record Models

Base class for records persisted in the document store.
"""
import time
from typing import Any, Dict, Type, TypeVar

from bson import ObjectId
from pydantic import BaseModel

T = TypeVar("T", bound="StoreRecord")


def now_ms() -> int:
    """Current time as integer milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


class StoreRecord(BaseModel):
    """
    Fields shared by files and directories.

    `id` is the string form of the document's `_id` ObjectId. It is
    assigned once at creation and never changes.
    """
    id: str
    name: str
    path: str
    parent_path: str
    created_at: int

    @classmethod
    def from_document(cls: Type[T], doc: Dict[str, Any]) -> T:
        data = {k: v for k, v in doc.items() if k != "_id"}
        return cls(id=str(doc["_id"]), **data)

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(exclude={"id"})
        doc["_id"] = ObjectId(self.id)
        return doc
