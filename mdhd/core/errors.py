"""
Typed errors raised by the storage layer.

Every error carries the name of the operation that failed so callers can
report it without parsing messages. Point lookups never raise for a
missing key; they return None instead.
"""
from typing import Optional


class StorageError(Exception):
    """A storage operation failed."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        super().__init__(message or f"Failed to {operation}")


class StoreInitError(StorageError):
    """The underlying store could not be opened. The store is unusable."""


class DuplicatePathError(StorageError):
    """Insert rejected because a record already exists at the path."""

    def __init__(self, operation: str, path: str):
        self.path = path
        super().__init__(operation, f"Failed to {operation}: path already exists: {path}")
