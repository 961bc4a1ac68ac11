"""
Core framework pieces shared by the document store: configuration,
logging, typed errors and the database connection manager.
"""
from .config import AppConfig, ConfigManager
from .errors import DuplicatePathError, StorageError, StoreInitError

__all__ = [
    "AppConfig",
    "ConfigManager",
    "DuplicatePathError",
    "StorageError",
    "StoreInitError",
]
