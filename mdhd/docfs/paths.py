"""
MDHD DocFS - Path Utilities

Pure helpers for absolute, slash-delimited store paths. No I/O.
"""
import re

ROOT = "/"

_REPEATED_SLASHES = re.compile(r"/{2,}")


def normalize_path(path: str) -> str:
    """
    Normalize a path to use forward slashes and ensure it starts with /.

    Runs of slashes collapse to one and a trailing slash is removed except
    for the root itself, so the result is stable under re-normalization
    and its parent (see get_parent_path) is normalized too.
    """
    normalized = _REPEATED_SLASHES.sub("/", path.replace("\\", "/"))
    if not normalized.startswith("/"):
        normalized = "/" + normalized
    if len(normalized) > 1 and normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


def get_parent_path(path: str) -> str:
    """Get the parent path from a full path. Top-level paths have parent /."""
    last_slash = path.rfind("/")
    if last_slash <= 0:
        return ROOT
    return path[:last_slash]


def get_name(path: str) -> str:
    """Leaf segment of a path ("" for the root)."""
    return normalize_path(path).rsplit("/", 1)[-1]


def join_path(base: str, relative: str) -> str:
    """Join a base path and a relative path into a normalized path."""
    return normalize_path(f"{base}/{relative}")

