"""
MDHD - Markdown document store.

Persistent hierarchical storage for text documents, with bulk ingest and
tree reconstruction for navigation.
"""
__version__ = "0.1.0"
