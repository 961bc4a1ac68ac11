"""
MDHD DocFS - Tree Builder

Reconstructs the navigable forest from the flat file and directory
collections. The tree is rebuilt from scratch on every call.
"""
from typing import Dict, Iterable, List

from loguru import logger

from mdhd.docfs.models.directory import StoredDirectory
from mdhd.docfs.models.file_record import StoredFile
from mdhd.docfs.models.tree_node import FileTreeNode
from mdhd.docfs.paths import ROOT, get_parent_path
from mdhd.docfs.services.directory_service import DirectoryService
from mdhd.docfs.services.file_service import FileService


def node_sort_key(node: FileTreeNode):
    """Directories first, then names compared case-insensitively."""
    return (node.type != "directory", node.name.casefold(), node.name)


def sort_nodes(nodes: List[FileTreeNode]) -> None:
    nodes.sort(key=node_sort_key)
    for node in nodes:
        if node.children:
            sort_nodes(node.children)


def build_file_tree(
    directories: Iterable[StoredDirectory],
    files: Iterable[StoredFile],
) -> List[FileTreeNode]:
    """
    Link records into a sorted forest.

    Every record becomes exactly one node. A record whose parent directory
    is not stored is attached at the root rather than dropped.
    """
    dir_nodes: Dict[str, FileTreeNode] = {}
    nodes: List[FileTreeNode] = []

    for directory in directories:
        node = FileTreeNode(
            id=directory.id,
            name=directory.name,
            path=directory.path,
            type="directory",
            children=[],
        )
        dir_nodes[directory.path] = node
        nodes.append(node)

    for file in files:
        nodes.append(FileTreeNode(
            id=file.id,
            name=file.name,
            path=file.path,
            type="file",
            content=file.content,
            size=file.size,
        ))

    root: List[FileTreeNode] = []
    orphans = 0

    for node in nodes:
        parent_path = get_parent_path(node.path)
        if parent_path == ROOT:
            root.append(node)
            continue
        parent = dir_nodes.get(parent_path)
        if parent is not None:
            parent.children.append(node)
        else:
            orphans += 1
            root.append(node)

    if orphans:
        logger.debug(f"File tree: attached {orphans} orphaned records at root")

    sort_nodes(root)
    return root


class TreeBuilder:
    """Loads both collections and builds the forest. Read-only."""

    def __init__(self, file_service: FileService, directory_service: DirectoryService):
        self.file_service = file_service
        self.directory_service = directory_service

    async def build(self) -> List[FileTreeNode]:
        directories = await self.directory_service.get_all_directories()
        files = await self.file_service.get_all_files()
        return build_file_tree(directories, files)
