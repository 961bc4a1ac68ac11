"""
MDHD - Console Application

Ingest local markdown files and directories into the document store and
browse what is stored.

Usage:
    python -m mdhd ingest notes/ README.md
    python -m mdhd tree
    python -m mdhd cat /notes/README.md
    python -m mdhd rm /notes
    python -m mdhd clear
"""
import argparse
import asyncio
import sys
from typing import List, Optional

from loguru import logger

from mdhd.core.config import ConfigManager
from mdhd.core.errors import StorageError
from mdhd.core.logging import setup_logging
from mdhd.docfs.ingest.sources import drop_paths
from mdhd.docfs.models.progress import UploadProgress
from mdhd.docfs.models.tree_node import FileTreeNode
from mdhd.docfs.storage import FileStorage


def format_tree(nodes: List[FileTreeNode], indent: int = 0) -> List[str]:
    """Render a forest as indented lines, directories with a trailing /."""
    lines = []
    for node in nodes:
        prefix = "  " * indent
        if node.is_directory:
            lines.append(f"{prefix}{node.name}/")
            lines.extend(format_tree(node.children or [], indent + 1))
        else:
            lines.append(f"{prefix}{node.name} ({node.size} bytes)")
    return lines


def print_progress(progress: UploadProgress) -> None:
    if progress.current_file:
        print(f"  [{progress.processed + 1}/{progress.total}] {progress.current_file}")


async def ingest(storage: FileStorage, paths: List[str], batch_size: int) -> int:
    result = await storage.process_dropped_items(
        drop_paths(paths, batch_size=batch_size), on_progress=print_progress
    )
    print(f"✓ Stored {len(result.files)} files, {len(result.directories)} directories")
    return 0


async def show_tree(storage: FileStorage) -> int:
    tree = await storage.build_file_tree()
    if not tree:
        print("(empty)")
    for line in format_tree(tree):
        print(line)
    return 0


async def cat_file(storage: FileStorage, path: str) -> int:
    file = await storage.get_file_by_path(path)
    if file is None:
        print(f"No such file: {path}", file=sys.stderr)
        return 1
    print(file.content)
    return 0


async def remove(storage: FileStorage, path: str) -> int:
    file = await storage.get_file_by_path(path)
    if file is not None:
        await storage.delete_file(file.id)
        print(f"✓ Removed file {file.path}")
        return 0
    if await storage.directory_exists(path):
        stats = await storage.delete_directory_recursive(path)
        print(f"✓ Removed {stats['directories_deleted']} directories, {stats['files_deleted']} files")
        return 0
    print(f"No such file or directory: {path}", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdhd", description="MDHD markdown document store")
    parser.add_argument("--config", default="config.json", help="Config file (JSON or TOML)")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    ingest_parser = subparsers.add_parser("ingest", help="Ingest files or directories")
    ingest_parser.add_argument("paths", nargs="+", help="Local files or directories")

    subparsers.add_parser("tree", help="Show stored file tree")

    cat_parser = subparsers.add_parser("cat", help="Print a stored file")
    cat_parser.add_argument("path", help="Store path")

    rm_parser = subparsers.add_parser("rm", help="Remove a file or a directory recursively")
    rm_parser.add_argument("path", help="Store path")

    subparsers.add_parser("clear", help="Remove everything")
    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for console application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = ConfigManager(args.config).data
    setup_logging(
        debug_mode=args.debug or config.general.debug_mode,
        log_dir=config.logging.log_dir,
        file_logging=config.logging.file_logging,
    )

    try:
        async with FileStorage.from_config(config) as storage:
            if args.command == "ingest":
                return await ingest(storage, args.paths, config.ingest.directory_batch_size)
            elif args.command == "tree":
                return await show_tree(storage)
            elif args.command == "cat":
                return await cat_file(storage, args.path)
            elif args.command == "rm":
                return await remove(storage, args.path)
            elif args.command == "clear":
                await storage.clear_all()
                print("✓ Cleared")
                return 0
    except StorageError as e:
        logger.error(f"Command failed: {e}")
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1
    return 1


def run() -> None:
    sys.exit(asyncio.run(main()))
