"""
DirectoryService tests: CRUD and cascading delete.
"""
from unittest.mock import patch

import pytest
from bson import ObjectId

from mdhd.core.errors import DuplicatePathError, StorageError


async def make_docs_tree(file_service, directory_service):
    await directory_service.add_directory("/docs")
    await directory_service.add_directory("/docs/sub")
    await file_service.add_file("/docs/a.md", "a")
    await file_service.add_file("/docs/sub/b.md", "b")


class TestDirectoryCrud:
    @pytest.mark.asyncio
    async def test_add_and_get(self, directory_service):
        created = await directory_service.add_directory("docs/guide/")

        assert created.path == "/docs/guide"
        assert created.parent_path == "/docs"
        assert created.name == "guide"
        assert await directory_service.get_directory(created.id) == created
        assert await directory_service.get_directory_by_path("/docs/guide") == created
        assert await directory_service.directory_exists("/docs/guide")

    @pytest.mark.asyncio
    async def test_duplicate_path_fails(self, directory_service):
        await directory_service.add_directory("/docs")

        with pytest.raises(DuplicatePathError):
            await directory_service.add_directory("/docs/")

        assert len(await directory_service.get_all_directories()) == 1

    @pytest.mark.asyncio
    async def test_missing_lookups(self, directory_service):
        assert await directory_service.get_directory(str(ObjectId())) is None
        assert await directory_service.get_directory("bad id") is None
        assert await directory_service.get_directory_by_path("/nope") is None
        assert not await directory_service.directory_exists("/nope")

    @pytest.mark.asyncio
    async def test_get_by_parent_path(self, directory_service):
        for path in ("/docs", "/docs/a", "/docs/b", "/docs/a/deep", "/notes"):
            await directory_service.add_directory(path)

        children = await directory_service.get_directories_by_parent_path("/docs")
        top = await directory_service.get_directories_by_parent_path("/")

        assert sorted(d.name for d in children) == ["a", "b"]
        assert sorted(d.path for d in top) == ["/docs", "/notes"]

    @pytest.mark.asyncio
    async def test_delete_directory_leaves_contents(self, file_service, directory_service):
        await make_docs_tree(file_service, directory_service)
        docs = await directory_service.get_directory_by_path("/docs")

        await directory_service.delete_directory(docs.id)
        await directory_service.delete_directory(str(ObjectId()))

        assert not await directory_service.directory_exists("/docs")
        assert await directory_service.directory_exists("/docs/sub")
        assert len(await file_service.get_all_files()) == 2


class TestDeleteRecursive:
    @pytest.mark.asyncio
    async def test_cascading_delete(self, file_service, directory_service):
        await make_docs_tree(file_service, directory_service)

        stats = await directory_service.delete_directory_recursive("/docs")

        assert stats == {"files_deleted": 2, "directories_deleted": 2}
        files = await file_service.get_all_files()
        dirs = await directory_service.get_all_directories()
        assert [f for f in files if f.path.startswith("/docs")] == []
        assert [d for d in dirs if d.path == "/docs" or d.path.startswith("/docs/")] == []

    @pytest.mark.asyncio
    async def test_cascading_delete_file_phase_is_a_plain_prefix(self, file_service, directory_service):
        await make_docs_tree(file_service, directory_service)
        await directory_service.add_directory("/docs2")
        await file_service.add_file("/docs2/keep.md", "k")
        await file_service.add_file("/docs.md", "k")
        await file_service.add_file("/other.md", "o")

        stats = await directory_service.delete_directory_recursive("/docs/")

        assert stats == {"files_deleted": 4, "directories_deleted": 2}
        assert [f.path for f in await file_service.get_all_files()] == ["/other.md"]
        assert [d.path for d in await directory_service.get_all_directories()] == ["/docs2"]

    @pytest.mark.asyncio
    async def test_cascading_delete_of_root_removes_everything(self, file_service, directory_service):
        await make_docs_tree(file_service, directory_service)
        await file_service.add_file("/top.md", "t")

        stats = await directory_service.delete_directory_recursive("/")

        assert stats == {"files_deleted": 3, "directories_deleted": 2}
        assert await file_service.get_all_files() == []
        assert await directory_service.get_all_directories() == []

    @pytest.mark.asyncio
    async def test_partial_failure_leaves_empty_directories(self, store, file_service, directory_service):
        """Files go first; if the directory phase fails, a retry finishes the job."""
        await make_docs_tree(file_service, directory_service)
        original = store.delete_many

        async def fail_directory_phase(collection, query, operation):
            if operation == "delete directory recursively":
                raise StorageError(operation)
            return await original(collection, query, operation)

        with patch.object(store, "delete_many", side_effect=fail_directory_phase):
            with pytest.raises(StorageError):
                await directory_service.delete_directory_recursive("/docs")

        assert await file_service.get_all_files() == []
        assert sorted(d.path for d in await directory_service.get_all_directories()) == [
            "/docs",
            "/docs/sub",
        ]

        stats = await directory_service.delete_directory_recursive("/docs")

        assert stats == {"files_deleted": 0, "directories_deleted": 2}
        assert await directory_service.get_all_directories() == []
