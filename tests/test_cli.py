"""
Console entry point tests. The Mongo client is replaced with the
in-process double and logging setup is left untouched.
"""
from unittest.mock import patch

import pytest

from mdhd import cli
from mdhd.docfs.models.tree_node import FileTreeNode
from mdhd.docfs.storage import FileStorage


@pytest.fixture
def run_cli(mongo_client, tmp_path):
    config_path = tmp_path / "config.json"
    from_config = FileStorage.from_config

    def build_storage(config):
        return from_config(config, client=mongo_client)

    async def run(*argv):
        with patch.object(cli, "setup_logging"), \
                patch.object(cli.FileStorage, "from_config", side_effect=build_storage):
            return await cli.main(["--config", str(config_path), *argv])

    return run


def test_format_tree():
    tree = [
        FileTreeNode(id="1", name="docs", path="/docs", type="directory", children=[
            FileTreeNode(id="2", name="a.md", path="/docs/a.md", type="file", content="abc", size=3),
        ]),
        FileTreeNode(id="3", name="top.md", path="/top.md", type="file", content="", size=0),
    ]

    assert cli.format_tree(tree) == [
        "docs/",
        "  a.md (3 bytes)",
        "top.md (0 bytes)",
    ]


def test_build_parser():
    args = cli.build_parser().parse_args(["--debug", "ingest", "a", "b"])

    assert args.debug
    assert args.command == "ingest"
    assert args.paths == ["a", "b"]


@pytest.mark.asyncio
async def test_no_command_prints_help(capsys):
    assert await cli.main([]) == 1
    assert "usage" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_ingest_tree_cat_rm(run_cli, tmp_path, capsys):
    notes = tmp_path / "notes"
    (notes / "daily").mkdir(parents=True)
    (notes / "index.md").write_text("# Index", encoding="utf-8")
    (notes / "daily" / "monday.md").write_text("gym", encoding="utf-8")

    assert await run_cli("ingest", str(notes)) == 0
    assert "Stored 2 files, 2 directories" in capsys.readouterr().out

    assert await run_cli("tree") == 0
    assert capsys.readouterr().out.splitlines() == [
        "notes/",
        "  daily/",
        "    monday.md (3 bytes)",
        "  index.md (7 bytes)",
    ]

    assert await run_cli("cat", "/notes/daily/monday.md") == 0
    assert capsys.readouterr().out.strip() == "gym"

    assert await run_cli("rm", "/notes/daily") == 0
    assert "Removed 1 directories, 1 files" in capsys.readouterr().out

    assert await run_cli("cat", "/notes/daily/monday.md") == 1


@pytest.mark.asyncio
async def test_rm_unknown_path(run_cli, capsys):
    assert await run_cli("rm", "/nowhere") == 1
    assert "No such file or directory" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_clear(run_cli, capsys):
    await run_cli("ingest", __file__)  # not markdown, nothing stored
    assert await run_cli("clear") == 0
    assert await run_cli("tree") == 0
    assert "(empty)" in capsys.readouterr().out
