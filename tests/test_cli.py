"""Tests for the export CLI."""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from portfolio.notion.cli import create_parser, main, run_export
from portfolio.notion.client import NotionAPIError
from portfolio.notion.models import ExportStats


class FakeNotionClient:
    """Stands in for NotionClient with a fixed set of pages."""

    def __init__(self, pages=None, blocks=None, **kwargs):
        self.pages = pages or []
        self.blocks = blocks or {}
        self.kwargs = kwargs

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None

    async def query_database(self, database_id):
        for page in self.pages:
            yield page

    async def list_block_children(self, block_id):
        return self.blocks.get(block_id, [])


@pytest.fixture
def env(monkeypatch, tmp_path):
    """Run in an empty directory with credentials set."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("NOTION_TOKEN", "secret-token")
    monkeypatch.setenv("NOTION_DATABASE_ID", "db-123")
    return tmp_path


def parse(*argv):
    return create_parser().parse_args(list(argv))


@pytest.mark.asyncio
async def test_missing_credentials(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NOTION_TOKEN", raising=False)
    monkeypatch.delenv("NOTION_DATABASE_ID", raising=False)

    exit_code = await run_export(parse())

    assert exit_code == 1
    assert "Missing NOTION_TOKEN or NOTION_DATABASE_ID" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_missing_config_file(env, capsys):
    exit_code = await run_export(parse("-c", "nope.yaml"))

    assert exit_code == 1
    assert "Configuration file not found" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_zero_pages_writes_empty_artifact(env):
    output = env / "public" / "projects.json"

    with patch("portfolio.notion.cli.NotionClient", FakeNotionClient):
        exit_code = await run_export(parse("-o", str(output)))

    assert exit_code == 0
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["projects"] == []
    assert data["generatedAt"].endswith("Z")


@pytest.mark.asyncio
async def test_export_end_to_end(env, capsys):
    page = {
        "id": "p1",
        "url": "https://www.notion.so/p1",
        "last_edited_time": "2024-01-15T10:00:00.000Z",
        "properties": {"Name": {"type": "title", "title": [{"plain_text": "Portfolio"}]}},
    }
    blocks = {
        "p1": [
            {"id": "h", "type": "heading_1", "has_children": False, "heading_1": {"rich_text": [{"plain_text": "Intro"}]}},
            {"id": "t", "type": "table", "has_children": True, "table": {"has_column_header": True}},
        ],
        "t": [
            {"type": "table_row", "table_row": {"cells": [[{"plain_text": "k"}], [{"plain_text": "v"}]]}},
        ],
    }

    def client_factory(**kwargs):
        return FakeNotionClient(pages=[page], blocks=blocks, **kwargs)

    with patch("portfolio.notion.cli.NotionClient", side_effect=client_factory):
        exit_code = await run_export(parse("--table-style", "ascii"))

    assert exit_code == 0
    data = json.loads((env / "public" / "projects.json").read_text(encoding="utf-8"))
    content = data["projects"][0]["content"]
    assert content[0] == "# Intro"
    assert content[1] == "(table)"
    assert "Wrote 1 projects" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_api_error_aborts(env, capsys):
    exporter = MagicMock()
    exporter.export = AsyncMock(side_effect=NotionAPIError("POST", "databases/db-123/query", 401, "unauthorized"))

    with patch("portfolio.notion.cli.NotionClient", FakeNotionClient), patch(
        "portfolio.notion.cli.ProjectExporter", return_value=exporter
    ):
        exit_code = await run_export(parse())

    assert exit_code == 1
    assert "Notion API error 401" in capsys.readouterr().err
    assert not (env / "public" / "projects.json").exists()


@pytest.mark.asyncio
async def test_dry_run_does_not_write(env, capsys):
    exporter = MagicMock()
    exporter.build_artifact = AsyncMock(
        return_value={"projects": [{"title": "A", "status": "완료", "content": ["x"]}], "generatedAt": "t"}
    )

    with patch("portfolio.notion.cli.NotionClient", FakeNotionClient), patch(
        "portfolio.notion.cli.ProjectExporter", return_value=exporter
    ):
        exit_code = await run_export(parse("--dry-run"))

    assert exit_code == 0
    assert "DRY RUN" in capsys.readouterr().out
    exporter.export.assert_not_called()
    assert not (env / "public").exists()


@pytest.mark.asyncio
async def test_partial_failure_still_succeeds(env, capsys):
    exporter = MagicMock()
    exporter.export = AsyncMock(return_value=ExportStats(pages_exported=3, pages_failed=1, output_path="out.json"))

    with patch("portfolio.notion.cli.NotionClient", FakeNotionClient), patch(
        "portfolio.notion.cli.ProjectExporter", return_value=exporter
    ):
        exit_code = await run_export(parse())

    assert exit_code == 0
    assert "1 without content" in capsys.readouterr().out


def test_main_exits_nonzero_without_credentials(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NOTION_TOKEN", raising=False)
    monkeypatch.delenv("NOTION_DATABASE_ID", raising=False)

    with patch("portfolio.notion.cli.setup_logging"):
        with pytest.raises(SystemExit) as exc_info:
            main([])

    assert exc_info.value.code == 1
