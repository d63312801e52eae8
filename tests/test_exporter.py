"""Tests for the project exporter."""

import asyncio
import json
import re

import pytest
from unittest.mock import AsyncMock, Mock, patch

from portfolio.notion.client import NotionAPIError
from portfolio.notion.exporter import ProjectExporter, utc_timestamp, write_artifact
from portfolio.notion.models import ExportStats

TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def make_page(page_id, title):
    return {
        "id": page_id,
        "url": f"https://www.notion.so/{page_id}",
        "last_edited_time": "2024-01-15T10:00:00.000Z",
        "properties": {"Name": {"type": "title", "title": [{"plain_text": title}]}},
    }


def mock_query(pages):
    async def query_database(database_id):
        for page in pages:
            yield page

    return query_database


@pytest.fixture
def mock_notion_client():
    """Create mock Notion client."""
    client = Mock()
    client.query_database = mock_query([])
    return client


@pytest.fixture
def mock_transcoder():
    """Create mock transcoder."""
    transcoder = Mock()
    transcoder.page_lines = AsyncMock(return_value=["# Overview", "Body text"])
    return transcoder


@pytest.fixture
def exporter(mock_notion_client, mock_transcoder):
    return ProjectExporter(notion_client=mock_notion_client, transcoder=mock_transcoder)


class TestBuildArtifact:
    @pytest.mark.asyncio
    async def test_zero_pages(self, exporter):
        """Test an empty database still yields a valid artifact."""
        artifact = await exporter.build_artifact("db-123")

        assert artifact["projects"] == []
        assert TIMESTAMP_RE.match(artifact["generatedAt"])

    @pytest.mark.asyncio
    async def test_projects_keep_query_order(self, exporter, mock_notion_client, mock_transcoder):
        mock_notion_client.query_database = mock_query([make_page("p1", "Newest"), make_page("p2", "Older")])

        async def slow_first(page_id):
            if page_id == "p1":
                await asyncio.sleep(0.01)
            return [f"content of {page_id}"]

        mock_transcoder.page_lines.side_effect = slow_first

        artifact = await exporter.build_artifact("db-123")

        assert [p["id"] for p in artifact["projects"]] == ["p1", "p2"]
        assert artifact["projects"][0]["title"] == "Newest"
        assert artifact["projects"][0]["content"] == ["content of p1"]
        assert artifact["projects"][1]["lastEdited"] == "2024-01-15T10:00:00.000Z"

    @pytest.mark.asyncio
    async def test_page_failure_is_isolated(self, exporter, mock_notion_client, mock_transcoder):
        """Test one failing page body does not block the others."""
        mock_notion_client.query_database = mock_query([make_page("bad", "Broken"), make_page("ok", "Fine")])

        async def page_lines(page_id):
            if page_id == "bad":
                raise NotionAPIError("GET", f"blocks/{page_id}/children", 502, "Bad Gateway")
            return ["fine"]

        mock_transcoder.page_lines.side_effect = page_lines
        stats = ExportStats()

        artifact = await exporter.build_artifact("db-123", stats)

        assert artifact["projects"][0]["content"] == []
        assert artifact["projects"][1]["content"] == ["fine"]
        assert stats.pages_exported == 2
        assert stats.pages_failed == 1
        assert "Broken" in stats.errors[0]

    @pytest.mark.asyncio
    async def test_query_failure_propagates(self, exporter, mock_notion_client):
        async def failing_query(database_id):
            raise NotionAPIError("POST", f"databases/{database_id}/query", 401, "unauthorized")
            yield  # pragma: no cover

        mock_notion_client.query_database = failing_query

        with pytest.raises(NotionAPIError):
            await exporter.build_artifact("db-123")

    @pytest.mark.asyncio
    async def test_placeholder_labels(self, mock_notion_client, mock_transcoder):
        page = {"id": "p", "properties": {}}
        mock_notion_client.query_database = mock_query([page])
        exporter = ProjectExporter(
            mock_notion_client, mock_transcoder, untitled_label="(제목 없음)", unknown_status_label="알수없음"
        )

        artifact = await exporter.build_artifact("db-123")

        assert artifact["projects"][0]["title"] == "(제목 없음)"
        assert artifact["projects"][0]["status"] == "알수없음"


class TestExport:
    @pytest.mark.asyncio
    async def test_writes_and_overwrites_artifact(self, exporter, mock_notion_client, tmp_path):
        output = tmp_path / "public" / "projects.json"
        output.parent.mkdir()
        output.write_text('{"stale": true}', encoding="utf-8")
        mock_notion_client.query_database = mock_query([make_page("p1", "한글 프로젝트")])

        stats = await exporter.export("db-123", str(output))

        data = json.loads(output.read_text(encoding="utf-8"))
        assert set(data) == {"projects", "generatedAt"}
        assert data["projects"][0]["title"] == "한글 프로젝트"
        assert data["projects"][0]["content"] == ["# Overview", "Body text"]
        assert stats.output_path == str(output)
        # Non-ASCII text is written as-is
        assert "한글 프로젝트" in output.read_text(encoding="utf-8")


def test_write_artifact_creates_directories(tmp_path):
    path = write_artifact({"projects": [], "generatedAt": "x"}, str(tmp_path / "a" / "b" / "out.json"))

    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == {"projects": [], "generatedAt": "x"}


def test_write_artifact_keeps_previous_file_on_failure(tmp_path):
    output = tmp_path / "projects.json"
    output.write_text('{"projects": [], "generatedAt": "old"}', encoding="utf-8")

    with patch("portfolio.notion.exporter.json.dump", side_effect=TypeError("not serializable")):
        with pytest.raises(TypeError):
            write_artifact({"projects": [object()], "generatedAt": "new"}, str(output))

    assert json.loads(output.read_text(encoding="utf-8"))["generatedAt"] == "old"
    assert [p.name for p in tmp_path.iterdir()] == ["projects.json"]


def test_utc_timestamp_format():
    assert TIMESTAMP_RE.match(utc_timestamp())
