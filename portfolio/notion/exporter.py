"""Export a Notion projects database to the static portfolio artifact."""

import asyncio
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .client import NotionClient
from .models import ExportStats, ProjectRecord
from .properties import DEFAULT_UNKNOWN_STATUS, DEFAULT_UNTITLED, map_page_properties
from .transcoder import BlockTranscoder


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def write_artifact(artifact: Dict[str, Any], output_path: str) -> Path:
    """
    Write the artifact as indented UTF-8 JSON, replacing any previous file.

    Args:
        artifact: ``{"projects": [...], "generatedAt": ...}``
        output_path: Destination file

    Returns:
        Path written
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # Written to a sibling file, then swapped into place
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(artifact, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return path


class ProjectExporter:
    """Fetches every database page and its body, then builds the artifact."""

    def __init__(
        self,
        notion_client: NotionClient,
        transcoder: BlockTranscoder,
        untitled_label: str = DEFAULT_UNTITLED,
        unknown_status_label: str = DEFAULT_UNKNOWN_STATUS,
    ):
        """
        Initialize exporter.

        Args:
            notion_client: Notion API client
            transcoder: Block transcoder for page bodies
            untitled_label: Placeholder title for pages without one
            unknown_status_label: Placeholder status for pages without one
        """
        self.notion_client = notion_client
        self.transcoder = transcoder
        self.untitled_label = untitled_label
        self.unknown_status_label = unknown_status_label
        self.logger = logging.getLogger(__name__)

    async def fetch_pages(self, database_id: str) -> List[Dict[str, Any]]:
        """Collect all database pages, most recently edited first."""
        return [page async for page in self.notion_client.query_database(database_id)]

    async def export_page(self, page: Dict[str, Any], stats: ExportStats) -> ProjectRecord:
        """
        Build one ProjectRecord, isolating content failures to this page.

        Args:
            page: Page object from the database query
            stats: Stats updated when the body cannot be fetched

        Returns:
            ProjectRecord, with empty content if its body failed
        """
        record = map_page_properties(page, self.untitled_label, self.unknown_status_label)

        try:
            record.content = await self.transcoder.page_lines(record.id)
        except Exception as e:
            stats.pages_failed += 1
            stats.errors.append(f"{record.title}: {e}")
            self.logger.error(f"Failed to fetch content for {record.id} ({record.title}): {e}")
            record.content = []

        self.logger.debug(f"Exported {record.title}: {len(record.content)} lines")
        return record

    async def build_artifact(self, database_id: str, stats: Optional[ExportStats] = None) -> Dict[str, Any]:
        """
        Fetch the database and transcode all pages concurrently.

        Args:
            database_id: Source database ID
            stats: Optional stats object to fill in

        Returns:
            ``{"projects": [...], "generatedAt": ...}``

        Raises:
            NotionAPIError: If the database query fails
        """
        stats = stats if stats is not None else ExportStats()

        pages = await self.fetch_pages(database_id)
        self.logger.info(f"Fetched {len(pages)} pages from database {database_id}")

        records = await asyncio.gather(*(self.export_page(page, stats) for page in pages))
        stats.pages_exported = len(records)

        return {
            "projects": [record.to_dict() for record in records],
            "generatedAt": utc_timestamp(),
        }

    async def export(self, database_id: str, output_path: str) -> ExportStats:
        """
        Build the artifact and write it to ``output_path``.

        Args:
            database_id: Source database ID
            output_path: Artifact destination

        Returns:
            ExportStats for the run
        """
        stats = ExportStats()
        artifact = await self.build_artifact(database_id, stats)
        path = write_artifact(artifact, output_path)
        stats.output_path = str(path)

        self.logger.info(
            f"Export complete: {stats.pages_exported} projects, "
            f"{stats.pages_failed} without content -> {path}"
        )
        return stats
