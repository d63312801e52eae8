"""Notion integration module for exporting the projects database."""

from .models import ProjectRecord, ExportStats
from .client import NotionAPIError, NotionClient
from .transcoder import BlockTranscoder
from .exporter import ProjectExporter

__all__ = [
    "ProjectRecord",
    "ExportStats",
    "NotionAPIError",
    "NotionClient",
    "BlockTranscoder",
    "ProjectExporter",
]
