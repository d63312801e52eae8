"""Dataclasses for exported Notion data."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ProjectRecord:
    """One database page flattened for the portfolio UI."""

    id: str
    title: str
    date: Optional[str]
    tags: List[str]
    status: str
    image: Optional[str]
    last_edited: Optional[str]
    url: Optional[str]
    description: str = ""
    content: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the artifact's camelCase keys."""
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "tags": list(self.tags),
            "status": self.status,
            "image": self.image,
            "description": self.description,
            "lastEdited": self.last_edited,
            "url": self.url,
            "content": list(self.content),
        }


@dataclass
class ExportStats:
    """Statistics from an export run."""

    pages_exported: int = 0
    pages_failed: int = 0
    errors: List[str] = field(default_factory=list)
    output_path: Optional[str] = None
