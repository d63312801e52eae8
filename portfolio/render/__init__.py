"""Display-side rendering of the exported projects artifact."""

from .content import ContentItem, parse_content, render_content_html
from .grid import format_date, render_project_card, render_project_grid, status_color

__all__ = [
    "ContentItem",
    "parse_content",
    "render_content_html",
    "format_date",
    "render_project_card",
    "render_project_grid",
    "status_color",
]
