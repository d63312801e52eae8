"""Project grid cards."""

import html
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional

DEFAULT_STATUS_COLOR = "#666666"

STATUS_COLORS = {
    "완료": "#2d5a2d",
    "진행중": "#ef6c00",
    "계획중": "#1565c0",
    "done": "#2d5a2d",
    "completed": "#2d5a2d",
    "in progress": "#ef6c00",
    "planned": "#1565c0",
}


def status_color(status: Optional[str]) -> str:
    """Badge color for a status name, grey when unrecognized."""
    return STATUS_COLORS.get((status or "").strip().lower(), DEFAULT_STATUS_COLOR)


def format_date(value: Optional[str], fmt: str = "%Y-%m-%d") -> Optional[str]:
    """
    Format an ISO date or datetime for display.

    Args:
        value: ``YYYY-MM-DD`` or a full ISO-8601 timestamp
        fmt: strftime format

    Returns:
        Formatted date, the raw value if it cannot be parsed, or None
    """
    if not value:
        return None
    try:
        if len(value) == 10:
            return date.fromisoformat(value).strftime(fmt)
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime(fmt)
    except ValueError:
        return value


def render_project_card(project: Dict[str, Any]) -> str:
    """Render one grid card: image, status badge, title, date and tags."""
    title = html.escape(project.get("title") or "")
    status = project.get("status") or ""
    parts = [f'<div class="project-card" data-id="{html.escape(project.get("id") or "")}">']

    parts.append('<div class="project-image">')
    if project.get("image"):
        parts.append(f'<img src="{html.escape(project["image"])}" alt="{title}">')
    parts.append(
        f'<div class="project-status" style="background-color: {status_color(status)}">'
        f"{html.escape(status)}</div>"
    )
    parts.append("</div>")

    parts.append('<div class="project-content">')
    parts.append(f'<div class="project-title">{title}</div>')
    formatted = format_date(project.get("date"))
    if formatted:
        parts.append(f'<div class="project-date">{html.escape(formatted)}</div>')
    if project.get("description"):
        parts.append(f'<div class="project-description">{html.escape(project["description"])}</div>')
    tags = "".join(
        f'<span class="tech-tag">{html.escape(tag)}</span>' for tag in project.get("tags") or []
    )
    parts.append(f'<div class="project-tech">{tags}</div>')
    parts.append("</div></div>")

    return "".join(parts)


def render_project_grid(projects: Iterable[Dict[str, Any]], empty_message: str = "No projects to show.") -> str:
    """Render all cards, or the empty message when there are none."""
    cards = [render_project_card(project) for project in projects]
    if not cards:
        cards = [f"<div>{html.escape(empty_message)}</div>"]
    return '<div class="projects-grid">' + "\n".join(cards) + "</div>"
