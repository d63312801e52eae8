"""Property pickers mapping database page properties to project fields.

Each picker looks at the conventional property names first and then falls
back to the first property of the same Notion type, so renamed columns in
the source database keep working.
"""

from typing import Any, Dict, List, Optional

from .models import ProjectRecord
from .text import rich_to_text

DEFAULT_UNTITLED = "(Untitled)"
DEFAULT_UNKNOWN_STATUS = "Unknown"


def pick_title(properties: Dict[str, Any], untitled: str = DEFAULT_UNTITLED) -> str:
    """Extract the page title, or the placeholder when none is set."""
    for prop_name in ["Title", "Name"]:
        title_array = (properties.get(prop_name) or {}).get("title")
        if title_array:
            return rich_to_text(title_array)

    # Fallback: check all properties for title type
    for prop in properties.values():
        if prop.get("type") == "title" and prop.get("title"):
            return rich_to_text(prop["title"])

    return untitled


def pick_date(properties: Dict[str, Any]) -> Optional[str]:
    """Extract the start of the page's date property."""
    date = (properties.get("Date") or {}).get("date") or {}
    if date.get("start"):
        return date["start"]

    for prop in properties.values():
        if prop.get("type") == "date" and (prop.get("date") or {}).get("start"):
            return prop["date"]["start"]

    return None


def pick_tags(properties: Dict[str, Any]) -> List[str]:
    """Extract multi-select option names."""
    options = (properties.get("Multi-select") or {}).get("multi_select")
    if options is None:
        options = (properties.get("Tags") or {}).get("multi_select")
    if isinstance(options, list):
        return [option.get("name", "") for option in options]

    for prop in properties.values():
        if prop.get("type") == "multi_select" and isinstance(prop.get("multi_select"), list):
            return [option.get("name", "") for option in prop["multi_select"]]

    return []


def pick_status(properties: Dict[str, Any], unknown: str = DEFAULT_UNKNOWN_STATUS) -> str:
    """Extract the status name from a status or select property."""
    status = properties.get("Status") or {}
    name = (status.get("status") or {}).get("name") or (status.get("select") or {}).get("name")
    if name:
        return name

    # The first status/select property wins even when it is empty
    for prop in properties.values():
        prop_type = prop.get("type")
        if prop_type in ("status", "select"):
            return (prop.get(prop_type) or {}).get("name") or unknown

    return unknown


def file_url(file_object: Optional[Dict[str, Any]]) -> Optional[str]:
    """Return the URL of an external or Notion-hosted file object."""
    if not file_object:
        return None
    if file_object.get("type") == "external":
        return (file_object.get("external") or {}).get("url")
    return (file_object.get("file") or {}).get("url")


def pick_image(page: Dict[str, Any], properties: Dict[str, Any]) -> Optional[str]:
    """Extract the card image from the Image property or the page cover."""
    files = (properties.get("Image") or {}).get("files")
    if files:
        return file_url(files[0])

    if page.get("cover"):
        return file_url(page["cover"])

    return None


def map_page_properties(
    page: Dict[str, Any],
    untitled: str = DEFAULT_UNTITLED,
    unknown_status: str = DEFAULT_UNKNOWN_STATUS,
) -> ProjectRecord:
    """
    Map a database page to a ProjectRecord without its content.

    Args:
        page: Page object from the database query
        untitled: Placeholder when no title is present
        unknown_status: Placeholder when no status is present

    Returns:
        ProjectRecord with an empty content list
    """
    properties = page.get("properties") or {}
    return ProjectRecord(
        id=page["id"],
        title=pick_title(properties, untitled),
        date=pick_date(properties),
        tags=pick_tags(properties),
        status=pick_status(properties, unknown_status),
        image=pick_image(page, properties),
        last_edited=page.get("last_edited_time"),
        url=page.get("url"),
    )
