"""Parse exported content lines back into links, attachments and tables.

The exporter flattens every page into plain display lines. This module is
the inverse used by the display side: it recognizes the line shapes the
transcoder emits and turns them into typed items, then renders those items
as HTML fragments.
"""

import html
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..notion.tables import HTML_PREFIX
from ..notion.text import truncate

ATTACHMENT_ICONS = ("📎", "📄", "🖼️", "🎞️", "🔖", "🔗")
LABEL_LIMIT = 120

_HTML_LINE_RE = re.compile("^\\ufeff?\\s*" + re.escape(HTML_PREFIX) + "(.*)$", re.DOTALL)
_TABLE_WRAP_RE = re.compile(r'^\s*<div\s+class="notion-table-wrap"')
_URL_ANCHOR_RE = re.compile(r'^\s*URL:\s+<a[^>]+href="([^"]+)"[^>]*>.*</a>\s*$', re.IGNORECASE)
_URL_PLAIN_RE = re.compile(r"^\s*URL:\s+(https?://\S+)\s*$", re.IGNORECASE)
_ATTACHMENT_RE = re.compile(
    r"^\s*(" + "|".join(re.escape(icon) for icon in ATTACHMENT_ICONS) + r")\s+(.+)$"
)
_TRAILING_PAREN_RE = re.compile(r"\s*\(.+\)\s*$")


@dataclass
class ContentItem:
    """One display element reconstructed from content lines.

    ``kind`` is one of ``text``, ``html``, ``link`` or ``attachment``.
    """

    kind: str
    text: str = ""
    url: Optional[str] = None
    icon: Optional[str] = None


def parse_url_line(line: str) -> Optional[str]:
    """Return the URL of a ``URL: ...`` line (plain or anchor form)."""
    line = str(line or "")
    match = _URL_ANCHOR_RE.match(line) or _URL_PLAIN_RE.match(line)
    return match.group(1) if match else None


def parse_attachment_label(line: str) -> Optional[Tuple[str, str]]:
    """
    Detect an attachment summary line such as ``📎 report.pdf (host/x)``.

    Args:
        line: Content line

    Returns:
        (icon, label) with the parenthesized short URL removed, or None
    """
    match = _ATTACHMENT_RE.match(str(line or ""))
    if not match:
        return None

    icon, label = match.group(1), match.group(2).strip()
    paren = _TRAILING_PAREN_RE.search(label)
    if paren:
        label = label[: paren.start()].strip()
    return icon, truncate(label, LABEL_LIMIT)


def parse_content(lines: Sequence[str]) -> List[ContentItem]:
    """
    Rebuild display items from a content line sequence.

    An attachment line immediately followed by a ``URL:`` line becomes a
    single attachment item and the URL line is consumed.

    Args:
        lines: ``content`` of a project record

    Returns:
        Items in display order
    """
    items: List[ContentItem] = []
    lines = [str(line if line is not None else "") for line in lines or []]

    i = 0
    while i < len(lines):
        raw = lines[i]

        html_match = _HTML_LINE_RE.match(raw)
        if html_match:
            items.append(ContentItem(kind="html", text=html_match.group(1)))
            i += 1
            continue

        attachment = parse_attachment_label(raw)
        next_url = parse_url_line(lines[i + 1]) if i + 1 < len(lines) else None
        if attachment and next_url:
            icon, label = attachment
            items.append(ContentItem(kind="attachment", text=label, url=next_url, icon=icon))
            i += 2
            continue

        solo_url = parse_url_line(raw)
        if solo_url:
            items.append(ContentItem(kind="link", text=solo_url, url=solo_url))
        elif _TABLE_WRAP_RE.match(raw):
            items.append(ContentItem(kind="html", text=raw))
        else:
            items.append(ContentItem(kind="text", text=raw))
        i += 1

    return items


def render_item_html(item: ContentItem) -> str:
    """Render one item as an HTML fragment."""
    if item.kind == "html":
        return f'<div class="popup-line popup-table">{item.text}</div>'

    if item.kind == "attachment":
        return (
            '<div class="popup-line">'
            f'<a href="{html.escape(item.url)}" target="_blank" rel="noreferrer noopener" '
            'class="popup-attachment">'
            f'<span aria-hidden="true" class="popup-attachment-icon">{html.escape(item.icon)}</span> '
            f'<span class="popup-attachment-label">{html.escape(item.text)}</span>'
            "</a></div>"
        )

    if item.kind == "link":
        url = html.escape(item.url)
        return (
            '<div class="popup-line">URL: '
            f'<a href="{url}" target="_blank" rel="noreferrer noopener">{url}</a></div>'
        )

    return f'<div class="popup-line">{html.escape(item.text)}</div>'


def render_content_html(lines: Sequence[str], empty_message: str = "No content.") -> str:
    """
    Render a project's content lines as the detail body.

    Args:
        lines: ``content`` of a project record
        empty_message: Shown when the record has no content

    Returns:
        HTML fragment
    """
    if not lines:
        return f'<p class="popup-desc">{html.escape(empty_message)}</p>'

    body = "\n".join(render_item_html(item) for item in parse_content(lines))
    return f'<div class="popup-plain">\n{body}\n</div>'
