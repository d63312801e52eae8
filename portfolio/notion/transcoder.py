"""Transcode Notion block trees into flat display lines."""

import logging
import re
from typing import Any, Dict, List

from .client import NotionClient
from .properties import file_url
from .tables import (
    DEFAULT_MAX_COLUMN_WIDTH,
    HTML_PREFIX,
    render_ascii_table,
    render_html_table,
)
from .text import rich_to_text, short_url, truncate

INDENT = "  "
DEFAULT_MAX_INDENT_DEPTH = 6
CAPTION_LIMIT = 90
DEFAULT_CALLOUT_EMOJI = "💡"

HEADING_MARKS = {
    "heading_1": "# ",
    "heading_2": "## ",
    "heading_3": "### ",
}

# block type -> (icon, default label, field holding the URL)
MEDIA_BLOCKS = {
    "image": ("🖼️", "Image", None),
    "file": ("📎", "File", None),
    "pdf": ("📄", "PDF", None),
    "video": ("🎞️", "Video", None),
    "embed": ("🔗", "Embed", "url"),
    "bookmark": ("🔖", "Bookmark", "url"),
}

# Blocks that take their label from their name when one is set
NAMED_MEDIA = {"file", "pdf"}

# Blocks whose children are separate pages, never inlined
SUBPAGE_BLOCKS = {"child_page", "child_database"}

# Lines the display side would read as raw table markup
_MARKUP_LINE_RE = re.compile(
    "^\\ufeff?\\s*(?:" + re.escape(HTML_PREFIX) + '|<div\\s+class="notion-table-wrap")'
)
ZERO_WIDTH_SPACE = "\u200b"


def escape_markup_line(line: str) -> str:
    """
    Keep user text from passing as a table sentinel line.

    A zero-width space in front is not whitespace to the display parser,
    so the line stays plain text.
    """
    if _MARKUP_LINE_RE.match(line):
        return ZERO_WIDTH_SPACE + line
    return line


def collapse_blank_lines(lines: List[str]) -> List[str]:
    """Collapse every run of blank (whitespace-only) lines into one."""
    out: List[str] = []
    prev_empty = False
    for line in lines:
        empty = not line.strip()
        if empty and prev_empty:
            continue
        out.append(line)
        prev_empty = empty
    return out


class BlockTranscoder:
    """Converts a page's block tree into indented display lines."""

    def __init__(
        self,
        client: NotionClient,
        table_style: str = "html",
        max_indent_depth: int = DEFAULT_MAX_INDENT_DEPTH,
        max_column_width: int = DEFAULT_MAX_COLUMN_WIDTH,
        numbered_lists: str = "literal",
    ):
        """
        Initialize transcoder.

        Args:
            client: NotionClient used to fetch block children
            table_style: 'html' for a sentinel HTML line, 'ascii' for a text grid
            max_indent_depth: Nesting depth beyond which indentation stops growing
            max_column_width: Column cap for ASCII tables
            numbered_lists: 'literal' to emit "1." for every item, 'ordinal' to count siblings
        """
        self.client = client
        self.table_style = table_style
        self.max_indent_depth = max_indent_depth
        self.max_column_width = max_column_width
        self.numbered_lists = numbered_lists
        self.logger = logging.getLogger(__name__)

    async def page_lines(self, page_id: str) -> List[str]:
        """
        Fetch and transcode the whole body of a page.

        Args:
            page_id: Notion page ID

        Returns:
            Display lines with blank-line runs collapsed

        Raises:
            NotionAPIError: If any block listing fails
        """
        roots = await self.client.list_block_children(page_id)
        lines = await self.blocks_to_lines(roots, depth=0)
        return collapse_blank_lines(lines)

    async def blocks_to_lines(self, blocks: List[Dict[str, Any]], depth: int) -> List[str]:
        """Transcode sibling blocks in document order."""
        lines: List[str] = []
        ordinal = 0
        for block in blocks:
            ordinal = ordinal + 1 if block.get("type") == "numbered_list_item" else 0
            lines.extend(await self.block_to_lines(block, depth, ordinal=max(ordinal, 1)))
        return lines

    async def block_to_lines(
        self, block: Dict[str, Any], depth: int = 0, ordinal: int = 1
    ) -> List[str]:
        """
        Transcode one block and, recursively, its children.

        Args:
            block: Raw block object
            depth: Nesting depth of the block
            ordinal: Position among consecutive numbered list siblings

        Returns:
            Display lines for the block subtree
        """
        indent = INDENT * min(depth, self.max_indent_depth)
        block_type = block.get("type", "unknown")
        data = block.get(block_type) or {}
        out: List[str] = []

        if block_type == "table":
            rows = await self._table_rows(block["id"])
            if self.table_style == "ascii":
                lines = render_ascii_table(
                    rows,
                    has_column_header=bool(data.get("has_column_header")),
                    max_column_width=self.max_column_width,
                )
            else:
                lines = [
                    render_html_table(
                        rows,
                        has_column_header=bool(data.get("has_column_header")),
                        has_row_header=bool(data.get("has_row_header")),
                    )
                ]
            return [indent + line for line in lines]

        text = rich_to_text(data.get("rich_text"))

        if block_type == "paragraph":
            if text.strip():
                out.append(indent + text)
        elif block_type in HEADING_MARKS:
            if text.strip():
                out.append(indent + HEADING_MARKS[block_type] + text)
        elif block_type == "bulleted_list_item":
            out.append(f"{indent}• {text}")
        elif block_type == "numbered_list_item":
            number = ordinal if self.numbered_lists == "ordinal" else 1
            out.append(f"{indent}{number}. {text}")
        elif block_type == "to_do":
            checked = "[x]" if data.get("checked") else "[ ]"
            out.append(f"{indent}{checked} {text}")
        elif block_type == "quote":
            out.append(f"{indent}> {text}")
        elif block_type == "callout":
            emoji = (data.get("icon") or {}).get("emoji") or DEFAULT_CALLOUT_EMOJI
            out.append(f"{indent}{emoji} {text}")
        elif block_type == "code":
            out.append(indent + "```" + (data.get("language") or ""))
            out.extend(indent + line for line in text.split("\n"))
            out.append(indent + "```")
        elif block_type == "toggle":
            out.append(f"{indent}▸ {text}")
        elif block_type in MEDIA_BLOCKS:
            out.extend(indent + line for line in self._media_lines(block_type, data))
        elif block_type == "divider":
            out.append(indent + "---")
        elif block_type == "equation":
            out.append(f"{indent}[Equation: {data.get('expression', '')}]")
        elif block_type == "table_of_contents":
            out.append(indent + "[Table of Contents]")
        elif block_type == "child_page":
            out.append(f"{indent}[Page: {data.get('title', '')}]")
        elif block_type == "child_database":
            out.append(f"{indent}[Database: {data.get('title', '')}]")
        else:
            self.logger.debug(f"Unsupported block type: {block_type}")
            out.append(f"{indent}[{block_type}]")

        out = [escape_markup_line(line) for line in out]

        if block.get("has_children") and block_type not in SUBPAGE_BLOCKS:
            children = await self.client.list_block_children(block["id"])
            out.extend(await self.blocks_to_lines(children, depth + 1))

        return out

    def _media_lines(self, block_type: str, data: Dict[str, Any]) -> List[str]:
        """Summary line plus a ``URL:`` line for media and link blocks."""
        icon, label, url_field = MEDIA_BLOCKS[block_type]
        url = data.get(url_field) if url_field else file_url(data)

        if block_type in NAMED_MEDIA and data.get("name"):
            label = data["name"]

        summary = f"{icon} {label}"
        if url:
            summary += f" ({short_url(url)})"
        caption = rich_to_text(data.get("caption"))
        if caption:
            summary += f" — {truncate(caption, CAPTION_LIMIT)}"

        lines = [summary]
        if url:
            lines.append(f"URL: {url}")
        return lines

    async def _table_rows(self, table_id: str) -> List[List[str]]:
        """Fetch table_row children and flatten each cell to text."""
        children = await self.client.list_block_children(table_id)
        return [
            [rich_to_text(cell) for cell in (child.get("table_row") or {}).get("cells", [])]
            for child in children
            if child.get("type") == "table_row"
        ]
