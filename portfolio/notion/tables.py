"""Table renderers: CJK-aware ASCII grid and sanitized HTML."""

import html
from typing import List, Sequence

from .text import cut_to_width, display_width, pad_to_width

HTML_PREFIX = "__HTML__:"
TABLE_LABEL = "(table)"
EMPTY_TABLE_LABEL = "(empty table)"
MIN_COLUMN_WIDTH = 3
DEFAULT_MAX_COLUMN_WIDTH = 56

Rows = Sequence[Sequence[str]]


def render_ascii_table(
    rows: Rows,
    has_column_header: bool = False,
    max_column_width: int = DEFAULT_MAX_COLUMN_WIDTH,
) -> List[str]:
    """
    Render table rows as a fixed-width grid.

    Multi-line cells expand their row to the height of the tallest cell.
    Cells wider than the column cap are cut with an ellipsis.

    Args:
        rows: Cell text per row
        has_column_header: Draw a border under the first row
        max_column_width: Upper bound for any column, in display columns

    Returns:
        Output lines: a label, borders and one line per row line
    """
    if not rows:
        return [EMPTY_TABLE_LABEL]

    split_rows = [[[part.strip() for part in str(cell or "").split("\n")] for cell in row] for row in rows]

    column_count = max(len(row) for row in split_rows)
    widths = []
    for ci in range(column_count):
        width = MIN_COLUMN_WIDTH
        for row in split_rows:
            for line in row[ci] if ci < len(row) else [""]:
                width = max(width, display_width(line))
        widths.append(min(width, max_column_width))

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    out = [TABLE_LABEL, border]
    for ri, row in enumerate(split_rows):
        row_height = max([len(cell) for cell in row] + [1])
        for k in range(row_height):
            cells = []
            for ci in range(column_count):
                lines = row[ci] if ci < len(row) else [""]
                raw = lines[k] if k < len(lines) else ""
                cells.append(" " + pad_to_width(cut_to_width(raw, widths[ci]), widths[ci]) + " ")
            out.append("|" + "|".join(cells) + "|")
        if has_column_header and ri == 0:
            out.append(border)
    out.append(border)
    return out


def _cell_html(text: str) -> str:
    return "<br>".join(html.escape(line) for line in str(text or "").split("\n"))


def render_html_table(
    rows: Rows,
    has_column_header: bool = False,
    has_row_header: bool = False,
) -> str:
    """
    Render table rows as one sentinel-prefixed HTML line.

    All cell text is escaped, so the markup is safe to inject verbatim.

    Args:
        rows: Cell text per row
        has_column_header: Render the first row as <thead>
        has_row_header: Render the first cell of body rows as a row header

    Returns:
        ``HTML_PREFIX`` followed by the table markup
    """
    rows = [list(row) for row in rows]
    column_count = max((len(row) for row in rows), default=0)
    rows = [row + [""] * (column_count - len(row)) for row in rows]

    parts = ['<div class="notion-table-wrap"><table class="notion-table">']

    body = rows
    if has_column_header and rows:
        header, body = rows[0], rows[1:]
        parts.append("<thead><tr>")
        parts.extend(f"<th>{_cell_html(cell)}</th>" for cell in header)
        parts.append("</tr></thead>")

    parts.append("<tbody>")
    for row in body:
        parts.append("<tr>")
        for ci, cell in enumerate(row):
            if has_row_header and ci == 0:
                parts.append(f'<th scope="row">{_cell_html(cell)}</th>')
            else:
                parts.append(f"<td>{_cell_html(cell)}</td>")
        parts.append("</tr>")
    parts.append("</tbody></table></div>")

    return HTML_PREFIX + "".join(parts)
