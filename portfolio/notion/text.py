"""Text helpers: rich text flattening, truncation and display width."""

from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

ELLIPSIS = "…"

# Code point ranges rendered two columns wide in a monospace font
_WIDE_RANGES = (
    (0x1100, 0x115F),  # Hangul Jamo
    (0x2E80, 0xA4CF),  # CJK Radicals .. Yi
    (0xAC00, 0xD7A3),  # Hangul Syllables
    (0xF900, 0xFAFF),  # CJK Compatibility Ideographs
    (0xFE10, 0xFE6F),  # Vertical forms
    (0xFF00, 0xFF60),  # Fullwidth forms
    (0xFFE0, 0xFFE6),  # Fullwidth signs
)


def rich_to_text(rich_text: Optional[List[Dict[str, Any]]]) -> str:
    """Concatenate the plain_text of a rich text array."""
    return "".join((item or {}).get("plain_text") or "" for item in rich_text or [])


def truncate(text: Optional[str], limit: int = 120) -> str:
    """Shorten text to at most ``limit`` characters, ending in an ellipsis."""
    if not text:
        return ""
    if len(text) > limit:
        return text[: limit - 1] + ELLIPSIS
    return text


def short_url(url: str) -> str:
    """
    Summarize a URL as ``host/<last path segment>``.

    Args:
        url: Absolute URL

    Returns:
        Short label, or the input unchanged when it is not an absolute URL
    """
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return url

    parts = [part for part in parsed.path.split("/") if part]
    tail = parts[-1] if parts else ""
    suffix = ELLIPSIS if len(tail) > 24 else ""
    return f"{parsed.netloc}/{tail[:24]}{suffix}"


def is_wide(ch: str) -> bool:
    """Return True when a character occupies two display columns."""
    code = ord(ch)
    return any(start <= code <= end for start, end in _WIDE_RANGES)


def display_width(text: Optional[str]) -> int:
    """Display width of text, counting wide characters as two columns."""
    return sum(2 if is_wide(ch) else 1 for ch in text or "")


def cut_to_width(text: str, limit: int) -> str:
    """Cut text to fit ``limit`` columns, marking the cut with an ellipsis."""
    if display_width(text) <= limit:
        return text

    budget = max(1, limit - 1)
    width = 0
    out = []
    for ch in text:
        step = 2 if is_wide(ch) else 1
        if width + step > budget:
            break
        out.append(ch)
        width += step
    return "".join(out) + ELLIPSIS


def pad_to_width(text: str, target: int) -> str:
    """Right-pad text with spaces up to ``target`` display columns."""
    width = display_width(text)
    if width >= target:
        return text
    return text + " " * (target - width)
