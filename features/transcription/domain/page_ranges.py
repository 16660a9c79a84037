"""
Page range parsing: "1-5, 8, 12-15" → [1, 2, 3, 4, 5, 8, 12, 13, 14, 15].

Rules:
  - Segments are comma separated; empty segments (e.g. a trailing comma) are skipped.
  - "a-b" is an inclusive range, "n" a single page.
  - Every page must lie in [1, max_page].
  - Output is always ascending and deduplicated, whatever the input order.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Set

from .errors import PageRangeError


# Plain non-negative integers only ("+3", "1.5", "1_000" are rejected)
_INTEGER_RE = re.compile(r"[0-9]+")


def _parse_int(token: str, max_page: int) -> Optional[int]:
    token = token.strip()
    if not _INTEGER_RE.fullmatch(token):
        return None
    digits = token.lstrip("0") or "0"
    # More digits than max_page is out of bounds; never convert arbitrarily long strings
    if len(digits) > len(str(max_page)):
        return max_page + 1
    return int(digits)


def parse_page_ranges(text: str, max_page: int) -> List[int]:
    """
    Parse a page range expression against a document with `max_page` pages.

    Args:
        text: User input, e.g. "1-5, 8, 12-15"
        max_page: Total number of pages in the document

    Returns:
        Strictly ascending list of distinct page numbers

    Raises:
        PageRangeError: on empty input, malformed segments, reversed or
            out-of-bounds ranges, or when no page was selected at all
    """
    if not text or not text.strip():
        raise PageRangeError("Page range input cannot be empty.")

    pages: Set[int] = set()

    for segment in text.split(","):
        segment = segment.strip()
        if not segment:
            continue

        if "-" in segment:
            parts = segment.split("-")
            if len(parts) != 2:
                raise PageRangeError(f'Invalid range format: "{segment}"')

            start = _parse_int(parts[0], max_page)
            end = _parse_int(parts[1], max_page)

            if start is None or end is None:
                raise PageRangeError(f'Invalid numbers in range: "{segment}"')
            if start > end:
                raise PageRangeError(
                    f'Start page cannot be greater than end page in range: "{segment}"'
                )
            if start < 1 or end > max_page:
                raise PageRangeError(
                    f'Pages must be between 1 and {max_page}. Invalid range: "{segment}"'
                )

            pages.update(range(start, end + 1))
        else:
            page = _parse_int(segment, max_page)
            if page is None:
                raise PageRangeError(f'Invalid page number: "{segment}"')
            if page < 1 or page > max_page:
                raise PageRangeError(
                    f'Page number must be between 1 and {max_page}. Invalid page: "{segment}"'
                )
            pages.add(page)

    if not pages:
        raise PageRangeError("No valid pages were specified.")

    return sorted(pages)


def default_page_range(page_count: int) -> str:
    """Expression selecting the whole document ("1-N"), used to pre-fill page selection."""
    if page_count <= 1:
        return "1"
    return f"1-{page_count}"


def format_page_ranges(pages: Iterable[int]) -> str:
    """Comma-joined form of a page set; parsing it again yields the same pages."""
    return ",".join(str(p) for p in pages)
