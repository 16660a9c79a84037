"""
DTO for upload inspection results.
"""

from dataclasses import dataclass


@dataclass
class InspectPdfResponseDTO:
    """What the page selection step needs to know about an upload."""

    filename: str
    size_bytes: int
    page_count: int
    default_page_range: str  # e.g. "1-12"
