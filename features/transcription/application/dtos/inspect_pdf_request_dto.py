"""
DTO for validating an uploaded PDF before page selection.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class InspectPdfRequestDTO:
    """Raw upload as received from the client."""

    filename: str
    data: bytes = field(repr=False)
    content_type: Optional[str] = None  # MIME type reported by the client
