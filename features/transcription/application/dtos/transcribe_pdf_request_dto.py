"""
DTO for a transcription run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class TranscribePdfRequestDTO:
    """
    Input for the transcription pipeline.

    `page_numbers=None` means every page of the document.
    """

    data: bytes = field(repr=False)
    page_numbers: Optional[List[int]] = None
