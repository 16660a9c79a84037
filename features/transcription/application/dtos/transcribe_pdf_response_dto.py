"""
DTO for a finished transcription run.
"""

from dataclasses import dataclass
from typing import List


@dataclass
class TranscribePdfResponseDTO:
    """Concatenated, page-labeled transcription plus the pages it covered."""

    text: str
    page_numbers: List[int]
    page_count: int
