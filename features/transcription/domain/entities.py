"""
Domain entities for the PDF transcription feature.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class ProcessingState(str, Enum):
    """Where an uploaded document is in the upload → select → process → result workflow."""

    IDLE = "idle"
    PAGE_SELECTION = "page_selection"
    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class ProgressUpdate:
    """Transient progress notification emitted by the pipeline."""

    current_index: int
    total: int
    message: str


IDLE_PROGRESS = ProgressUpdate(current_index=0, total=0, message="")


@dataclass
class TranscriptionSession:
    """One uploaded PDF and everything the workflow knows about it."""

    session_id: str
    filename: str
    data: bytes = field(repr=False)
    size_bytes: int
    page_count: int
    default_page_range: str
    state: ProcessingState = ProcessingState.PAGE_SELECTION
    progress: ProgressUpdate = IDLE_PROGRESS
    page_numbers: Optional[list[int]] = None
    text: Optional[str] = field(default=None, repr=False)
    error: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
