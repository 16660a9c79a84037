"""
Interface for receiving pipeline progress.

A single-method capability rather than an event bus: the pipeline calls it
inline, in order, on the same thread, so implementations must return quickly.
"""

from abc import ABC, abstractmethod

from features.transcription.domain.entities import ProgressUpdate


class IProgressListener(ABC):
    """Receives ProgressUpdate notifications."""

    @abstractmethod
    def on_progress(self, update: ProgressUpdate) -> None:
        raise NotImplementedError


class NullProgressListener(IProgressListener):
    """Discards every update."""

    def on_progress(self, update: ProgressUpdate) -> None:
        return None
