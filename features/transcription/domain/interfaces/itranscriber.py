"""
Interface for the remote image → text transcription service.

Infrastructure adapters (e.g., GeminiTranscriber) implement this interface.
"""

from abc import ABC, abstractmethod


TRANSCRIPTION_PROMPT = (
    "Transcribe all text from this image accurately. "
    "Preserve the original line breaks and formatting as much as possible. "
    "If there is no text, return an empty response."
)


class ITranscriber(ABC):
    """Port for transcribing a page image into plain text."""

    @abstractmethod
    def transcribe_image(self, image_bytes: bytes, mime_type: str) -> str:
        """
        Transcribe the text visible in an image.

        Args:
            image_bytes: Encoded image
            mime_type: MIME type of `image_bytes` (e.g. "image/jpeg")

        Returns:
            The transcribed text, or "" when the image holds no text

        Raises:
            TranscriptionServiceError: if the remote call fails
        """
        raise NotImplementedError
