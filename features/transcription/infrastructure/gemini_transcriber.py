"""
Remote transcription through Google Gemini (google-genai SDK).

The API key is passed in explicitly; there is no ambient environment lookup
here. Each call sends the page image plus a fixed instruction prompt and
returns the model's plain text answer.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from features.transcription.domain.errors import (
    MissingCredentialError,
    TranscriptionServiceError,
)
from features.transcription.domain.interfaces import ITranscriber
from features.transcription.domain.interfaces.itranscriber import TRANSCRIPTION_PROMPT


logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT_SECONDS = 120

SERVICE_FAILURE_MESSAGE = (
    "Failed to get a response from the AI model. "
    "Please check your API key and network connection."
)


class GeminiTranscriber(ITranscriber):
    """ITranscriber implementation calling `client.models.generate_content`."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        prompt: str = TRANSCRIPTION_PROMPT,
        client: Optional[Any] = None,
    ):
        if not api_key:
            raise MissingCredentialError(
                "GEMINI_API_KEY is not set. Configure an API key to transcribe pages."
            )
        self.model = model
        self.prompt = prompt
        if client is None:
            # HttpOptions.timeout is in milliseconds
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=timeout_seconds * 1000),
            )
        self._client = client

    def transcribe_image(self, image_bytes: bytes, mime_type: str) -> str:
        try:
            response = self._client.models.generate_content(
                model=self.model,
                contents=[
                    types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                    self.prompt,
                ],
            )
        except Exception as e:
            logger.error(f"GeminiTranscriber: generate_content failed ({self.model}): {e}")
            raise TranscriptionServiceError(SERVICE_FAILURE_MESSAGE) from e

        text = getattr(response, "text", None)
        if text is None:
            # Blocked or empty candidates; treated as a page without text
            logger.debug("GeminiTranscriber: Response contained no text")
            return ""
        if not isinstance(text, str):
            raise TranscriptionServiceError(
                f"Malformed response from the AI model (text is {type(text).__name__})."
            )
        return text
