"""
Gemini Transcriber Tests

The SDK client is replaced by a stub exposing `models.generate_content`.
"""
from types import SimpleNamespace

import pytest

from features.transcription.domain.errors import (
    MissingCredentialError,
    PipelineError,
    TranscriptionServiceError,
)
from features.transcription.domain.interfaces.itranscriber import TRANSCRIPTION_PROMPT
from features.transcription.infrastructure.gemini_transcriber import GeminiTranscriber


class StubModels:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def generate_content(self, model, contents):
        self.requests.append({"model": model, "contents": contents})
        if self.error is not None:
            raise self.error
        return self.response


def make_client(response=None, error=None):
    return SimpleNamespace(models=StubModels(response=response, error=error))


class TestCredentials:
    @pytest.mark.parametrize("api_key", [None, ""])
    def test_missing_api_key(self, api_key):
        with pytest.raises(MissingCredentialError):
            GeminiTranscriber(api_key=api_key, client=make_client())

    def test_missing_api_key_is_a_pipeline_error(self):
        with pytest.raises(PipelineError):
            GeminiTranscriber(api_key=None)

    def test_builds_sdk_client(self):
        transcriber = GeminiTranscriber(api_key="key", model="gemini-test")
        assert transcriber.model == "gemini-test"


class TestTranscribeImage:
    def test_returns_text(self):
        client = make_client(response=SimpleNamespace(text="Hello\nWorld"))
        transcriber = GeminiTranscriber(api_key="key", model="gemini-test", client=client)

        assert transcriber.transcribe_image(b"\xff\xd8jpeg", "image/jpeg") == "Hello\nWorld"

    def test_request_contains_image_and_prompt(self):
        client = make_client(response=SimpleNamespace(text="x"))
        transcriber = GeminiTranscriber(api_key="key", model="gemini-test", client=client)

        transcriber.transcribe_image(b"\xff\xd8jpeg", "image/jpeg")

        request = client.models.requests[0]
        assert request["model"] == "gemini-test"
        image_part, prompt = request["contents"]
        assert image_part.inline_data.data == b"\xff\xd8jpeg"
        assert image_part.inline_data.mime_type == "image/jpeg"
        assert prompt == TRANSCRIPTION_PROMPT

    def test_none_text_is_empty_string(self):
        client = make_client(response=SimpleNamespace(text=None))
        transcriber = GeminiTranscriber(api_key="key", client=client)

        assert transcriber.transcribe_image(b"img", "image/jpeg") == ""

    def test_sdk_error_becomes_service_error(self):
        client = make_client(error=ConnectionError("network down"))
        transcriber = GeminiTranscriber(api_key="key", client=client)

        with pytest.raises(TranscriptionServiceError, match="check your API key and network") as exc_info:
            transcriber.transcribe_image(b"img", "image/jpeg")

        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_malformed_response(self):
        client = make_client(response=SimpleNamespace(text=42))
        transcriber = GeminiTranscriber(api_key="key", client=client)

        with pytest.raises(TranscriptionServiceError, match="Malformed"):
            transcriber.transcribe_image(b"img", "image/jpeg")
