"""
Test Configuration and Fixtures
"""
import os

# Must be set before main/config are imported: settings are read once
os.environ["LOG_FILE"] = ""
os.environ.setdefault("GEMINI_API_KEY", "test-key")

import fitz
import pytest

from features.transcription.domain.errors import DocumentError, TranscriptionServiceError
from features.transcription.domain.interfaces import (
    IDocument,
    IDocumentProvider,
    IPage,
    IProgressListener,
    ITranscriber,
)


class FakePage(IPage):
    """Page that records render and cleanup calls on its document."""

    def __init__(self, document, page_number):
        self.document = document
        self._page_number = page_number

    @property
    def page_number(self):
        return self._page_number

    def render_jpeg(self, scale, quality):
        self.document.events.append(("render", self._page_number, scale, quality))
        if self._page_number in self.document.failing_pages:
            raise DocumentError(f"Could not render page {self._page_number}: broken")
        return f"jpeg-{self._page_number}".encode()

    def cleanup(self):
        self.document.events.append(("cleanup", self._page_number))


class FakeDocument(IDocument):
    def __init__(self, page_count, failing_pages=()):
        self._page_count = page_count
        self.failing_pages = set(failing_pages)
        self.events = []
        self.closed = False

    @property
    def page_count(self):
        return self._page_count

    def get_page(self, page_number):
        if page_number < 1 or page_number > self._page_count:
            raise DocumentError(f"Page {page_number} does not exist.")
        self.events.append(("get_page", page_number))
        return FakePage(self, page_number)

    def close(self):
        self.closed = True


class FakeDocumentProvider(IDocumentProvider):
    def __init__(self, document):
        self.document = document
        self.opened = 0

    def open(self, data):
        self.opened += 1
        return self.document


class FakeTranscriber(ITranscriber):
    """
    Returns scripted text per image.

    `responses` maps image bytes to text or to an exception instance to raise.
    Images without an entry get "text for <image>". Setting `error` makes every
    call fail with it.
    """

    def __init__(self, responses=None, events=None, error=None):
        self.responses = responses or {}
        self.calls = []
        self.events = events
        self.error = error

    def transcribe_image(self, image_bytes, mime_type):
        self.calls.append((image_bytes, mime_type))
        if self.events is not None:
            self.events.append(("transcribe", image_bytes))
        if self.error is not None:
            raise self.error
        response = self.responses.get(image_bytes, f"text for {image_bytes.decode('latin-1')}")
        if isinstance(response, Exception):
            raise response
        return response


class RecordingListener(IProgressListener):
    def __init__(self):
        self.updates = []

    def on_progress(self, update):
        self.updates.append(update)


def make_pdf_bytes(pages=3, text="Hello page {n}"):
    """Real PDF with one line of text per page."""
    doc = fitz.open()
    for n in range(1, pages + 1):
        page = doc.new_page(width=200, height=300)
        page.insert_text((20, 50), text.format(n=n), fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def fake_document():
    return FakeDocument(page_count=6)


@pytest.fixture
def fake_transcriber(fake_document):
    return FakeTranscriber(events=fake_document.events)


@pytest.fixture
def pdf_bytes():
    return make_pdf_bytes(pages=3)


@pytest.fixture
def service_error():
    return TranscriptionServiceError("Failed to get a response from the AI model.")
