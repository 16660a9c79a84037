"""
Transcription Pipeline Tests
"""
import pytest

from conftest import FakeDocument, FakeTranscriber
from features.transcription.application.pipeline import (
    NO_PAGES_SELECTED,
    format_page_block,
    transcribe_pages,
)
from features.transcription.domain.entities import ProgressUpdate
from features.transcription.domain.errors import DocumentError, PipelineError


class TestEmptySelection:
    def test_returns_sentinel_without_events_or_calls(self, fake_document, listener, fake_transcriber):
        result = transcribe_pages(fake_document, [], listener, fake_transcriber)

        assert result == NO_PAGES_SELECTED
        assert listener.updates == []
        assert fake_transcriber.calls == []
        assert fake_document.events == []


class TestOrdering:
    def test_two_pages_two_calls_in_order(self, fake_document, listener, fake_transcriber):
        transcribe_pages(fake_document, [2, 5], listener, fake_transcriber)

        assert [image for image, _ in fake_transcriber.calls] == [b"jpeg-2", b"jpeg-5"]
        assert all(mime == "image/jpeg" for _, mime in fake_transcriber.calls)

    def test_follows_given_order_not_numeric_order(self, fake_document, listener, fake_transcriber):
        result = transcribe_pages(fake_document, [5, 1, 3], listener, fake_transcriber)

        assert [image for image, _ in fake_transcriber.calls] == [b"jpeg-5", b"jpeg-1", b"jpeg-3"]
        assert result.index("--- Page 5 ---") < result.index("--- Page 1 ---")

    def test_one_page_fully_processed_before_next(self, fake_document, listener, fake_transcriber):
        transcribe_pages(fake_document, [2, 4], listener, fake_transcriber)

        assert [e[:2] for e in fake_document.events] == [
            ("get_page", 2),
            ("render", 2),
            ("transcribe", b"jpeg-2"),
            ("cleanup", 2),
            ("get_page", 4),
            ("render", 4),
            ("transcribe", b"jpeg-4"),
            ("cleanup", 4),
        ]

    def test_render_settings_are_passed_through(self, fake_document, listener, fake_transcriber):
        transcribe_pages(fake_document, [1], listener, fake_transcriber, render_scale=3.0, jpeg_quality=75)

        assert ("render", 1, 3.0, 75) in fake_document.events

    def test_default_render_settings(self, fake_document, listener, fake_transcriber):
        transcribe_pages(fake_document, [1], listener, fake_transcriber)

        assert ("render", 1, 2.0, 90) in fake_document.events


class TestProgress:
    def test_progress_sequence(self, fake_document, listener, fake_transcriber):
        transcribe_pages(fake_document, [2, 5], listener, fake_transcriber)

        assert listener.updates == [
            ProgressUpdate(0, 2, "Found 2 pages to process."),
            ProgressUpdate(1, 2, "Processing page 2 of 6..."),
            ProgressUpdate(1, 2, "Analyzing image from page 2..."),
            ProgressUpdate(2, 2, "Processing page 5 of 6..."),
            ProgressUpdate(2, 2, "Analyzing image from page 5..."),
        ]

    def test_final_update_reaches_total(self, fake_document, listener, fake_transcriber):
        transcribe_pages(fake_document, [1, 2, 3], listener, fake_transcriber)

        last = listener.updates[-1]
        assert last.current_index == last.total == 3


class TestOutput:
    def test_labeled_blocks(self, fake_document, listener):
        transcriber = FakeTranscriber({b"jpeg-1": "First", b"jpeg-2": "Second\nline"})

        result = transcribe_pages(fake_document, [1, 2], listener, transcriber)

        assert result == "--- Page 1 ---\n\nFirst\n\n--- Page 2 ---\n\nSecond\nline"

    def test_empty_page_is_skipped_but_processing_continues(self, fake_document, listener):
        transcriber = FakeTranscriber({b"jpeg-2": ""})

        result = transcribe_pages(fake_document, [1, 2, 3], listener, transcriber)

        assert "--- Page 2 ---" not in result
        assert "--- Page 1 ---" in result
        assert "--- Page 3 ---" in result
        assert len(transcriber.calls) == 3

    def test_all_pages_empty_gives_empty_string(self, fake_document, listener):
        transcriber = FakeTranscriber({b"jpeg-1": "", b"jpeg-2": ""})

        assert transcribe_pages(fake_document, [1, 2], listener, transcriber) == ""

    def test_result_is_stripped(self, fake_document, listener):
        transcriber = FakeTranscriber({b"jpeg-1": "  padded  "})

        result = transcribe_pages(fake_document, [1], listener, transcriber)

        assert result == "--- Page 1 ---\n\n  padded"

    def test_format_page_block(self):
        assert format_page_block(7, "abc") == "--- Page 7 ---\n\nabc\n\n"


class TestFailures:
    def test_remote_failure_aborts_run(self, fake_document, listener, service_error):
        transcriber = FakeTranscriber({b"jpeg-3": service_error}, events=fake_document.events)

        with pytest.raises(PipelineError):
            transcribe_pages(fake_document, [1, 3, 5], listener, transcriber)

        assert [image for image, _ in transcriber.calls] == [b"jpeg-1", b"jpeg-3"]
        assert ("get_page", 5) not in fake_document.events

    def test_failed_page_is_still_cleaned_up(self, fake_document, listener, service_error):
        transcriber = FakeTranscriber({b"jpeg-3": service_error})

        with pytest.raises(PipelineError):
            transcribe_pages(fake_document, [3], listener, transcriber)

        assert fake_document.events.count(("cleanup", 3)) == 1

    def test_render_failure_aborts_before_remote_call(self, listener, fake_transcriber):
        document = FakeDocument(page_count=4, failing_pages={2})

        with pytest.raises(DocumentError):
            transcribe_pages(document, [1, 2, 3], listener, fake_transcriber)

        assert len(fake_transcriber.calls) == 1
        assert ("cleanup", 2) in document.events

    def test_missing_page_aborts(self, fake_document, listener, fake_transcriber):
        with pytest.raises(DocumentError):
            transcribe_pages(fake_document, [1, 99], listener, fake_transcriber)
