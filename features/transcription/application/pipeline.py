"""
Page-by-page transcription pipeline.

For each selected page, in the order given:
  1. Render the page to a JPEG (2x scale, quality 90 by default)
  2. Send the image to the remote transcriber
  3. Append "--- Page N ---" followed by the text (pages with no text are skipped)
  4. Release the page's decoded resources

Pages are processed strictly one at a time: page k+1 is not rendered before
page k's remote call has returned. Any error aborts the whole run.
"""

from __future__ import annotations

import logging
from typing import Sequence

from features.transcription.domain.entities import ProgressUpdate
from features.transcription.domain.interfaces import (
    IDocument,
    IProgressListener,
    ITranscriber,
)


logger = logging.getLogger(__name__)

NO_PAGES_SELECTED = "No pages were selected for transcription."

DEFAULT_RENDER_SCALE = 2.0
DEFAULT_JPEG_QUALITY = 90
IMAGE_MIME_TYPE = "image/jpeg"


def format_page_block(page_number: int, text: str) -> str:
    """Labeled block appended to the result for one page."""
    return f"--- Page {page_number} ---\n\n{text}\n\n"


def transcribe_pages(
    document: IDocument,
    page_numbers: Sequence[int],
    listener: IProgressListener,
    transcriber: ITranscriber,
    render_scale: float = DEFAULT_RENDER_SCALE,
    jpeg_quality: int = DEFAULT_JPEG_QUALITY,
) -> str:
    """
    Transcribe the given pages of an opened document.

    Args:
        document: Opened document (owned by the caller)
        page_numbers: 1-indexed pages, processed in this order
        listener: Receives progress updates inline
        transcriber: Remote image → text service
        render_scale: Rasterization scale factor
        jpeg_quality: JPEG quality for the page images

    Returns:
        The concatenated page blocks, stripped of surrounding whitespace,
        or NO_PAGES_SELECTED when `page_numbers` is empty

    Raises:
        PipelineError: from rendering or the remote call; no partial result
    """
    total = len(page_numbers)
    if total == 0:
        return NO_PAGES_SELECTED

    logger.info(f"transcribe_pages: Starting - {total} pages (document has {document.page_count})")
    listener.on_progress(
        ProgressUpdate(current_index=0, total=total, message=f"Found {total} pages to process.")
    )

    parts: list[str] = []
    empty_pages = 0

    for index, page_number in enumerate(page_numbers):
        position = index + 1
        listener.on_progress(
            ProgressUpdate(
                current_index=position,
                total=total,
                message=f"Processing page {page_number} of {document.page_count}...",
            )
        )

        page = document.get_page(page_number)
        try:
            image = page.render_jpeg(scale=render_scale, quality=jpeg_quality)
            logger.debug(f"transcribe_pages: Page {page_number}: Rendered ({len(image)} bytes)")

            listener.on_progress(
                ProgressUpdate(
                    current_index=position,
                    total=total,
                    message=f"Analyzing image from page {page_number}...",
                )
            )

            text = transcriber.transcribe_image(image, IMAGE_MIME_TYPE)
            del image
        finally:
            page.cleanup()

        if text:
            parts.append(format_page_block(page_number, text))
            logger.debug(f"transcribe_pages: Page {page_number}: Added block (len={len(text)})")
        else:
            empty_pages += 1
            logger.debug(f"transcribe_pages: Page {page_number}: No text returned")

    logger.info(
        f"transcribe_pages: Complete - {total} pages processed ({empty_pages} without text)"
    )
    return "".join(parts).strip()
