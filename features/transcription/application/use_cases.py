"""
Application use cases for the PDF transcription feature.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from features.transcription.application.pipeline import (
    DEFAULT_JPEG_QUALITY,
    DEFAULT_RENDER_SCALE,
    NO_PAGES_SELECTED,
    transcribe_pages,
)
from features.transcription.domain.entities import ProgressUpdate
from features.transcription.domain.errors import (
    DocumentError,
    FileTooLargeError,
    UnsupportedFileError,
)
from features.transcription.domain.interfaces import (
    IDocumentProvider,
    IProgressListener,
    ITranscriber,
)
from features.transcription.domain.interfaces.iprogress_listener import NullProgressListener
from features.transcription.domain.page_ranges import default_page_range
from .dtos import (
    InspectPdfRequestDTO,
    InspectPdfResponseDTO,
    TranscribePdfRequestDTO,
    TranscribePdfResponseDTO,
)


logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
# Some clients send uploads without a specific type; fall back to the extension for these
GENERIC_MIME_TYPES = {None, "", "application/octet-stream", "binary/octet-stream"}
DEFAULT_MAX_UPLOAD_MB = 200


def _is_pdf_upload(filename: str, content_type: Optional[str]) -> bool:
    if content_type == PDF_MIME_TYPE:
        return True
    if content_type in GENERIC_MIME_TYPES:
        return filename.lower().endswith(".pdf")
    return False


@dataclass
class InspectPdfUseCase:
    """
    Upload validation before page selection.

    Checks type and size, opens the document and reports its page count
    together with the "whole document" page range used to pre-fill selection.
    """

    document_provider: IDocumentProvider
    max_upload_mb: int = DEFAULT_MAX_UPLOAD_MB

    def execute(self, request: InspectPdfRequestDTO) -> InspectPdfResponseDTO:
        if not _is_pdf_upload(request.filename, request.content_type):
            raise UnsupportedFileError("Invalid file type. Please upload a PDF file.")

        size = len(request.data)
        if size == 0:
            raise UnsupportedFileError("The uploaded file is empty.")
        if size > self.max_upload_mb * 1024 * 1024:
            raise FileTooLargeError(
                f"File is too large. Maximum size is {self.max_upload_mb} MB."
            )

        try:
            with self.document_provider.open(request.data) as document:
                page_count = document.page_count
        except DocumentError as e:
            logger.warning(f"InspectPdfUseCase: Could not open {request.filename!r}: {e}")
            raise DocumentError(
                "Could not read the PDF file to determine the number of pages."
            ) from e

        logger.info(f"InspectPdfUseCase: {request.filename!r} - {page_count} pages, {size} bytes")

        return InspectPdfResponseDTO(
            filename=request.filename,
            size_bytes=size,
            page_count=page_count,
            default_page_range=default_page_range(page_count),
        )


@dataclass
class TranscribePdfUseCase:
    """
    Complete transcription run: open PDF → render pages → remote OCR → labeled text.

    Follows clean architecture: depends on IDocumentProvider and ITranscriber
    interfaces, not on PyMuPDF or Gemini directly.
    """

    document_provider: IDocumentProvider
    transcriber: ITranscriber
    render_scale: float = DEFAULT_RENDER_SCALE
    jpeg_quality: int = DEFAULT_JPEG_QUALITY

    def execute(
        self,
        request: TranscribePdfRequestDTO,
        listener: Optional[IProgressListener] = None,
    ) -> TranscribePdfResponseDTO:
        """
        Execute the pipeline and return the concatenated transcription.

        Args:
            request: File bytes and optional page selection (None = all pages)
            listener: Receives progress updates; optional

        Returns:
            TranscribePdfResponseDTO with the text and the pages processed

        Raises:
            PipelineError: document or remote failure; the run is aborted
        """
        listener = listener or NullProgressListener()

        if request.page_numbers is not None and not request.page_numbers:
            return TranscribePdfResponseDTO(text=NO_PAGES_SELECTED, page_numbers=[], page_count=0)

        listener.on_progress(ProgressUpdate(current_index=0, total=0, message="Reading PDF file..."))

        with self.document_provider.open(request.data) as document:
            page_count = document.page_count
            if request.page_numbers is None:
                page_numbers = list(range(1, page_count + 1))
            else:
                page_numbers = list(request.page_numbers)

            text = transcribe_pages(
                document,
                page_numbers,
                listener,
                self.transcriber,
                render_scale=self.render_scale,
                jpeg_quality=self.jpeg_quality,
            )

        return TranscribePdfResponseDTO(
            text=text,
            page_numbers=page_numbers,
            page_count=page_count,
        )
