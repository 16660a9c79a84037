"""
PDF document provider backed by PyMuPDF.

  - Opens PDFs from in-memory bytes (uploads never touch the disk)
  - Rasterizes one page at a time with a scale matrix (2.0 = 144 DPI)
  - Encodes the raster as JPEG with Pillow
  - Releases each page's pixmap and shrinks MuPDF's resource store after use

MuPDF is not thread-safe and its resource store is process-wide, so every
call into fitz goes through FITZ_LOCK. Request handlers and background
session runs share the same worker threads.
"""

from __future__ import annotations

import io
import logging
import threading
from typing import Optional

import fitz  # PyMuPDF
from PIL import Image

from features.transcription.domain.errors import DocumentError
from features.transcription.domain.interfaces import IDocument, IDocumentProvider, IPage


logger = logging.getLogger(__name__)

FITZ_LOCK = threading.Lock()


class PyMuPdfPage(IPage):
    """A loaded PyMuPDF page."""

    def __init__(self, page: fitz.Page, page_number: int):
        self._page: Optional[fitz.Page] = page
        self._page_number = page_number

    @property
    def page_number(self) -> int:
        return self._page_number

    def render_jpeg(self, scale: float, quality: int) -> bytes:
        if self._page is None:
            raise DocumentError(f"Page {self._page_number} was already released.")

        try:
            with FITZ_LOCK:
                pix = self._page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
                img = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
                del pix
            buffer = io.BytesIO()
            img.save(buffer, format="JPEG", quality=quality)
            img.close()
        except Exception as e:
            logger.error(f"PyMuPdfPage: Page {self._page_number}: Render failed: {e}")
            raise DocumentError(f"Could not render page {self._page_number}: {e}") from e

        return buffer.getvalue()

    def cleanup(self) -> None:
        if self._page is None:
            return
        with FITZ_LOCK:
            self._page = None
            # Drop cached fonts/images decoded for this page
            fitz.TOOLS.store_shrink(100)


class PyMuPdfDocument(IDocument):
    """An opened PyMuPDF document."""

    def __init__(self, doc: fitz.Document):
        self._doc = doc

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def get_page(self, page_number: int) -> PyMuPdfPage:
        if page_number < 1 or page_number > self._doc.page_count:
            raise DocumentError(
                f"Page {page_number} does not exist (document has {self._doc.page_count} pages)."
            )
        try:
            with FITZ_LOCK:
                page = self._doc.load_page(page_number - 1)  # PyMuPDF pages are 0-indexed
        except Exception as e:
            raise DocumentError(f"Could not load page {page_number}: {e}") from e
        return PyMuPdfPage(page, page_number)

    def close(self) -> None:
        with FITZ_LOCK:
            if not self._doc.is_closed:
                self._doc.close()


class PyMuPdfDocumentProvider(IDocumentProvider):
    """Opens PDF bytes with PyMuPDF."""

    def open(self, data: bytes) -> PyMuPdfDocument:
        with FITZ_LOCK:
            try:
                doc = fitz.open(stream=data, filetype="pdf")
            except Exception as e:
                logger.warning(f"PyMuPdfDocumentProvider: Could not open PDF ({len(data)} bytes): {e}")
                raise DocumentError(f"Could not open the PDF file: {e}") from e

            if doc.needs_pass:
                doc.close()
                raise DocumentError("The PDF file is password protected.")

        logger.debug(f"PyMuPdfDocumentProvider: Opened PDF - {doc.page_count} pages")
        return PyMuPdfDocument(doc)
