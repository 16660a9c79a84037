"""
Interfaces for opening a PDF and rasterizing its pages.

Infrastructure adapters (e.g., PyMuPdfDocumentProvider) implement these.
The caller owns the document; the pipeline only reads from it and releases
each page's decoded resources once it is done with that page.
"""

from abc import ABC, abstractmethod


class IPage(ABC):
    """A single renderable page."""

    @property
    @abstractmethod
    def page_number(self) -> int:
        """1-indexed page number within the document."""
        raise NotImplementedError

    @abstractmethod
    def render_jpeg(self, scale: float, quality: int) -> bytes:
        """
        Rasterize the page and encode it as JPEG.

        Args:
            scale: Upscaling factor relative to the page's nominal size
            quality: JPEG quality (1-95)

        Returns:
            JPEG bytes

        Raises:
            DocumentError: if the page cannot be rendered
        """
        raise NotImplementedError

    @abstractmethod
    def cleanup(self) -> None:
        """Release decoded resources held for this page. Safe to call more than once."""
        raise NotImplementedError


class IDocument(ABC):
    """An opened PDF."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def get_page(self, page_number: int) -> IPage:
        """
        Load a page by its 1-indexed number.

        Raises:
            DocumentError: if the page does not exist or cannot be loaded
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release the document. Default: nothing to release."""

    def __enter__(self) -> "IDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class IDocumentProvider(ABC):
    """Port for turning raw file bytes into an IDocument."""

    @abstractmethod
    def open(self, data: bytes) -> IDocument:
        """
        Raises:
            DocumentError: if the bytes are not a readable PDF
        """
        raise NotImplementedError
