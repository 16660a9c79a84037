"""
Domain interfaces (ports) for the PDF transcription feature.

Following clean architecture principles:
- Domain defines interfaces (ports)
- Infrastructure implements interfaces (adapters)
- Application orchestrates via interfaces

Each interface is defined in its own file for better organization.
"""

from .idocument_provider import IDocument, IDocumentProvider, IPage
from .iprogress_listener import IProgressListener
from .itranscriber import ITranscriber

__all__ = [
    "IDocument",
    "IDocumentProvider",
    "IPage",
    "IProgressListener",
    "ITranscriber",
]
