"""
DTOs (Data Transfer Objects) used by the PDF transcription use cases and API.

Following clean architecture principles:
- DTOs are organized by feature/domain
- Each DTO is in its own file for better organization
- Easy to find and maintain specific DTOs
"""

# Upload inspection DTOs
from .inspect_pdf_request_dto import InspectPdfRequestDTO
from .inspect_pdf_response_dto import InspectPdfResponseDTO

# Transcription DTOs
from .transcribe_pdf_request_dto import TranscribePdfRequestDTO
from .transcribe_pdf_response_dto import TranscribePdfResponseDTO

__all__ = [
    # Upload inspection
    "InspectPdfRequestDTO",
    "InspectPdfResponseDTO",
    # Transcription
    "TranscribePdfRequestDTO",
    "TranscribePdfResponseDTO",
]
