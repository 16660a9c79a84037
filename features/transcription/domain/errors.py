"""
Error hierarchy for the PDF transcription feature.

Two kinds matter to callers:
  - ValidationError: bad user input (page ranges, uploads). Recoverable, re-prompt.
  - PipelineError: the document or the remote model failed. Fatal to the run.

Messages are written for end users and are surfaced verbatim.
"""


class TranscriptionError(Exception):
    """Base class for every error raised by this feature."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


# ==================== Validation ====================


class ValidationError(TranscriptionError):
    """User input was rejected."""


class PageRangeError(ValidationError):
    """A page range expression could not be parsed or is out of bounds."""


class UnsupportedFileError(ValidationError):
    """Upload is not a PDF (or is empty)."""


class FileTooLargeError(ValidationError):
    """Upload exceeds the configured size limit."""


# ==================== Pipeline ====================


class PipelineError(TranscriptionError):
    """The transcription run failed and was aborted."""


class MissingCredentialError(PipelineError):
    """No API key is configured for the remote model."""


class DocumentError(PipelineError):
    """The PDF could not be opened or a page could not be rendered."""


class TranscriptionServiceError(PipelineError):
    """The remote model call failed (network, auth, malformed response)."""


# ==================== Sessions ====================


class SessionNotFoundError(TranscriptionError):
    """No session exists for the given id."""


class SessionStateError(TranscriptionError):
    """The requested action is not allowed in the session's current state."""
