"""
FastAPI routes for the PDF transcription feature.

Two ways to use it:
  - One shot: POST /transcribe with the file (and optional page range).
  - Session workflow mirroring the upload → page selection → processing → result
    screens: POST /sessions, POST /sessions/{id}/start, poll GET /sessions/{id},
    then GET /sessions/{id}/download.
"""

from __future__ import annotations

from functools import partial
from typing import Callable

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    Response,
    UploadFile,
    status,
)
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from config import Settings, get_settings
from features.transcription.application.dtos import (
    InspectPdfRequestDTO,
    InspectPdfResponseDTO,
    TranscribePdfRequestDTO,
    TranscribePdfResponseDTO,
)
from features.transcription.application.sessions import TranscriptionSessionStore
from features.transcription.application.use_cases import (
    InspectPdfUseCase,
    TranscribePdfUseCase,
)
from features.transcription.domain.entities import ProcessingState, TranscriptionSession
from features.transcription.domain.errors import (
    DocumentError,
    FileTooLargeError,
    MissingCredentialError,
    PipelineError,
    SessionNotFoundError,
    SessionStateError,
    TranscriptionError,
    UnsupportedFileError,
    ValidationError,
)
from features.transcription.domain.page_ranges import parse_page_ranges
from features.transcription.infrastructure.gemini_transcriber import GeminiTranscriber
from features.transcription.infrastructure.pdf_renderer_pymupdf import PyMuPdfDocumentProvider


router = APIRouter(prefix="/api/v1/transcriptions", tags=["transcriptions"])

DOWNLOAD_FILENAME = "transcription.txt"

_session_store = TranscriptionSessionStore(ttl_seconds=get_settings().session_ttl_seconds)


# ==================== API models ====================


class PdfInfo(BaseModel):
    filename: str
    size_bytes: int
    page_count: int
    default_page_range: str


class TranscriptionResponse(BaseModel):
    text: str
    pages: list[int]
    page_count: int


class Progress(BaseModel):
    current_index: int
    total: int
    message: str


class SessionResponse(BaseModel):
    session_id: str
    filename: str
    size_bytes: int
    page_count: int
    default_page_range: str
    state: ProcessingState
    progress: Progress
    pages: list[int] | None = None
    error: str | None = None


class StartSessionRequest(BaseModel):
    pages: str


# ==================== Builders ====================


def build_inspect_pdf_use_case(settings: Settings) -> InspectPdfUseCase:
    """Build upload inspection use case with the PyMuPDF provider."""
    return InspectPdfUseCase(
        document_provider=PyMuPdfDocumentProvider(),
        max_upload_mb=settings.max_upload_mb,
    )


def build_transcribe_pdf_use_case(settings: Settings) -> TranscribePdfUseCase:
    """
    Build transcription use case with PyMuPDF + Gemini.

    Raises MissingCredentialError when no API key is configured.
    """
    transcriber = GeminiTranscriber(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        timeout_seconds=settings.gemini_timeout_seconds,
    )
    return TranscribePdfUseCase(
        document_provider=PyMuPdfDocumentProvider(),
        transcriber=transcriber,
        render_scale=settings.render_scale,
        jpeg_quality=settings.jpeg_quality,
    )


def get_inspect_pdf_use_case(settings: Settings = Depends(get_settings)) -> InspectPdfUseCase:
    return build_inspect_pdf_use_case(settings)


def get_transcribe_pdf_use_case_factory(
    settings: Settings = Depends(get_settings),
) -> Callable[[], TranscribePdfUseCase]:
    """
    Deferred transcription use case builder.

    Calling it raises MissingCredentialError when no API key is configured.
    """
    return partial(build_transcribe_pdf_use_case, settings)


def get_session_store() -> TranscriptionSessionStore:
    return _session_store


# ==================== Helpers ====================


def _status_code_for(error: TranscriptionError) -> int:
    if isinstance(error, FileTooLargeError):
        return status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    if isinstance(error, UnsupportedFileError):
        return status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    if isinstance(error, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, SessionNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, SessionStateError):
        return status.HTTP_409_CONFLICT
    if isinstance(error, DocumentError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(error, MissingCredentialError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(error, PipelineError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _http_error(error: TranscriptionError) -> HTTPException:
    return HTTPException(status_code=_status_code_for(error), detail=error.message)


def _read_upload(file: UploadFile) -> InspectPdfRequestDTO:
    return InspectPdfRequestDTO(
        filename=file.filename or "upload.pdf",
        data=file.file.read(),
        content_type=file.content_type,
    )


def _download_response(text: str) -> PlainTextResponse:
    return PlainTextResponse(
        content=text,
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_FILENAME}"'},
    )


def _to_session_response(session: TranscriptionSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        filename=session.filename,
        size_bytes=session.size_bytes,
        page_count=session.page_count,
        default_page_range=session.default_page_range,
        state=session.state,
        progress=Progress(
            current_index=session.progress.current_index,
            total=session.progress.total,
            message=session.progress.message,
        ),
        pages=session.page_numbers,
        error=session.error,
    )


# ==================== One-shot endpoints ====================


@router.post("/inspect", response_model=PdfInfo)
def inspect_pdf(
    file: UploadFile = File(...),
    use_case: InspectPdfUseCase = Depends(get_inspect_pdf_use_case),
) -> PdfInfo:
    """
    Validate an upload and report its page count.

    The default page range ("1-N") is what a client should pre-fill for page selection.
    """
    dto_in = _read_upload(file)

    try:
        dto_out: InspectPdfResponseDTO = use_case.execute(dto_in)
    except TranscriptionError as e:
        raise _http_error(e) from e

    return PdfInfo(
        filename=dto_out.filename,
        size_bytes=dto_out.size_bytes,
        page_count=dto_out.page_count,
        default_page_range=dto_out.default_page_range,
    )


@router.post("/transcribe", response_model=TranscriptionResponse)
def transcribe_pdf(
    file: UploadFile = File(...),
    pages: str | None = Form(None),
    download: bool = Query(False),
    inspect_use_case: InspectPdfUseCase = Depends(get_inspect_pdf_use_case),
    use_case_factory: Callable[[], TranscribePdfUseCase] = Depends(get_transcribe_pdf_use_case_factory),
):
    """
    Transcribe a PDF in a single blocking request.

    Pipeline:
    1. Validate upload (type, size, readable)
    2. Parse `pages` against the page count (all pages when omitted)
    3. Render each page to JPEG and transcribe it with Gemini, one page at a time
    4. Return the page-labeled text, as JSON or as a `transcription.txt` download
    """
    dto_in = _read_upload(file)

    try:
        info = inspect_use_case.execute(dto_in)
        page_numbers = parse_page_ranges(pages, info.page_count) if pages is not None else None
        use_case = use_case_factory()
        dto_out: TranscribePdfResponseDTO = use_case.execute(
            TranscribePdfRequestDTO(data=dto_in.data, page_numbers=page_numbers)
        )
    except TranscriptionError as e:
        raise _http_error(e) from e

    if download:
        return _download_response(dto_out.text)

    return TranscriptionResponse(
        text=dto_out.text,
        pages=dto_out.page_numbers,
        page_count=dto_out.page_count,
    )


# ==================== Session workflow ====================


@router.post("/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(
    file: UploadFile = File(...),
    use_case: InspectPdfUseCase = Depends(get_inspect_pdf_use_case),
    store: TranscriptionSessionStore = Depends(get_session_store),
) -> SessionResponse:
    """Upload a PDF and open a session awaiting page selection."""
    dto_in = _read_upload(file)

    try:
        session = store.create(dto_in, use_case)
    except TranscriptionError as e:
        raise _http_error(e) from e

    return _to_session_response(session)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: str,
    store: TranscriptionSessionStore = Depends(get_session_store),
) -> SessionResponse:
    """Current state, latest progress update and error (if any)."""
    try:
        session = store.get(session_id)
    except TranscriptionError as e:
        raise _http_error(e) from e
    return _to_session_response(session)


@router.post(
    "/sessions/{session_id}/start",
    response_model=SessionResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def start_session(
    session_id: str,
    request: StartSessionRequest,
    background_tasks: BackgroundTasks,
    use_case_factory: Callable[[], TranscribePdfUseCase] = Depends(get_transcribe_pdf_use_case_factory),
    store: TranscriptionSessionStore = Depends(get_session_store),
) -> SessionResponse:
    """
    Validate the page range and start transcribing in the background.

    Invalid ranges return 400 and leave the session in page selection.
    A missing API key returns 503 and moves the session to error.
    """
    try:
        session = store.start(session_id, request.pages)
    except TranscriptionError as e:
        raise _http_error(e) from e

    try:
        use_case = use_case_factory()
    except MissingCredentialError as e:
        store.fail(session_id, e.message)
        raise _http_error(e) from e

    background_tasks.add_task(store.run, session_id, use_case)
    return _to_session_response(session)


@router.get("/sessions/{session_id}/download", response_class=PlainTextResponse)
def download_session_result(
    session_id: str,
    store: TranscriptionSessionStore = Depends(get_session_store),
) -> PlainTextResponse:
    """Finished transcription as a `transcription.txt` attachment."""
    try:
        session = store.get(session_id)
    except TranscriptionError as e:
        raise _http_error(e) from e

    if session.state != ProcessingState.DONE or session.text is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Transcription is not available (session is {session.state.value}).",
        )
    return _download_response(session.text)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: str,
    store: TranscriptionSessionStore = Depends(get_session_store),
) -> Response:
    """Forget a session (back to the upload step)."""
    try:
        store.delete(session_id)
    except TranscriptionError as e:
        raise _http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
