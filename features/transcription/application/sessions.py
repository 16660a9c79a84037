"""
In-memory session workflow: upload → page selection → processing → done / error.

A session holds one uploaded PDF and its transcription state. Sessions live
only in process memory: the upload is dropped as soon as a run finishes, and
sessions older than the TTL are forgotten (except while processing).
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from features.transcription.domain.entities import (
    ProcessingState,
    ProgressUpdate,
    TranscriptionSession,
)
from features.transcription.domain.errors import (
    SessionNotFoundError,
    SessionStateError,
    TranscriptionError,
)
from features.transcription.domain.interfaces import IProgressListener
from features.transcription.domain.page_ranges import parse_page_ranges
from .dtos import InspectPdfRequestDTO, TranscribePdfRequestDTO
from .use_cases import InspectPdfUseCase, TranscribePdfUseCase


logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 3600
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred during transcription."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _SessionProgressListener(IProgressListener):
    """Records the latest progress update on a session."""

    def __init__(self, store: "TranscriptionSessionStore", session_id: str):
        self._store = store
        self._session_id = session_id

    def on_progress(self, update: ProgressUpdate) -> None:
        self._store._update(self._session_id, progress=update)


class TranscriptionSessionStore:
    """Thread-safe registry of transcription sessions."""

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._sessions: Dict[str, TranscriptionSession] = {}
        self._lock = threading.Lock()
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock or _utcnow

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(
        self,
        request: InspectPdfRequestDTO,
        inspect_use_case: InspectPdfUseCase,
    ) -> TranscriptionSession:
        """
        Inspect an upload and open a session in PAGE_SELECTION.

        Raises:
            ValidationError / DocumentError: from inspection; no session is created
        """
        info = inspect_use_case.execute(request)
        session = TranscriptionSession(
            session_id=uuid.uuid4().hex,
            filename=info.filename,
            data=request.data,
            size_bytes=info.size_bytes,
            page_count=info.page_count,
            default_page_range=info.default_page_range,
            created_at=self._clock(),
        )
        with self._lock:
            self._evict_expired_locked()
            self._sessions[session.session_id] = session
        logger.info(
            f"TranscriptionSessionStore: Created {session.session_id} "
            f"({session.filename!r}, {session.page_count} pages)"
        )
        return replace(session)

    def get(self, session_id: str) -> TranscriptionSession:
        """Snapshot of a session."""
        with self._lock:
            self._evict_expired_locked()
            return replace(self._get_locked(session_id))

    def delete(self, session_id: str) -> TranscriptionSession:
        """Forget a session; returns it reset to IDLE."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
            if session is None:
                raise SessionNotFoundError(f"Session {session_id} not found.")
            self._reset(session)
        logger.info(f"TranscriptionSessionStore: Deleted {session_id}")
        return replace(session)

    def evict_expired(self) -> int:
        """Forget sessions older than the TTL; returns how many were dropped."""
        with self._lock:
            return self._evict_expired_locked()

    def start(self, session_id: str, page_expression: str) -> TranscriptionSession:
        """
        Validate the page selection and move the session to PROCESSING.

        Raises:
            PageRangeError: the session stays in PAGE_SELECTION
            SessionStateError: the session is not awaiting page selection
        """
        with self._lock:
            session = self._get_locked(session_id)
            if session.state != ProcessingState.PAGE_SELECTION:
                raise SessionStateError(
                    f"Session {session_id} cannot be started while {session.state.value}."
                )
            page_numbers = parse_page_ranges(page_expression, session.page_count)
            session.page_numbers = page_numbers
            session.state = ProcessingState.PROCESSING
            session.progress = ProgressUpdate(current_index=0, total=len(page_numbers), message="")
            logger.info(
                f"TranscriptionSessionStore: Started {session_id} ({len(page_numbers)} pages)"
            )
            return replace(session)

    def fail(self, session_id: str, message: str) -> None:
        """Move a session to ERROR without running it."""
        logger.error(f"TranscriptionSessionStore: Session {session_id} failed: {message}")
        self._finish(session_id, state=ProcessingState.ERROR, error=message)

    def run(self, session_id: str, use_case: TranscribePdfUseCase) -> None:
        """
        Execute the transcription for a PROCESSING session.

        Meant to run as a background task: pipeline errors are recorded on the
        session (state ERROR) instead of being raised.
        """
        with self._lock:
            session = self._get_locked(session_id)
            if session.state != ProcessingState.PROCESSING:
                raise SessionStateError(
                    f"Session {session_id} is not ready to run ({session.state.value})."
                )
            request = TranscribePdfRequestDTO(data=session.data, page_numbers=session.page_numbers)

        listener = _SessionProgressListener(self, session_id)
        try:
            result = use_case.execute(request, listener)
        except TranscriptionError as e:
            logger.error(f"TranscriptionSessionStore: Run {session_id} failed: {e}")
            self._finish(session_id, state=ProcessingState.ERROR, error=e.message)
            return
        except Exception:
            logger.exception(f"TranscriptionSessionStore: Run {session_id} crashed")
            self._finish(session_id, state=ProcessingState.ERROR, error=UNKNOWN_ERROR_MESSAGE)
            return

        self._finish(session_id, state=ProcessingState.DONE, text=result.text)
        logger.info(f"TranscriptionSessionStore: Run {session_id} done ({len(result.text)} chars)")

    def _get_locked(self, session_id: str) -> TranscriptionSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found.")
        return session

    def _evict_expired_locked(self) -> int:
        cutoff = self._clock() - self._ttl
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if session.created_at < cutoff and session.state != ProcessingState.PROCESSING
        ]
        for session_id in expired:
            self._reset(self._sessions.pop(session_id))
        if expired:
            logger.info(f"TranscriptionSessionStore: Evicted {len(expired)} expired sessions")
        return len(expired)

    @staticmethod
    def _reset(session: TranscriptionSession) -> None:
        session.state = ProcessingState.IDLE
        session.data = b""
        session.text = None

    def _finish(self, session_id: str, **changes) -> None:
        # Uploaded bytes are only needed while processing
        self._update(session_id, data=b"", **changes)

    def _update(self, session_id: str, **changes) -> None:
        with self._lock:
            session = self._sessions.get(session_id)
            # Deleted while running; nothing to record
            if session is None:
                return
            for name, value in changes.items():
                setattr(session, name, value)
