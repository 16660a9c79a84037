"""
Command-line transcription of a local PDF.

    pdf-transcribe scan.pdf --pages "1-5, 8" --output scan.txt

Progress goes to stderr; the transcription is written to the output file.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from config import get_settings
from features.transcription.application.dtos import (
    InspectPdfRequestDTO,
    TranscribePdfRequestDTO,
)
from features.transcription.domain.entities import ProgressUpdate
from features.transcription.domain.errors import TranscriptionError
from features.transcription.domain.interfaces import IProgressListener
from features.transcription.domain.page_ranges import parse_page_ranges
from features.transcription.presentation.api import (
    DOWNLOAD_FILENAME,
    build_inspect_pdf_use_case,
    build_transcribe_pdf_use_case,
)


logger = logging.getLogger(__name__)


class ConsoleProgressListener(IProgressListener):
    """Prints "[i/N] message" lines."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stderr

    def on_progress(self, update: ProgressUpdate) -> None:
        if update.total:
            print(f"[{update.current_index}/{update.total}] {update.message}", file=self.stream)
        else:
            print(update.message, file=self.stream)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdf-transcribe",
        description="Transcribe PDF pages with a vision-language model (Gemini).",
    )
    parser.add_argument(
        "pdf_path",
        type=str,
        help="Path to the input PDF.",
    )
    parser.add_argument(
        "--pages",
        type=str,
        default=None,
        help='Page range to transcribe, e.g. "1-5, 8, 12-15" (default: all pages).',
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=DOWNLOAD_FILENAME,
        help=f"Path to write the transcription (default: {DOWNLOAD_FILENAME}).",
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Gemini model name (default: GEMINI_MODEL or gemini-2.5-flash).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    pdf_path = Path(args.pdf_path)
    if not pdf_path.exists():
        print(f"PDF not found: {pdf_path}", file=sys.stderr)
        return 1

    settings = get_settings()
    if args.model:
        settings = replace(settings, gemini_model=args.model)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        data = pdf_path.read_bytes()
    except OSError as e:
        print(f"Could not read PDF: {e}", file=sys.stderr)
        return 1

    try:
        info = build_inspect_pdf_use_case(settings).execute(
            InspectPdfRequestDTO(filename=pdf_path.name, data=data, content_type="application/pdf")
        )
        page_numbers = (
            parse_page_ranges(args.pages, info.page_count) if args.pages is not None else None
        )
        use_case = build_transcribe_pdf_use_case(settings)
        result = use_case.execute(
            TranscribePdfRequestDTO(data=data, page_numbers=page_numbers),
            ConsoleProgressListener(),
        )
    except TranscriptionError as e:
        print(f"Transcription failed: {e}", file=sys.stderr)
        return 1

    Path(args.output).write_text(result.text, encoding="utf-8")
    print(f"Transcription saved to: {args.output}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
