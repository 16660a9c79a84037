"""
Entry point for the FastAPI application.

Run with (from project root):

    uvicorn main:app --reload

Exposes the "transcribe PDF" feature under:

    /api/v1/transcriptions
"""

import logging
import sys

from fastapi import FastAPI

from config import get_settings
from features.transcription.presentation.api import router as transcription_router


settings = get_settings()

# Configure logging
handlers = [logging.StreamHandler(sys.stdout)]
if settings.log_file:
    handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=handlers,
)

# The SDK's HTTP client is chatty at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)
logger.info("Starting PDF Transcriber API")

app = FastAPI(title="PDF Transcriber API", version="0.1.0")

app.include_router(transcription_router)


@app.get("/health")
def health_check() -> dict:
    return {"status": "ok"}
