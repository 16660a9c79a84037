"""
PDF Transcriber configuration.

All values come from environment variables; see Settings.from_env().
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    value = env.get(name, "").strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


@dataclass(frozen=True)
class Settings:
    """Runtime settings"""

    # Gemini
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_timeout_seconds: int = 120

    # Rendering
    render_scale: float = 2.0  # 2x nominal resolution for small-text legibility
    jpeg_quality: int = 90

    # Uploads
    max_upload_mb: int = 200

    # Sessions
    session_ttl_seconds: int = 3600

    # Logging
    log_level: str = "INFO"
    log_file: str = "pdf_transcriber.log"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables (os.environ by default)."""
        env = os.environ if env is None else env
        return cls(
            # API_KEY is accepted for compatibility with older deployments
            gemini_api_key=env.get("GEMINI_API_KEY") or env.get("API_KEY", ""),
            gemini_model=env.get("GEMINI_MODEL") or cls.gemini_model,
            gemini_timeout_seconds=_get_int(env, "GEMINI_TIMEOUT_SECONDS", cls.gemini_timeout_seconds),
            render_scale=_get_float(env, "RENDER_SCALE", cls.render_scale),
            jpeg_quality=_get_int(env, "JPEG_QUALITY", cls.jpeg_quality),
            max_upload_mb=_get_int(env, "MAX_UPLOAD_MB", cls.max_upload_mb),
            session_ttl_seconds=_get_int(env, "SESSION_TTL_SECONDS", cls.session_ttl_seconds),
            log_level=(env.get("LOG_LEVEL") or cls.log_level).upper(),
            log_file=env.get("LOG_FILE", cls.log_file),
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings, read once from the environment"""
    return Settings.from_env()
