"""
versevoice/config.py
=====================
Runtime configuration — VerseVoice

Responsibility:
    - Read service settings from environment variables
    - Provide defaults for the realtime transcription endpoint, credential,
      response timeout and upload staging limits

Environment variables (loaded from .env by main.py via python-dotenv):
    OPENAI_API_KEY                    Bearer credential for the realtime service
    VERSEVOICE_REALTIME_URL           WebSocket endpoint of the realtime service
    VERSEVOICE_REALTIME_PROTOCOL      Protocol-version marker sent at handshake
    VERSEVOICE_TRANSCRIPTION_TIMEOUT  Seconds to wait for a transcript event
    VERSEVOICE_UPLOAD_DIR             Directory used to stage uploaded audio
    VERSEVOICE_MAX_UPLOAD_BYTES       Largest accepted upload, in bytes

This module does NOT:
    - Load the .env file itself (main.py does that before any import)
    - Validate the API key (a missing key surfaces at handshake time)
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("versevoice.config")


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_REALTIME_URL: str = (
    "wss://api.openai.com/v1/realtime?model=gpt-4o-realtime-preview-2024-10-01"
)
DEFAULT_REALTIME_PROTOCOL: str = "realtime=v1"
DEFAULT_TRANSCRIPTION_TIMEOUT: float = 30.0  # seconds
DEFAULT_UPLOAD_DIR: str = "uploads"
DEFAULT_MAX_UPLOAD_BYTES: int = 25 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    """Immutable service settings, built once per process by load_settings()."""

    api_key: str = ""
    realtime_url: str = DEFAULT_REALTIME_URL
    realtime_protocol: str = DEFAULT_REALTIME_PROTOCOL
    transcription_timeout: float = DEFAULT_TRANSCRIPTION_TIMEOUT
    upload_dir: str = DEFAULT_UPLOAD_DIR
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES

    def __post_init__(self) -> None:
        if self.transcription_timeout <= 0:
            raise ValueError(
                f"transcription_timeout must be positive, got {self.transcription_timeout}"
            )
        if self.max_upload_bytes <= 0:
            raise ValueError(
                f"max_upload_bytes must be positive, got {self.max_upload_bytes}"
            )


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings() -> Settings:
    """
    Build a Settings instance from the current environment.

    Returns:
        Settings populated from environment variables, falling back to
        module defaults for anything unset or blank.

    Raises:
        ValueError: If a numeric variable cannot be parsed or is not positive.
    """
    settings = Settings(
        api_key=os.getenv("OPENAI_API_KEY", ""),
        realtime_url=os.getenv("VERSEVOICE_REALTIME_URL") or DEFAULT_REALTIME_URL,
        realtime_protocol=(
            os.getenv("VERSEVOICE_REALTIME_PROTOCOL") or DEFAULT_REALTIME_PROTOCOL
        ),
        transcription_timeout=_env_float(
            "VERSEVOICE_TRANSCRIPTION_TIMEOUT", DEFAULT_TRANSCRIPTION_TIMEOUT
        ),
        upload_dir=os.getenv("VERSEVOICE_UPLOAD_DIR") or DEFAULT_UPLOAD_DIR,
        max_upload_bytes=_env_int(
            "VERSEVOICE_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES
        ),
    )

    if not settings.api_key:
        logger.warning("OPENAI_API_KEY is not set; transcription requests will fail.")

    return settings
