"""
versevoice/audio/normalizer.py
===============================
Audio Normalizer — VerseVoice

Responsibility:
    - Decode an uploaded audio clip in an arbitrary container (wav, mp3, m4a,
      ogg, webm, ...) using pydub / ffmpeg
    - Validate the clip is non-empty and within the duration limit
    - Convert to mono, 16 kHz, signed 16-bit little-endian PCM
    - Return the canonical PCM as raw bytes (no container header)

The source format is taken from the filename extension when it is a known
one; otherwise ffmpeg is left to sniff the container.

This module does NOT:
    - Talk to the transcription service
    - Stage or delete files (see versevoice.audio.staging)
    - Inspect the speech content
"""

import io
import os

from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

KNOWN_FORMATS: dict[str, str] = {
    ".wav": "wav",
    ".wave": "wav",
    ".mp3": "mp3",
    ".m4a": "m4a",
    ".mp4": "mp4",
    ".aac": "aac",
    ".ogg": "ogg",
    ".oga": "ogg",
    ".opus": "ogg",
    ".webm": "webm",
    ".flac": "flac",
}
TARGET_SAMPLE_RATE = 16000  # Hz
TARGET_CHANNELS = 1  # mono
TARGET_SAMPLE_WIDTH = 2  # bytes -> signed 16-bit
MAX_DURATION_SECONDS = 300  # short clips only


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConversionFailed(Exception):
    """Raised when the input audio cannot be converted to canonical PCM."""
    pass


class AudioValidationError(ConversionFailed):
    """Raised when the uploaded audio is empty, silent-length or too long."""
    pass


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_not_empty(size: int) -> None:
    """
    Check that the uploaded payload has content.

    Raises:
        AudioValidationError: If the payload is zero bytes.
    """
    if size <= 0:
        raise AudioValidationError("Audio file is empty.")


def validate_duration(audio: AudioSegment) -> None:
    """
    Check that the decoded clip has a duration within limits.

    Raises:
        AudioValidationError: If duration is zero or exceeds MAX_DURATION_SECONDS.
    """
    duration_seconds = len(audio) / 1000.0
    if duration_seconds == 0:
        raise AudioValidationError("Audio file has zero duration.")
    if duration_seconds > MAX_DURATION_SECONDS:
        raise AudioValidationError(
            f"Audio duration ({duration_seconds:.1f}s) exceeds the "
            f"maximum allowed ({MAX_DURATION_SECONDS}s)."
        )


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize(source, filename: str = "") -> bytes:
    """
    Convert an audio clip to canonical PCM.

    Steps:
        1. Validate the payload is non-empty
        2. Decode (format from extension, or sniffed by ffmpeg)
        3. Validate duration
        4. Convert to mono, 16 kHz, 16-bit
        5. Return raw little-endian sample bytes

    Args:
        source:   Path of a staged audio file, or the raw uploaded bytes.
        filename: Original filename, used only as a format hint.

    Returns:
        Raw PCM bytes: mono, 16 kHz, s16le.

    Raises:
        AudioValidationError: Empty, zero-length or over-long clip.
        ConversionFailed:     The clip could not be decoded or converted.
    """
    if isinstance(source, (bytes, bytearray)):
        validate_not_empty(len(source))
        source = io.BytesIO(source)
    else:
        validate_not_empty(os.path.getsize(source))

    fmt = detect_format(filename)
    try:
        audio = AudioSegment.from_file(source, format=fmt)
    except CouldntDecodeError as exc:
        raise ConversionFailed(f"Audio could not be decoded: {exc}") from exc
    except Exception as exc:
        raise ConversionFailed(f"Unexpected error decoding audio: {exc}") from exc

    validate_duration(audio)

    try:
        if audio.channels != TARGET_CHANNELS:
            audio = audio.set_channels(TARGET_CHANNELS)
        if audio.frame_rate != TARGET_SAMPLE_RATE:
            audio = audio.set_frame_rate(TARGET_SAMPLE_RATE)
        if audio.sample_width != TARGET_SAMPLE_WIDTH:
            audio = audio.set_sample_width(TARGET_SAMPLE_WIDTH)
        return audio.raw_data
    except Exception as exc:
        raise ConversionFailed(f"Failed to convert audio to PCM: {exc}") from exc


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def detect_format(filename: str) -> str | None:
    """Return the pydub format name for a filename, or None to let ffmpeg sniff."""
    if not filename:
        return None
    dot_index = filename.rfind(".")
    if dot_index == -1:
        return None
    return KNOWN_FORMATS.get(filename[dot_index:].lower())
