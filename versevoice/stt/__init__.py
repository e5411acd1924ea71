# versevoice/stt/__init__.py
# ===========================
# Speech-to-Text Layer — VerseVoice
#
# One realtime WebSocket session per audio buffer:
#   1. Connect with bearer credential + protocol-version header
#   2. Send the whole buffer (append) then commit
#   3. Resolve on the first transcript event, an error, or the deadline
#   4. Close the connection exactly once
#
# Public API:
#   transcribe(audio_bytes) → str

from versevoice.stt.realtime_session import (  # noqa: F401
    HandshakeFailed,
    MalformedResponse,
    SessionError,
    TranscriptionSession,
    TranscriptionTimeout,
    TransportError,
    transcribe,
)

__all__ = [
    "transcribe",
    "TranscriptionSession",
    "SessionError",
    "TransportError",
    "HandshakeFailed",
    "MalformedResponse",
    "TranscriptionTimeout",
]
