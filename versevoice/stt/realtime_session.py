"""
versevoice/stt/realtime_session.py
===================================
Realtime Transcription Session — VerseVoice

Responsibility:
    - Open ONE WebSocket connection to the realtime transcription service
      for exactly one audio buffer
    - Send the whole buffer as a single base64 "append" frame, then "commit"
    - Wait for the first "transcript ready" event, a transport error, a
      malformed frame, or the response deadline
    - Close the connection exactly once, whichever of those happens first

Wire protocol (client → server):
    {"type": "input_audio_buffer.append", "audio": "<base64 PCM>"}
    {"type": "input_audio_buffer.commit"}

Wire protocol (server → client):
    {"type": "response.audio_transcript.done", "transcript": "..."}
    {"type": "error", "error": {"message": "..."}}
    Any other "type" is ignored.

Resolution is guarded by a one-shot latch (an asyncio.Future). The deadline
timer and the send-then-read worker both try to resolve it; the first one
wins and the other becomes a no-op. The deadline therefore also bounds a
peer that stops reading mid-send. The remote service is not trusted to send
exactly one transcript event.

This module does NOT:
    - Retry failed sessions (the caller decides)
    - Reuse or pool connections
    - Normalize audio or classify transcripts
"""

import asyncio
import base64
import json
import logging
from enum import Enum
from typing import Any

import aiohttp

from versevoice.config import Settings, load_settings

logger = logging.getLogger("versevoice.stt.realtime_session")


# ---------------------------------------------------------------------------
# Protocol constants
# ---------------------------------------------------------------------------

APPEND_FRAME_TYPE = "input_audio_buffer.append"
COMMIT_FRAME_TYPE = "input_audio_buffer.commit"
TRANSCRIPT_READY_TYPE = "response.audio_transcript.done"
ERROR_FRAME_TYPE = "error"

PROTOCOL_HEADER = "OpenAI-Beta"
PLACEHOLDER_TRANSCRIPT = "No transcript received."
CLOSE_TIMEOUT = 5.0  # seconds; bounds the closing handshake with a stalled peer

_CLOSING_TYPES = (
    aiohttp.WSMsgType.CLOSE,
    aiohttp.WSMsgType.CLOSING,
    aiohttp.WSMsgType.CLOSED,
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class SessionError(Exception):
    """Base class for every way a transcription session can fail."""
    pass


class TransportError(SessionError):
    """The connection failed, errored, or closed before a transcript arrived."""
    pass


class HandshakeFailed(TransportError):
    """The WebSocket handshake with the realtime service did not succeed."""
    pass


class MalformedResponse(SessionError):
    """An inbound frame could not be parsed as a JSON event object."""
    pass


class TranscriptionTimeout(SessionError):
    """No transcript arrived before the response deadline."""
    pass


class SessionState(str, Enum):
    """Lifecycle states of a TranscriptionSession."""

    IDLE = "idle"
    CONNECTING = "connecting"
    AWAITING = "awaiting"
    RESOLVED = "resolved"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class TranscriptionSession:
    """
    One short-lived connection to the realtime service for one audio buffer.

    A session instance is single-use: calling transcribe() a second time
    raises RuntimeError.

    Args:
        url:          WebSocket endpoint of the realtime service.
        api_key:      Bearer credential.
        timeout:      Seconds allowed for sending the buffer and receiving its
                      transcript, counted from the end of the handshake.
        protocol:     Value of the protocol-version header.
        http_session: Optional aiohttp.ClientSession to connect through. When
                      omitted the session creates (and closes) its own.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float,
        protocol: str = "realtime=v1",
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.protocol = protocol
        self.state = SessionState.IDLE
        self.deadline: float | None = None

        self._api_key = api_key
        self._http_session = http_session
        self._owns_http_session = http_session is None
        self._ws: Any = None
        self._result: asyncio.Future | None = None
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "TranscriptionSession":
        return cls(
            url=settings.realtime_url,
            api_key=settings.api_key,
            timeout=settings.transcription_timeout,
            protocol=settings.realtime_protocol,
            **kwargs,
        )

    @property
    def resolved(self) -> bool:
        """True once the one-shot latch has been set."""
        return self._result is not None and self._result.done()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def transcribe(self, audio: bytes) -> str:
        """
        Send ``audio`` and wait for its transcript.

        Args:
            audio: Canonical PCM (mono, 16 kHz, s16le).

        Returns:
            The transcript text, or PLACEHOLDER_TRANSCRIPT when the service
            reports an empty or missing transcript.

        Raises:
            HandshakeFailed:      Connecting to the service failed.
            TransportError:       Sending failed, or the service reported an
                                  error / closed the connection.
            MalformedResponse:    An inbound frame was not a JSON object.
            TranscriptionTimeout: No transcript before the deadline.
        """
        if self.state != SessionState.IDLE:
            raise RuntimeError("TranscriptionSession instances are single-use.")

        self.state = SessionState.CONNECTING
        try:
            self._ws = await self._connect()
        except HandshakeFailed:
            self.state = SessionState.FAILED
            await self._close()
            raise

        loop = asyncio.get_running_loop()
        self._result = loop.create_future()
        self.state = SessionState.AWAITING
        self.deadline = loop.time() + self.timeout
        timer = loop.call_later(self.timeout, self._on_deadline)
        worker = asyncio.create_task(self._exchange(audio))
        worker.add_done_callback(self._on_worker_done)

        try:
            return await self._result
        finally:
            timer.cancel()
            self.state = SessionState.RESOLVED
            worker.cancel()
            await asyncio.gather(worker, return_exceptions=True)
            await self._close()

    async def _exchange(self, audio: bytes) -> None:
        """Send the buffer, then read frames until the latch is set."""
        await self._send_audio(audio)
        if not self.resolved:
            await self._read_frames()

    def _on_worker_done(self, task: asyncio.Task) -> None:
        if task.cancelled() or self.resolved:
            return
        exc = task.exception()
        if exc is not None:
            self._result.set_exception(
                TransportError(f"Realtime exchange failed: {type(exc).__name__}: {exc}")
            )

    # ------------------------------------------------------------------
    # Connecting
    # ------------------------------------------------------------------

    async def _connect(self):
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            PROTOCOL_HEADER: self.protocol,
        }
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()

        try:
            ws = await asyncio.wait_for(
                self._http_session.ws_connect(self.url, headers=headers),
                timeout=self.timeout,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            logger.error("Handshake with realtime service failed: %s", exc)
            raise HandshakeFailed(f"Could not connect to realtime service: {exc}") from exc

        logger.debug("Connected to realtime service at %s", self.url)
        return ws

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    async def _send_audio(self, audio: bytes) -> None:
        """Send the append frame (whole buffer) and then the commit frame."""
        append_frame = {
            "type": APPEND_FRAME_TYPE,
            "audio": base64.b64encode(audio).decode("ascii"),
        }
        commit_frame = {"type": COMMIT_FRAME_TYPE}

        try:
            await self._ws.send_str(json.dumps(append_frame))
            await self._ws.send_str(json.dumps(commit_frame))
        except (aiohttp.ClientError, ConnectionError, RuntimeError) as exc:
            self._resolve_error(TransportError(f"Failed to send audio: {exc}"))
            return

        logger.debug("Sent %d bytes of audio and commit frame.", len(audio))

    # ------------------------------------------------------------------
    # Receiving
    # ------------------------------------------------------------------

    async def _read_frames(self) -> None:
        while not self.resolved:
            try:
                msg = await self._ws.receive()
            except (aiohttp.ClientError, ConnectionError, RuntimeError) as exc:
                self._resolve_error(TransportError(f"Receive failed: {exc}"))
                return

            if msg.type == aiohttp.WSMsgType.TEXT:
                self._handle_frame(msg.data)
            elif msg.type == aiohttp.WSMsgType.BINARY:
                self._resolve_error(
                    MalformedResponse("Unexpected binary frame from realtime service.")
                )
            elif msg.type == aiohttp.WSMsgType.ERROR:
                self._resolve_error(TransportError(f"WebSocket error: {msg.data}"))
            elif msg.type in _CLOSING_TYPES:
                self._resolve_error(
                    TransportError("Realtime service closed the connection before a transcript.")
                )
                return

    def _handle_frame(self, raw: str) -> None:
        try:
            event = json.loads(raw)
        except (TypeError, ValueError) as exc:
            self._resolve_error(MalformedResponse(f"Frame is not valid JSON: {exc}"))
            return

        if not isinstance(event, dict):
            self._resolve_error(
                MalformedResponse(f"Expected JSON object, got {type(event).__name__}")
            )
            return

        event_type = event.get("type")
        if event_type == TRANSCRIPT_READY_TYPE:
            transcript = event.get("transcript")
            if not isinstance(transcript, str) or not transcript.strip():
                transcript = PLACEHOLDER_TRANSCRIPT
            if not self._resolve(transcript):
                logger.debug("Ignoring duplicate transcript event.")
        elif event_type == ERROR_FRAME_TYPE:
            self._resolve_error(TransportError(_error_detail(event)))
        else:
            logger.debug("Ignoring realtime event type %r", event_type)

    # ------------------------------------------------------------------
    # One-shot latch
    # ------------------------------------------------------------------

    def _resolve(self, transcript: str) -> bool:
        if self.resolved:
            return False
        self._result.set_result(transcript)
        logger.info("Transcript received (%d chars).", len(transcript))
        return True

    def _resolve_error(self, error: SessionError) -> bool:
        if self.resolved:
            logger.debug("Session already resolved; dropping %s", type(error).__name__)
            return False
        self._result.set_exception(error)
        logger.warning("Transcription session failed: %s: %s", type(error).__name__, error)
        return True

    def _on_deadline(self) -> None:
        self._resolve_error(
            TranscriptionTimeout(f"No transcript within {self.timeout:.1f}s.")
        )

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    async def _close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self._ws is not None:
                await asyncio.wait_for(self._ws.close(), timeout=CLOSE_TIMEOUT)
        except Exception as exc:
            logger.warning("Error closing realtime connection: %s", exc)
        finally:
            if self._owns_http_session and self._http_session is not None:
                await self._http_session.close()


def _error_detail(event: dict[str, Any]) -> str:
    error = event.get("error")
    if isinstance(error, dict):
        return str(error.get("message") or error.get("type") or error)
    if error:
        return str(error)
    return "Realtime service reported an error."


# ---------------------------------------------------------------------------
# Convenience wrapper
# ---------------------------------------------------------------------------


async def transcribe(
    audio: bytes,
    settings: Settings | None = None,
    timeout: float | None = None,
) -> str:
    """
    Transcribe one audio buffer through a fresh TranscriptionSession.

    Args:
        audio:    Canonical PCM (mono, 16 kHz, s16le).
        settings: Service settings; loaded from the environment when omitted.
        timeout:  Override for settings.transcription_timeout.

    Returns:
        Transcript text.

    Raises:
        SessionError: Any session failure (see TranscriptionSession.transcribe).
    """
    settings = settings or load_settings()
    session = TranscriptionSession.from_settings(settings)
    if timeout is not None:
        session.timeout = timeout
    return await session.transcribe(audio)
