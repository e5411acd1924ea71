"""
versevoice/pipeline.py
=======================
Request Orchestrator — VerseVoice

Responsibility:
    1. Stage the uploaded clip and normalize it to canonical PCM
    2. Transcribe the PCM through one realtime session
    3. Classify the transcript
    4. Return the composed response payload

Failure policy:
    - Normalizer and session errors are NOT retried
    - Both surface as ProcessingFailed(stage, detail); the detail is for logs,
      callers show GENERIC_FAILURE_MESSAGE only
    - An empty transcript is not an error; the classifier handles it
    - Staged files are removed on every path (see versevoice.audio.staging)

Step order:
    Step 1: Staging + normalization → pcm (bytes)
    Step 2: Transcription           → transcript (str)
    Step 3: Classification          → ClassificationResult
"""

import asyncio
import logging
from typing import Any

from versevoice.audio.normalizer import ConversionFailed, normalize
from versevoice.audio.staging import staged_upload
from versevoice.config import Settings, load_settings
from versevoice.nlp.classifier import classify
from versevoice.stt.realtime_session import SessionError, transcribe

logger = logging.getLogger("versevoice.pipeline")

SUCCESS_MESSAGE = "Audio processed successfully."
GENERIC_FAILURE_MESSAGE = "Could not process the audio. Please try again."


class ProcessingFailed(Exception):
    """
    Unified failure of one audio-processing request.

    Attributes:
        stage:  "conversion" or "transcription".
        detail: Underlying error message, for logging only.
    """

    def __init__(self, stage: str, detail: str) -> None:
        self.stage = stage
        self.detail = detail
        super().__init__(f"{stage} failed: {detail}")


async def run_pipeline(
    audio_bytes: bytes,
    filename: str,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """
    Process one uploaded clip end to end.

    Args:
        audio_bytes: Raw uploaded bytes in any container format.
        filename:    Original filename (format hint only).
        settings:    Service settings; loaded from the environment when omitted.

    Returns:
        {"message": str, "transcript": str, "result": {category, text,
        religion, subtopic, source}}

    Raises:
        ProcessingFailed: Conversion or transcription failed.
    """
    settings = settings or load_settings()

    # Step 1: staging + normalization
    try:
        with staged_upload(audio_bytes, filename, settings.upload_dir) as path:
            pcm = await asyncio.to_thread(normalize, path, filename)
    except ConversionFailed as exc:
        logger.error("Audio conversion failed for %r: %s", filename, exc)
        raise ProcessingFailed("conversion", str(exc)) from exc
    except OSError as exc:
        logger.error("Could not stage upload %r: %s", filename, exc)
        raise ProcessingFailed("conversion", f"staging failed: {exc}") from exc

    logger.info("Normalized %r to %d bytes of PCM.", filename, len(pcm))

    # Step 2: transcription
    try:
        transcript = await transcribe(pcm, settings=settings)
    except SessionError as exc:
        logger.error("Transcription failed (%s): %s", type(exc).__name__, exc)
        raise ProcessingFailed("transcription", f"{type(exc).__name__}: {exc}") from exc

    logger.debug("Transcript: %s", transcript)

    # Step 3: classification
    result = classify(transcript)

    return {
        "message": SUCCESS_MESSAGE,
        "transcript": transcript,
        "result": result.to_dict(),
    }
