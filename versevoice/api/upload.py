"""
versevoice/api/upload.py
=========================
API Endpoints — VerseVoice

Responsibility:
    - Expose POST /process-audio (multipart field "audioFile")
    - Expose WebSocket /ws/audio for clients that push clips as binary
      messages and receive a "transcript" event per clip
    - Expose GET /health for liveness
    - Delegate all processing to versevoice.pipeline.run_pipeline

Processing failures are logged with their stage and detail, but callers only
ever see the generic failure message.
"""

import logging

from fastapi import FastAPI, File, HTTPException, UploadFile, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from versevoice.config import load_settings
from versevoice.pipeline import GENERIC_FAILURE_MESSAGE, ProcessingFailed, run_pipeline

logger = logging.getLogger("versevoice.api")

SETTINGS = load_settings()


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="VerseVoice",
    description="Spoken questions about religion, answered with scripture.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/process-audio")
async def process_audio(audio_file: UploadFile | None = File(None, alias="audioFile")):
    """
    Accept an audio clip, transcribe it and classify the transcript.

    Args:
        audio_file: Uploaded clip in any container ffmpeg can read.

    Returns:
        {"message", "transcript", "result": {category, text, religion,
        subtopic, source}}
    """
    if audio_file is None or not audio_file.filename:
        raise HTTPException(status_code=400, detail="Audio file is required.")

    logger.info("Audio file received: %s", audio_file.filename)

    try:
        audio_bytes = await audio_file.read()
    except Exception:
        raise HTTPException(status_code=400, detail="Failed to read uploaded file.")

    if not audio_bytes:
        raise HTTPException(status_code=400, detail="Audio file is empty.")
    if len(audio_bytes) > SETTINGS.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Audio file is too large.")

    logger.info("File size: %.2f KB", len(audio_bytes) / 1024)

    try:
        payload = await run_pipeline(audio_bytes, audio_file.filename, SETTINGS)
    except ProcessingFailed as exc:
        logger.error("Processing failed at %s: %s", exc.stage, exc.detail)
        raise HTTPException(status_code=500, detail=GENERIC_FAILURE_MESSAGE)

    return JSONResponse(status_code=200, content=payload)


@app.websocket("/ws/audio")
async def audio_socket(websocket: WebSocket):
    """
    Receive clips as binary messages; reply to each with a "transcript" event.

    A failed clip is reported as an event with an "error" key and the
    connection stays open for the next clip.
    """
    await websocket.accept()
    logger.info("WebSocket client connected: %s", websocket.client)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            audio_bytes = message.get("bytes")
            if not audio_bytes:
                await websocket.send_json(
                    {"event": "transcript", "error": "Send audio as a binary message."}
                )
                continue
            if len(audio_bytes) > SETTINGS.max_upload_bytes:
                await websocket.send_json(
                    {"event": "transcript", "error": "Audio file is too large."}
                )
                continue

            try:
                payload = await run_pipeline(audio_bytes, "", SETTINGS)
            except ProcessingFailed as exc:
                logger.error("Processing failed at %s: %s", exc.stage, exc.detail)
                await websocket.send_json(
                    {"event": "transcript", "error": GENERIC_FAILURE_MESSAGE}
                )
                continue

            await websocket.send_json({"event": "transcript", **payload})
    except WebSocketDisconnect:
        pass

    logger.info("WebSocket client disconnected: %s", websocket.client)
