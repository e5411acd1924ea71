"""
versevoice/audio/staging.py
============================
Upload staging — VerseVoice

Writes an uploaded clip to a uniquely named file in the upload directory so
ffmpeg can read it from disk, and removes it again on every exit path.
Concurrent requests never share a staged file.

A failure to remove the file is logged and swallowed: it must never mask the
result (or the error) of the request that staged it.
"""

import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger("versevoice.audio.staging")


@contextmanager
def staged_upload(audio_bytes: bytes, filename: str, upload_dir: str) -> Iterator[str]:
    """
    Stage ``audio_bytes`` on disk for the duration of the ``with`` block.

    Args:
        audio_bytes: Raw uploaded bytes.
        filename:    Original filename; only its extension is kept.
        upload_dir:  Directory to stage into (created if missing).

    Yields:
        Absolute path of the staged file.
    """
    os.makedirs(upload_dir, exist_ok=True)
    suffix = os.path.splitext(filename or "")[1].lower()
    fd, path = tempfile.mkstemp(prefix="upload-", suffix=suffix, dir=upload_dir)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(audio_bytes)
        logger.debug("Staged %d bytes at %s", len(audio_bytes), path)
        yield os.path.abspath(path)
    finally:
        remove_quietly(path)


def remove_quietly(path: str) -> bool:
    """Delete ``path``; log instead of raising on failure. Returns True if removed."""
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.warning("Failed to remove staged file %s: %s", path, exc)
        return False
    logger.debug("Removed staged file %s", path)
    return True
