"""
tests/test_pipeline.py
=======================
Request Orchestrator Tests

Tests verify:
    1. Successful run composes message + transcript + classification
    2. Conversion and session failures become ProcessingFailed with stage
    3. Staged uploads are removed on every exit path
    4. Empty transcripts are classified, not treated as errors

All tests are OFFLINE: normalizer and transcription are mocked.
"""

import os
import sys
import tempfile
import unittest
from unittest.mock import AsyncMock, patch

# Ensure project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from versevoice.audio.normalizer import AudioValidationError, ConversionFailed
from versevoice.config import Settings
from versevoice.pipeline import SUCCESS_MESSAGE, ProcessingFailed, run_pipeline
from versevoice.stt.realtime_session import HandshakeFailed, TranscriptionTimeout

PCM = b"\x00\x01" * 1600


class TestRunPipeline(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.settings = Settings(api_key="sk-test", upload_dir=self._tmp.name)
        self.staged_paths: list[str] = []

    def tearDown(self):
        self._tmp.cleanup()

    def _fake_normalize(self, path, filename):
        self.staged_paths.append(path)
        assert os.path.exists(path), "normalize must see the staged file"
        return PCM

    def _assert_upload_dir_empty(self):
        self.assertEqual(os.listdir(self.settings.upload_dir), [])

    async def test_success(self):
        with patch("versevoice.pipeline.normalize", side_effect=self._fake_normalize), \
             patch("versevoice.pipeline.transcribe",
                   new=AsyncMock(return_value="Tell me about mercy in Islam")) as fake_transcribe:
            payload = await run_pipeline(b"raw-bytes", "question.m4a", self.settings)

        fake_transcribe.assert_awaited_once_with(PCM, settings=self.settings)
        self.assertEqual(payload["message"], SUCCESS_MESSAGE)
        self.assertEqual(payload["transcript"], "Tell me about mercy in Islam")
        self.assertEqual(payload["result"]["category"], "religious")
        self.assertEqual(payload["result"]["religion"], "islam")
        self.assertEqual(payload["result"]["subtopic"], "mercy")
        self.assertTrue(self.staged_paths[0].endswith(".m4a"))
        self._assert_upload_dir_empty()

    async def test_conversion_failure(self):
        with patch("versevoice.pipeline.normalize",
                   side_effect=ConversionFailed("Invalid data found when processing input")), \
             patch("versevoice.pipeline.transcribe", new=AsyncMock()) as fake_transcribe:
            with self.assertRaises(ProcessingFailed) as ctx:
                await run_pipeline(b"garbage", "bad.mp3", self.settings)

        self.assertEqual(ctx.exception.stage, "conversion")
        self.assertIn("Invalid data", ctx.exception.detail)
        fake_transcribe.assert_not_awaited()
        self._assert_upload_dir_empty()

    async def test_validation_failure_is_conversion_stage(self):
        with patch("versevoice.pipeline.normalize",
                   side_effect=AudioValidationError("Audio file has zero duration.")):
            with self.assertRaises(ProcessingFailed) as ctx:
                await run_pipeline(b"x", "empty.wav", self.settings)
        self.assertEqual(ctx.exception.stage, "conversion")
        self._assert_upload_dir_empty()

    async def test_session_timeout(self):
        with patch("versevoice.pipeline.normalize", side_effect=self._fake_normalize), \
             patch("versevoice.pipeline.transcribe",
                   new=AsyncMock(side_effect=TranscriptionTimeout("No transcript within 30.0s."))):
            with self.assertRaises(ProcessingFailed) as ctx:
                await run_pipeline(b"raw", "clip.wav", self.settings)

        self.assertEqual(ctx.exception.stage, "transcription")
        self.assertIn("TranscriptionTimeout", ctx.exception.detail)
        self._assert_upload_dir_empty()

    async def test_handshake_failure(self):
        with patch("versevoice.pipeline.normalize", side_effect=self._fake_normalize), \
             patch("versevoice.pipeline.transcribe",
                   new=AsyncMock(side_effect=HandshakeFailed("401"))):
            with self.assertRaises(ProcessingFailed) as ctx:
                await run_pipeline(b"raw", "clip.wav", self.settings)
        self.assertEqual(ctx.exception.stage, "transcription")

    async def test_empty_transcript_is_classified(self):
        with patch("versevoice.pipeline.normalize", side_effect=self._fake_normalize), \
             patch("versevoice.pipeline.transcribe", new=AsyncMock(return_value="")):
            payload = await run_pipeline(b"raw", "clip.wav", self.settings)
        self.assertEqual(payload["transcript"], "")
        self.assertEqual(payload["result"]["category"], "non_religious")

    async def test_unexpected_error_still_cleans_up(self):
        with patch("versevoice.pipeline.normalize", side_effect=MemoryError()):
            with self.assertRaises(MemoryError):
                await run_pipeline(b"raw", "clip.wav", self.settings)
        self._assert_upload_dir_empty()


if __name__ == "__main__":
    unittest.main()
