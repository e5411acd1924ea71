"""
tests/test_config.py
=====================
Settings loading from environment variables.
"""

import os
import sys
import unittest
from unittest.mock import patch

# Ensure project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from versevoice.config import (
    DEFAULT_REALTIME_URL,
    DEFAULT_TRANSCRIPTION_TIMEOUT,
    Settings,
    load_settings,
)

_VARS = (
    "OPENAI_API_KEY",
    "VERSEVOICE_REALTIME_URL",
    "VERSEVOICE_REALTIME_PROTOCOL",
    "VERSEVOICE_TRANSCRIPTION_TIMEOUT",
    "VERSEVOICE_UPLOAD_DIR",
    "VERSEVOICE_MAX_UPLOAD_BYTES",
)


def _clean_env(**overrides) -> dict:
    env = {k: v for k, v in os.environ.items() if k not in _VARS}
    env.update(overrides)
    return env


class TestLoadSettings(unittest.TestCase):

    def test_defaults(self):
        with patch.dict(os.environ, _clean_env(), clear=True):
            settings = load_settings()
        self.assertEqual(settings.api_key, "")
        self.assertEqual(settings.realtime_url, DEFAULT_REALTIME_URL)
        self.assertEqual(settings.realtime_protocol, "realtime=v1")
        self.assertEqual(settings.transcription_timeout, DEFAULT_TRANSCRIPTION_TIMEOUT)
        self.assertEqual(settings.transcription_timeout, 30.0)

    def test_overrides(self):
        env = _clean_env(
            OPENAI_API_KEY="sk-test",
            VERSEVOICE_REALTIME_URL="wss://example/realtime",
            VERSEVOICE_TRANSCRIPTION_TIMEOUT="7.5",
            VERSEVOICE_UPLOAD_DIR="/tmp/vv",
            VERSEVOICE_MAX_UPLOAD_BYTES="1024",
        )
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings()
        self.assertEqual(settings.api_key, "sk-test")
        self.assertEqual(settings.realtime_url, "wss://example/realtime")
        self.assertEqual(settings.transcription_timeout, 7.5)
        self.assertEqual(settings.upload_dir, "/tmp/vv")
        self.assertEqual(settings.max_upload_bytes, 1024)

    def test_missing_key_is_warned(self):
        with patch.dict(os.environ, _clean_env(), clear=True):
            with self.assertLogs("versevoice.config", level="WARNING"):
                load_settings()

    def test_bad_timeout(self):
        with patch.dict(os.environ, _clean_env(VERSEVOICE_TRANSCRIPTION_TIMEOUT="soon"), clear=True):
            with self.assertRaises(ValueError):
                load_settings()

    def test_non_positive_timeout(self):
        with self.assertRaises(ValueError):
            Settings(transcription_timeout=0)

    def test_settings_are_frozen(self):
        settings = Settings()
        with self.assertRaises(Exception):
            settings.api_key = "changed"


if __name__ == "__main__":
    unittest.main()
