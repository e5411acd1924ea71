# versevoice/api/__init__.py
# ===========================
# API Layer — VerseVoice
#
#   - POST /process-audio  multipart upload ("audioFile") → transcript + result
#   - WS   /ws/audio       binary clips in → "transcript" events out
#   - GET  /health         liveness
