# versevoice/__init__.py
# =======================
# VerseVoice — spoken questions about religion, answered with scripture.
#
# Pipeline:
#   1. Audio normalization   (versevoice.audio)
#   2. Realtime transcription (versevoice.stt)
#   3. Content classification (versevoice.nlp)
#   4. Orchestration         (versevoice.pipeline)

__version__ = "1.0.0"
