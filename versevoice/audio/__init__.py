# versevoice/audio/__init__.py
# =============================
# Audio Processing Layer — VerseVoice
#
#   - Upload staging with cleanup on every exit path (staging.py)
#   - Conversion of any container to mono 16 kHz s16le PCM (normalizer.py)

from versevoice.audio.normalizer import (  # noqa: F401
    AudioValidationError,
    ConversionFailed,
    normalize,
)
from versevoice.audio.staging import staged_upload  # noqa: F401
