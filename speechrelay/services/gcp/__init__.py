"""
GCP Services Package

Exports the Google Cloud speech and text-to-speech adapters.
"""

from speechrelay.services.gcp.speech import GCPSpeechService, RecognizeStream, STTConfig
from speechrelay.services.gcp.tts import GCPTextToSpeechService

__all__ = [
    "GCPSpeechService",
    "RecognizeStream",
    "STTConfig",
    "GCPTextToSpeechService",
]
