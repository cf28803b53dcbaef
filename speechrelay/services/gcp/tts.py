"""
GCP Text-to-Speech Service

Handles Google Cloud Text-to-Speech synthesis calls.
"""

import logging
import threading
from typing import Optional

from google.cloud import texttospeech

from speechrelay.services.exceptions import ProviderError
from speechrelay.services.gcp.credentials import ensure_credentials

logger = logging.getLogger(__name__)


class GCPTextToSpeechService:
    """Handles Text-to-Speech operations."""

    def __init__(self, client=None, credentials_path: Optional[str] = None):
        self._client = client
        self._credentials_path = credentials_path
        self._client_lock = threading.Lock()

    def _get_client(self):
        with self._client_lock:
            if self._client is None:
                ensure_credentials(self._credentials_path)
                self._client = texttospeech.TextToSpeechClient()
            return self._client

    def synthesize(
        self,
        text: str,
        *,
        language_code: str,
        voice_name: Optional[str] = None,
        ssml_gender: Optional[str] = None,
    ) -> bytes:
        """Synthesize text to MP3 audio.

        Raises:
            ProviderError: if the provider returns no audio
        """
        voice_params = texttospeech.VoiceSelectionParams(
            language_code=language_code,
            name=voice_name or "",
            ssml_gender=texttospeech.SsmlVoiceGender[ssml_gender or "SSML_VOICE_GENDER_UNSPECIFIED"],
        )

        audio_config = texttospeech.AudioConfig(
            audio_encoding=texttospeech.AudioEncoding.MP3,
            speaking_rate=1.0,
            pitch=0.0,
            volume_gain_db=0.0,
        )

        synthesis_input = texttospeech.SynthesisInput(text=text)

        response = self._get_client().synthesize_speech(
            input=synthesis_input,
            voice=voice_params,
            audio_config=audio_config,
        )

        if not response.audio_content:
            raise ProviderError("No audio content returned from Google Cloud TTS")

        return response.audio_content
