"""
Google Cloud Translation engine.

Wraps the Cloud Translation v3 API. The client is built lazily on first use
and calls run in the default executor because the client is blocking.
Library errors propagate unmodified; this engine never retries.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional

from google.cloud import translate

from speechrelay.config.settings import Settings, settings as default_settings
from speechrelay.config.constants import (
    SUPPORTED_TRANSLATION_LOCATIONS,
    DEFAULT_TRANSLATION_LOCATION,
    SUPPORTED_LANGUAGES,
    TRANSLATION_COST_PER_CHAR,
)
from speechrelay.services.exceptions import ConfigurationError, ProviderError
from speechrelay.services.gcp.credentials import ensure_credentials
from speechrelay.services.metrics import translation_requests, translation_latency
from speechrelay.services.translation.request import TranslationRequest

logger = logging.getLogger(__name__)


def resolve_translation_location(raw: Optional[str]) -> str:
    """Validate a configured region against the allow-list, defaulting to global."""
    location = (raw if raw is not None else DEFAULT_TRANSLATION_LOCATION).strip()
    if location in SUPPORTED_TRANSLATION_LOCATIONS:
        return location

    logger.warning(
        f"Unsupported Google Translation location '{location}'; "
        f"falling back to {DEFAULT_TRANSLATION_LOCATION}"
    )
    return DEFAULT_TRANSLATION_LOCATION


class GoogleTranslateEngine:
    """Handles translation through Google Cloud Translation."""

    def __init__(self, config: Optional[Settings] = None, client=None):
        config = config or default_settings
        self.project_id = config.GOOGLE_CLOUD_PROJECT_ID or ""
        self.credentials_path = config.GOOGLE_APPLICATION_CREDENTIALS
        self.location = resolve_translation_location(
            config.GOOGLE_CLOUD_TRANSLATE_LOCATION
            if config.GOOGLE_CLOUD_TRANSLATE_LOCATION is not None
            else config.GOOGLE_CLOUD_LOCATION
        )
        self._client = client

    def is_available(self) -> bool:
        return bool(self.project_id)

    def get_name(self) -> str:
        return "Google Cloud Translation"

    async def initialize(self) -> None:
        if self._client is None:
            ensure_credentials(self.credentials_path)
            self._client = translate.TranslationServiceClient()

    async def translate(self, request: TranslationRequest) -> str:
        normalized_text = request.text.strip()
        if not normalized_text:
            return request.text

        if not self.project_id:
            raise ConfigurationError("GOOGLE_CLOUD_PROJECT_ID is not configured")

        await self.initialize()

        payload = {
            "parent": f"projects/{self.project_id}/locations/{self.location}",
            "contents": [normalized_text],
            "mime_type": "text/plain",
            "source_language_code": request.source_lang,
            "target_language_code": request.target_lang,
        }

        loop = asyncio.get_running_loop()
        started = time.perf_counter()
        try:
            response = await loop.run_in_executor(
                None, lambda: self._client.translate_text(request=payload)
            )
        except Exception as e:
            translation_requests.labels(engine="google", status="error").inc()
            logger.error(f"Google translation failed ({request.source_lang}->{request.target_lang}): {e}")
            raise
        finally:
            translation_latency.labels(engine="google").observe(time.perf_counter() - started)

        if not response.translations or not response.translations[0].translated_text:
            translation_requests.labels(engine="google", status="error").inc()
            raise ProviderError("No translation returned")

        translation_requests.labels(engine="google", status="success").inc()
        return response.translations[0].translated_text

    async def get_supported_languages(self) -> List[Dict[str, str]]:
        return [{"code": code, "name": name} for code, name in SUPPORTED_LANGUAGES]

    def estimate_cost(self, text: str, source_lang: str = "", target_lang: str = "") -> float:
        return len(text) * TRANSLATION_COST_PER_CHAR
