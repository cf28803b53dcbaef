"""
Fallback translation engine.

Wraps a primary engine with a secondary one. The wrapper advertises the
primary's identity; callers only learn that the secondary served a request
from the logs and the fallback counter.
"""

import logging
from typing import Dict, List

from speechrelay.services.metrics import translation_fallbacks
from speechrelay.services.protocols import TranslationEngine
from speechrelay.services.translation.request import TranslationRequest

logger = logging.getLogger(__name__)


class FallbackTranslationEngine:
    """Tries the primary engine, then the secondary once on failure."""

    def __init__(
        self,
        primary_id: str,
        primary: TranslationEngine,
        secondary_id: str,
        secondary: TranslationEngine,
    ):
        self.primary_id = primary_id
        self.primary = primary
        self.secondary_id = secondary_id
        self.secondary = secondary

    async def initialize(self) -> None:
        await self.primary.initialize()

    async def translate(self, request: TranslationRequest) -> str:
        try:
            return await self.primary.translate(request)
        except Exception as e:
            # Availability is only checked now, when the secondary is needed
            if not self.secondary.is_available():
                raise

            logger.warning(
                f"Translation engine {self.primary_id} failed ({e}); "
                f"falling back to {self.secondary_id}"
            )
            translation_fallbacks.labels(primary=self.primary_id, secondary=self.secondary_id).inc()
            return await self.secondary.translate(request)

    def is_available(self) -> bool:
        return self.primary.is_available()

    def get_name(self) -> str:
        return self.primary.get_name()

    async def get_supported_languages(self) -> List[Dict[str, str]]:
        return await self.primary.get_supported_languages()

    def estimate_cost(self, text: str, source_lang: str = "", target_lang: str = "") -> float:
        return self.primary.estimate_cost(text, source_lang, target_lang)
