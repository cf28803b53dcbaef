"""
Translation Module

This module contains the translation engine layer:
- TranslationRequest: value object for one translate call
- GoogleTranslateEngine / GrokTranslateEngine: provider adapters
- FallbackTranslationEngine: primary engine with single-hop fallback
- TranslationEngineRegistry: per-user engine resolution

Usage:
    from speechrelay.services.translation import build_translation_registry

    registry = build_translation_registry(settings)
    engine = registry.get_engine(user_id)
"""

from typing import Optional

from speechrelay.config.settings import Settings, settings as default_settings
from speechrelay.config.constants import GOOGLE_TRANSLATE_ENGINE_ID, GROK_TRANSLATE_ENGINE_ID
from speechrelay.services.translation.request import TranslationRequest
from speechrelay.services.translation.response_cache import TranslationResponseCache
from speechrelay.services.translation.google_engine import GoogleTranslateEngine
from speechrelay.services.translation.grok_engine import GrokTranslateEngine
from speechrelay.services.translation.fallback import FallbackTranslationEngine
from speechrelay.services.translation.registry import TranslationEngineRegistry


def build_translation_registry(config: Optional[Settings] = None) -> TranslationEngineRegistry:
    """Create the process-wide registry with the Google and Grok engines."""
    config = config or default_settings
    registry = TranslationEngineRegistry(default_engine_id=config.DEFAULT_TRANSLATION_ENGINE)
    registry.register_engine(GOOGLE_TRANSLATE_ENGINE_ID, GoogleTranslateEngine(config))
    registry.register_engine(GROK_TRANSLATE_ENGINE_ID, GrokTranslateEngine(config))
    return registry


__all__ = [
    "TranslationRequest",
    "TranslationResponseCache",
    "GoogleTranslateEngine",
    "GrokTranslateEngine",
    "FallbackTranslationEngine",
    "TranslationEngineRegistry",
    "build_translation_registry",
]
