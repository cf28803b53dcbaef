from fastapi import Request

from speechrelay.services.translation.registry import TranslationEngineRegistry
from speechrelay.services.tts_cache import TTSCache


def get_translation_registry(request: Request) -> TranslationEngineRegistry:
    return request.app.state.translation_registry


def get_tts_cache(request: Request) -> TTSCache:
    return request.app.state.tts_cache
