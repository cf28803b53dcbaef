"""
Translation Engine Registry - per-user engine selection.

Engines are registered once at startup. Each lookup resolves the user's
preferred engine (or the process default), wraps the Grok engine with a
Google fallback, and otherwise scans engines in registration order for the
first available one.

Usage:
    registry = TranslationEngineRegistry(default_engine_id="google-translate")
    registry.register_engine("google-translate", GoogleTranslateEngine())
    registry.register_engine("grok-translate", GrokTranslateEngine())

    engine = registry.get_engine(user_id)
    text = await engine.translate(TranslationRequest("Hallo", "de", "en"))
"""

import logging
import threading
from typing import Dict, List, Optional

from speechrelay.config.constants import GOOGLE_TRANSLATE_ENGINE_ID, GROK_TRANSLATE_ENGINE_ID
from speechrelay.services.exceptions import NoEngineAvailableError
from speechrelay.services.protocols import TranslationEngine
from speechrelay.services.translation.fallback import FallbackTranslationEngine

logger = logging.getLogger(__name__)


class TranslationEngineRegistry:
    """
    Holds translation engines and per-user preferences.

    Thread-safe: engine and preference maps are guarded by one lock; the
    fallback wrapper is built fresh on each lookup and never stored.
    """

    def __init__(
        self,
        default_engine_id: str = GOOGLE_TRANSLATE_ENGINE_ID,
        model_engine_id: str = GROK_TRANSLATE_ENGINE_ID,
        cloud_engine_id: str = GOOGLE_TRANSLATE_ENGINE_ID,
    ):
        self.default_engine_id = default_engine_id
        self.model_engine_id = model_engine_id
        self.cloud_engine_id = cloud_engine_id
        self._engines: Dict[str, TranslationEngine] = {}
        self._user_preferences: Dict[str, str] = {}
        self._lock = threading.Lock()

    def register_engine(self, engine_id: str, engine: TranslationEngine) -> None:
        with self._lock:
            self._engines[engine_id] = engine
        logger.info(f"Registered translation engine {engine_id} ({engine.get_name()})")

    def has_engine(self, engine_id: str) -> bool:
        with self._lock:
            return engine_id in self._engines

    def get_engine(self, user_id: Optional[str] = None) -> TranslationEngine:
        """
        Resolve the engine for a user.

        Raises:
            NoEngineAvailableError: if no registered engine is available
        """
        with self._lock:
            preferred_id = self._user_preferences.get(user_id) if user_id else None
            engines = list(self._engines.items())

        engine_id = preferred_id or self.default_engine_id
        registered = dict(engines)
        engine = registered.get(engine_id)

        if engine is not None and engine.is_available():
            secondary = registered.get(self.cloud_engine_id)
            if engine_id == self.model_engine_id and secondary is not None:
                return FallbackTranslationEngine(engine_id, engine, self.cloud_engine_id, secondary)
            return engine

        for fallback_id, fallback in engines:
            if fallback.is_available():
                logger.warning(f"Translation engine {engine_id} not available, falling back to {fallback_id}")
                return fallback

        raise NoEngineAvailableError()

    def registered_engines(self) -> List[TranslationEngine]:
        with self._lock:
            return list(self._engines.values())

    def set_user_preference(self, user_id: str, engine_id: str) -> None:
        with self._lock:
            self._user_preferences[user_id] = engine_id

    def get_user_preference(self, user_id: str) -> Optional[str]:
        with self._lock:
            return self._user_preferences.get(user_id)

    def get_available_engines(self) -> List[Dict[str, str]]:
        with self._lock:
            engines = list(self._engines.items())
        return [
            {"id": engine_id, "name": engine.get_name()}
            for engine_id, engine in engines
            if engine.is_available()
        ]
