"""
Protocol definitions for the provider abstraction layer.

This module defines interfaces (Python Protocols) that allow:
- Swapping implementations (e.g., Google -> Grok) behind one registry
- Testing without real API credentials
- Clear contracts between components

Usage:
    from speechrelay.services.protocols import TranslationEngine

    async def relay(engine: TranslationEngine, request: TranslationRequest) -> str:
        return await engine.translate(request)
"""

from datetime import timedelta
from typing import Dict, List, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from speechrelay.services.translation.request import TranslationRequest


class TranslationEngine(Protocol):
    """
    Interface for translation engines.

    Implementations:
        - GoogleTranslateEngine: Cloud Translation v3
        - GrokTranslateEngine: chat-completion model used as a translator
        - FallbackTranslationEngine: primary engine with a secondary on failure
    """

    async def initialize(self) -> None:
        """Prepare provider clients. Safe to call more than once."""
        ...

    async def translate(self, request: "TranslationRequest") -> str:
        """
        Translate text from source to target language.

        Whitespace-only text is returned unchanged without a provider call.

        Raises:
            Whatever the provider raises; engines do not retry.
        """
        ...

    def is_available(self) -> bool:
        """True when required credentials/config are present (no network check)."""
        ...

    def get_name(self) -> str:
        """Human-readable engine name."""
        ...

    async def get_supported_languages(self) -> List[Dict[str, str]]:
        """List of {"code", "name"} dicts."""
        ...

    def estimate_cost(self, text: str, source_lang: str, target_lang: str) -> float:
        """Approximate provider cost in USD for translating `text`."""
        ...


class SpeechSynthesizer(Protocol):
    """
    Interface for text-to-speech providers.

    Implementations should return MP3 audio and never an empty payload.
    """

    def synthesize(
        self,
        text: str,
        *,
        language_code: str,
        voice_name: Optional[str] = None,
        ssml_gender: Optional[str] = None,
    ) -> bytes:
        ...


class RoomStore(Protocol):
    """Storage query interface used by the cleanup scheduler."""

    async def delete_rooms_older_than(self, age: timedelta) -> int:
        """Bulk delete rooms created more than `age` ago; returns affected rows."""
        ...
