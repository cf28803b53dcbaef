"""
Grok (xAI) translation engine.

Uses an OpenAI-compatible chat completions endpoint as a translator. Responses
are kept in an in-process TTL/LRU cache keyed by language pair and normalized
text, so repeated phrases skip the model call entirely.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional

import httpx

from speechrelay.config.settings import Settings, settings as default_settings
from speechrelay.config.constants import (
    GROK_REQUEST_TIMEOUT_SEC,
    GROK_CACHE_MAX_ENTRIES,
    GROK_CACHE_TTL_SEC,
    GROK_ERROR_BODY_LOG_CHARS,
    GROK_SYSTEM_PROMPT,
    SUPPORTED_LANGUAGES,
    TRANSLATION_COST_PER_CHAR,
)
from speechrelay.services.exceptions import ConfigurationError, ProviderError
from speechrelay.services.metrics import translation_requests, translation_latency
from speechrelay.services.translation.request import TranslationRequest
from speechrelay.services.translation.response_cache import TranslationResponseCache

logger = logging.getLogger(__name__)


class GrokTranslateEngine:
    """Translation through a chat-completion model."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        cache: Optional[TranslationResponseCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = GROK_REQUEST_TIMEOUT_SEC,
    ):
        config = config or default_settings
        self.api_key = config.GROK_API_KEY or ""
        self.base_url = config.GROK_API_BASE_URL.rstrip("/")
        self.model = config.GROK_TRANSLATE_MODEL
        self.timeout = timeout
        self.cache = cache or TranslationResponseCache(
            maxsize=GROK_CACHE_MAX_ENTRIES,
            ttl=GROK_CACHE_TTL_SEC,
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def initialize(self) -> None:
        # No-op: the pooled HTTP client is created on first request.
        pass

    def is_available(self) -> bool:
        return bool(self.api_key)

    def get_name(self) -> str:
        return "Grok (xAI) Translation"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def aclose(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _build_messages(self, request: TranslationRequest, normalized_text: str) -> List[Dict[str, str]]:
        lines = [
            f"Translate the following text from {request.source_lang} to {request.target_lang} "
            "accurately, preserving tone, idioms, and context.",
        ]
        if request.context:
            lines.append(f"Context: {request.context}")
        lines.append("Text:")
        lines.append(normalized_text)

        return [
            {"role": "system", "content": GROK_SYSTEM_PROMPT},
            {"role": "user", "content": "\n".join(lines)},
        ]

    async def translate(self, request: TranslationRequest) -> str:
        normalized_text = request.text.strip()
        if not normalized_text:
            return request.text

        cache_key = TranslationResponseCache.get_cache_key(
            request.source_lang, request.target_lang, normalized_text
        )
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        if not self.api_key:
            raise ConfigurationError("GROK_API_KEY is not configured")

        started = time.perf_counter()
        try:
            translated_text = await self._request_translation(request, normalized_text)
        except Exception:
            translation_requests.labels(engine="grok", status="error").inc()
            raise
        finally:
            translation_latency.labels(engine="grok").observe(time.perf_counter() - started)

        translation_requests.labels(engine="grok", status="success").inc()
        self.cache.put(cache_key, translated_text)
        return translated_text

    async def _request_translation(self, request: TranslationRequest, normalized_text: str) -> str:
        # httpx timeouts bound each read, not the whole call; cap the total here
        try:
            async with asyncio.timeout(self.timeout):
                response = await self._get_client().post(
                    f"{self.base_url}/chat/completions",
                    headers={
                        "Content-Type": "application/json",
                        "Authorization": f"Bearer {self.api_key}",
                    },
                    json={
                        "model": self.model,
                        "temperature": 0,
                        "messages": self._build_messages(request, normalized_text),
                    },
                )
        except (httpx.TimeoutException, TimeoutError) as e:
            raise ProviderError(f"Grok API request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Grok API request failed: {e}") from e

        if not response.is_success:
            logger.warning(
                f"Grok translation request failed: {response.status_code} {response.reason_phrase} "
                f"{response.text[:GROK_ERROR_BODY_LOG_CHARS]}"
            )
            raise ProviderError(f"Grok API error: {response.status_code} {response.reason_phrase}")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError("No translation returned from Grok") from e

        if not isinstance(content, str) or not content.strip():
            raise ProviderError("No translation returned from Grok")

        return content.strip()

    async def get_supported_languages(self) -> List[Dict[str, str]]:
        return [{"code": code, "name": name} for code, name in SUPPORTED_LANGUAGES]

    def estimate_cost(self, text: str, source_lang: str = "", target_lang: str = "") -> float:
        # Provider pricing varies; keep an approximate heuristic.
        return len(text) * TRANSLATION_COST_PER_CHAR
