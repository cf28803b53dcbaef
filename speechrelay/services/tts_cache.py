"""
TTS Cache - file-backed synthesis cache.

Identical phrases are synthesized over and over in a conversation relay
("Hello", "Thank you", "Can you hear me?"). Audio is stored as
``<cache_dir>/<key>.mp3`` where the key is an MD5 digest of the normalized
(text, language, voice, gender) tuple, so repeats skip the paid TTS call.

Example benefit:
- Listener A needs "Hola" in es-ES -> miss, provider call, file written
- Listener B needs " hola " in es-ES later -> same key, served from disk

Cache writes happen after the audio is returned to the caller and never fail
the request. File modification time is the only eviction signal; see
CleanupService.cleanup_tts_cache.
"""
import asyncio
import functools
import hashlib
import json
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Set, Union

import aiofiles
import aiofiles.os

from speechrelay.config.constants import TTS_CACHE_EXTENSION, TTS_CACHE_DRAIN_TIMEOUT_SEC
from speechrelay.services.exceptions import CacheIOError, ProviderError
from speechrelay.services.metrics import tts_cache_requests, tts_cache_write_failures
from speechrelay.services.protocols import SpeechSynthesizer

logger = logging.getLogger(__name__)

SSML_GENDERS = ("MALE", "FEMALE", "NEUTRAL", "SSML_VOICE_GENDER_UNSPECIFIED")


@dataclass(frozen=True)
class TTSOptions:
    """Parameters for one synthesis request."""
    text: str
    language_code: str
    voice_name: Optional[str] = None
    ssml_gender: Optional[str] = None

    def __post_init__(self):
        if self.ssml_gender is not None and self.ssml_gender not in SSML_GENDERS:
            raise ValueError(f"Unsupported SSML gender: {self.ssml_gender}")


def get_cache_key(options: TTSOptions) -> str:
    """
    Generate the cache key for a TTS request.

    Text is trimmed and lower-cased; the other fields are used verbatim.

    Returns:
        32-character hex digest
    """
    data = json.dumps({
        "text": options.text.strip().lower(),
        "languageCode": options.language_code,
        "voiceName": options.voice_name,
        "ssmlGender": options.ssml_gender,
    })
    return hashlib.md5(data.encode("utf-8")).hexdigest()


class TTSCache:
    """Serves synthesis results from disk, falling back to the provider."""

    def __init__(self, synthesizer: SpeechSynthesizer, cache_dir: Union[str, Path]):
        """
        Initialize the TTS cache.

        Args:
            synthesizer: Provider used on cache misses
            cache_dir: Directory holding <key>.mp3 files (created if missing)
        """
        self._synthesizer = synthesizer
        self.cache_dir = Path(cache_dir).resolve()
        self._pending_writes: Set[asyncio.Task] = set()
        self._hits = 0
        self._misses = 0
        self._ensure_cache_dir()

    def _ensure_cache_dir(self):
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create TTS cache directory {self.cache_dir}: {e}")

    def cache_path(self, cache_key: str) -> Path:
        return self.cache_dir / f"{cache_key}{TTS_CACHE_EXTENSION}"

    async def _read_cached(self, path: Path) -> Optional[bytes]:
        try:
            async with aiofiles.open(path, "rb") as f:
                audio = await f.read()
        except OSError:
            return None
        return audio or None

    async def synthesize(self, options: TTSOptions) -> bytes:
        """
        Return MP3 audio for `options`, from cache when possible.

        Raises:
            ProviderError: if the provider returns no audio
            Any provider library error, unmodified.
        """
        cache_key = get_cache_key(options)
        path = self.cache_path(cache_key)

        cached = await self._read_cached(path)
        if cached is not None:
            self._hits += 1
            tts_cache_requests.labels(result="hit").inc()
            logger.info(f"Serving TTS from cache (key: {cache_key}, text: '{options.text[:20]}')")
            return cached

        self._misses += 1
        tts_cache_requests.labels(result="miss").inc()
        logger.debug(f"TTS cache MISS for key {cache_key}")

        loop = asyncio.get_running_loop()
        try:
            audio = await loop.run_in_executor(
                None,
                functools.partial(
                    self._synthesizer.synthesize,
                    options.text,
                    language_code=options.language_code,
                    voice_name=options.voice_name,
                    ssml_gender=options.ssml_gender,
                ),
            )
        except Exception as e:
            logger.error(f"Error in TTS synthesis (lang: {options.language_code}): {e}")
            raise

        if not audio:
            raise ProviderError("No audio content returned from TTS provider")

        self._schedule_write(path, bytes(audio), cache_key)
        return audio

    def _schedule_write(self, path: Path, audio: bytes, cache_key: str):
        task = asyncio.create_task(self._write_back(path, audio, cache_key))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _write_back(self, path: Path, audio: bytes, cache_key: str):
        try:
            await self._write_cache_file(path, audio)
            logger.debug(f"TTS cache PUT for key {cache_key} ({len(audio)} bytes)")
        except CacheIOError as e:
            tts_cache_write_failures.inc()
            logger.error(f"Failed to save TTS to cache (key: {cache_key}): {e}")

    async def _write_cache_file(self, path: Path, audio: bytes):
        # Write then rename so concurrent readers never see a partial file.
        # The temp name keeps the cache extension so orphans age out too.
        tmp_path = path.with_name(f"{path.stem}.{uuid.uuid4().hex[:8]}.tmp{TTS_CACHE_EXTENSION}")
        try:
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(audio)
            await aiofiles.os.replace(tmp_path, path)
        except OSError as e:
            raise CacheIOError(str(e)) from e

    @property
    def pending_writes(self) -> int:
        return len(self._pending_writes)

    async def drain(self, timeout: float = TTS_CACHE_DRAIN_TIMEOUT_SEC):
        """Wait (bounded) for in-flight cache writes, e.g. on shutdown."""
        if not self._pending_writes:
            return
        done, pending = await asyncio.wait(set(self._pending_writes), timeout=timeout)
        if pending:
            logger.warning(f"{len(pending)} TTS cache writes still pending after {timeout}s")

    def get_stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dict with hits, misses, hit_rate, pending writes
        """
        total = self._hits + self._misses
        hit_rate = (self._hits / total * 100) if total > 0 else 0

        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate_percent": round(hit_rate, 2),
            "pending_writes": len(self._pending_writes),
            "cache_dir": str(self.cache_dir),
        }
