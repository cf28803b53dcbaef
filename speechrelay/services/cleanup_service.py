"""
Cleanup Service - scheduled eviction of expired rooms and stale TTS audio.

Two independent jobs run for the lifetime of the process:
1. Room eviction at the top of every hour: one bulk delete of rooms older
   than ROOM_RETENTION_HOURS.
2. TTS cache eviction once a day at midnight: deletes cached .mp3 files whose
   modification time is older than TTS_CACHE_RETENTION_DAYS.

Each job is also callable directly for tests and ops scripts.
"""
import asyncio
import logging
import os
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Union

from speechrelay.config.constants import TTS_CACHE_EXTENSION
from speechrelay.services.metrics import cleanup_deleted
from speechrelay.services.protocols import RoomStore

logger = logging.getLogger(__name__)


def seconds_until_next_hour(now: datetime) -> float:
    next_run = now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
    return (next_run - now).total_seconds()


def seconds_until_next_midnight(now: datetime) -> float:
    next_run = now.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=1)
    return (next_run - now).total_seconds()


class CleanupService:
    """Service for room and TTS cache lifecycles."""

    def __init__(
        self,
        room_store: RoomStore,
        tts_cache_dir: Union[str, Path],
        room_retention: timedelta = timedelta(hours=24),
        tts_cache_retention: timedelta = timedelta(days=7),
    ):
        self._room_store = room_store
        self.tts_cache_dir = Path(tts_cache_dir)
        self.room_retention = room_retention
        self.tts_cache_retention = tts_cache_retention
        self._tasks: List[asyncio.Task] = []

    def init(self):
        """Start the scheduled jobs on the running event loop. Idempotent."""
        if self._tasks:
            return

        self._tasks = [
            asyncio.create_task(self._run_scheduled("rooms", self.cleanup_expired_rooms, seconds_until_next_hour)),
            asyncio.create_task(self._run_scheduled("tts_cache", self.cleanup_tts_cache, seconds_until_next_midnight)),
        ]
        logger.info("Cleanup service initialized")

    async def shutdown(self):
        """Cancel the scheduled jobs (process shutdown)."""
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

    async def _run_scheduled(
        self,
        name: str,
        job: Callable[[], Awaitable[int]],
        delay_until_next: Callable[[datetime], float],
    ):
        logger.info(f"Starting {name} cleanup schedule")
        while True:
            await asyncio.sleep(delay_until_next(datetime.now()))
            try:
                await job()
            except Exception as e:
                # Already logged by the job; the next tick runs regardless
                logger.debug(f"{name} cleanup tick failed: {e}")

    async def cleanup_expired_rooms(self) -> int:
        """
        Delete rooms older than the retention window.

        Raises:
            Whatever the storage layer raises, after logging it.
        """
        try:
            deleted = await self._room_store.delete_rooms_older_than(self.room_retention)
        except Exception as e:
            logger.error(f"Error cleaning up expired rooms: {e}")
            raise

        cleanup_deleted.labels(target="rooms").inc(deleted)
        logger.info(f"Expired room cleanup completed ({deleted} removed)")
        return deleted

    async def cleanup_tts_cache(self, now: Optional[float] = None) -> int:
        """
        Delete cached audio files older than the retention window.

        Args:
            now: Reference epoch time; defaults to the current time

        Returns:
            Number of files deleted
        """
        loop = asyncio.get_running_loop()
        deleted = await loop.run_in_executor(None, self._sweep_tts_cache, now)

        if deleted:
            cleanup_deleted.labels(target="tts_cache").inc(deleted)
            logger.info(f"TTS cache cleanup removed {deleted} files")
        return deleted

    def _sweep_tts_cache(self, now: Optional[float] = None) -> int:
        if not self.tts_cache_dir.is_dir():
            return 0

        now = time.time() if now is None else now
        max_age = self.tts_cache_retention.total_seconds()
        deleted = 0

        with os.scandir(self.tts_cache_dir) as entries:
            for entry in entries:
                if not entry.name.endswith(TTS_CACHE_EXTENSION):
                    continue
                # Races with concurrent cache writes are expected; skip the file
                try:
                    if now - entry.stat().st_mtime > max_age:
                        os.remove(entry.path)
                        deleted += 1
                except OSError as e:
                    logger.debug(f"Skipping TTS cache file {entry.name}: {e}")

        return deleted
