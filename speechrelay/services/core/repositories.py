"""
Repository Layer - Room storage queries.

Rooms are owned by the web application; this service only needs the bulk
delete used by the expiry job.

Usage:
    from speechrelay.services.core.repositories import RoomRepository

    deleted = await RoomRepository().delete_rooms_older_than(timedelta(hours=24))
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete

from speechrelay.models.database import AsyncSessionLocal
from speechrelay.models.room import Room

logger = logging.getLogger(__name__)


class RoomRepository:
    """Repository for room queries."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or AsyncSessionLocal

    async def delete_rooms_older_than(self, age: timedelta, now: Optional[datetime] = None) -> int:
        """
        Delete every room created more than `age` ago.

        Args:
            age: Retention window
            now: Reference time (UTC, naive); defaults to the current time

        Returns:
            Number of rooms deleted
        """
        cutoff = (now or datetime.utcnow()) - age
        async with self._session_factory() as db:
            result = await db.execute(delete(Room).where(Room.created_at < cutoff))
            await db.commit()
            return result.rowcount or 0
