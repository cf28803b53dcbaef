"""
Room Model - Conversational rooms joined by a short code.

Only the creation timestamp matters to this service: rooms older than the
retention window are bulk-deleted by the cleanup scheduler.
"""
from sqlalchemy import Column, String, DateTime
from datetime import datetime
import uuid

from .database import Base


class Room(Base):
    """Conversation room"""
    __tablename__ = "rooms"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code = Column(String(12), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

