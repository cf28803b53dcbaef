from .database import Base, engine, AsyncSessionLocal
from .room import Room

__all__ = ["Base", "engine", "AsyncSessionLocal", "Room"]
