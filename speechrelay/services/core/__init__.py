from speechrelay.services.core.repositories import RoomRepository

__all__ = ["RoomRepository"]
