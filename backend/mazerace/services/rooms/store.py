from abc import ABC, abstractmethod
from typing import Dict, Iterator, Optional

from mazerace.models import Room


class RoomStore(ABC):
    """Where live rooms are kept, keyed by room code."""

    @abstractmethod
    def get(self, code: str) -> Optional[Room]:
        ...

    @abstractmethod
    def add(self, room: Room) -> None:
        ...

    @abstractmethod
    def delete(self, code: str) -> None:
        ...

    @abstractmethod
    def __iter__(self) -> Iterator[Room]:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    def __contains__(self, code: str) -> bool:
        return self.get(code) is not None


class InMemoryRoomStore(RoomStore):

    def __init__(self):
        self._rooms: Dict[str, Room] = {}

    def get(self, code: str) -> Optional[Room]:
        return self._rooms.get(code)

    def add(self, room: Room) -> None:
        self._rooms[room.id] = room

    def delete(self, code: str) -> None:
        self._rooms.pop(code, None)

    def __iter__(self) -> Iterator[Room]:
        # Snapshot so callers may delete while iterating
        return iter(list(self._rooms.values()))

    def __len__(self) -> int:
        return len(self._rooms)
