"""Room domain services: registry, round lifecycle and broadcast effects.

Nothing in this package talks to Socket.IO. State transitions return
``Effect`` values and the socket handlers decide how to deliver them.
"""

from .effects import Effect, ROOM, OTHERS, SENDER
from .store import RoomStore, InMemoryRoomStore
from .lifecycle import RoundLifecycle
from .registry import RoomRegistry

__all__ = [
    'Effect',
    'ROOM',
    'OTHERS',
    'SENDER',
    'RoomStore',
    'InMemoryRoomStore',
    'RoundLifecycle',
    'RoomRegistry',
]
