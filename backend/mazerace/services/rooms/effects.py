from dataclasses import dataclass
from typing import Any, Optional

# Audiences
ROOM = 'room'
OTHERS = 'others'
SENDER = 'sender'


@dataclass(frozen=True)
class Effect:
    """A message to deliver once a state transition has been applied."""
    event: str
    payload: Any
    audience: str = ROOM
    room_code: Optional[str] = None


def to_room(room_code: str, event: str, payload: Any) -> Effect:
    return Effect(event, payload, ROOM, room_code)


def to_others(room_code: str, event: str, payload: Any) -> Effect:
    return Effect(event, payload, OTHERS, room_code)


def to_sender(event: str, payload: Any) -> Effect:
    return Effect(event, payload, SENDER)
