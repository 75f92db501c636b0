import logging
import random
import threading
from typing import List, Optional, Tuple

from mazerace.exceptions import AlreadyInRoom, RoomNotFound, GameInProgress, RoomFull
from mazerace.models import Player, Room, WAITING, PLAYING, color_for_slot
from .effects import Effect, to_room, to_sender
from .lifecycle import RoundLifecycle
from .store import RoomStore, InMemoryRoomStore

logger = logging.getLogger(__name__)

# No I, O, 0 or 1 so codes read unambiguously aloud and on screen
CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
CODE_LENGTH = 4


def normalize_code(code) -> str:
    return str(code or '').strip().upper()


class RoomRegistry:
    """Owns the live rooms and the players in them.

    Bound to a Flask app through ``init_app`` like the other extensions; tests
    may also build one directly with their own store and lifecycle.
    """

    def __init__(self, store: Optional[RoomStore] = None,
                 lifecycle: Optional[RoundLifecycle] = None,
                 rng: Optional[random.Random] = None):
        self.store = store or InMemoryRoomStore()
        self.lifecycle = lifecycle or RoundLifecycle()
        self.rng = rng or random.Random()
        # Held by socket handlers so each action applies atomically
        self.lock = threading.RLock()

    def init_app(self, app, store: Optional[RoomStore] = None):
        self.store = store or InMemoryRoomStore()
        self.lifecycle = RoundLifecycle(
            maze_width=int(app.config.get('MAZE_WIDTH', 21)),
            maze_height=int(app.config.get('MAZE_HEIGHT', 21)),
            validate_moves=bool(app.config.get('VALIDATE_MOVES', False)),
        )
        app.extensions['mazerace'] = self

    def generate_code(self) -> str:
        while True:
            code = ''.join(self.rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
            if code not in self.store:
                return code
            logger.warning("Room code collision detected, regenerating: %s", code)

    def get_room(self, code) -> Optional[Room]:
        return self.store.get(normalize_code(code))

    def room_for_player(self, player_id: str) -> Optional[Room]:
        for room in self.store:
            if room.find_player(player_id):
                return room
        return None

    def create_room(self, sid: str, host_name: str, max_players: int,
                    total_rounds: int) -> Tuple[Room, List[Effect]]:
        # One seat per connection: hosting a new room leaves the old one
        effects = self.remove_player(sid)
        room = Room(id=self.generate_code(), max_players=max_players, total_rounds=total_rounds)
        room.players.append(Player(id=sid, name=host_name, color=color_for_slot(0)))
        self.store.add(room)

        logger.info("[room-created] room=%s host=%s max_players=%s rounds=%s",
                    room.id, host_name, max_players, total_rounds)
        return room, effects + [to_sender('roomCreated', {
            'roomCode': room.id,
            'isHost': True,
            'room': room.to_dict(),
        })]

    def join_room(self, sid: str, name: str, code) -> Tuple[Player, List[Effect]]:
        room = self.get_room(code)
        if not room:
            raise RoomNotFound(normalize_code(code))
        if room.find_player(sid):
            raise AlreadyInRoom()
        if room.status != WAITING:
            raise GameInProgress()
        if room.is_full:
            raise RoomFull()

        effects = self.remove_player(sid)
        player = Player(id=sid, name=name, color=color_for_slot(len(room.players)))
        room.players.append(player)
        logger.info("[join] room=%s player=%s total=%s/%s",
                    room.id, name, len(room.players), room.max_players)

        effects.append(to_room(room.id, 'playerJoined', {
            'players': room.players_to_dict(),
            'roomCode': room.id,
            'maxPlayers': room.max_players,
        }))
        if room.is_full:
            logger.info("[auto-start] room=%s full, starting round", room.id)
            effects.extend(self.lifecycle.start_round(room))
        return player, effects

    def remove_player(self, player_id: str) -> List[Effect]:
        room = self.room_for_player(player_id)
        if not room:
            return []

        room.players = [p for p in room.players if p.id != player_id]
        if not room.players:
            self.store.delete(room.id)
            logger.info("[room-closed] room=%s empty, deleted", room.id)
            return []

        logger.info("[leave] room=%s player=%s remaining=%s", room.id, player_id, len(room.players))
        effects = [to_room(room.id, 'playerLeft', {'players': room.players_to_dict()})]
        if room.status == PLAYING and room.all_finished:
            # The leaver was the last one still racing
            effects.extend(self.lifecycle.complete_round(room))
        return effects
