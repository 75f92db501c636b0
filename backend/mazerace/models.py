from dataclasses import dataclass, field
from typing import List, Optional

from mazerace.maze import START, Grid

# Room status values, sent to clients verbatim
WAITING = 'waiting'
PLAYING = 'playing'
ROUND_OVER = 'round_over'
GAME_OVER = 'game_over'

# Assigned by join order, cycling once a room has more players than colors
PALETTE = [
    '#FF4136', '#2ECC40', '#0074D9', '#FFDC00', '#B10DC9',
    '#FF851B', '#39CCCC', '#F012BE', '#01FF70', '#AAAAAA',
]


def color_for_slot(index: int) -> str:
    return PALETTE[index % len(PALETTE)]


@dataclass
class Player:
    id: str
    name: str
    color: str
    score: int = 0
    x: int = START[0]
    y: int = START[1]
    finished: bool = False
    last_finish_time: Optional[float] = None

    def reset_for_round(self):
        self.x, self.y = START
        self.finished = False
        self.last_finish_time = None

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
            'color': self.color,
            'x': self.x,
            'y': self.y,
            'finished': self.finished,
            'lastFinishTime': self.last_finish_time,
        }


@dataclass
class Room:
    id: str
    max_players: int
    total_rounds: int
    players: List[Player] = field(default_factory=list)
    current_round: int = 1
    status: str = WAITING
    maze: Optional[Grid] = None
    # Seconds since the epoch at round start
    start_time: Optional[float] = None

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    @property
    def all_finished(self) -> bool:
        return bool(self.players) and all(p.finished for p in self.players)

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def players_to_dict(self):
        return [p.to_dict() for p in self.players]

    def start_time_ms(self) -> Optional[int]:
        if self.start_time is None:
            return None
        return int(self.start_time * 1000)

    def to_dict(self):
        return {
            'id': self.id,
            'players': self.players_to_dict(),
            'maxPlayers': self.max_players,
            'totalRounds': self.total_rounds,
            'currentRound': self.current_round,
            'status': self.status,
            'maze': self.maze,
            'startTime': self.start_time_ms(),
        }
