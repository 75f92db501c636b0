import logging
import math
import random
import time
from typing import Callable, List, Optional

from mazerace.maze import check_dimensions, generate_maze, is_open
from mazerace.models import Player, Room, WAITING, PLAYING, ROUND_OVER, GAME_OVER
from .effects import Effect, to_others, to_room

logger = logging.getLogger(__name__)


def wins_needed(total_rounds: int) -> int:
    return math.ceil(total_rounds / 2)


def is_match_winner(score: int, current_round: int, total_rounds: int) -> bool:
    """A majority of round wins ends the match early; the last round always ends it."""
    return score >= wins_needed(total_rounds) or current_round == total_rounds


def select_round_winner(players: List[Player]) -> Optional[Player]:
    """Fastest finisher; on an exact tie the player listed first wins."""
    finished = [p for p in players if p.finished and p.last_finish_time is not None]
    if not finished:
        return None
    return min(finished, key=lambda p: p.last_finish_time)


class RoundLifecycle:
    """Drives a room through waiting -> playing -> round_over -> game_over.

    Every method mutates the room in place and returns the effects the caller
    should broadcast. Out-of-state calls return no effects and change nothing.
    """

    def __init__(self, maze_width: int = 21, maze_height: int = 21,
                 clock: Callable[[], float] = time.time,
                 rng: Optional[random.Random] = None,
                 validate_moves: bool = False):
        check_dimensions(maze_width, maze_height)
        self.maze_width = maze_width
        self.maze_height = maze_height
        self.clock = clock
        self.rng = rng or random.Random()
        self.validate_moves = validate_moves

    def is_legal_step(self, room: Room, player: Player, x: int, y: int) -> bool:
        if not room.maze or not is_open(room.maze, x, y):
            return False
        return abs(x - player.x) + abs(y - player.y) == 1

    def record_move(self, room: Room, player_id: str, x: int, y: int) -> List[Effect]:
        """Store a client-reported position and relay it to the rest of the room."""
        if room.status != PLAYING:
            return []
        player = room.find_player(player_id)
        if not player:
            return []
        if self.validate_moves and not self.is_legal_step(room, player, x, y):
            logger.debug("[move-rejected] room=%s player=%s to=(%s,%s)", room.id, player_id, x, y)
            return []
        player.x, player.y = x, y
        return [to_others(room.id, 'playerMoved', {'id': player.id, 'position': {'x': x, 'y': y}})]

    def start_round(self, room: Room) -> List[Effect]:
        room.maze = generate_maze(self.maze_width, self.maze_height, self.rng)
        room.start_time = self.clock()
        room.status = PLAYING
        for player in room.players:
            player.reset_for_round()

        logger.info("[round-start] room=%s round=%s/%s players=%s",
                    room.id, room.current_round, room.total_rounds, len(room.players))
        return [to_room(room.id, 'gameStart', {
            'maze': room.maze,
            'round': room.current_round,
            'players': room.players_to_dict(),
            'startTime': room.start_time_ms(),
            'roomCode': room.id,
        })]

    def record_finish(self, room: Room, player_id: str) -> List[Effect]:
        if room.status != PLAYING:
            return []
        player = room.find_player(player_id)
        if not player or player.finished:
            return []

        finish_time = self.clock() - (room.start_time or 0.0)
        player.finished = True
        player.last_finish_time = finish_time
        logger.info("[finish] room=%s player=%s time=%.3fs", room.id, player.name, finish_time)

        if room.all_finished:
            return self.complete_round(room)
        return [to_room(room.id, 'playerFinished', {
            'playerId': player.id,
            'finishTime': finish_time,
            'players': room.players_to_dict(),
        })]

    def complete_round(self, room: Room) -> List[Effect]:
        """Score the round once every player in the room has finished."""
        if room.status != PLAYING or not room.all_finished:
            return []

        room.status = ROUND_OVER
        winner = select_round_winner(room.players)
        winner.score += 1
        grand = is_match_winner(winner.score, room.current_round, room.total_rounds)
        if grand:
            room.status = GAME_OVER

        logger.info("[round-over] room=%s round=%s winner=%s score=%s grand=%s",
                    room.id, room.current_round, winner.name, winner.score, grand)
        return [to_room(room.id, 'roundResult', {
            'winner': winner.to_dict(),
            'players': room.players_to_dict(),
            'currentRound': room.current_round,
            'totalRounds': room.total_rounds,
            'isGrandWinner': grand,
        })]

    def request_next_round(self, room: Room) -> List[Effect]:
        if room.status != ROUND_OVER or room.current_round >= room.total_rounds:
            return []
        room.current_round += 1
        return self.start_round(room)

    def request_play_again(self, room: Room) -> List[Effect]:
        if room.status != GAME_OVER:
            return []
        room.current_round = 1
        room.status = WAITING
        room.maze = None
        room.start_time = None
        for player in room.players:
            player.score = 0
            player.reset_for_round()

        logger.info("[reset] room=%s back to lobby", room.id)
        return [to_room(room.id, 'resetToLobby', {'players': room.players_to_dict()})]
