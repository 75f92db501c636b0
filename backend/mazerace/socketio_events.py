from functools import wraps
from typing import Iterable, Optional

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from mazerace import registry, socketio
from mazerace.exceptions import MazeRaceError
from mazerace.services.rooms import Effect, OTHERS, SENDER


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _room_key(room_code: str) -> str:
    return f"room:{room_code}"


def _coerce_int(value, default: int, lo: int, hi: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        number = default
    return max(lo, min(hi, number))


def _clean_name(value, fallback: str) -> str:
    name = value.strip() if isinstance(value, str) else ''
    limit = int(current_app.config.get('MAX_NAME_LENGTH', 20))
    return name[:limit] or fallback


def _coerce_position(position) -> Optional[tuple]:
    if not isinstance(position, dict):
        return None
    try:
        return int(position['x']), int(position['y'])
    except (KeyError, TypeError, ValueError, OverflowError):
        return None


def _move_socket(previous, room) -> None:
    if previous and previous.id != room.id:
        leave_room(_room_key(previous.id))
    join_room(_room_key(room.id))


def _dispatch(effects: Iterable[Effect]) -> None:
    for effect in effects:
        if effect.audience == SENDER:
            emit(effect.event, effect.payload)
        elif effect.audience == OTHERS:
            emit(effect.event, effect.payload, to=_room_key(effect.room_code), include_self=False)
        else:
            emit(effect.event, effect.payload, to=_room_key(effect.room_code))


def _room_action(handler):
    """Apply one client action atomically; report room errors to the sender only."""
    @wraps(handler)
    def wrapper(*args):
        data = args[0] if args and isinstance(args[0], dict) else {}
        with registry.lock:
            try:
                effects = handler(data)
            except MazeRaceError as exc:
                current_app.logger.info(f"[rejected] sid={_get_sid()} event={handler.__name__} reason={exc}")
                emit('error', exc.client_message)
                return
            _dispatch(effects or [])
    return wrapper


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    with registry.lock:
        effects = registry.remove_player(_get_sid())
        _dispatch(effects)
    current_app.logger.info(f"[disconnect] sid={_get_sid()}")


@_room_action
def handle_create_room(data):
    cfg = current_app.config
    max_players = _coerce_int(data.get('maxPlayers'), cfg['DEFAULT_MAX_PLAYERS'], 2, 10)
    total_rounds = _coerce_int(data.get('totalRounds'), cfg['DEFAULT_TOTAL_ROUNDS'], 1, cfg['MAX_TOTAL_ROUNDS'])
    name = _clean_name(data.get('playerName'), 'Player 1')
    previous = registry.room_for_player(_get_sid())
    room, effects = registry.create_room(_get_sid(), name, max_players, total_rounds)
    _move_socket(previous, room)
    return effects


@_room_action
def handle_join_room(data):
    room = registry.get_room(data.get('roomCode'))
    fallback = f"Player {len(room.players) + 1}" if room else 'Player'
    name = _clean_name(data.get('playerName'), fallback)
    previous = registry.room_for_player(_get_sid())
    _, effects = registry.join_room(_get_sid(), name, data.get('roomCode'))
    _move_socket(previous, room)
    return effects


@_room_action
def handle_player_move(data):
    room = registry.get_room(data.get('roomCode'))
    position = _coerce_position(data.get('position'))
    if not room or position is None:
        return []
    return registry.lifecycle.record_move(room, _get_sid(), *position)


@_room_action
def handle_player_won(data):
    room = registry.get_room(data.get('roomCode'))
    if not room:
        return []
    return registry.lifecycle.record_finish(room, _get_sid())


@_room_action
def handle_request_next_round(data):
    room = registry.get_room(data.get('roomCode'))
    if not room:
        return []
    return registry.lifecycle.request_next_round(room)


@_room_action
def handle_request_play_again(data):
    room = registry.get_room(data.get('roomCode'))
    if not room:
        return []
    return registry.lifecycle.request_play_again(room)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the configured namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createRoom', handle_create_room, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('playerMove', handle_player_move, namespace=namespace)
    socketio.on_event('playerWon', handle_player_won, namespace=namespace)
    socketio.on_event('requestNextRound', handle_request_next_round, namespace=namespace)
    socketio.on_event('requestPlayAgain', handle_request_play_again, namespace=namespace)
