from flask import Blueprint, jsonify

from mazerace import registry

rooms = Blueprint('rooms', __name__)


@rooms.route('/<string:room_code>/state', methods=['GET'])
def get_room_state(room_code):
    """
    Returns the live state of a room: players, round, status and maze.
    """
    with registry.lock:
        room = registry.get_room(room_code)
        if not room:
            return jsonify({'error': 'Room not found'}), 404
        return jsonify(room.to_dict())
