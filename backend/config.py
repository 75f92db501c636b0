import os


def _env_bool(name, default='0'):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    # Comma separated; '*' allows any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Maze size per round (odd, >= 5)
    MAZE_WIDTH = int(os.environ.get('MAZE_WIDTH', '21'))
    MAZE_HEIGHT = int(os.environ.get('MAZE_HEIGHT', '21'))
    # Fallbacks when a client sends missing or unparsable room settings
    DEFAULT_MAX_PLAYERS = int(os.environ.get('DEFAULT_MAX_PLAYERS', '2'))
    DEFAULT_TOTAL_ROUNDS = int(os.environ.get('DEFAULT_TOTAL_ROUNDS', '3'))
    MAX_TOTAL_ROUNDS = int(os.environ.get('MAX_TOTAL_ROUNDS', '15'))
    MAX_NAME_LENGTH = int(os.environ.get('MAX_NAME_LENGTH', '20'))
    # Optional: reject moves into walls or that skip cells. Off keeps clients authoritative.
    VALIDATE_MOVES = _env_bool('VALIDATE_MOVES')
