from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config
from mazerace.services.rooms import RoomRegistry

registry = RoomRegistry()
socketio = SocketIO(async_mode=None)


def _allowed_origins(value):
    if isinstance(value, (list, tuple)):
        return list(value)
    origins = [o.strip() for o in str(value or '*').split(',') if o.strip()]
    if not origins or '*' in origins:
        return '*'
    return origins


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)
    registry.init_app(flask_app)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from mazerace.main import main
    flask_app.register_blueprint(main)

    from mazerace.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    # Handlers bind to the server created by init_app above
    from mazerace.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    @click.command('print-maze')
    @click.option('--width', default=None, type=int, help='Odd width >= 5 (defaults to MAZE_WIDTH).')
    @click.option('--height', default=None, type=int, help='Odd height >= 5 (defaults to MAZE_HEIGHT).')
    @click.option('--seed', default=None, type=int, help='Seed for a reproducible maze.')
    def print_maze_command(width, height, seed):
        """Generates a maze and prints it as text."""
        import random
        from mazerace.maze import generate_maze, render_maze
        width = width or flask_app.config['MAZE_WIDTH']
        height = height or flask_app.config['MAZE_HEIGHT']
        try:
            grid = generate_maze(width, height, random.Random(seed))
        except ValueError as exc:
            raise click.BadParameter(str(exc))
        click.echo(render_maze(grid))

    flask_app.cli.add_command(print_maze_command)

    return flask_app
